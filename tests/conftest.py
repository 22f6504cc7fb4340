"""
tests/conftest.py
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient

from notepool.app import create_app
from notepool.config import Settings

ADMIN_PASSWORD = "s3cret"


def make_settings(db_path: Path, **overrides) -> Settings:
    """Settings pointing at a throwaway SQLite file, ignoring any .env."""
    values = dict(
        database_url=f"sqlite:///{db_path}",
        admin_password=ADMIN_PASSWORD,
        log_level="WARNING",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def make_client(tmp_path: Path) -> Generator[Callable[..., TestClient], None, None]:
    """
    Factory for clients over a fresh database with custom settings.

    Every client is entered (so the lifespan creates the tables) and
    closed again at teardown.
    """
    clients = []

    def _make(**overrides) -> TestClient:
        db_file = tmp_path / f"notes-{len(clients)}.sqlite3"
        app = create_app(make_settings(db_file, **overrides))
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    """Client with default settings and the known admin password."""
    return make_client()


@pytest.fixture
def admin_headers() -> dict:
    return {"x-admin-password": ADMIN_PASSWORD}
