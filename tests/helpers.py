"""
tests/helpers.py
"""
from __future__ import annotations

from fastapi.testclient import TestClient

from conftest import ADMIN_PASSWORD


def submit(client: TestClient, message: str = "hello there", **fields) -> None:
    rv = client.post("/submit", json={"message": message, **fields})
    assert rv.status_code == 200, rv.text


def admin_notes(client: TestClient) -> list[dict]:
    rv = client.get("/admin/data", headers={"x-admin-password": ADMIN_PASSWORD})
    assert rv.status_code == 200
    return rv.json()["notes"]


def note_ids(client: TestClient) -> list[int]:
    return [n["id"] for n in admin_notes(client)]


def note_by_id(client: TestClient, note_id: int) -> dict | None:
    for note in admin_notes(client):
        if note["id"] == note_id:
            return note
    return None


def count(client: TestClient) -> int:
    rv = client.get("/count")
    assert rv.status_code == 200
    return rv.json()["total"]
