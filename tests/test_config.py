"""
tests/test_config.py
"""
from notepool.config import PACKAGE_PUBLIC_DIR, Settings
from notepool.database import _connect_args


def test_defaults(monkeypatch):
    for var in ("PORT", "ADMIN_PASSWORD", "DATABASE_URL", "TAGS_ENABLED"):
        monkeypatch.delenv(var, raising=False)
    settings = Settings(_env_file=None)
    assert settings.port == 3000
    assert settings.admin_password == ""
    assert settings.admin_enabled is False
    assert settings.report_threshold == 3
    assert settings.max_message_words == 500
    assert settings.tags_enabled is True
    assert settings.public_dir == PACKAGE_PUBLIC_DIR


def test_reads_original_env_names(monkeypatch):
    monkeypatch.setenv("ADMIN_PASSWORD", "  hunter2 \n")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("DATABASE_URL", "postgres://user:pw@db.example.com:5432/notes")
    settings = Settings(_env_file=None)
    assert settings.admin_password == "hunter2"
    assert settings.admin_enabled is True
    assert settings.port == 8080
    assert settings.database_url == "postgresql://user:pw@db.example.com:5432/notes"


def test_feature_flags_from_env(monkeypatch):
    monkeypatch.setenv("TAGS_ENABLED", "false")
    monkeypatch.setenv("REQUIRE_TITLE", "true")
    settings = Settings(_env_file=None)
    assert settings.tags_enabled is False
    assert settings.require_title is True


def test_origins_split():
    settings = Settings(_env_file=None, allowed_origins="https://a.example, https://b.example,")
    assert settings.origins == ["https://a.example", "https://b.example"]


def test_connect_args_per_backend():
    settings = Settings(_env_file=None)
    assert _connect_args("sqlite:///x.db", settings) == {"check_same_thread": False}
    assert _connect_args("postgresql://u@h/db", settings) == {"sslmode": "require"}
    assert _connect_args("mysql://u@h/db", settings) == {}
