"""
tests/test_app.py
"""
from fastapi.testclient import TestClient

from conftest import make_settings
from notepool.app import create_app


def test_health_ok(client):
    rv = client.get("/health")
    assert rv.status_code == 200
    assert rv.json() == {"ok": True}


def test_home_page_and_static(client):
    rv = client.get("/")
    assert rv.status_code == 200
    assert "text/html" in rv.headers["content-type"]
    assert "Anonymous Notes" in rv.text

    rv = client.get("/style.css")
    assert rv.status_code == 200


def test_unknown_path_is_404(client):
    assert client.get("/no-such-file.txt").status_code == 404


def _broken_client(tmp_path) -> TestClient:
    # Parent directory does not exist, so SQLite cannot open the file.
    settings = make_settings(tmp_path / "missing" / "dir" / "notes.sqlite3")
    return TestClient(create_app(settings))


def test_health_reports_store_failure(tmp_path):
    rv = _broken_client(tmp_path).get("/health")
    assert rv.status_code == 500
    assert rv.json() == {"ok": False}


def test_store_failure_is_generic_500(tmp_path):
    client = _broken_client(tmp_path)
    for rv in (
        client.get("/count"),
        client.get("/random"),
        client.post("/submit", json={"message": "lost"}),
        client.post("/report", json={"noteId": 1}),
    ):
        assert rv.status_code == 500
        assert rv.text == "Server error"


def test_scenario_end_to_end(client):
    assert client.post("/submit", json={"message": "hi"}).status_code == 200
    assert client.get("/count").json() == {"total": 1}
    note_id = client.get("/random").json()["id"]

    last = None
    for _ in range(3):
        last = client.post("/report", json={"noteId": note_id})
    assert last.json()["reportcount"] == 3
    assert client.get("/count").json() == {"total": 0}
    assert client.get("/random").json()["id"] is None

    assert client.post("/like", json={"noteId": note_id + 1000}).status_code == 200
    assert client.post("/feedback", json={"message": ""}).status_code == 400
