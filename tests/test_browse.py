"""
tests/test_browse.py
"""
from helpers import count, note_ids, submit


def _hide(client, note_id, admin_headers):
    rv = client.post(
        "/admin/toggleHidden",
        json={"noteId": note_id, "hidden": True},
        headers=admin_headers,
    )
    assert rv.status_code == 200


def test_random_placeholder_on_empty_pool(client):
    rv = client.get("/random")
    assert rv.status_code == 200
    assert rv.json() == {
        "id": None,
        "title": "No notes yet",
        "message": "Be the first to leave something kind.",
        "tags": [],
        "likes": 0,
        "created_at": None,
    }


def test_random_returns_public_fields(client):
    submit(client, "the only one", title="solo", tags=["x"])
    data = client.get("/random").json()
    assert data["message"] == "the only one"
    assert data["title"] == "solo"
    assert data["tags"] == ["x"]
    assert data["likes"] == 0
    assert isinstance(data["id"], int)
    assert "reportcount" not in data
    assert "hidden" not in data


def test_random_skips_hidden(client, admin_headers):
    submit(client, "visible")
    submit(client, "hidden")
    hidden_id = note_ids(client)[0]  # newest first
    _hide(client, hidden_id, admin_headers)
    for _ in range(20):
        assert client.get("/random").json()["message"] == "visible"


def test_random_placeholder_when_everything_hidden(client, admin_headers):
    submit(client, "soon gone")
    _hide(client, note_ids(client)[0], admin_headers)
    assert client.get("/random").json()["id"] is None


def test_random_tag_filter(client):
    submit(client, "about cats", tags=["cats"])
    submit(client, "about dogs", tags=["dogs"])
    submit(client, "about both", tags=["dogs", "cats"])

    for _ in range(20):
        data = client.get("/random", params={"tag": "cats"}).json()
        assert "cats" in data["tags"]

    seen = {client.get("/random", params={"tag": "all"}).json()["message"] for _ in range(60)}
    assert len(seen) > 1

    assert client.get("/random", params={"tag": "birds"}).json()["id"] is None


def test_random_tag_ignored_when_tags_disabled(make_client):
    client = make_client(tags_enabled=False)
    submit(client, "untagged")
    data = client.get("/random", params={"tag": "cats"}).json()
    assert data["message"] == "untagged"
    assert data["tags"] == []


def test_count_excludes_hidden(client, admin_headers):
    assert count(client) == 0
    for i in range(5):
        submit(client, f"note {i}")
    ids = note_ids(client)
    for note_id in ids[:2]:
        _hide(client, note_id, admin_headers)
    assert count(client) == 3
