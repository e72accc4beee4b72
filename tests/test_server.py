"""
Tests for the local JSON API (Flask test client over in-memory slots).
"""
from unittest.mock import patch

import pytest
import requests

from lifeboard.config import Config
from lifeboard.slots import MemorySlots
from lifeboard_server import create_app


@pytest.fixture
def client():
    app = create_app(Config(), slots=MemorySlots())
    app.testing = True
    return app.test_client()


def test_create_and_list_tasks(client):
    r = client.post("/api/tasks", json={"title": "Write tests"})
    assert r.status_code == 201
    task = r.get_json()
    assert "quadrant" not in task

    listed = client.get("/api/tasks").get_json()
    assert [t["id"] for t in listed] == [task["id"]]


def test_rejected_create_is_422(client):
    assert client.post("/api/tasks", json={"title": ""}).status_code == 422
    assert client.post("/api/bookmarks", json={"title": "x", "url": "nope"}).status_code == 422
    assert client.post("/api/reminders", json={"title": "x"}).status_code == 422
    assert client.get("/api/tasks").get_json() == []


def test_unknown_collection_is_404(client):
    assert client.get("/api/widgets").status_code == 404
    assert client.get("/api/search/widgets?q=x").status_code == 404


def test_bookmark_and_search(client):
    client.post("/api/bookmarks", json={"title": "Go Docs", "url": "golang.org", "tags": ["lang"]})
    data = client.get("/api/search?q=golang").get_json()
    assert data["total"] == 1
    assert data["bookmarks"][0]["url"] == "https://golang.org"

    assert client.get("/api/search?q=").get_json()["total"] == 0
    assert client.get("/api/search?q=python").get_json()["bookmarks"] == []


def test_search_single_category_is_exhaustive(client):
    for i in range(5):
        client.post("/api/notes", json={"title": f"Plan {i}"})
    preview = client.get("/api/search?q=plan").get_json()
    assert len(preview["notes"]) == 3
    assert preview["notes_count"] == 5

    full = client.get("/api/search/notes?q=plan").get_json()
    assert full["count"] == 5
    assert len(full["items"]) == 5


def test_matrix_default_and_move(client):
    task = client.post("/api/tasks", json={"title": "Sort me"}).get_json()
    board = client.get("/api/matrix").get_json()
    assert [q["quadrant"] for q in board["quadrants"]] == [
        "important-urgent",
        "important-not-urgent",
        "not-important-urgent",
        "not-important-not-urgent",
    ]
    assert board["quadrants"][0]["tasks"][0]["id"] == task["id"]
    assert board["quadrants"][0]["action"] == "DO FIRST"
    assert board["notifications"] == []

    r = client.post(f"/api/matrix/{task['id']}", json={"quadrant": "not-important-not-urgent"})
    assert r.status_code == 200
    board = client.get("/api/matrix").get_json()
    assert board["quadrants"][3]["tasks"][0]["id"] == task["id"]
    assert client.get("/api/tasks").get_json()[0]["quadrant"] == "not-important-not-urgent"


def test_matrix_move_invalid_quadrant(client):
    task = client.post("/api/tasks", json={"title": "x"}).get_json()
    assert client.post(f"/api/matrix/{task['id']}", json={"quadrant": "soon"}).status_code == 400


def test_toggle_and_delete(client):
    task = client.post("/api/tasks", json={"title": "x"}).get_json()
    assert client.post(f"/api/tasks/{task['id']}/toggle").get_json()["completed"] is True
    assert client.post("/api/tasks/missing/toggle").status_code == 404
    assert client.post(f"/api/notes/{task['id']}/toggle").status_code == 404

    assert client.delete(f"/api/tasks/{task['id']}").get_json() == {"deleted": True}
    assert client.delete(f"/api/tasks/{task['id']}").get_json() == {"deleted": False}


def test_edit_note_and_journal(client):
    note = client.post("/api/notes", json={"title": "a"}).get_json()
    edited = client.put(f"/api/notes/{note['id']}", json={"content": "body"}).get_json()
    assert edited["content"] == "body"
    assert edited["updatedAt"] >= edited["createdAt"]
    assert client.put("/api/notes/missing", json={"content": "x"}).status_code == 404

    entry = client.post("/api/journals", json={"date": "2025-03-01"}).get_json()
    assert entry["title"] == "Journal Entry — Saturday, March 1, 2025"
    edited = client.put(f"/api/journals/{entry['id']}", json={"mood": "happy"}).get_json()
    assert edited["mood"] == "happy"


def test_reminders_sorted(client):
    client.post("/api/reminders", json={"title": "A", "date": "2025-03-01", "time": "09:00"})
    client.post("/api/reminders", json={"title": "B", "date": "2025-02-01"})
    assert [r["title"] for r in client.get("/api/reminders").get_json()] == ["B", "A"]


def test_dashboard(client):
    client.post("/api/tasks", json={"title": "x"})
    data = client.get("/api/dashboard").get_json()
    assert data["tasks_total"] == 1
    assert data["tasks_label"] == "1 tasks remaining"


def test_quote_falls_back_when_offline(client):
    with patch("lifeboard.quotes.requests.get", side_effect=requests.ConnectionError("offline")):
        data = client.get("/api/quote").get_json()
    assert data["author"] == "Steve Jobs"


def test_theme(client):
    assert client.get("/api/theme").get_json() == {"theme": "light"}
    assert client.get("/api/theme?prefers_dark=1").get_json() == {"theme": "dark"}
    assert client.post("/api/theme", json={"theme": "dark"}).get_json() == {"theme": "dark"}
    assert client.post("/api/theme", json={"theme": "neon"}).status_code == 400
    assert client.post("/api/theme", json={"toggle": True}).get_json() == {"theme": "light"}


def test_auth_without_remote(client):
    assert client.post("/api/auth/signin", json={}).status_code == 503


def test_non_string_fields_do_not_error(client):
    r = client.post("/api/tasks", json={"title": 123})
    assert r.status_code == 422
    assert r.get_json() == {"error": "rejected"}
    assert client.post("/api/reminders", json={"title": "x", "date": 20250301}).status_code == 422
    assert client.post("/api/bookmarks", json={"title": "x", "url": 5}).status_code == 422

    r = client.post("/api/journals", json={"title": 5, "content": 6, "date": "2025-03-01"})
    assert r.status_code == 201
    assert r.get_json()["title"] == "Journal Entry — Saturday, March 1, 2025"
    assert r.get_json()["content"] == ""

    note = client.post("/api/notes", json={"title": 1}).get_json()
    assert note["title"] == ""
    assert client.put(f"/api/notes/{note['id']}", json={"content": ["x"]}).get_json()["content"] == ""
