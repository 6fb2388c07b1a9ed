# tests/test_api.py

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from dashboard.app import create_app
from dashboard.config import DashboardSettings


def test_health_and_root(client: TestClient) -> None:
    assert client.get("/health").json() == {"ok": True}

    root = client.get("/")
    assert root.status_code == 200
    assert "/api/tasks" in root.text
    assert "X-Process-Time" in root.headers


def test_create_and_list_tasks(client: TestClient) -> None:
    first = client.post("/api/tasks", json={"title": "  Past paper  "})
    second = client.post("/api/tasks", json={"title": "Flashcards"})

    assert first.status_code == 201
    body = first.json()
    assert body["title"] == "Past paper"
    assert body["done"] is False
    assert isinstance(body["created_at"], int)

    listed = client.get("/api/tasks").json()
    assert [t["id"] for t in listed] == [second.json()["id"], body["id"]]


@pytest.mark.parametrize("payload", [{"title": ""}, {"title": "   "}, {"title": 5}, {}])
def test_create_task_requires_title(client: TestClient, payload) -> None:
    response = client.post("/api/tasks", json=payload)

    assert response.status_code == 400
    assert response.json()["error"] == "title_required"


def test_create_task_without_body(client: TestClient) -> None:
    response = client.post("/api/tasks")

    assert response.status_code == 400
    assert response.json()["error"] == "title_required"


def test_malformed_json_is_invalid_request(client: TestClient) -> None:
    response = client.post(
        "/api/tasks",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_request"


def test_patch_task(client: TestClient) -> None:
    task = client.post("/api/tasks", json={"title": "Essay"}).json()

    response = client.patch(f"/api/tasks/{task['id']}", json={"done": True})
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert client.get("/api/tasks").json()[0]["done"] is True


@pytest.mark.parametrize("payload", [{}, {"done": "true"}, {"done": 1}, {"done": None}])
def test_patch_requires_boolean(client: TestClient, payload) -> None:
    task = client.post("/api/tasks", json={"title": "Essay"}).json()

    response = client.patch(f"/api/tasks/{task['id']}", json=payload)
    assert response.status_code == 400
    assert response.json()["error"] == "done_boolean_required"


def test_unknown_task_is_not_found(client: TestClient) -> None:
    patched = client.patch("/api/tasks/missing", json={"done": True})
    deleted = client.delete("/api/tasks/missing")

    assert patched.status_code == 404
    assert patched.json() == {"error": "not_found", "status_code": 404}
    assert deleted.status_code == 404


def test_delete_task(client: TestClient) -> None:
    task = client.post("/api/tasks", json={"title": "Drop"}).json()

    assert client.delete(f"/api/tasks/{task['id']}").json() == {"ok": True}
    assert client.get("/api/tasks").json() == []


def test_state_defaults(client: TestClient) -> None:
    assert client.get("/api/state").json() == {"notes": "", "exam": {"label": "", "date": ""}}


def test_notes_and_exam_round_trip(client: TestClient) -> None:
    assert client.put("/api/notes", json={"notes": "Chain rule"}).status_code == 200
    assert client.put("/api/exam", json={"label": " Maths P1 ", "date": "2026-06-12"}).status_code == 200

    assert client.get("/api/state").json() == {
        "notes": "Chain rule",
        "exam": {"label": "Maths P1", "date": "2026-06-12"},
    }


def test_missing_fields_default_to_empty(client: TestClient) -> None:
    client.put("/api/notes", json={"notes": "something"})
    client.put("/api/exam", json={"label": "Maths", "date": "2026-06-12"})

    client.put("/api/notes", json={})
    client.put("/api/exam", json={})

    assert client.get("/api/state").json() == {"notes": "", "exam": {"label": "", "date": ""}}


def test_notes_must_be_string(client: TestClient) -> None:
    response = client.put("/api/notes", json={"notes": 42})

    assert response.status_code == 400
    assert response.json()["error"] == "notes_string_required"


@pytest.mark.parametrize(
    "payload, reason",
    [
        ({"label": 5, "date": ""}, "exam_fields_string_required"),
        ({"label": "Maths", "date": 20260612}, "exam_fields_string_required"),
        ({"label": "Maths", "date": "12/06/2026"}, "date_invalid"),
        ({"label": "Maths", "date": "2026-02-30"}, "date_invalid"),
        ({"label": "Maths", "date": "2026-W10-1"}, "date_invalid"),
        ({"label": "Maths", "date": "20260612"}, "date_invalid"),
    ],
)
def test_exam_validation(client: TestClient, payload, reason) -> None:
    response = client.put("/api/exam", json=payload)

    assert response.status_code == 400
    assert response.json()["error"] == reason


def test_unknown_route(client: TestClient) -> None:
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_payload_too_large(tmp_path) -> None:
    settings = DashboardSettings(ENVIRONMENT="testing", DB_PATH=tmp_path / "data.sqlite", MAX_BODY_BYTES=64)
    with TestClient(create_app(settings)) as client:
        response = client.put(
            "/api/notes",
            json={"notes": "x" * 200},
            headers={"Origin": "https://study.example"},
        )

    assert response.status_code == 413
    assert response.json()["error"] == "payload_too_large"
    assert response.headers["access-control-allow-origin"] == "*"


def test_cors_allow_list(tmp_path) -> None:
    settings = DashboardSettings(
        ENVIRONMENT="testing",
        DB_PATH=tmp_path / "data.sqlite",
        CORS_ORIGINS="https://study.example, https://other.example",
    )
    with TestClient(create_app(settings)) as client:
        allowed = client.get("/api/tasks", headers={"Origin": "https://study.example"})
        blocked = client.get("/api/tasks", headers={"Origin": "https://evil.example"})
        no_origin = client.get("/api/tasks")

    assert allowed.headers["access-control-allow-origin"] == "https://study.example"
    assert "access-control-allow-origin" not in blocked.headers
    assert no_origin.status_code == 200


def test_cors_permissive_by_default(client: TestClient) -> None:
    response = client.options(
        "/api/tasks",
        headers={"Origin": "https://anywhere.example", "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_data_persists_across_app_instances(api_settings: DashboardSettings) -> None:
    with TestClient(create_app(api_settings)) as client:
        client.post("/api/tasks", json={"title": "Persisted"})
        client.put("/api/notes", json={"notes": "kept"})

    with TestClient(create_app(api_settings)) as client:
        assert [t["title"] for t in client.get("/api/tasks").json()] == ["Persisted"]
        assert client.get("/api/state").json()["notes"] == "kept"


def test_production_disables_docs(tmp_path) -> None:
    settings = DashboardSettings(ENVIRONMENT="production", DB_PATH=tmp_path / "data.sqlite", DEBUG=True)

    assert settings.is_production
    assert settings.DEBUG is False
    assert settings.DOCS_URL is None
    with TestClient(create_app(settings)) as client:
        assert client.get("/api/docs").status_code == 404
