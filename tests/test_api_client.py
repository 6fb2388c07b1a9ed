# tests/test_api_client.py

from __future__ import annotations

import asyncio
import uuid

import pytest
from aiohttp import web
from aiohttp import test_utils

from services.api_client import (
    ApiConnectionError,
    ApiNotFoundError,
    ApiValidationError,
    StudyApiClient,
)


def make_backend() -> web.Application:
    """In-memory stand-in for the REST backend, mounted under /api."""
    tasks: list[dict] = []
    state = {"notes": "", "exam": {"label": "", "date": ""}}

    def error(status: int, reason: str) -> web.Response:
        return web.json_response({"error": reason, "status_code": status}, status=status)

    async def health(request):
        return web.json_response({"ok": True})

    async def list_tasks(request):
        return web.json_response(tasks)

    async def create_task(request):
        body = await request.json()
        title = body.get("title")
        if not isinstance(title, str) or not title.strip():
            return error(400, "title_required")
        task = {"id": str(uuid.uuid4()), "title": title.strip(), "done": False, "created_at": len(tasks) + 1}
        tasks.insert(0, task)
        return web.json_response(task, status=201)

    async def patch_task(request):
        body = await request.json()
        for task in tasks:
            if task["id"] == request.match_info["task_id"]:
                task["done"] = body["done"]
                return web.json_response({"ok": True})
        return error(404, "not_found")

    async def delete_task(request):
        for task in list(tasks):
            if task["id"] == request.match_info["task_id"]:
                tasks.remove(task)
                return web.json_response({"ok": True})
        return error(404, "not_found")

    async def get_state(request):
        return web.json_response(state)

    async def put_notes(request):
        state["notes"] = (await request.json()).get("notes", "")
        return web.json_response({"ok": True})

    async def put_exam(request):
        body = await request.json()
        state["exam"] = {"label": body.get("label", ""), "date": body.get("date", "")}
        return web.json_response({"ok": True})

    app = web.Application()
    app.router.add_get("/health", health)
    app.router.add_get("/api/tasks", list_tasks)
    app.router.add_post("/api/tasks", create_task)
    app.router.add_patch("/api/tasks/{task_id}", patch_task)
    app.router.add_delete("/api/tasks/{task_id}", delete_task)
    app.router.add_get("/api/state", get_state)
    app.router.add_put("/api/notes", put_notes)
    app.router.add_put("/api/exam", put_exam)
    return app


def run_with_client(scenario):
    async def _run():
        async with test_utils.TestServer(make_backend()) as server:
            async with StudyApiClient(str(server.make_url("/"))) as api:
                return await scenario(api)

    return asyncio.run(_run())


def test_health() -> None:
    async def scenario(api):
        return await api.health()

    assert run_with_client(scenario) == {"ok": True}


def test_task_lifecycle() -> None:
    async def scenario(api):
        first = await api.create_task("Past paper")
        second = await api.create_task("Flashcards")
        await api.set_task_done(first.id, True)
        listed = await api.list_tasks()
        await api.delete_task(second.id)
        remaining = await api.list_tasks()
        return first, second, listed, remaining

    first, second, listed, remaining = run_with_client(scenario)

    assert [t.id for t in listed] == [second.id, first.id]
    assert listed[1].done is True
    assert [t.id for t in remaining] == [first.id]


def test_state_round_trip() -> None:
    async def scenario(api):
        await api.save_notes("Chain rule")
        await api.save_exam("Maths P1", "2026-06-12")
        return await api.get_state()

    state = run_with_client(scenario)

    assert state["notes"] == "Chain rule"
    assert state["exam"].label == "Maths P1"
    assert state["exam"].date == "2026-06-12"


def test_validation_error_carries_reason() -> None:
    async def scenario(api):
        await api.create_task("   ")

    with pytest.raises(ApiValidationError) as excinfo:
        run_with_client(scenario)

    assert excinfo.value.status == 400
    assert excinfo.value.reason == "title_required"


def test_unknown_task_raises_not_found() -> None:
    async def scenario(api):
        await api.set_task_done("missing", True)

    with pytest.raises(ApiNotFoundError) as excinfo:
        run_with_client(scenario)

    assert excinfo.value.reason == "not_found"


def test_unreachable_backend() -> None:
    async def scenario():
        async with StudyApiClient("http://127.0.0.1:9", timeout=2) as api:
            await api.list_tasks()

    with pytest.raises(ApiConnectionError):
        asyncio.run(scenario())


def test_client_requires_context_manager() -> None:
    async def scenario():
        await StudyApiClient("http://127.0.0.1:9").list_tasks()

    with pytest.raises(RuntimeError):
        asyncio.run(scenario())


def test_url_building() -> None:
    api = StudyApiClient("http://host:3000/", api_prefix="api/")

    assert api._url("/tasks") == "http://host:3000/api/tasks"
    assert api._url("/health", prefixed=False) == "http://host:3000/health"
    assert StudyApiClient("http://host", api_prefix="")._url("/state") == "http://host/state"
