# tests/test_migrations.py

from __future__ import annotations

from database.manager import LocalStore
from database.migrations import run_migrations
from models.enums import StorageKey


def test_nothing_to_migrate(store: LocalStore) -> None:
    assert run_migrations(store) == 0
    store.set(StorageKey.TASKS.value, [{"id": "a", "title": "A", "done": False, "created_at": 1}])
    assert run_migrations(store) == 0


def test_created_at_is_stamped_in_stored_order(store: LocalStore) -> None:
    store.set(StorageKey.TASKS.value, [
        {"id": "a", "title": "A", "done": False},
        {"id": "b", "title": "B", "done": False, "created_at": 5},
        {"id": "c", "title": "C", "done": True},
    ])

    assert run_migrations(store) == 1

    tasks = store.get(StorageKey.TASKS.value)
    assert tasks[1]["created_at"] == 5
    assert tasks[0]["created_at"] > tasks[2]["created_at"]
    assert run_migrations(store) == 0


def test_unparseable_tasks_are_left_alone(store: LocalStore) -> None:
    store.set_raw(StorageKey.TASKS.value, "[oops")

    assert run_migrations(store) == 0
    assert store.load(StorageKey.TASKS.value).defaulted is True
