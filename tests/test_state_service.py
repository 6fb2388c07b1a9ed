# tests/test_state_service.py

from __future__ import annotations

import pytest

from database.manager import LocalStore, StorageQuotaError
from models.enums import StateSlice, StorageKey
from models.state import DEFAULT_SUBJECTS, DEFAULT_USP_CARDS
from models.task import Task
from services.state_service import StudyStateManager


def test_defaults_on_empty_store(manager: StudyStateManager) -> None:
    state = manager.state
    assert state.tasks == []
    assert state.notes == ""
    assert state.exam.label == "" and state.exam.date == ""
    assert state.focus is False
    assert state.subjects == DEFAULT_SUBJECTS
    assert state.usp_cards == DEFAULT_USP_CARDS


def test_add_task_trims_and_prepends(manager: StudyStateManager, store: LocalStore) -> None:
    first = manager.add_task("Past paper 1")
    second = manager.add_task("  Flashcards  ")

    assert second.title == "Flashcards"
    assert second.done is False
    assert [t.id for t in manager.tasks] == [second.id, first.id]
    stored = store.get(StorageKey.TASKS.value)
    assert [t["id"] for t in stored] == [second.id, first.id]


@pytest.mark.parametrize("title", ["", "   ", "\t\n"])
def test_add_task_rejects_blank_titles(manager: StudyStateManager, title: str) -> None:
    assert manager.add_task(title) is None
    assert manager.tasks == []


def test_task_ids_are_unique(manager: StudyStateManager) -> None:
    ids = {manager.add_task(f"task {i}").id for i in range(20)}
    assert len(ids) == 20


def test_toggle_task(manager: StudyStateManager, store: LocalStore) -> None:
    task = manager.add_task("Essay plan")

    assert manager.toggle_task(task.id, True) is True
    assert manager.get_task(task.id).done is True
    assert store.get(StorageKey.TASKS.value)[0]["done"] is True


def test_toggle_and_delete_unknown_id_are_noops(manager: StudyStateManager) -> None:
    manager.add_task("Keep me")
    seen = []
    manager.subscribe(seen.append)

    assert manager.toggle_task("missing", True) is False
    assert manager.delete_task("missing") is False
    assert len(manager.tasks) == 1
    assert seen == []


def test_delete_task(manager: StudyStateManager) -> None:
    keep = manager.add_task("Keep")
    drop = manager.add_task("Drop")

    assert manager.delete_task(drop.id) is True
    assert [t.id for t in manager.tasks] == [keep.id]


def test_state_survives_reload(manager: StudyStateManager, store: LocalStore) -> None:
    task = manager.add_task("Revise calc")
    manager.toggle_task(task.id, True)
    manager.save_notes("Chain rule")
    manager.save_exam("  Maths P1 ", "2026-06-12")
    manager.set_focus(True)

    reloaded = StudyStateManager(LocalStore(store.path))
    assert [t.to_dict() for t in reloaded.tasks] == [t.to_dict() for t in manager.tasks]
    assert reloaded.state.notes == "Chain rule"
    assert reloaded.state.exam.label == "Maths P1"
    assert reloaded.state.exam.date == "2026-06-12"
    assert reloaded.state.focus is True


def test_corrupted_slices_fall_back_to_defaults(store: LocalStore) -> None:
    store.set_raw(StorageKey.TASKS.value, "[{broken")
    store.set(StorageKey.NOTES.value, 42)
    store.set(StorageKey.FOCUS.value, "yes")
    store.set(StorageKey.EXAM.value, ["not", "an", "object"])

    state = StudyStateManager(store).state
    assert state.tasks == []
    assert state.notes == ""
    assert state.focus is False
    assert state.exam.date == ""


def test_non_finite_numbers_do_not_break_loading(store: LocalStore) -> None:
    store.set_raw(
        StorageKey.SUBJECTS.value,
        '[{"name": "Maths", "progress": 1e999}, {"name": "Science", "progress": -Infinity},'
        ' {"name": "English", "progress": NaN}]',
    )
    store.set_raw(StorageKey.TASKS.value, '[{"id": "a", "title": "A", "done": false, "created_at": 1e999}]')

    manager = StudyStateManager(store)

    assert [(s.name, s.progress) for s in manager.state.subjects] == [("Maths", 0), ("Science", 0), ("English", 0)]
    assert [t.id for t in manager.tasks] == ["a"]


def test_task_from_dict_is_strict_about_stored_values() -> None:
    task = Task.from_dict({"id": "a", "title": "A", "done": "false", "created_at": float("inf")})

    assert task.done is False
    assert task.created_at == 0
    assert Task.from_dict({"id": "b", "title": "B", "done": True}).done is True


def test_invalid_stored_tasks_are_skipped(store: LocalStore) -> None:
    store.set(StorageKey.TASKS.value, [
        {"id": "a", "title": "Good", "done": False, "created_at": 2},
        {"id": "b", "title": "   ", "done": False, "created_at": 1},
        {"id": "a", "title": "Duplicate", "done": True, "created_at": 1},
        "garbage",
    ])

    tasks = StudyStateManager(store).tasks
    assert [(t.id, t.title) for t in tasks] == [("a", "Good")]


def test_write_failure_does_not_block_add_task(tmp_path) -> None:
    store = LocalStore(tmp_path / "store.json", max_bytes=10)
    manager = StudyStateManager(store)

    task = manager.add_task("Still works")

    assert task is not None
    assert manager.tasks == [task]
    assert isinstance(manager.last_persist_error, StorageQuotaError)
    assert StorageKey.TASKS.value not in store


def test_strict_manager_raises_on_write_failure(tmp_path) -> None:
    store = LocalStore(tmp_path / "store.json", max_bytes=10)
    manager = StudyStateManager(store, strict=True)

    with pytest.raises(StorageQuotaError):
        manager.save_notes("too long for the quota")


def test_listeners_get_touched_slice(manager: StudyStateManager) -> None:
    seen = []
    unsubscribe = manager.subscribe(seen.append)

    task = manager.add_task("A")
    manager.save_notes("n")
    manager.save_exam("E", "2026-01-01")
    manager.set_focus(True)
    unsubscribe()
    manager.delete_task(task.id)

    assert seen == [StateSlice.TASKS, StateSlice.NOTES, StateSlice.EXAM, StateSlice.FOCUS]


def test_reset_clears_namespace(manager: StudyStateManager, store: LocalStore) -> None:
    manager.add_task("A")
    manager.save_notes("n")
    manager.set_focus(True)
    store.set("unrelated", 1)
    seen = []
    manager.subscribe(seen.append)

    state = manager.reset()

    assert state.tasks == [] and state.notes == "" and state.focus is False
    assert store.keys("ecc_") == []
    assert store.get("unrelated") == 1
    assert seen == [StateSlice.ALL]


def test_find_task_by_prefix(manager: StudyStateManager) -> None:
    task = manager.add_task("A")
    assert manager.find_task(task.id[:6]) is task
    assert manager.find_task("") is None


def test_find_task_ambiguous_prefix(store: LocalStore) -> None:
    store.set(StorageKey.TASKS.value, [
        {"id": "abc1", "title": "One", "done": False, "created_at": 2},
        {"id": "abc2", "title": "Two", "done": False, "created_at": 1},
    ])
    manager = StudyStateManager(store)

    assert manager.find_task("abc") is None
    assert manager.find_task("abc2").title == "Two"


def test_legacy_tasks_get_created_at(store: LocalStore) -> None:
    store.set(StorageKey.TASKS.value, [
        {"id": "new", "title": "Newest", "done": False},
        {"id": "old", "title": "Oldest", "done": True},
    ])

    tasks = StudyStateManager(store).tasks
    assert [t.id for t in tasks] == ["new", "old"]
    assert tasks[0].created_at > tasks[1].created_at
