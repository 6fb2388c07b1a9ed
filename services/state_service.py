# services/state_service.py

import logging
from datetime import datetime
from typing import Callable, List, Optional

from database.manager import LocalStore, StorageError
from database.migrations import run_migrations
from models.enums import STORAGE_PREFIX, StateSlice, StorageKey
from models.state import (
    DEFAULT_SUBJECTS,
    DEFAULT_USP_CARDS,
    ExamState,
    StudyState,
    SubjectProgress,
    UspCard,
)
from models.task import Task, find_task, tasks_from_list
from services.kpi import Kpis, compute_kpis
from utils.validators import clean_task_title

logger = logging.getLogger(__name__)

Listener = Callable[[StateSlice], None]

class StudyStateManager:
    """
    Owner of the in-memory study state for one client session.

    Every mutation follows the same order: change state, persist the touched
    slice, notify listeners. Reads from the store never fail (defaults are
    substituted); write failures are logged and kept in ``last_persist_error``
    unless the manager is ``strict``.
    """

    def __init__(self, store: LocalStore, strict: bool = False):
        self.store = store
        self.strict = strict
        self.state = StudyState()
        self.last_persist_error: Optional[StorageError] = None
        self._listeners: List[Listener] = []
        self.load()

    # ===== LOADING =====

    def load(self) -> StudyState:
        run_migrations(self.store)
        self.state = StudyState(
            tasks=self._load_tasks(),
            notes=self._load_notes(),
            exam=ExamState.from_dict(self.store.get(StorageKey.EXAM.value, ExamState().to_dict())),
            focus=self._load_focus(),
            subjects=self._load_subjects(),
            usp_cards=self._load_usp_cards(),
        )
        logger.debug(f"📂 State loaded: {len(self.state.tasks)} tasks")
        return self.state

    def _load_tasks(self) -> List[Task]:
        return tasks_from_list(self.store.get(StorageKey.TASKS.value, []))

    def _load_notes(self) -> str:
        notes = self.store.get(StorageKey.NOTES.value, "")
        return notes if isinstance(notes, str) else ""

    def _load_focus(self) -> bool:
        focus = self.store.get(StorageKey.FOCUS.value, False)
        return focus if isinstance(focus, bool) else False

    def _load_subjects(self) -> List[SubjectProgress]:
        items = self.store.get(StorageKey.SUBJECTS.value, None)
        if not isinstance(items, list):
            return list(DEFAULT_SUBJECTS)
        return [SubjectProgress.from_dict(i) for i in items if isinstance(i, dict)]

    def _load_usp_cards(self) -> List[UspCard]:
        items = self.store.get(StorageKey.USP.value, None)
        if not isinstance(items, list):
            return list(DEFAULT_USP_CARDS)
        return [UspCard.from_dict(i) for i in items if isinstance(i, dict)]

    # ===== LISTENERS =====

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, part: StateSlice) -> None:
        for listener in list(self._listeners):
            listener(part)

    # ===== PERSISTENCE =====

    def _persist(self, key: StorageKey, value) -> bool:
        try:
            self.store.set(key.value, value)
        except StorageError as e:
            self.last_persist_error = e
            logger.warning(f"⚠️ {key.value} not persisted for this session: {e}")
            if self.strict:
                raise
            return False
        self.last_persist_error = None
        return True

    def _persist_tasks(self) -> bool:
        return self._persist(StorageKey.TASKS, [t.to_dict() for t in self.state.tasks])

    # ===== TASKS =====

    @property
    def tasks(self) -> List[Task]:
        return self.state.tasks

    def get_task(self, task_id: str) -> Optional[Task]:
        for task in self.state.tasks:
            if task.id == task_id:
                return task
        return None

    def find_task(self, id_or_prefix: str) -> Optional[Task]:
        """Exact id, or the single task whose id starts with the prefix."""
        return find_task(self.state.tasks, id_or_prefix)

    def add_task(self, title: str) -> Optional[Task]:
        trimmed = clean_task_title(title)
        if trimmed is None:
            return None

        task = Task.create(trimmed)
        self.state.tasks.insert(0, task)
        self._persist_tasks()
        logger.info(f"📝 Task added: {task.id}")
        self._notify(StateSlice.TASKS)
        return task

    def toggle_task(self, task_id: str, done: bool) -> bool:
        task = self.get_task(task_id)
        if task is None:
            return False

        task.done = bool(done)
        self._persist_tasks()
        self._notify(StateSlice.TASKS)
        return True

    def delete_task(self, task_id: str) -> bool:
        remaining = [t for t in self.state.tasks if t.id != task_id]
        if len(remaining) == len(self.state.tasks):
            return False

        self.state.tasks = remaining
        self._persist_tasks()
        logger.info(f"🗑 Task deleted: {task_id}")
        self._notify(StateSlice.TASKS)
        return True

    # ===== NOTES / EXAM / FOCUS =====

    def save_notes(self, text: Optional[str]) -> None:
        self.state.notes = text or ""
        self._persist(StorageKey.NOTES, self.state.notes)
        self._notify(StateSlice.NOTES)

    def save_exam(self, label: Optional[str], date: Optional[str]) -> ExamState:
        self.state.exam = ExamState(label=(label or "").strip(), date=date or "")
        self._persist(StorageKey.EXAM, self.state.exam.to_dict())
        self._notify(StateSlice.EXAM)
        return self.state.exam

    def set_focus(self, on: bool) -> bool:
        self.state.focus = bool(on)
        self._persist(StorageKey.FOCUS, self.state.focus)
        self._notify(StateSlice.FOCUS)
        return self.state.focus

    # ===== DERIVED =====

    def compute_kpis(self, now: Optional[datetime] = None) -> Kpis:
        return compute_kpis(self.state.tasks, self.state.notes, self.state.exam, now=now)

    # ===== RESET =====

    def reset(self) -> StudyState:
        """Drop every namespaced key and start over from defaults."""
        try:
            removed = self.store.clear(STORAGE_PREFIX)
        except StorageError as e:
            self.last_persist_error = e
            logger.warning(f"⚠️ Reset could not clear the store: {e}")
            if self.strict:
                raise
        else:
            logger.info(f"🧹 Reset removed {removed} keys")
        self.load()
        self._notify(StateSlice.ALL)
        return self.state
