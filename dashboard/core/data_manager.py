import contextlib
import json
import logging
import sqlite3
import uuid
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from utils.datetime_utils import now_ms

logger = logging.getLogger(__name__)

NOTES_KEY = "notes"
EXAM_KEY = "exam"

DEFAULT_NOTES = ""
DEFAULT_EXAM = {"label": "", "date": ""}

class DataManagerError(Exception):
    """SQLite access failed"""
    pass

class DataManager:
    """
    SQLite store behind the API: a ``tasks`` table and a ``kv`` table
    holding whole JSON values for the notes and exam slices.

    Every method opens its own connection, so concurrent requests never
    share one.
    """

    def __init__(self, db_path: Union[str, Path] = "data.sqlite"):
        self.db_path = Path(db_path)

    @contextlib.contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise DataManagerError(f"cannot open {self.db_path}: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        except sqlite3.Error as e:
            raise DataManagerError(str(e)) from e
        finally:
            conn.close()

    def initialize(self) -> None:
        """Create tables and make sure ``kv.key`` is unique."""
        if self.db_path.parent and not self.db_path.parent.exists():
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    done INTEGER NOT NULL,
                    created_at INTEGER NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            # Upserts rely on ON CONFLICT(key); a kv table created elsewhere
            # without the primary key still gets a unique index here.
            conn.execute("CREATE UNIQUE INDEX IF NOT EXISTS kv_key_unique ON kv (key)")

        logger.info(f"✅ Database ready: {self.db_path}")

    # === TASKS ===

    @staticmethod
    def _task_from_row(row: sqlite3.Row) -> Dict[str, Any]:
        return {
            "id": row["id"],
            "title": row["title"],
            "done": bool(row["done"]),
            "created_at": row["created_at"],
        }

    def list_tasks(self) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT id, title, done, created_at FROM tasks ORDER BY created_at DESC, rowid DESC"
            ).fetchall()
        return [self._task_from_row(row) for row in rows]

    def get_task(self, task_id: str) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, title, done, created_at FROM tasks WHERE id = ?", (task_id,)
            ).fetchone()
        return self._task_from_row(row) if row else None

    def create_task(self, title: str) -> Dict[str, Any]:
        task = {
            "id": str(uuid.uuid4()),
            "title": title,
            "done": False,
            "created_at": now_ms(),
        }
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO tasks (id, title, done, created_at) VALUES (?, ?, ?, ?)",
                (task["id"], task["title"], 0, task["created_at"]),
            )
        logger.info(f"📝 Task created: {task['id']}")
        return task

    def set_task_done(self, task_id: str, done: bool) -> bool:
        """False when no row has ``task_id``."""
        with self._connect() as conn:
            cursor = conn.execute("UPDATE tasks SET done = ? WHERE id = ?", (1 if done else 0, task_id))
        return cursor.rowcount > 0

    def delete_task(self, task_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        if cursor.rowcount:
            logger.info(f"🗑 Task deleted: {task_id}")
        return cursor.rowcount > 0

    def count_tasks(self) -> int:
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM tasks").fetchone()[0]

    # === KEY-VALUE STATE ===

    def get_value(self, key: str, default: Any = None) -> Any:
        with self._connect() as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        if not row or not row["value"]:
            return default
        try:
            return json.loads(row["value"])
        except json.JSONDecodeError:
            logger.warning(f"⚠️ Stored value for {key!r} is not valid JSON, using default")
            return default

    def put_value(self, key: str, value: Any) -> None:
        """Whole-value upsert keyed by ``key``; the last write wins."""
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO kv (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, json.dumps(value, ensure_ascii=False)),
            )

    def get_notes(self) -> str:
        notes = self.get_value(NOTES_KEY, DEFAULT_NOTES)
        return notes if isinstance(notes, str) else DEFAULT_NOTES

    def get_exam(self) -> Dict[str, str]:
        exam = self.get_value(EXAM_KEY, None)
        if not isinstance(exam, dict):
            return dict(DEFAULT_EXAM)
        return {"label": str(exam.get("label") or ""), "date": str(exam.get("date") or "")}

    def save_notes(self, notes: str) -> None:
        self.put_value(NOTES_KEY, notes)

    def save_exam(self, label: str, date: str) -> None:
        self.put_value(EXAM_KEY, {"label": label, "date": date})
