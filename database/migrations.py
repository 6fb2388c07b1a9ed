# database/migrations.py

import logging
from typing import Any, Callable, Dict, List

from database.manager import LocalStore, StorageError
from models.enums import StorageKey
from utils.datetime_utils import now_ms

logger = logging.getLogger(__name__)

def add_created_at(tasks: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Older pages stored tasks without ``created_at``. Stamp them so that
    the stored (newest first) order survives sorting by creation time.
    """
    base = now_ms()
    for index, task in enumerate(tasks):
        if isinstance(task, dict) and not isinstance(task.get("created_at"), int):
            task["created_at"] = base - index
    return tasks

# key -> (needs_migration, migration_fn)
MIGRATIONS: Dict[str, List[tuple]] = {
    StorageKey.TASKS.value: [
        (
            lambda tasks: isinstance(tasks, list) and any(
                isinstance(t, dict) and not isinstance(t.get("created_at"), int) for t in tasks
            ),
            add_created_at,
        ),
    ],
}

def migrate_key(store: LocalStore, key: str, needs: Callable[[Any], bool], migration_fn: Callable[[Any], Any]) -> bool:
    result = store.load(key)
    if result.defaulted or not needs(result.value):
        return False

    try:
        store.set(key, migration_fn(result.value))
    except StorageError as e:
        logger.warning(f"⚠️ Migration of {key} not saved: {e}")
        return False

    logger.info(f"🔧 Migrated {key} with {migration_fn.__name__}")
    return True

def run_migrations(store: LocalStore) -> int:
    """Apply every pending migration; returns how many were applied."""
    applied = 0
    for key, steps in MIGRATIONS.items():
        for needs, migration_fn in steps:
            if migrate_key(store, key, needs, migration_fn):
                applied += 1
    return applied
