# database/manager.py

"""
Local persistent store: a flat namespace of string keys holding
JSON-serialized values, kept in one JSON document on disk (or only in
memory when no path is given).
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

# ===== EXCEPTIONS =====

class StorageError(Exception):
    """Base error of the local store"""
    pass

class StorageWriteError(StorageError):
    """Value could not be serialized or written"""
    pass

class StorageQuotaError(StorageWriteError):
    """Write would exceed the configured quota"""
    pass

# ===== HELPERS =====

@dataclass(frozen=True)
class LoadResult:
    """Outcome of ``LocalStore.load``; ``defaulted`` marks fallback substitution."""
    value: Any
    defaulted: bool
    error: Optional[str] = None

def serialize(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, sort_keys=True, separators=(",", ":"))

class LocalStore:
    """
    localStorage-like key/value store.

    - ``get`` never raises on read problems and returns the fallback instead
    - ``set`` raises ``StorageWriteError`` / ``StorageQuotaError``
    - every write rewrites the backing file atomically
    """

    def __init__(self, path: Union[str, Path, None] = None, max_bytes: Optional[int] = None):
        self.path = Path(path) if path else None
        self.max_bytes = max_bytes
        self._items: Dict[str, str] = {}
        self._load_file()

    # ===== BACKING FILE =====

    def _load_file(self) -> None:
        if self.path is None or not self.path.exists():
            self._items = {}
            return

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"⚠️ Store file {self.path} is unreadable: {e}")
            self._move_aside()
            self._items = {}
            return

        if not isinstance(data, dict):
            logger.warning(f"⚠️ Store file {self.path} has an unexpected format")
            self._move_aside()
            self._items = {}
            return

        self._items = {str(k): v for k, v in data.items() if isinstance(v, str)}
        logger.debug(f"📂 Loaded {len(self._items)} keys from {self.path}")

    def _move_aside(self) -> None:
        stamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        target = self.path.with_name(f"{self.path.name}.corrupted-{stamp}")
        try:
            self.path.replace(target)
            logger.warning(f"🔄 Corrupted store moved to {target}")
        except OSError as e:
            logger.error(f"❌ Could not move corrupted store aside: {e}")

    def _write_file(self, items: Dict[str, str]) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, ensure_ascii=False, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _size_of(self, items: Dict[str, str]) -> int:
        return sum(len(k) + len(v) for k, v in items.items())

    def _commit(self, items: Dict[str, str]) -> None:
        if self.max_bytes is not None and self._size_of(items) > self.max_bytes:
            raise StorageQuotaError(f"store quota of {self.max_bytes} bytes exceeded")
        try:
            self._write_file(items)
        except OSError as e:
            raise StorageWriteError(f"could not write {self.path}: {e}") from e
        self._items = items

    # ===== PUBLIC API =====

    def load(self, key: str, fallback: Any = None) -> LoadResult:
        raw = self._items.get(key)
        if not raw:
            return LoadResult(fallback, defaulted=True)
        try:
            return LoadResult(json.loads(raw), defaulted=False)
        except json.JSONDecodeError as e:
            logger.debug(f"Stored value for {key} is not valid JSON: {e}")
            return LoadResult(fallback, defaulted=True, error=str(e))

    def get(self, key: str, fallback: Any = None) -> Any:
        return self.load(key, fallback).value

    def set(self, key: str, value: Any) -> None:
        try:
            raw = serialize(value)
        except (TypeError, ValueError) as e:
            raise StorageWriteError(f"value for {key} is not serializable: {e}") from e
        items = dict(self._items)
        items[key] = raw
        self._commit(items)

    def set_raw(self, key: str, raw: str) -> None:
        """Store an already serialized string as is."""
        items = dict(self._items)
        items[key] = raw
        self._commit(items)

    def remove(self, key: str) -> bool:
        if key not in self._items:
            return False
        items = dict(self._items)
        del items[key]
        self._commit(items)
        return True

    def keys(self, prefix: str = "") -> List[str]:
        return sorted(k for k in self._items if k.startswith(prefix))

    def clear(self, prefix: str = "") -> int:
        items = {k: v for k, v in self._items.items() if not k.startswith(prefix)}
        removed = len(self._items) - len(items)
        if removed:
            self._commit(items)
        return removed

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)
