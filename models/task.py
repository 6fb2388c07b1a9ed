# models/task.py

import math
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from models.errors import ValidationError
from utils.datetime_utils import now_ms
from utils.validators import clean_task_title

@dataclass
class Task:
    """A single study task. ``id`` never changes once assigned."""
    id: str
    title: str
    done: bool = False
    created_at: int = field(default_factory=now_ms)

    def __post_init__(self):
        title = clean_task_title(self.title)
        if title is None:
            raise ValidationError("title_required")
        self.title = title
        if not isinstance(self.id, str) or not self.id:
            raise ValidationError("id_required")

    @classmethod
    def create(cls, title: str) -> "Task":
        return cls(id=str(uuid.uuid4()), title=title)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        created_at = data.get("created_at") or 0
        if not isinstance(created_at, (int, float)) or isinstance(created_at, bool) or not math.isfinite(created_at):
            created_at = 0
        return cls(
            id=data.get("id"),
            title=data.get("title"),
            done=data.get("done") is True,
            created_at=int(created_at),
        )

def tasks_from_list(items: Any) -> List[Task]:
    """Rebuild tasks from stored data, skipping records that no longer validate."""
    if not isinstance(items, list):
        return []
    tasks = []
    seen = set()
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            task = Task.from_dict(item)
        except ValidationError:
            continue
        if task.id in seen:
            continue
        seen.add(task.id)
        tasks.append(task)
    return tasks

def find_task(tasks: Iterable[Task], id_or_prefix: str) -> Optional[Task]:
    """Exact id, or the single task whose id starts with the prefix; None when missing or ambiguous."""
    tasks = list(tasks)
    for task in tasks:
        if task.id == id_or_prefix:
            return task
    if not id_or_prefix:
        return None
    matches = [t for t in tasks if t.id.startswith(id_or_prefix)]
    return matches[0] if len(matches) == 1 else None
