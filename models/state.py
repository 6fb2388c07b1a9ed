# models/state.py

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from models.task import Task
from utils.validators import clamp_progress

@dataclass
class ExamState:
    label: str = ""
    date: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> "ExamState":
        if not isinstance(data, dict):
            return cls()
        label = data.get("label") or ""
        date = data.get("date") or ""
        return cls(label=str(label), date=str(date))

@dataclass(frozen=True)
class SubjectProgress:
    name: str
    progress: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SubjectProgress":
        return cls(name=str(data.get("name", "")), progress=clamp_progress(data.get("progress")))

@dataclass(frozen=True)
class UspCard:
    title: str
    body: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UspCard":
        return cls(title=str(data.get("title", "")), body=str(data.get("body", "")))

DEFAULT_SUBJECTS = [
    SubjectProgress("Maths", 55),
    SubjectProgress("Science", 42),
    SubjectProgress("English", 68),
]

DEFAULT_USP_CARDS = [
    UspCard("Clarity under pressure", "Everything you need, nothing you don’t."),
    UspCard("Action > motivation", "Small tasks, fast feedback loops."),
    UspCard("Review that sticks", "Mistake → cause → fix, every time."),
]

@dataclass
class StudyState:
    """Everything one client session holds in memory."""
    tasks: List[Task] = field(default_factory=list)
    notes: str = ""
    exam: ExamState = field(default_factory=ExamState)
    focus: bool = False
    subjects: List[SubjectProgress] = field(default_factory=lambda: list(DEFAULT_SUBJECTS))
    usp_cards: List[UspCard] = field(default_factory=lambda: list(DEFAULT_USP_CARDS))
