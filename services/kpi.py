# services/kpi.py

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from models.state import ExamState
from models.task import Task
from utils.datetime_utils import days_until, format_date, parse_date

logger = logging.getLogger(__name__)

# Placeholder heuristics carried over from the first version of the page
MINUTES_PER_DONE_TASK = 25
MAX_MINUTES_TODAY = 240

UNKNOWN_LABEL = "—"
PASSED_LABEL = "Passed"
DEFAULT_EXAM_LABEL = "Next exam"

@dataclass(frozen=True)
class ExamCountdown:
    days: Optional[int]
    label: str
    hint: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.days is not None and self.days < 0

@dataclass(frozen=True)
class Kpis:
    total: int
    done: int
    minutes_today: int
    today_label: str
    streak: int
    exam_countdown: str
    exam_hint: Optional[str]

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "done": self.done,
            "minutes_today": self.minutes_today,
            "today_label": self.today_label,
            "streak": self.streak,
            "exam_countdown": self.exam_countdown,
            "exam_hint": self.exam_hint,
        }

def exam_countdown(exam: ExamState, now: datetime) -> ExamCountdown:
    if not exam.date:
        return ExamCountdown(days=None, label=UNKNOWN_LABEL)
    try:
        day = parse_date(exam.date)
    except ValueError:
        logger.debug(f"Exam date {exam.date!r} is not an ISO date")
        return ExamCountdown(days=None, label=UNKNOWN_LABEL)

    days = days_until(day, now)
    label = f"{days}d" if days >= 0 else PASSED_LABEL
    hint = f"{exam.label or DEFAULT_EXAM_LABEL} • {format_date(day)}"
    return ExamCountdown(days=days, label=label, hint=hint)

def study_minutes(done_count: int) -> int:
    return min(MAX_MINUTES_TODAY, done_count * MINUTES_PER_DONE_TASK)

def format_minutes(minutes: int) -> str:
    return f"{minutes // 60}h {minutes % 60:02d}m"

def compute_kpis(tasks: Iterable[Task], notes: str, exam: ExamState, now: Optional[datetime] = None) -> Kpis:
    """Derive the dashboard KPIs; depends on nothing but its arguments."""
    now = now or datetime.now()
    tasks = list(tasks)
    done = sum(1 for t in tasks if t.done)
    minutes = study_minutes(done)
    countdown = exam_countdown(exam, now)

    return Kpis(
        total=len(tasks),
        done=done,
        minutes_today=minutes,
        today_label=format_minutes(minutes),
        streak=1 if (notes or "").strip() else 0,
        exam_countdown=countdown.label,
        exam_hint=countdown.hint,
    )
