# ui/messages.py

from datetime import datetime
from typing import Iterable, List

from models.state import ExamState, UspCard
from models.task import Task
from services.kpi import Kpis
from ui.progress import streak_emoji, tasks_progress_bar
from utils.datetime_utils import format_stamp
from utils.text_utils import escape_html, short_id, truncate

EMPTY_TASKS_MESSAGE = "No tasks yet. Add one and keep it small."

def today_stamp(now: datetime) -> str:
    return format_stamp(now)

def task_line(task: Task) -> str:
    status = "[x]" if task.done else "[ ]"
    return f"{status} {short_id(task.id)}  {truncate(task.title, 72)}"

def tasks_list_message(tasks: Iterable[Task]) -> str:
    tasks = list(tasks)
    if not tasks:
        return EMPTY_TASKS_MESSAGE
    return "\n".join(task_line(t) for t in tasks)

def kpis_message(kpis: Kpis) -> str:
    lines = [
        f"⏱ Today:     {kpis.today_label}",
        f"{streak_emoji(kpis.streak)} Streak:    {kpis.streak}",
        f"✅ Done:      {kpis.done} / {kpis.total}",
        f"   Progress:  {tasks_progress_bar(kpis.done, kpis.total)}",
        f"📅 Next exam: {kpis.exam_countdown}",
    ]
    if kpis.exam_hint:
        lines.append(f"   {kpis.exam_hint}")
    return "\n".join(lines)

def exam_message(exam: ExamState, countdown: str) -> str:
    if not exam.date:
        return f"No exam date set ({countdown})."
    label = exam.label or "Next exam"
    return f"{label}: {exam.date} ({countdown})"

def notes_message(notes: str) -> str:
    return notes if notes.strip() else "(no notes yet)"

def focus_message(focus: bool) -> str:
    return "🎯 Focus mode on" if focus else "Focus mode off"

def usp_card_html(card: UspCard) -> str:
    return (
        '<div class="rounded-3xl ring-soft p-4 bg-white/5">'
        f'<p class="text-sm font-semibold">{escape_html(card.title)}</p>'
        f'<p class="text-xs text-slate-300 mt-1">{escape_html(card.body)}</p>'
        '</div>'
    )

def usp_cards_html(cards: Iterable[UspCard]) -> str:
    return "\n".join(usp_card_html(c) for c in cards)

def usp_cards_message(cards: Iterable[UspCard]) -> str:
    lines: List[str] = []
    for card in cards:
        lines.append(f"• {card.title}")
        lines.append(f"  {card.body}")
    return "\n".join(lines)
