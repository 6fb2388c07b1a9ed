# ui/progress.py

from typing import Iterable, List

from models.state import SubjectProgress

def progress_bar(percent: int, length: int = 20, filled: str = "█", empty: str = "░") -> str:
    """Text progress bar with the percentage appended."""
    percent = max(0, min(100, int(percent)))
    done = int(length * percent // 100)
    return filled * done + empty * (length - done) + f" {percent}%"

def tasks_progress_bar(done: int, total: int, length: int = 20) -> str:
    percent = int((done / total) * 100) if total else 0
    return progress_bar(percent, length)

def subjects_progress(subjects: Iterable[SubjectProgress], length: int = 20) -> List[str]:
    subjects = list(subjects)
    if not subjects:
        return ["No subjects yet."]
    width = max(len(s.name) for s in subjects)
    return [f"{s.name.ljust(width)}  {progress_bar(s.progress, length)}" for s in subjects]

def streak_emoji(streak: int) -> str:
    return "🔥" if streak > 0 else "🔹"
