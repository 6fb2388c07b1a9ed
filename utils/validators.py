# utils/validators.py

import re
from datetime import date
from typing import Any, Optional

ISO_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

def clean_task_title(title: Any) -> Optional[str]:
    """Trimmed title, or None when nothing is left to store."""
    if not isinstance(title, str):
        return None
    trimmed = title.strip()
    return trimmed or None

def is_valid_date(date_str: str) -> bool:
    """True only for a real calendar date written as YYYY-MM-DD."""
    if not isinstance(date_str, str) or not ISO_DATE_RE.fullmatch(date_str):
        return False
    try:
        date.fromisoformat(date_str)
    except ValueError:
        return False
    return True

def clamp_progress(value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        # NaN, infinity and non-numbers all read as no progress
        return 0
    return max(0, min(100, number))
