# utils/datetime_utils.py

import math
import time
from datetime import date, datetime, timedelta
from typing import Optional

import pytz

DAY = timedelta(days=1)

def now_local(tz_name: Optional[str] = None) -> datetime:
    """Naive wall-clock time, in ``tz_name`` when given, else the system zone."""
    if tz_name:
        return datetime.now(pytz.timezone(tz_name)).replace(tzinfo=None)
    return datetime.now()

def now_ms() -> int:
    return int(time.time() * 1000)

def parse_date(date_str: str) -> date:
    return date.fromisoformat(date_str)

def midnight(day: date) -> datetime:
    return datetime.combine(day, datetime.min.time())

def days_until(day: date, now: datetime) -> int:
    return math.ceil((midnight(day) - now) / DAY)

def format_date(day: date, fmt: str = "%d %b %Y") -> str:
    return day.strftime(fmt)

def format_stamp(dt: datetime) -> str:
    return dt.strftime("%a %d %b, %H:%M")
