# ui/charts.py

"""
Chart.js configurations for the study page. Rendering happens in the
browser; only the data and options are produced here.
"""

from typing import Any, Dict, Iterable

from models.state import SubjectProgress

BREAKDOWN_LABELS = ["Practice", "Review", "Notes"]
BREAKDOWN_VALUES = [55, 30, 15]

TREND_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
TREND_VALUES = [40, 55, 48, 62, 58, 70, 66]

def _percent_scale() -> Dict[str, Any]:
    return {"y": {"beginAtZero": True, "max": 100}}

def progress_chart(subjects: Iterable[SubjectProgress]) -> Dict[str, Any]:
    subjects = list(subjects)
    return {
        "type": "bar",
        "data": {
            "labels": [s.name for s in subjects],
            "datasets": [{"label": "Progress %", "data": [s.progress for s in subjects]}],
        },
        "options": {
            "responsive": True,
            "plugins": {"legend": {"display": False}},
            "scales": _percent_scale(),
        },
    }

def breakdown_chart() -> Dict[str, Any]:
    return {
        "type": "doughnut",
        "data": {
            "labels": list(BREAKDOWN_LABELS),
            "datasets": [{"data": list(BREAKDOWN_VALUES)}],
        },
        "options": {"responsive": True, "plugins": {"legend": {"position": "bottom"}}},
    }

def trend_chart() -> Dict[str, Any]:
    return {
        "type": "line",
        "data": {
            "labels": list(TREND_LABELS),
            "datasets": [{"label": "Focus score", "data": list(TREND_VALUES), "tension": 0.35}],
        },
        "options": {
            "responsive": True,
            "plugins": {"legend": {"display": False}},
            "scales": _percent_scale(),
        },
    }

def all_charts(subjects: Iterable[SubjectProgress]) -> Dict[str, Dict[str, Any]]:
    return {
        "chartProgress": progress_chart(subjects),
        "chartBreakdown": breakdown_chart(),
        "chartTrend": trend_chart(),
    }