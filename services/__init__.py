# services/__init__.py

"""
Services of the Exam Command Centre: the study state manager over the local
store, the KPI calculations and the backend API client.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from database.manager import LocalStore

from .api_client import (
    ApiConnectionError,
    ApiError,
    ApiNotFoundError,
    ApiValidationError,
    StudyApiClient,
)
from .kpi import ExamCountdown, Kpis, compute_kpis, exam_countdown
from .state_service import StudyStateManager

logger = logging.getLogger(__name__)

def create_state_manager(
    config,
    store_path: Union[str, Path, None] = None,
    strict: bool = False
) -> StudyStateManager:
    """Open the local store named by ``config`` (or ``store_path``) and load the state."""
    path = store_path or config.storage.path
    logger.info(f"📂 Opening local store {path}")
    store = LocalStore(path, max_bytes=config.storage.max_bytes)
    return StudyStateManager(store, strict=strict)

__all__ = [
    'StudyStateManager',
    'StudyApiClient',
    'ApiError',
    'ApiValidationError',
    'ApiNotFoundError',
    'ApiConnectionError',
    'ExamCountdown',
    'Kpis',
    'compute_kpis',
    'exam_countdown',
    'create_state_manager'
]
