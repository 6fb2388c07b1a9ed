#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exam Command Centre - Models Package
Data models and enums shared by the study client

Version: 1.0.0
"""

from .enums import (
    STORAGE_PREFIX,
    StorageKey,
    StateSlice
)

from .errors import ValidationError

from .task import (
    Task,
    find_task,
    tasks_from_list
)

from .state import (
    ExamState,
    SubjectProgress,
    UspCard,
    StudyState,
    DEFAULT_SUBJECTS,
    DEFAULT_USP_CARDS
)

__all__ = [
    # Enums
    'STORAGE_PREFIX',
    'StorageKey',
    'StateSlice',

    # Errors
    'ValidationError',

    # Task models
    'Task',
    'find_task',
    'tasks_from_list',

    # State models
    'ExamState',
    'SubjectProgress',
    'UspCard',
    'StudyState',
    'DEFAULT_SUBJECTS',
    'DEFAULT_USP_CARDS'
]
