# models/enums.py

from enum import Enum

STORAGE_PREFIX = "ecc_"

class StorageKey(str, Enum):
    TASKS = "ecc_tasks_v1"
    NOTES = "ecc_notes_v1"
    EXAM = "ecc_exam_v1"
    FOCUS = "ecc_focus_v1"
    SUBJECTS = "ecc_subjects_v1"
    USP = "ecc_usp_v1"

class StateSlice(str, Enum):
    TASKS = "tasks"
    NOTES = "notes"
    EXAM = "exam"
    FOCUS = "focus"
    ALL = "all"
