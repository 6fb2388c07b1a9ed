from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator

from utils.validators import is_valid_date

# Task models
class TaskOut(BaseModel):
    id: str
    title: str
    done: bool
    created_at: int

class CreateTaskRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: StrictStr

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('title must not be empty')
        return v.strip()

class UpdateTaskRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    done: StrictBool

# State models (notes + exam)
class ExamModel(BaseModel):
    label: str = ""
    date: str = ""

class StateOut(BaseModel):
    notes: str = ""
    exam: ExamModel = Field(default_factory=ExamModel)

class NotesRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    notes: StrictStr = ""

class ExamRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    label: StrictStr = ""
    date: StrictStr = ""

    @field_validator('label')
    @classmethod
    def strip_label(cls, v):
        return v.strip()

    @field_validator('date')
    @classmethod
    def validate_date(cls, v):
        v = v.strip()
        if v and not is_valid_date(v):
            raise ValueError('date must be an ISO calendar date (YYYY-MM-DD)')
        return v

# API responses
class OkResponse(BaseModel):
    ok: bool = True

class ErrorResponse(BaseModel):
    error: str
    status_code: int
    details: List[Any] = []
