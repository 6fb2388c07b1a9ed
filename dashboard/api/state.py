from typing import Optional

from fastapi import APIRouter, Depends

from shared.models import ExamModel, ExamRequest, NotesRequest, OkResponse, StateOut

from ..core.data_manager import DataManager
from ..dependencies import get_data_manager

router = APIRouter(tags=["state"])

@router.get("/state", response_model=StateOut)
async def get_state(data_manager: DataManager = Depends(get_data_manager)):
    """
    Notes and exam, with defaults when nothing was saved yet
    """
    return StateOut(notes=data_manager.get_notes(), exam=ExamModel(**data_manager.get_exam()))

@router.put("/notes", response_model=OkResponse)
async def put_notes(
    payload: Optional[NotesRequest] = None,
    data_manager: DataManager = Depends(get_data_manager)
):
    """
    Replace the notes wholesale
    """
    payload = payload or NotesRequest()
    data_manager.save_notes(payload.notes)
    return OkResponse()

@router.put("/exam", response_model=OkResponse)
async def put_exam(
    payload: Optional[ExamRequest] = None,
    data_manager: DataManager = Depends(get_data_manager)
):
    """
    Replace the exam label and date wholesale
    """
    payload = payload or ExamRequest()
    data_manager.save_exam(payload.label, payload.date)
    return OkResponse()
