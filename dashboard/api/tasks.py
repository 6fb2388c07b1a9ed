import logging
from typing import List

from fastapi import APIRouter, Depends

from shared.models import CreateTaskRequest, ErrorResponse, OkResponse, TaskOut, UpdateTaskRequest

from ..core.data_manager import DataManager
from ..dependencies import get_data_manager
from ..errors import NotFound

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
)

@router.get("", response_model=List[TaskOut])
async def list_tasks(data_manager: DataManager = Depends(get_data_manager)):
    """
    All tasks, newest first
    """
    return data_manager.list_tasks()

@router.post("", response_model=TaskOut, status_code=201)
async def create_task(
    payload: CreateTaskRequest,
    data_manager: DataManager = Depends(get_data_manager)
):
    """
    Create a task with a generated id and ``done=false``
    """
    return data_manager.create_task(payload.title)

@router.patch("/{task_id}", response_model=OkResponse)
async def update_task(
    task_id: str,
    payload: UpdateTaskRequest,
    data_manager: DataManager = Depends(get_data_manager)
):
    """
    Set ``done`` of one task
    """
    if not data_manager.set_task_done(task_id, payload.done):
        raise NotFound()
    return OkResponse()

@router.delete("/{task_id}", response_model=OkResponse)
async def delete_task(
    task_id: str,
    data_manager: DataManager = Depends(get_data_manager)
):
    if not data_manager.delete_task(task_id):
        raise NotFound()
    return OkResponse()
