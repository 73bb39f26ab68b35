from typing import Any

from fastapi import APIRouter, Body, status

from task_tracker.dependencies import TaskServiceDep
from task_tracker.models import ErrorResponse, TaskCreated, TaskResponse

router = APIRouter(prefix="/tasks", tags=["tasks"])

_not_found = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}


@router.post(
    "",
    response_model=TaskCreated,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def create_task(
    service: TaskServiceDep,
    payload: Any = Body(default=None),
):
    """Create a new task"""
    # a body without a title, whatever its shape, is a missing title
    if not isinstance(payload, dict):
        payload = {}
    task_id = await service.create_task(payload)
    return TaskCreated(id=task_id)


@router.get("", response_model=list[TaskResponse])
async def get_tasks(service: TaskServiceDep):
    return await service.get_all_tasks()


@router.get("/{task_id}", response_model=TaskResponse, responses=_not_found)
async def get_task(task_id: int, service: TaskServiceDep):
    """Get a specific task by ID"""
    return await service.get_task(task_id)


@router.put("/{task_id}", response_model=TaskResponse, responses=_not_found)
async def update_task(
    task_id: int,
    service: TaskServiceDep,
    payload: dict[str, Any] = Body(...),
):
    """Merge the given fields into the task's data"""
    return await service.update_task(task_id, payload)


@router.delete(
    "/{task_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_not_found
)
async def delete_task(task_id: int, service: TaskServiceDep):
    """Delete a task"""
    await service.delete_task(task_id)
