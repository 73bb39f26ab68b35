from fastapi import APIRouter

from task_tracker.dependencies import TaskServiceDep
from task_tracker.models import TaskStats

router = APIRouter(tags=["stats"])


@router.get("/stats", response_model=TaskStats)
async def get_stats(service: TaskServiceDep):
    """Cached task count, rebuilt from the store if the key is missing"""
    return TaskStats(taskCount=await service.get_task_count())
