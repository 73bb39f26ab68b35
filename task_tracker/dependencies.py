from fastapi import Depends, Request
from typing_extensions import Annotated

from task_tracker.services.task_service import TaskService


# Dependency for getting the process-scoped task service built in lifespan
def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
