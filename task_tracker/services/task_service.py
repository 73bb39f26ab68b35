import logging
from typing import Any

from task_tracker.cache.counter import TaskCountCache
from task_tracker.database import TaskStore
from task_tracker.exceptions import TaskNotFoundError, TaskValidationError
from task_tracker.models import DEFAULT_STATUS, TaskResponse
from task_tracker.services.count_reconciler import TaskCountReconciler

logger = logging.getLogger(__name__)


class TaskService:
    """
    Task CRUD against the durable store, keeping the cached count in step.

    The store is always written first; the counter is adjusted only after
    the durable write succeeded. If the adjustment then fails the row stays
    and the counter drifts until the key is lost and recounted.
    """

    def __init__(
        self,
        store: TaskStore,
        cache: TaskCountCache,
        reconciler: TaskCountReconciler,
    ):
        self.store = store
        self.cache = cache
        self.reconciler = reconciler

    @property
    def count_key(self) -> str:
        return self.reconciler.key

    async def create_task(self, payload: dict[str, Any]) -> int:
        title = payload.get("title")
        if not isinstance(title, str) or not title.strip():
            raise TaskValidationError("Title is required")

        data = {
            "title": title,
            "description": payload.get("description"),
            "status": payload.get("status", DEFAULT_STATUS),
        }

        # a lazily rebuilt count must not already include the new row
        await self.reconciler.ensure_initialized()
        task_id = await self.store.insert(data)
        count = await self.cache.increment(self.count_key)
        logger.debug(f"Created task {task_id}, {self.count_key}={count}")
        return task_id

    async def get_all_tasks(self) -> list[TaskResponse]:
        rows = await self.store.select_all()
        return [TaskResponse(id=task_id, data=data) for task_id, data in rows]

    async def get_task(self, task_id: int) -> TaskResponse:
        row = await self.store.select_by_id(task_id)
        if row is None:
            raise TaskNotFoundError(task_id)
        return TaskResponse(id=row[0], data=row[1])

    # shallow merge: request keys win, nested objects are replaced wholesale
    async def update_task(self, task_id: int, payload: dict[str, Any]) -> TaskResponse:
        existing = await self.get_task(task_id)
        merged = {**existing.data, **payload}
        await self.store.update(task_id, merged)
        return TaskResponse(id=task_id, data=merged)

    async def delete_task(self, task_id: int) -> None:
        await self.reconciler.ensure_initialized()
        if not await self.store.delete(task_id):
            raise TaskNotFoundError(task_id)
        count = await self.cache.decrement(self.count_key)
        logger.debug(f"Deleted task {task_id}, {self.count_key}={count}")

    async def get_task_count(self) -> int:
        return await self.reconciler.current_count()
