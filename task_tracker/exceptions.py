class TaskTrackerError(Exception):
    """Base class for errors raised by the task tracker."""


class TaskValidationError(TaskTrackerError):
    """Request payload failed validation (HTTP 400)."""


class TaskNotFoundError(TaskTrackerError):
    """No task row exists for the given id (HTTP 404)."""

    def __init__(self, task_id: int):
        super().__init__(f"Task with id {task_id} not found")
        self.task_id = task_id


class StoreError(TaskTrackerError):
    """Durable store failure: connectivity, constraint or serialization."""


class CacheError(TaskTrackerError):
    """Cache failure. Never to be confused with a cache miss."""
