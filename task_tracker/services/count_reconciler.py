import logging

from task_tracker.cache.counter import TaskCountCache
from task_tracker.database import TaskStore
from task_tracker.exceptions import CacheError

logger = logging.getLogger(__name__)


class TaskCountReconciler:
    """
    Lazily rebuilds the cached task count from the durable store.

    A present value is trusted, however stale, and never overwritten here.
    Only an absent key (cache restart, eviction, flush) triggers a recount.
    Two callers that both see the key absent will both recount and both
    write; the last write wins.
    """

    def __init__(self, store: TaskStore, cache: TaskCountCache, key: str = "taskCount"):
        self.store = store
        self.cache = cache
        self.key = key

    async def ensure_initialized(self) -> int:
        raw = await self.cache.get(self.key)
        if raw is not None:
            return self._parse(raw)

        total = await self.store.count()
        await self.cache.set(self.key, total)
        logger.info(f"Reconciled {self.key} from store: {total}")
        return total

    async def current_count(self) -> int:
        return await self.ensure_initialized()

    def _parse(self, raw: str) -> int:
        try:
            return int(raw)
        except ValueError as e:
            logger.error(f"Cached {self.key} is not an integer: {raw!r}")
            raise CacheError(f"{self.key} holds a non-integer value") from e
