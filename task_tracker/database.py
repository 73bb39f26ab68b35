import logging
from typing import Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

from task_tracker.core.config import Settings
from task_tracker.exceptions import StoreError
from task_tracker.models import Task

logger = logging.getLogger(__name__)

# asyncpg raises OSError subclasses (ConnectionRefusedError) outside SQLAlchemy
STORE_ERRORS = (SQLAlchemyError, OSError)


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the process-wide async engine from settings."""
    return create_async_engine(
        settings.sqlalchemy_url,
        echo=False,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def create_db_and_tables(engine: AsyncEngine):
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


class TaskStore:
    """
    Durable store adapter for task rows.

    Every operation is a single parameterized statement run in its own
    session, so a connection is only held for the duration of one call.
    The `data` bag is handed to the JSON column as-is and never inspected.
    Driver and SQLAlchemy failures are logged and re-raised as StoreError.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def insert(self, attrs: dict[str, Any]) -> int:
        stmt = insert(Task).values(data=attrs).returning(Task.id)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                task_id = result.scalar_one()
                await session.commit()
        except STORE_ERRORS as e:
            logger.error(f"Task insert failed: {e}")
            raise StoreError("insert failed") from e
        return task_id

    async def select_all(self) -> list[tuple[int, dict[str, Any]]]:
        stmt = select(Task.id, Task.data).order_by(Task.id)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                rows = result.all()
        except STORE_ERRORS as e:
            logger.error(f"Task select failed: {e}")
            raise StoreError("select failed") from e
        return [(row.id, row.data) for row in rows]

    async def select_by_id(self, task_id: int) -> tuple[int, dict[str, Any]] | None:
        stmt = select(Task.id, Task.data).where(Task.id == task_id)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                row = result.first()
        except STORE_ERRORS as e:
            logger.error(f"Task select failed for id={task_id}: {e}")
            raise StoreError("select failed") from e
        if row is None:
            return None
        return row.id, row.data

    async def update(self, task_id: int, attrs: dict[str, Any]) -> None:
        stmt = update(Task).where(Task.id == task_id).values(data=attrs)
        try:
            async with self._session_factory() as session:
                await session.execute(stmt)
                await session.commit()
        except STORE_ERRORS as e:
            logger.error(f"Task update failed for id={task_id}: {e}")
            raise StoreError("update failed") from e

    async def delete(self, task_id: int) -> bool:
        stmt = delete(Task).where(Task.id == task_id)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                deleted = result.rowcount > 0
                await session.commit()
        except STORE_ERRORS as e:
            logger.error(f"Task delete failed for id={task_id}: {e}")
            raise StoreError("delete failed") from e
        return deleted

    async def count(self) -> int:
        stmt = select(func.count()).select_from(Task)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                total = result.scalar_one()
        except STORE_ERRORS as e:
            logger.error(f"Task count failed: {e}")
            raise StoreError("count failed") from e
        return total
