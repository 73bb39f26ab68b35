# tests/conftest.py

from __future__ import annotations

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from task_tracker.cache.counter import TaskCountCache
from task_tracker.database import TaskStore, create_db_and_tables, create_session_factory
from task_tracker.dependencies import get_task_service
from task_tracker.main import create_app
from task_tracker.services.count_reconciler import TaskCountReconciler
from task_tracker.services.task_service import TaskService

from .fakes import FakeRedis, FakeTaskStore

COUNT_KEY = "taskCount"


@pytest.fixture()
def redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture()
def store() -> FakeTaskStore:
    return FakeTaskStore()


@pytest.fixture()
def cache(redis: FakeRedis) -> TaskCountCache:
    return TaskCountCache(redis)


@pytest.fixture()
def reconciler(store: FakeTaskStore, cache: TaskCountCache) -> TaskCountReconciler:
    return TaskCountReconciler(store, cache, key=COUNT_KEY)


@pytest.fixture()
def service(
    store: FakeTaskStore, cache: TaskCountCache, reconciler: TaskCountReconciler
) -> TaskService:
    return TaskService(store, cache, reconciler)


@pytest.fixture()
def client(service: TaskService):
    """
    HTTP client against the real app with the service swapped for one
    wired to in-memory fakes. The lifespan is not entered, so no
    database or Redis server is needed.
    """
    app = create_app()
    app.dependency_overrides[get_task_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def sqlite_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_db_and_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture()
async def sqlite_store(sqlite_engine) -> TaskStore:
    return TaskStore(create_session_factory(sqlite_engine))
