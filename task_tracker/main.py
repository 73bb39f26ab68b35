import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from task_tracker.cache.counter import TaskCountCache, create_redis
from task_tracker.core.config import get_settings
from task_tracker.core.logging import setup_logging
from task_tracker.database import (
    TaskStore,
    build_engine,
    create_db_and_tables,
    create_session_factory,
)
from task_tracker.exceptions import (
    TaskNotFoundError,
    TaskTrackerError,
    TaskValidationError,
)
from task_tracker.routers import stats, tasks
from task_tracker.services.count_reconciler import TaskCountReconciler
from task_tracker.services.task_service import TaskService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level)

    engine = build_engine(settings)
    if settings.create_tables:
        await create_db_and_tables(engine)

    cache = TaskCountCache(create_redis(settings))
    store = TaskStore(create_session_factory(engine))
    reconciler = TaskCountReconciler(store, cache, key=settings.task_count_key)
    app.state.task_service = TaskService(store, cache, reconciler)

    try:
        await cache.ping()
        logger.info("Redis connection established")
        await reconciler.ensure_initialized()
    except TaskTrackerError as e:
        # /stats and every create/delete retry this lazily
        logger.warning(f"Startup reconciliation skipped: {e}")

    yield

    await cache.close()
    await engine.dispose()


async def validation_error_handler(request: Request, exc: TaskValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)}
    )


async def not_found_handler(request: Request, exc: TaskNotFoundError):
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content={"error": "Task not found"}
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"error": "Invalid request"}
    )


async def server_error_handler(request: Request, exc: Exception):
    logger.error(
        f"{request.method} {request.url.path} failed: {exc}", exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Server error"},
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title="Task Tracker API",
        description="Task API with PostgreSQL records and a Redis-cached task count",
        swagger_ui_parameters={"displayRequestDuration": True},
        version="1.0.0",
        lifespan=lifespan,
    )

    # Include routers
    app.include_router(tasks.router)
    app.include_router(stats.router)

    # StoreError and CacheError fall through to the TaskTrackerError handler
    app.add_exception_handler(TaskValidationError, validation_error_handler)
    app.add_exception_handler(TaskNotFoundError, not_found_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(TaskTrackerError, server_error_handler)
    # anything else still gets the JSON body instead of plain text
    app.add_exception_handler(Exception, server_error_handler)

    @app.get("/")
    async def root():
        return {
            "message": "Welcome to Task Tracker API",
            "docs": "/docs",
            "version": "1.0.0",
        }

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


app = create_app()


def run():
    settings = get_settings()
    uvicorn.run(
        "task_tracker.main:app",
        host="0.0.0.0",
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
