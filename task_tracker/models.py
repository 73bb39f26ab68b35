from typing import Any

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Column, Field, SQLModel

DEFAULT_STATUS = "pending"

# JSONB on PostgreSQL, plain JSON on other dialects (SQLite in tests)
TaskData = JSON().with_variant(JSONB(), "postgresql")


class Task(SQLModel, table=True):
    """Database model. The attribute bag is stored opaquely in `data`."""

    __tablename__ = "tasks"

    id: int | None = Field(default=None, primary_key=True)
    data: dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(TaskData, nullable=False)
    )


class TaskCreated(SQLModel):
    """Schema for the create response"""

    id: int


class TaskResponse(SQLModel):
    """Schema for task responses"""

    id: int
    data: dict[str, Any]


class TaskStats(SQLModel):
    """Schema for the stats response"""

    taskCount: int


class ErrorResponse(SQLModel):
    error: str
