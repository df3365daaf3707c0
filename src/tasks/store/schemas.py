from datetime import datetime
from enum import Enum
from typing import Literal
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Priority(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


# Listing order, highest first
PRIORITY_RANK: dict[Priority, int] = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}

GroupField = Literal["priority", "category"]


class Task(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    title: str
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    category: str | None = None
    tags: list[str] | None = None
    due_date: datetime | None = None
    completed: bool = False
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class NewTask(BaseModel):
    title: str
    description: str | None = None
    priority: Priority = Priority.MEDIUM
    category: str | None = None
    tags: list[str] | None = None
    due_date: datetime | None = None


class TaskUpdate(BaseModel):
    """Partial update.

    Only the fields explicitly set on the instance are applied; a field set to
    None clears the stored value.
    """

    title: str | None = None
    description: str | None = None
    priority: Priority | None = None
    category: str | None = None
    tags: list[str] | None = None
    due_date: datetime | None = None
    completed: bool | None = None
    completed_at: datetime | None = None


class TaskFilter(BaseModel):
    model_config = ConfigDict(frozen=True)

    completed: bool | None = None
    priority: Priority | None = None
    category: str | None = None
    search_text: str | None = None
    due_before: datetime | None = None
