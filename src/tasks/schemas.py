from datetime import datetime
from typing import Any
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class TaskRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str | None = None
    description: str | None = None
    priority: str | None = None
    due_date: datetime | None = None
    category: str | None = None
    tags: list[str] | None = None

    @field_validator("due_date", mode="before")
    def blank_due_date_to_none(cls, value: Any):
        if not value:
            return None
        return value


class CreateTaskRequest(TaskRequest):
    pass


class UpdateTaskRequest(TaskRequest):
    completed: bool | None = None


class TaskStats(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int
    completed: int
    pending: int
    overdue: int
    by_priority: dict[str, int]
    by_category: dict[str, int]
