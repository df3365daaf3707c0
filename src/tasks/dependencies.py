from typing import Any
from fastapi import Body, Depends
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from src.common.exceptions import InvalidRequestException
from src.config import Settings, get_settings
from src.tasks.schemas import CreateTaskRequest
from src.tasks.service import TaskService
from src.tasks.store.base import TaskStore
from src.tasks.store.dependencies import get_task_store


def get_task_service(
    task_store: TaskStore = Depends(get_task_store),
    settings: Settings = Depends(get_settings),
) -> TaskService:
    return TaskService(
        task_store=task_store, default_limit=settings.DEFAULT_LIST_LIMIT
    )


def get_create_task_request(body: Any = Body(None)) -> CreateTaskRequest:
    """Parse the create body, checking the title before any other field."""
    if not isinstance(body, dict) or not body.get("title"):
        raise InvalidRequestException("title required")

    try:
        return CreateTaskRequest.model_validate(body)
    except ValidationError as e:
        errors = [
            {**error, "loc": ("body", *error["loc"])}
            for error in e.errors(include_url=False)
        ]
        raise RequestValidationError(errors, body=body) from e
