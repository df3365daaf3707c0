from fastapi import APIRouter, Depends, Query, status

from src.common.exceptions import (
    ResourceType,
    invalid_request_response,
    resource_not_found_response,
)
from src.tasks.dependencies import get_create_task_request, get_task_service
from src.tasks.schemas import CreateTaskRequest, TaskStats, UpdateTaskRequest
from src.tasks.service import TaskService
from src.tasks.store.schemas import Task
from src.tasks.validators import INVALID_ID_MESSAGE, INVALID_PRIORITY_MESSAGE


router = APIRouter(
    prefix="/tasks",
    tags=["Tasks"],
)


@router.get("", responses={**invalid_request_response(INVALID_PRIORITY_MESSAGE)})
def list_tasks(
    priority: str | None = None,
    category: str | None = None,
    search: str | None = None,
    show_completed: bool = Query(False, alias="showCompleted"),
    limit: int | None = Query(None, ge=1),
    task_service: TaskService = Depends(get_task_service),
) -> list[Task]:
    return task_service.list_tasks(
        priority=priority,
        category=category,
        search=search,
        show_completed=show_completed,
        limit=limit,
    )


@router.get("/stats")
def get_task_stats(
    task_service: TaskService = Depends(get_task_service),
) -> TaskStats:
    return task_service.get_stats()


@router.get(
    "/{task_id}",
    responses={
        **invalid_request_response(INVALID_ID_MESSAGE),
        **resource_not_found_response(ResourceType.TASK),
    },
)
def get_task(
    task_id: str, task_service: TaskService = Depends(get_task_service)
) -> Task:
    return task_service.get_task(task_id)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={**invalid_request_response("title required")},
)
def create_task(
    task_input: CreateTaskRequest = Depends(get_create_task_request),
    task_service: TaskService = Depends(get_task_service),
) -> Task:
    return task_service.create_task(task_input)


@router.put(
    "/{task_id}",
    responses={
        **invalid_request_response(INVALID_ID_MESSAGE),
        **resource_not_found_response(ResourceType.TASK),
    },
)
def update_task(
    task_id: str,
    task_input: UpdateTaskRequest,
    task_service: TaskService = Depends(get_task_service),
) -> Task:
    return task_service.update_task(task_id, task_input)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        **invalid_request_response(INVALID_ID_MESSAGE),
        **resource_not_found_response(ResourceType.TASK),
    },
)
def delete_task(task_id: str, task_service: TaskService = Depends(get_task_service)):
    task_service.delete_task(task_id)


@router.post(
    "/{task_id}/done",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        **invalid_request_response(INVALID_ID_MESSAGE),
        **resource_not_found_response(ResourceType.TASK),
    },
)
def complete_task(
    task_id: str, task_service: TaskService = Depends(get_task_service)
):
    task_service.complete_task(task_id)


@router.post(
    "/{task_id}/uncomplete",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        **invalid_request_response(INVALID_ID_MESSAGE),
        **resource_not_found_response(ResourceType.TASK),
    },
)
def uncomplete_task(
    task_id: str, task_service: TaskService = Depends(get_task_service)
):
    task_service.uncomplete_task(task_id)
