import logging

from src.common.current_datetime import get_current_datetime
from src.common.exceptions import InvalidRequestException
from src.tasks.schemas import CreateTaskRequest, TaskStats, UpdateTaskRequest
from src.tasks.store.base import TaskStore
from src.tasks.store.schemas import NewTask, Priority, Task, TaskFilter, TaskUpdate
from src.tasks.validators import (
    parse_completion_task_id,
    parse_priority,
    parse_required_priority,
    parse_task_id,
)

logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, *, task_store: TaskStore, default_limit: int = 5) -> None:
        self.task_store = task_store
        self.default_limit = default_limit

    def list_tasks(
        self,
        *,
        priority: str | None = None,
        category: str | None = None,
        search: str | None = None,
        show_completed: bool = False,
        limit: int | None = None,
    ) -> list[Task]:
        task_filter = TaskFilter(
            completed=show_completed,
            priority=parse_priority(priority),
            category=category or None,
            search_text=search or None,
        )
        return self.task_store.find_tasks(
            task_filter, limit=limit if limit is not None else self.default_limit
        )

    def get_stats(self) -> TaskStats:
        pending_filter = TaskFilter(completed=False)

        return TaskStats(
            total=self.task_store.count_tasks(TaskFilter()),
            completed=self.task_store.count_tasks(TaskFilter(completed=True)),
            pending=self.task_store.count_tasks(pending_filter),
            overdue=self.task_store.count_tasks(
                TaskFilter(completed=False, due_before=get_current_datetime())
            ),
            by_priority=self.task_store.group_count("priority", pending_filter),
            by_category=self.task_store.group_count("category", pending_filter),
        )

    def get_task(self, raw_id: str) -> Task:
        return self.task_store.get_task(parse_task_id(raw_id))

    def create_task(self, task_input: CreateTaskRequest | None) -> Task:
        if task_input is None or not task_input.title:
            raise InvalidRequestException("title required")

        new_task = NewTask(
            title=task_input.title,
            description=task_input.description,
            priority=parse_priority(task_input.priority) or Priority.MEDIUM,
            due_date=task_input.due_date,
            category=task_input.category or None,
            tags=task_input.tags,
        )

        task = self.task_store.create_task(new_task, timestamp=get_current_datetime())
        logger.info(f"Created task {task.id}")
        return task

    def update_task(self, raw_id: str, task_input: UpdateTaskRequest) -> Task:
        task_id = parse_task_id(raw_id)
        fields = task_input.model_fields_set

        if "title" in fields and not task_input.title:
            raise InvalidRequestException("title required")

        values = {field: getattr(task_input, field) for field in fields}
        if "priority" in values:
            values["priority"] = parse_required_priority(task_input.priority)
        updates = TaskUpdate(**values)

        task = self.task_store.update_task(
            task_id, updates, timestamp=get_current_datetime()
        )
        logger.info(f"Updated task {task_id}: {sorted(fields)}")
        return task

    def delete_task(self, raw_id: str) -> None:
        task_id = parse_task_id(raw_id)
        self.task_store.delete_task(task_id)
        logger.info(f"Deleted task {task_id}")

    def complete_task(self, raw_id: str) -> None:
        task_id = parse_completion_task_id(raw_id)
        timestamp = get_current_datetime()
        self.task_store.update_task(
            task_id,
            TaskUpdate(completed=True, completed_at=timestamp),
            timestamp=timestamp,
        )
        logger.info(f"Completed task {task_id}")

    def uncomplete_task(self, raw_id: str) -> None:
        task_id = parse_task_id(raw_id)
        self.task_store.update_task(
            task_id,
            TaskUpdate(completed=False, completed_at=None),
            timestamp=get_current_datetime(),
        )
        logger.info(f"Uncompleted task {task_id}")
