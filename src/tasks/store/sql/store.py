from datetime import datetime
from functools import wraps
import logging
from typing import Any, Callable, TypeVar
from sqlalchemy import ColumnElement, Select, and_, case, create_engine, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from src.common.current_datetime import to_utc
from src.common.exceptions import (
    InvalidRequestException,
    ResourceNotFoundException,
    ResourceType,
    StoreException,
)
from src.tasks.store.base import TaskStore
from src.tasks.store.schemas import (
    PRIORITY_RANK,
    GroupField,
    NewTask,
    Priority,
    Task,
    TaskFilter,
    TaskUpdate,
)
from src.tasks.store.sql.model import Base, TaskModel
from src.tasks.store.utils import deserialize_tags, serialize_tags

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def store_operation(message: str) -> Callable[[F], F]:
    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except SQLAlchemyError as e:
                logger.exception(message)
                raise StoreException(message) from e

        return wrapper  # type: ignore

    return decorator


def _optional_utc(value: datetime | None) -> datetime | None:
    return to_utc(value) if value is not None else None


class SqlTaskStore(TaskStore):
    def __init__(self, database_url: str):
        self.engine = create_engine(database_url)
        self.Session = sessionmaker(bind=self.engine)
        Base.metadata.create_all(self.engine)

    def close(self) -> None:
        self.engine.dispose()

    def _map_task(self, task: TaskModel) -> Task:
        return Task(
            id=task.id,
            title=task.title,
            description=task.description,
            priority=Priority(task.priority),
            category=task.category,
            tags=deserialize_tags(task.tags),
            due_date=_optional_utc(task.due_date),
            completed=task.completed,
            completed_at=_optional_utc(task.completed_at),
            created_at=to_utc(task.created_at),
            updated_at=to_utc(task.updated_at),
        )

    def _conditions(self, task_filter: TaskFilter) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []

        if task_filter.completed is not None:
            conditions.append(TaskModel.completed == task_filter.completed)
        if task_filter.priority is not None:
            conditions.append(TaskModel.priority == task_filter.priority.value)
        if task_filter.category is not None:
            conditions.append(TaskModel.category == task_filter.category)
        if task_filter.search_text:
            conditions.append(
                or_(
                    TaskModel.title.contains(task_filter.search_text, autoescape=True),
                    TaskModel.description.contains(
                        task_filter.search_text, autoescape=True
                    ),
                )
            )
        if task_filter.due_before is not None:
            conditions.append(TaskModel.due_date < to_utc(task_filter.due_before))

        return conditions

    def _filtered(self, query: Select[Any], task_filter: TaskFilter) -> Select[Any]:
        conditions = self._conditions(task_filter)
        if conditions:
            query = query.where(and_(*conditions))
        return query

    def _get_model(self, session: Any, task_id: int) -> TaskModel:
        task = session.get(TaskModel, task_id)
        if not task:
            raise ResourceNotFoundException(ResourceType.TASK, task_id)
        return task

    @store_operation("Failed to create task")
    def create_task(self, new_task: NewTask, timestamp: datetime) -> Task:
        if not new_task.title:
            raise InvalidRequestException("title required")

        timestamp = to_utc(timestamp)
        with self.Session() as session:
            task = TaskModel(
                title=new_task.title,
                description=new_task.description,
                priority=new_task.priority.value,
                category=new_task.category,
                tags=serialize_tags(new_task.tags),
                due_date=_optional_utc(new_task.due_date),
                created_at=timestamp,
                updated_at=timestamp,
            )
            session.add(task)
            session.commit()
            session.refresh(task)

            return self._map_task(task)

    @store_operation("Failed to fetch tasks")
    def find_tasks(self, task_filter: TaskFilter, limit: int = 5) -> list[Task]:
        priority_rank = case(
            {priority.value: rank for priority, rank in PRIORITY_RANK.items()},
            value=TaskModel.priority,
            else_=len(PRIORITY_RANK),
        )
        query = (
            self._filtered(select(TaskModel), task_filter)
            .order_by(
                TaskModel.completed.asc(),
                priority_rank.asc(),
                TaskModel.created_at.desc(),
                TaskModel.id.desc(),
            )
            .limit(limit)
        )

        with self.Session() as session:
            return [self._map_task(task) for task in session.scalars(query).all()]

    @store_operation("Failed to fetch task")
    def get_task(self, task_id: int) -> Task:
        with self.Session() as session:
            return self._map_task(self._get_model(session, task_id))

    @store_operation("Failed to update task")
    def update_task(
        self, task_id: int, updates: TaskUpdate, timestamp: datetime
    ) -> Task:
        timestamp = to_utc(timestamp)
        fields = updates.model_fields_set

        with self.Session() as session:
            task = self._get_model(session, task_id)

            if "title" in fields:
                if not updates.title:
                    raise InvalidRequestException("title required")
                task.title = updates.title
            if "description" in fields:
                task.description = updates.description
            if "priority" in fields:
                if updates.priority is None:
                    raise InvalidRequestException(
                        "invalid priority. Must be HIGH, MEDIUM, or LOW"
                    )
                task.priority = updates.priority.value
            if "category" in fields:
                task.category = updates.category
            if "tags" in fields:
                task.tags = serialize_tags(updates.tags)
            if "due_date" in fields:
                task.due_date = _optional_utc(updates.due_date)
            if "completed" in fields and updates.completed is not None:
                task.completed = updates.completed
                if updates.completed:
                    task.completed_at = _optional_utc(updates.completed_at) or timestamp
                else:
                    task.completed_at = None

            task.updated_at = timestamp
            session.commit()
            session.refresh(task)

            return self._map_task(task)

    @store_operation("Failed to delete task")
    def delete_task(self, task_id: int) -> None:
        with self.Session() as session:
            task = self._get_model(session, task_id)
            session.delete(task)
            session.commit()

    @store_operation("Failed to count tasks")
    def count_tasks(self, task_filter: TaskFilter) -> int:
        query = self._filtered(select(func.count(TaskModel.id)), task_filter)

        with self.Session() as session:
            return session.scalar(query) or 0

    @store_operation("Failed to count tasks")
    def group_count(self, field: GroupField, task_filter: TaskFilter) -> dict[str, int]:
        column = getattr(TaskModel, field)
        query = (
            self._filtered(select(column, func.count(TaskModel.id)), task_filter)
            .where(column.is_not(None))
            .group_by(column)
        )

        with self.Session() as session:
            return {value: count for value, count in session.execute(query).all()}
