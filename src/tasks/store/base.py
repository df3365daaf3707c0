from abc import ABC, abstractmethod
from datetime import datetime

from src.tasks.store.schemas import (
    GroupField,
    NewTask,
    Task,
    TaskFilter,
    TaskUpdate,
)


class TaskStore(ABC):
    @abstractmethod
    def create_task(self, new_task: NewTask, timestamp: datetime) -> Task:
        pass

    @abstractmethod
    def find_tasks(self, task_filter: TaskFilter, limit: int = 5) -> list[Task]:
        """Matching tasks ordered by completed asc, priority desc, created_at desc."""
        pass

    @abstractmethod
    def get_task(self, task_id: int) -> Task:
        pass

    @abstractmethod
    def update_task(
        self, task_id: int, updates: TaskUpdate, timestamp: datetime
    ) -> Task:
        pass

    @abstractmethod
    def delete_task(self, task_id: int) -> None:
        pass

    @abstractmethod
    def count_tasks(self, task_filter: TaskFilter) -> int:
        pass

    @abstractmethod
    def group_count(self, field: GroupField, task_filter: TaskFilter) -> dict[str, int]:
        """Counts per distinct non-null value of `field`."""
        pass

    def close(self) -> None:
        pass
