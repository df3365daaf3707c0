import logging

from src.client.client import TaskClient
from src.client.exceptions import TaskClientException
from src.client.formatting import format_relative_time
from src.tasks.store.schemas import Task

logger = logging.getLogger(__name__)

LOAD_ERROR = "Failed to load tasks"
CREATE_ERROR = "Failed to create task"
COMPLETE_ERROR = "Failed to complete task"


class TaskBoard:
    """List-view state for the pending tasks shown to a user.

    Holds the loaded tasks, a loading flag, the last error message and the ids
    whose completion request is still in flight. Each id has at most one
    completion in flight; a second click on the same task is ignored.
    """

    def __init__(self, client: TaskClient):
        self.client = client
        self.tasks: list[Task] = []
        self.loading = False
        self.error: str | None = None
        self.completing: set[int] = set()

    def can_submit(self, title: str) -> bool:
        return not self.loading and bool(title.strip())

    def is_completing(self, task_id: int) -> bool:
        return task_id in self.completing

    def created_labels(self) -> dict[int, str]:
        return {task.id: format_relative_time(task.created_at) for task in self.tasks}

    async def refresh(self) -> None:
        self.loading = True
        try:
            self.tasks = await self.client.list_tasks()
            self.error = None
        except TaskClientException as e:
            logger.warning(f"Loading tasks failed: {e}")
            self.error = LOAD_ERROR
        finally:
            self.loading = False

    async def add(self, title: str, description: str | None = None) -> bool:
        title = title.strip()
        description = (description or "").strip() or None
        if not title:
            return False

        try:
            await self.client.create_task(title, description)
        except TaskClientException as e:
            logger.warning(f"Creating task failed: {e}")
            self.error = CREATE_ERROR
            return False

        self.error = None
        await self.refresh()
        return True

    async def complete(self, task_id: int) -> bool:
        if task_id in self.completing:
            return False

        self.completing.add(task_id)
        position = next(
            (i for i, task in enumerate(self.tasks) if task.id == task_id), None
        )
        removed = self.tasks.pop(position) if position is not None else None

        try:
            await self.client.complete_task(task_id)
        except TaskClientException as e:
            logger.warning(f"Completing task {task_id} failed: {e}")
            self.error = COMPLETE_ERROR
            if removed is not None and position is not None:
                self.tasks.insert(position, removed)
            return False
        finally:
            self.completing.discard(task_id)

        await self.refresh()
        return True
