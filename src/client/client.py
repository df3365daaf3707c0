import asyncio
import logging
from datetime import datetime
from types import TracebackType
from typing import Any, Type
from aiohttp import ClientError, ClientResponse, ClientSession, ClientTimeout

from src.client.exceptions import TaskClientException
from src.tasks.schemas import TaskStats, UpdateTaskRequest
from src.tasks.store.schemas import Task


logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:4000"


class TaskClient:
    def __init__(
        self,
        *,
        base_url: str = DEFAULT_API_URL,
        api_key: str | None = None,
        timeout: float = 10,
    ):
        headers = {"Accept": "application/json"}
        if api_key:
            headers["x-api-key"] = api_key

        self.base_url = base_url.rstrip("/")
        self.session: ClientSession = ClientSession(
            headers=headers, timeout=ClientTimeout(total=timeout)
        )

    async def __aenter__(self):
        return self

    async def __aexit__(
        self, exc_type: Type[Exception], exc: Exception, tb: TracebackType
    ):
        await self.close()

    async def close(self) -> None:
        if self.session:
            await self.session.close()

    async def _error_message(self, response: ClientResponse) -> str:
        try:
            data = await response.json()
        except (ClientError, ValueError):
            return response.reason or f"HTTP {response.status}"

        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
        return response.reason or f"HTTP {response.status}"

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, str | int] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any | None:
        url = f"{self.base_url}{path}"
        try:
            async with self.session.request(
                method, url, params=params, json=json
            ) as response:
                if response.status >= 400:
                    message = await self._error_message(response)
                    raise TaskClientException(message, status=response.status)
                if response.status == 204:
                    return None
                return await response.json()
        except (ClientError, asyncio.TimeoutError) as e:
            logger.error(f"{method} {url} failed: {e!r}")
            raise TaskClientException(f"Request to {url} failed") from e

    async def list_tasks(
        self,
        *,
        priority: str | None = None,
        category: str | None = None,
        search: str | None = None,
        show_completed: bool = False,
        limit: int | None = None,
    ) -> list[Task]:
        params: dict[str, str | int] = {}
        if priority:
            params["priority"] = priority
        if category:
            params["category"] = category
        if search:
            params["search"] = search
        if show_completed:
            params["showCompleted"] = "true"
        if limit is not None:
            params["limit"] = limit

        data = await self.request("GET", "/tasks", params=params or None)
        return [Task.model_validate(item) for item in data or []]

    async def get_stats(self) -> TaskStats:
        data = await self.request("GET", "/tasks/stats")
        return TaskStats.model_validate(data)

    async def get_task(self, task_id: int) -> Task:
        data = await self.request("GET", f"/tasks/{task_id}")
        return Task.model_validate(data)

    async def create_task(
        self,
        title: str,
        description: str | None = None,
        *,
        priority: str | None = None,
        due_date: datetime | None = None,
        category: str | None = None,
        tags: list[str] | None = None,
    ) -> Task:
        payload: dict[str, Any] = {"title": title}
        if description is not None:
            payload["description"] = description
        if priority is not None:
            payload["priority"] = priority
        if due_date is not None:
            payload["dueDate"] = due_date.isoformat()
        if category is not None:
            payload["category"] = category
        if tags is not None:
            payload["tags"] = tags

        data = await self.request("POST", "/tasks", json=payload)
        return Task.model_validate(data)

    async def update_task(self, task_id: int, **fields: Any) -> Task:
        payload = UpdateTaskRequest(**fields).model_dump(
            mode="json", by_alias=True, exclude_unset=True
        )
        data = await self.request("PUT", f"/tasks/{task_id}", json=payload)
        return Task.model_validate(data)

    async def delete_task(self, task_id: int) -> None:
        await self.request("DELETE", f"/tasks/{task_id}")

    async def complete_task(self, task_id: int) -> None:
        await self.request("POST", f"/tasks/{task_id}/done")

    async def uncomplete_task(self, task_id: int) -> None:
        await self.request("POST", f"/tasks/{task_id}/uncomplete")
