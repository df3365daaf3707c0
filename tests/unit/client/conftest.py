from typing import AsyncGenerator

import pytest

from src.client.client import TaskClient


@pytest.fixture
async def task_client() -> AsyncGenerator[TaskClient, None]:
    async with TaskClient(base_url="http://test-api:4000/", api_key="test-key") as client:
        yield client
