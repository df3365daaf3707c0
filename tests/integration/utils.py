from typing import Any
from fastapi.testclient import TestClient


def create_task(client: TestClient, title: str, **fields: Any) -> dict[str, Any]:
    """Helper to create a task through the API and return its JSON."""

    response = client.post("/tasks", json={"title": title, **fields})
    assert response.status_code == 201, response.text
    return response.json()


def list_task_ids(client: TestClient, **params: Any) -> list[int]:
    response = client.get("/tasks", params=params)
    assert response.status_code == 200, response.text
    return [task["id"] for task in response.json()]
