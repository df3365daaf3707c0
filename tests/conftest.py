from datetime import datetime, timezone
from pathlib import Path
from typing import Generator
import pytest

from src.tasks.store.schemas import Priority, Task
from src.tasks.store.sql.store import SqlTaskStore


@pytest.fixture
def test_database_url(tmp_path: Path) -> str:
    db_path: Path = tmp_path / "test_tasks.db"
    return f"sqlite:///{db_path}"


@pytest.fixture
def task_store(test_database_url: str) -> Generator[SqlTaskStore, None, None]:
    store = SqlTaskStore(database_url=test_database_url)
    yield store
    store.close()


@pytest.fixture
def sample_task() -> Task:
    return Task(
        id=1,
        title="Write report",
        description="Quarterly numbers",
        priority=Priority.HIGH,
        category="work",
        tags=["q1", "finance"],
        due_date=None,
        completed=False,
        completed_at=None,
        created_at=datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
        updated_at=datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
    )
