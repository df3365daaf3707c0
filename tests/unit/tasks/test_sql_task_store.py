from datetime import datetime, timedelta, timezone
import pytest
from pytest_mock import MockerFixture
from sqlalchemy.exc import OperationalError

from src.common.exceptions import (
    InvalidRequestException,
    ResourceNotFoundException,
    ResourceType,
    StoreException,
)
from src.tasks.store.schemas import NewTask, Priority, TaskFilter, TaskUpdate
from src.tasks.store.sql.store import SqlTaskStore

TEST_TIMESTAMP = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
UPDATED_TIMESTAMP = datetime(2024, 1, 1, 13, 0, 0, tzinfo=timezone.utc)


def at(minutes: int) -> datetime:
    return TEST_TIMESTAMP + timedelta(minutes=minutes)


def test_create_task_success(task_store: SqlTaskStore) -> None:
    result = task_store.create_task(
        NewTask(
            title="Write report",
            description="Quarterly numbers",
            priority=Priority.HIGH,
            category="work",
            tags=["q1", "finance"],
            due_date=datetime(2024, 2, 1, 9, 0, 0, tzinfo=timezone.utc),
        ),
        timestamp=TEST_TIMESTAMP,
    )

    assert result.id == 1
    assert result.title == "Write report"
    assert result.description == "Quarterly numbers"
    assert result.priority == Priority.HIGH
    assert result.category == "work"
    assert result.tags == ["q1", "finance"]
    assert result.due_date == datetime(2024, 2, 1, 9, 0, 0, tzinfo=timezone.utc)
    assert result.completed is False
    assert result.completed_at is None
    assert result.created_at == TEST_TIMESTAMP
    assert result.updated_at == TEST_TIMESTAMP


def test_create_task_defaults(task_store: SqlTaskStore) -> None:
    result = task_store.create_task(NewTask(title="Bare"), timestamp=TEST_TIMESTAMP)

    assert result.priority == Priority.MEDIUM
    assert result.description is None
    assert result.category is None
    assert result.tags is None
    assert result.due_date is None


def test_create_task_empty_title(task_store: SqlTaskStore) -> None:
    with pytest.raises(InvalidRequestException, match="title required"):
        task_store.create_task(NewTask(title=""), timestamp=TEST_TIMESTAMP)

    assert task_store.count_tasks(TaskFilter()) == 0


def test_ids_increase_in_creation_order(task_store: SqlTaskStore) -> None:
    first = task_store.create_task(NewTask(title="A"), timestamp=at(0))
    second = task_store.create_task(NewTask(title="B"), timestamp=at(1))

    assert second.id > first.id


def test_get_task_not_found(task_store: SqlTaskStore) -> None:
    with pytest.raises(ResourceNotFoundException) as exc_info:
        task_store.get_task(99999)

    assert exc_info.value.resource_type == ResourceType.TASK.value
    assert exc_info.value.identifier == 99999
    assert str(exc_info.value) == "task not found"


def test_find_tasks_default_limit_newest_first(task_store: SqlTaskStore) -> None:
    for i in range(1, 8):
        task_store.create_task(NewTask(title=f"Task {i}"), timestamp=at(i))

    result = task_store.find_tasks(TaskFilter(completed=False))

    assert [task.title for task in result] == [
        "Task 7",
        "Task 6",
        "Task 5",
        "Task 4",
        "Task 3",
    ]


def test_find_tasks_priority_outranks_recency(task_store: SqlTaskStore) -> None:
    task_store.create_task(NewTask(title="A", priority=Priority.LOW), timestamp=at(0))
    task_store.create_task(
        NewTask(title="M", priority=Priority.MEDIUM), timestamp=at(1)
    )
    task_store.create_task(NewTask(title="B", priority=Priority.HIGH), timestamp=at(2))
    task_store.create_task(NewTask(title="L", priority=Priority.LOW), timestamp=at(3))

    result = task_store.find_tasks(TaskFilter(completed=False), limit=10)

    assert [task.title for task in result] == ["B", "M", "L", "A"]


def test_find_tasks_equal_timestamps_fall_back_to_id(
    task_store: SqlTaskStore,
) -> None:
    task_store.create_task(NewTask(title="first"), timestamp=TEST_TIMESTAMP)
    task_store.create_task(NewTask(title="second"), timestamp=TEST_TIMESTAMP)

    result = task_store.find_tasks(TaskFilter())

    assert [task.title for task in result] == ["second", "first"]


def test_find_tasks_filters(task_store: SqlTaskStore) -> None:
    task_store.create_task(
        NewTask(title="Buy milk", priority=Priority.LOW, category="home"),
        timestamp=at(0),
    )
    task_store.create_task(
        NewTask(
            title="Report",
            description="send the milk invoice",
            priority=Priority.HIGH,
            category="work",
        ),
        timestamp=at(1),
    )
    task_store.create_task(
        NewTask(title="Call Bob", priority=Priority.HIGH, category="work"),
        timestamp=at(2),
    )

    by_priority = task_store.find_tasks(TaskFilter(priority=Priority.HIGH))
    assert [task.title for task in by_priority] == ["Call Bob", "Report"]

    by_category = task_store.find_tasks(TaskFilter(category="home"))
    assert [task.title for task in by_category] == ["Buy milk"]

    by_search = task_store.find_tasks(TaskFilter(search_text="milk"))
    assert {task.title for task in by_search} == {"Buy milk", "Report"}

    combined = task_store.find_tasks(
        TaskFilter(search_text="milk", category="work", priority=Priority.HIGH)
    )
    assert [task.title for task in combined] == ["Report"]


def test_find_tasks_search_escapes_wildcards(task_store: SqlTaskStore) -> None:
    task_store.create_task(NewTask(title="100% done"), timestamp=at(0))
    task_store.create_task(NewTask(title="1000 things"), timestamp=at(1))

    result = task_store.find_tasks(TaskFilter(search_text="100%"))

    assert [task.title for task in result] == ["100% done"]


def test_find_tasks_completed_filter(task_store: SqlTaskStore) -> None:
    done = task_store.create_task(NewTask(title="done"), timestamp=at(0))
    task_store.create_task(NewTask(title="open"), timestamp=at(1))
    task_store.update_task(done.id, TaskUpdate(completed=True), timestamp=at(2))

    pending = task_store.find_tasks(TaskFilter(completed=False))
    completed = task_store.find_tasks(TaskFilter(completed=True))
    everything = task_store.find_tasks(TaskFilter())

    assert [task.title for task in pending] == ["open"]
    assert [task.title for task in completed] == ["done"]
    # Uncompleted tasks sort first
    assert [task.title for task in everything] == ["open", "done"]


def test_update_task_only_changes_supplied_fields(task_store: SqlTaskStore) -> None:
    created = task_store.create_task(
        NewTask(title="Keep", priority=Priority.HIGH, category="work", tags=["a"]),
        timestamp=TEST_TIMESTAMP,
    )

    updated = task_store.update_task(
        created.id, TaskUpdate(description="x"), timestamp=UPDATED_TIMESTAMP
    )

    assert updated.description == "x"
    assert updated.title == "Keep"
    assert updated.priority == Priority.HIGH
    assert updated.category == "work"
    assert updated.tags == ["a"]
    assert updated.created_at == TEST_TIMESTAMP
    assert updated.updated_at == UPDATED_TIMESTAMP


def test_update_task_explicit_none_clears(task_store: SqlTaskStore) -> None:
    created = task_store.create_task(
        NewTask(
            title="Clear me",
            category="work",
            tags=["a"],
            due_date=datetime(2024, 2, 1, tzinfo=timezone.utc),
        ),
        timestamp=TEST_TIMESTAMP,
    )

    updated = task_store.update_task(
        created.id,
        TaskUpdate(category=None, tags=None, due_date=None),
        timestamp=UPDATED_TIMESTAMP,
    )

    assert updated.category is None
    assert updated.tags is None
    assert updated.due_date is None


def test_update_task_rejects_empty_title(task_store: SqlTaskStore) -> None:
    created = task_store.create_task(NewTask(title="Keep"), timestamp=TEST_TIMESTAMP)

    with pytest.raises(InvalidRequestException, match="title required"):
        task_store.update_task(
            created.id, TaskUpdate(title=""), timestamp=UPDATED_TIMESTAMP
        )

    assert task_store.get_task(created.id).title == "Keep"


def test_update_task_not_found(task_store: SqlTaskStore) -> None:
    with pytest.raises(ResourceNotFoundException) as exc_info:
        task_store.update_task(
            404, TaskUpdate(description="x"), timestamp=UPDATED_TIMESTAMP
        )

    assert exc_info.value.identifier == 404


def test_completion_transition_sets_and_clears_completed_at(
    task_store: SqlTaskStore,
) -> None:
    created = task_store.create_task(NewTask(title="Flip"), timestamp=TEST_TIMESTAMP)

    completed = task_store.update_task(
        created.id, TaskUpdate(completed=True), timestamp=UPDATED_TIMESTAMP
    )
    assert completed.completed is True
    assert completed.completed_at == UPDATED_TIMESTAMP

    later = UPDATED_TIMESTAMP + timedelta(hours=1)
    completed_again = task_store.update_task(
        created.id, TaskUpdate(completed=True, completed_at=later), timestamp=later
    )
    assert completed_again.completed is True
    assert completed_again.completed_at == later
    assert completed_again.updated_at == later

    reopened = task_store.update_task(
        created.id, TaskUpdate(completed=False), timestamp=later
    )
    assert reopened.completed is False
    assert reopened.completed_at is None


def test_delete_task(task_store: SqlTaskStore) -> None:
    created = task_store.create_task(NewTask(title="Gone"), timestamp=TEST_TIMESTAMP)

    task_store.delete_task(created.id)

    with pytest.raises(ResourceNotFoundException):
        task_store.get_task(created.id)
    assert task_store.find_tasks(TaskFilter()) == []


def test_delete_task_not_found(task_store: SqlTaskStore) -> None:
    with pytest.raises(ResourceNotFoundException) as exc_info:
        task_store.delete_task(12345)

    assert exc_info.value.identifier == 12345


def test_count_and_group_count(task_store: SqlTaskStore) -> None:
    task_store.create_task(
        NewTask(title="a", priority=Priority.HIGH, category="work"), timestamp=at(0)
    )
    task_store.create_task(
        NewTask(title="b", priority=Priority.HIGH, category="home"), timestamp=at(1)
    )
    task_store.create_task(NewTask(title="c", priority=Priority.LOW), timestamp=at(2))
    done = task_store.create_task(
        NewTask(title="d", priority=Priority.LOW, category="work"), timestamp=at(3)
    )
    task_store.update_task(done.id, TaskUpdate(completed=True), timestamp=at(4))

    pending = TaskFilter(completed=False)

    assert task_store.count_tasks(TaskFilter()) == 4
    assert task_store.count_tasks(pending) == 3
    assert task_store.count_tasks(TaskFilter(completed=True)) == 1
    assert task_store.group_count("priority", pending) == {"HIGH": 2, "LOW": 1}
    assert task_store.group_count("category", pending) == {"work": 1, "home": 1}
    assert task_store.group_count("category", TaskFilter()) == {"work": 2, "home": 1}


def test_count_due_before(task_store: SqlTaskStore) -> None:
    task_store.create_task(
        NewTask(title="late", due_date=at(-60)), timestamp=at(-120)
    )
    task_store.create_task(NewTask(title="soon", due_date=at(60)), timestamp=at(0))
    task_store.create_task(NewTask(title="whenever"), timestamp=at(1))

    assert task_store.count_tasks(TaskFilter(due_before=TEST_TIMESTAMP)) == 1


def test_sqlalchemy_errors_become_store_exceptions(
    task_store: SqlTaskStore, mocker: MockerFixture
) -> None:
    mocker.patch.object(
        task_store,
        "Session",
        side_effect=OperationalError("SELECT 1", {}, Exception("database is locked")),
    )

    with pytest.raises(StoreException, match="Failed to fetch tasks") as exc_info:
        task_store.find_tasks(TaskFilter())

    assert isinstance(exc_info.value.__cause__, OperationalError)
