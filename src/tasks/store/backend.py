from src.config import Settings
from src.tasks.store.base import TaskStore
from src.tasks.store.sql.store import SqlTaskStore


def get_task_store_backend(settings: Settings) -> TaskStore:
    if settings.DATABASE_URL.startswith(("sqlite", "postgresql")):
        return SqlTaskStore(database_url=settings.DATABASE_URL)
    else:
        raise ValueError(f"Unsupported task store database: {settings.DATABASE_URL}")
