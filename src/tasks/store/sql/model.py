from datetime import datetime
from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base, Mapped, mapped_column

from src.config import get_settings


settings = get_settings()

Base = declarative_base()


class TaskModel(Base):
    __tablename__ = settings.TASKS_TABLE_NAME

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    priority: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    category: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    tags: Mapped[str | None] = mapped_column(Text, nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, index=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )

    def __init__(
        self,
        title: str,
        priority: str,
        created_at: datetime,
        updated_at: datetime,
        description: str | None = None,
        category: str | None = None,
        tags: str | None = None,
        due_date: datetime | None = None,
        completed: bool = False,
        completed_at: datetime | None = None,
    ):
        self.title = title
        self.priority = priority
        self.created_at = created_at
        self.updated_at = updated_at
        self.description = description
        self.category = category
        self.tags = tags
        self.due_date = due_date
        self.completed = completed
        self.completed_at = completed_at
