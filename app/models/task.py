"""Task entity, its SQL record and the HTTP schemas."""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from sqlalchemy import DateTime
from sqlmodel import Field as SQLField
from sqlmodel import SQLModel


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Convert to aware UTC.

    Naive values come from stores without timezone support and are
    already UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Task(BaseModel):
    """Task domain entity.

    Timestamps are aware UTC datetimes. Every mutation moves
    ``updated_at`` strictly forward, so ``updated_at > created_at``
    holds after any change even on a coarse clock.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    description: str = ""
    completed: bool = False
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(cls, title: str, description: str = "") -> "Task":
        """Build a new open task with a fresh id."""
        now = utcnow()
        return cls(
            id=str(uuid4()),
            title=title,
            description=description,
            completed=False,
            created_at=now,
            updated_at=now,
        )

    def complete(self) -> bool:
        """Mark the task completed.

        Returns:
            True if the task changed, False if it was already completed
        """
        if self.completed:
            return False
        self.completed = True
        self._touch()
        return True

    def update_title(self, title: str) -> None:
        self.title = title
        self._touch()

    def update_description(self, description: str) -> None:
        self.description = description
        self._touch()

    def _touch(self) -> None:
        now = utcnow()
        if now <= self.updated_at:
            now = self.updated_at + timedelta(microseconds=1)
        self.updated_at = now

    def to_item(self) -> dict[str, Any]:
        """Plain camelCase dict with ISO timestamps (storage and wire shape)."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "Task":
        task = cls.model_validate(item)
        task.created_at = as_utc(task.created_at)
        task.updated_at = as_utc(task.updated_at)
        return task


class TaskRecord(SQLModel, table=True):
    """Task database model for the SQL repository."""

    __tablename__ = "tasks"

    id: str = SQLField(primary_key=True, max_length=36)
    title: str = SQLField(max_length=200)
    description: str = SQLField(default="", max_length=2000)
    completed: bool = SQLField(default=False)
    created_at: datetime = SQLField(sa_type=DateTime(timezone=True))
    updated_at: datetime = SQLField(sa_type=DateTime(timezone=True))

    @classmethod
    def from_task(cls, task: Task) -> "TaskRecord":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            completed=task.completed,
            created_at=as_utc(task.created_at),
            updated_at=as_utc(task.updated_at),
        )

    def to_task(self) -> Task:
        return Task.from_item(
            {
                "id": self.id,
                "title": self.title,
                "description": self.description,
                "completed": self.completed,
                "createdAt": self.created_at,
                "updatedAt": self.updated_at,
            }
        )


class TaskCreate(BaseModel):
    """Schema for task creation."""

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)


class TaskUpdate(BaseModel):
    """Schema for task update.

    Omitted fields are left untouched; an explicit empty description
    clears it.
    """

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)


class TaskResponse(BaseModel):
    """Schema for task response."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str
    title: str
    description: str
    completed: bool
    created_at: datetime
    updated_at: datetime
