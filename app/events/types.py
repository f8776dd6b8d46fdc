"""Event type definitions for the task lifecycle and registration events."""

import json
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EventSource(str, Enum):
    """Dotted namespaces that events are published under."""

    TASKS = "com.taskapp.tasks"
    AUTH = "com.taskapp.auth"


class EventType(str, Enum):
    """Detail types carried by events on the bus."""

    USER_REGISTRATION = "UserRegistration"
    TASK_CREATION = "TaskCreation"
    TASK_COMPLETION = "TaskCompletion"
    USER_PREFERENCES_UPDATED = "UserPreferencesUpdated"


class PublishOutcome(str, Enum):
    """Result of a best-effort publish attempt."""

    DELIVERED = "delivered"
    SKIPPED = "skipped"  # No publisher configured
    FAILED = "failed"  # Publisher raised; logged and ignored


class DomainEvent(BaseModel):
    """A tagged event: source, detail type and a free-form payload."""

    source: str
    detail_type: str
    detail: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_eventbridge(cls, envelope: dict[str, Any]) -> "DomainEvent":
        """Build from an EventBridge envelope (``detail-type`` key).

        ``detail`` may arrive as a dict or as a JSON string.
        """
        detail = envelope.get("detail") or {}
        if isinstance(detail, str):
            detail = json.loads(detail)
        return cls(
            source=envelope.get("source", ""),
            detail_type=envelope.get("detail-type", ""),
            detail=detail,
        )


class _Detail(BaseModel):
    """Base for payloads: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_detail(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class UserRegistrationDetail(_Detail):
    username: str
    email: str | None = None
    user_id: str | None = None


class TaskCreationDetail(_Detail):
    task_id: str
    title: str
    description: str | None = None
    user_id: str | None = None
    user_email: str | None = None


class TaskCompletionDetail(_Detail):
    task_id: str
    title: str
    completed_at: datetime
    user_id: str | None = None
    user_email: str | None = None


class UserPreferencesUpdatedDetail(_Detail):
    user_id: str
    preferences: dict[str, Any]
