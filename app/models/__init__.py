"""Domain entities and schemas for the TaskApp backend."""

from app.models.email import EmailMessage
from app.models.task import Task, TaskCreate, TaskRecord, TaskResponse, TaskUpdate
from app.models.user import User, UserPreferences

__all__ = [
    "EmailMessage",
    "Task",
    "TaskCreate",
    "TaskRecord",
    "TaskResponse",
    "TaskUpdate",
    "User",
    "UserPreferences",
]
