"""Task service: entity mutation, persistence and best-effort events."""

import logging

from app.events.publisher import EventPublisher, publish_best_effort
from app.events.types import (
    EventSource,
    EventType,
    PublishOutcome,
    TaskCompletionDetail,
    TaskCreationDetail,
)
from app.models.task import Task
from app.repositories.base import TaskRepository

logger = logging.getLogger(__name__)


class TaskService:
    """Orchestrates the Task entity, its repository and the event publisher.

    Task state changes are authoritative: repository errors propagate,
    while publish failures are logged and reported as an outcome only.
    """

    def __init__(
        self,
        repository: TaskRepository,
        publisher: EventPublisher | None = None,
    ) -> None:
        self.repository = repository
        self.publisher = publisher

    def create_task(
        self,
        title: str,
        description: str = "",
        user_id: str | None = None,
        user_email: str | None = None,
    ) -> Task:
        """Create and persist a task, then emit TaskCreation."""
        task = self.repository.save(Task.create(title, description))

        self._emit(
            EventType.TASK_CREATION,
            TaskCreationDetail(
                task_id=task.id,
                title=task.title,
                description=task.description,
                user_id=user_id,
                user_email=user_email,
            ).to_detail(),
        )
        return task

    def get_task(self, task_id: str) -> Task | None:
        return self.repository.find_by_id(task_id)

    def get_all_tasks(self) -> list[Task]:
        return self.repository.find_all()

    def complete_task(
        self,
        task_id: str,
        user_id: str | None = None,
        user_email: str | None = None,
    ) -> Task | None:
        """Complete a task and emit TaskCompletion.

        Completing an already-completed task returns it unchanged and
        emits nothing.
        """
        task = self.repository.find_by_id(task_id)
        if task is None:
            return None

        if not task.complete():
            logger.debug("Task already completed", extra={"task_id": task_id})
            return task

        task = self.repository.update(task)

        self._emit(
            EventType.TASK_COMPLETION,
            TaskCompletionDetail(
                task_id=task.id,
                title=task.title,
                completed_at=task.updated_at,
                user_id=user_id,
                user_email=user_email,
            ).to_detail(),
        )
        return task

    def update_task(
        self,
        task_id: str,
        title: str | None = None,
        description: str | None = None,
    ) -> Task | None:
        """Apply the supplied fields. ``None`` means "leave unchanged"."""
        task = self.repository.find_by_id(task_id)
        if task is None:
            return None

        if title is not None:
            task.update_title(title)
        if description is not None:
            task.update_description(description)

        return self.repository.update(task)

    def delete_task(self, task_id: str) -> bool:
        return self.repository.delete(task_id)

    def _emit(self, event_type: EventType, detail: dict) -> PublishOutcome:
        outcome = publish_best_effort(
            self.publisher,
            EventSource.TASKS.value,
            event_type.value,
            detail,
        )
        if outcome is PublishOutcome.FAILED:
            logger.warning(
                "Task change persisted but %s event was not delivered",
                event_type.value,
                extra={"task_id": detail.get("taskId")},
            )
        return outcome
