"""Notification handler: event → render → send.

Single-shot processing per event:
    Received → Type-Switched → (Skipped | Rendered → Sent) → Done

A missing recipient address, or a user who turned task notifications
off, is a soft skip, not an error. Anything else
that goes wrong (invalid payload, email service failure) propagates so
the bus's own retry policy can act on it.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Any

from app.events.types import (
    DomainEvent,
    EventType,
    TaskCompletionDetail,
    TaskCreationDetail,
    UserRegistrationDetail,
)
from app.models.email import EmailMessage
from app.notifications.email import EmailSender
from app.notifications.templates import EmailRenderer, RenderedEmail
from app.repositories.base import UserRepository

logger = logging.getLogger(__name__)


class NotificationOutcome(str, Enum):
    """What the handler did with an event."""

    SENT = "sent"
    SKIPPED = "skipped"  # No recipient address, or the user opted out
    UNHANDLED = "unhandled"  # Detail type has no processor


class NotificationHandler:
    """Bus subscriber that turns domain events into emails."""

    def __init__(
        self,
        email_sender: EmailSender,
        renderer: EmailRenderer | None = None,
        user_repository: UserRepository | None = None,
    ) -> None:
        self.email_sender = email_sender
        self.renderer = renderer or EmailRenderer()
        self.user_repository = user_repository
        self._processors: dict[str, Callable[[dict[str, Any]], NotificationOutcome]] = {
            EventType.USER_REGISTRATION.value: self.process_user_registration,
            EventType.TASK_CREATION.value: self.process_task_creation,
            EventType.TASK_COMPLETION.value: self.process_task_completion,
        }

    def handle(self, event: DomainEvent) -> NotificationOutcome:
        """Dispatch an event to the processor for its detail type."""
        logger.info(
            "Received notification event",
            extra={"source": event.source, "detail_type": event.detail_type},
        )

        processor = self._processors.get(event.detail_type)
        if processor is None:
            logger.info("Unhandled event type: %s", event.detail_type)
            return NotificationOutcome.UNHANDLED

        return processor(event.detail)

    def process_user_registration(self, detail: dict[str, Any]) -> NotificationOutcome:
        if not detail.get("email"):
            logger.warning("No email address provided in user registration event")
            return NotificationOutcome.SKIPPED

        payload = UserRegistrationDetail.model_validate(detail)
        rendered = self.renderer.render_welcome(payload.username)
        self._send(payload.email, rendered)

        logger.info("Welcome email sent", extra={"to": payload.email})
        return NotificationOutcome.SENT

    def process_task_creation(self, detail: dict[str, Any]) -> NotificationOutcome:
        if not detail.get("userEmail"):
            logger.warning(
                "No email address provided in task creation event",
                extra={"task_id": detail.get("taskId")},
            )
            return NotificationOutcome.SKIPPED

        payload = TaskCreationDetail.model_validate(detail)
        if not self._notifications_enabled(payload.user_id):
            return NotificationOutcome.SKIPPED

        rendered = self.renderer.render_task_created(
            payload.title, payload.description, payload.task_id
        )
        self._send(payload.user_email, rendered)

        logger.info(
            "Task creation confirmation email sent",
            extra={"to": payload.user_email, "task_id": payload.task_id},
        )
        return NotificationOutcome.SENT

    def process_task_completion(self, detail: dict[str, Any]) -> NotificationOutcome:
        if not detail.get("userEmail"):
            logger.warning(
                "No email address provided in task completion event",
                extra={"task_id": detail.get("taskId")},
            )
            return NotificationOutcome.SKIPPED

        payload = TaskCompletionDetail.model_validate(detail)
        if not self._notifications_enabled(payload.user_id):
            return NotificationOutcome.SKIPPED

        rendered = self.renderer.render_task_completed(
            payload.title, payload.task_id, payload.completed_at
        )
        self._send(payload.user_email, rendered)

        logger.info(
            "Task completion confirmation email sent",
            extra={"to": payload.user_email, "task_id": payload.task_id},
        )
        return NotificationOutcome.SENT

    def _notifications_enabled(self, user_id: str | None) -> bool:
        """Unknown users and a missing repository default to enabled."""
        if self.user_repository is None or not user_id:
            return True
        user = self.user_repository.get_user_by_id(user_id)
        if user is None or user.preferences.notifications:
            return True
        logger.info("Task notifications disabled by user", extra={"user_id": user_id})
        return False

    def _send(self, to: str, rendered: RenderedEmail) -> None:
        self.email_sender.send_email(
            EmailMessage(
                to=to,
                subject=rendered.subject,
                body=rendered.html,
                text_body=rendered.text,
                is_html=True,
            )
        )
