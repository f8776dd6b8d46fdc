"""Tests for the notification handler and email rendering."""

from datetime import datetime, timezone
from unittest.mock import Mock
from zoneinfo import ZoneInfoNotFoundError

import pytest
from pydantic import ValidationError

from app.events.types import DomainEvent
from app.notifications.email import EmailSender, InMemoryEmailSender
from app.notifications.handler import NotificationHandler, NotificationOutcome
from app.notifications.templates import EmailRenderer


def _event(source: str, detail_type: str, detail: dict) -> DomainEvent:
    return DomainEvent(source=source, detail_type=detail_type, detail=detail)


class TestNotificationHandler:
    """Tests for event dispatch and email sending."""

    def test_task_completion_sends_one_email(
        self, notification_handler: NotificationHandler, email_sender: InMemoryEmailSender
    ):
        """TaskCompletion with an address produces exactly one email."""
        outcome = notification_handler.handle(
            _event(
                "com.taskapp.tasks",
                "TaskCompletion",
                {
                    "taskId": "t1",
                    "title": "Ship it",
                    "completedAt": "2024-01-01T00:00:00Z",
                    "userEmail": "a@b.com",
                },
            )
        )

        assert outcome is NotificationOutcome.SENT
        assert len(email_sender.sent) == 1
        message = email_sender.sent[0]
        assert message.to == "a@b.com"
        assert message.subject == "Task Completed"
        assert message.is_html is True
        assert message.sender == "noreply@taskapp.com"
        assert "t1" in message.body
        assert "Ship it" in message.body
        assert "2024-01-01 00:00 UTC" in message.body
        assert "Ship it" in message.text_body

    def test_task_creation_sends_confirmation(
        self, notification_handler: NotificationHandler, email_sender: InMemoryEmailSender
    ):
        """TaskCreation sends the creation email."""
        outcome = notification_handler.handle(
            _event(
                "com.taskapp.tasks",
                "TaskCreation",
                {"taskId": "t2", "title": "Buy milk", "description": "", "userEmail": "u1@x.com"},
            )
        )

        assert outcome is NotificationOutcome.SENT
        message = email_sender.sent[0]
        assert message.to == "u1@x.com"
        assert message.subject == "New Task Created"
        assert "Buy milk" in message.body
        assert "No description provided" in message.body

    def test_task_creation_with_null_description(
        self, notification_handler: NotificationHandler, email_sender: InMemoryEmailSender
    ):
        """A null description renders the placeholder instead of failing."""
        event = DomainEvent.from_eventbridge(
            {
                "source": "com.taskapp.tasks",
                "detail-type": "TaskCreation",
                "detail": '{"taskId": "t1", "title": "Buy milk", "description": null, "userEmail": "a@b.com"}',
            }
        )

        outcome = notification_handler.handle(event)

        assert outcome is NotificationOutcome.SENT
        message = email_sender.sent[0]
        assert "No description provided" in message.body
        assert "No description provided" in message.text_body

    def test_task_creation_without_email_is_skipped(self, renderer: EmailRenderer):
        """A missing userEmail is a soft skip; nothing is sent."""
        sender = Mock(spec=EmailSender)
        handler = NotificationHandler(sender, renderer)

        outcome = handler.handle(
            _event("com.taskapp.tasks", "TaskCreation", {"taskId": "t1", "title": "Buy milk"})
        )

        assert outcome is NotificationOutcome.SKIPPED
        sender.send_email.assert_not_called()

    def test_task_completion_without_email_is_skipped(self, renderer: EmailRenderer):
        sender = Mock(spec=EmailSender)
        handler = NotificationHandler(sender, renderer)

        outcome = handler.handle(
            _event(
                "com.taskapp.tasks",
                "TaskCompletion",
                {"taskId": "t1", "title": "Ship it", "completedAt": "2024-01-01T00:00:00Z", "userEmail": ""},
            )
        )

        assert outcome is NotificationOutcome.SKIPPED
        sender.send_email.assert_not_called()

    def test_user_registration_sends_welcome(
        self, notification_handler: NotificationHandler, email_sender: InMemoryEmailSender
    ):
        """UserRegistration sends the welcome email."""
        outcome = notification_handler.handle(
            _event(
                "com.taskapp.auth",
                "UserRegistration",
                {"username": "ada", "email": "ada@example.com", "userId": "u1"},
            )
        )

        assert outcome is NotificationOutcome.SENT
        message = email_sender.sent[0]
        assert message.to == "ada@example.com"
        assert message.subject == "Welcome to TaskApp!"
        assert "Hello ada" in message.body

    def test_user_registration_without_email_is_skipped(
        self, notification_handler: NotificationHandler, email_sender: InMemoryEmailSender
    ):
        outcome = notification_handler.handle(
            _event("com.taskapp.auth", "UserRegistration", {"username": "ada"})
        )

        assert outcome is NotificationOutcome.SKIPPED
        assert len(email_sender.sent) == 0

    def test_unknown_event_type_is_unhandled(
        self, notification_handler: NotificationHandler, email_sender: InMemoryEmailSender
    ):
        """Unknown detail types are logged and acknowledged."""
        outcome = notification_handler.handle(
            _event("com.taskapp.tasks", "TaskDeleted", {"taskId": "t1", "userEmail": "a@b.com"})
        )

        assert outcome is NotificationOutcome.UNHANDLED
        assert len(email_sender.sent) == 0

    def test_sender_errors_propagate(self, renderer: EmailRenderer):
        """Email service failures reach the caller for the bus to retry."""
        sender = Mock(spec=EmailSender)
        sender.send_email.side_effect = RuntimeError("ses throttled")
        handler = NotificationHandler(sender, renderer)

        with pytest.raises(RuntimeError):
            handler.handle(
                _event(
                    "com.taskapp.tasks",
                    "TaskCreation",
                    {"taskId": "t1", "title": "Buy milk", "userEmail": "a@b.com"},
                )
            )

    def test_invalid_payload_raises(self, notification_handler: NotificationHandler):
        """A payload missing required fields fails validation."""
        with pytest.raises(ValidationError):
            notification_handler.handle(
                _event(
                    "com.taskapp.tasks",
                    "TaskCompletion",
                    {"taskId": "t1", "title": "Ship it", "userEmail": "a@b.com"},
                )
            )

    def test_invalid_recipient_is_rejected_before_delivery(
        self, notification_handler: NotificationHandler, email_sender: InMemoryEmailSender
    ):
        """Malformed addresses fail validation and nothing is recorded."""
        with pytest.raises(ValueError):
            notification_handler.handle(
                _event(
                    "com.taskapp.tasks",
                    "TaskCreation",
                    {"taskId": "t1", "title": "Buy milk", "userEmail": "not-an-email"},
                )
            )

        assert len(email_sender.sent) == 0


class TestEmailRenderer:
    """Tests for template rendering."""

    def test_html_escapes_event_fields(self, renderer: EmailRenderer):
        """Titles cannot inject markup into the HTML body."""
        rendered = renderer.render_task_created("<script>alert(1)</script>", "a & b", "t1")

        assert "<script>alert(1)</script>" not in rendered.html
        assert "&lt;script&gt;" in rendered.html
        assert "a &amp; b" in rendered.html
        # Plain text is not escaped
        assert "<script>alert(1)</script>" in rendered.text

    def test_empty_description_placeholder(self, renderer: EmailRenderer):
        rendered = renderer.render_task_created("Buy milk", "", "t1")

        assert "No description provided" in rendered.html
        assert "No description provided" in rendered.text

    def test_welcome_mentions_app_name(self, renderer: EmailRenderer):
        rendered = renderer.render_welcome("ada")

        assert rendered.subject == "Welcome to TaskApp!"
        assert "Hello ada" in rendered.text
        assert "The TaskApp Team" in rendered.html

    def test_format_timestamp_utc(self, renderer: EmailRenderer):
        """Timestamps are formatted with the configured pattern."""
        stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)

        assert renderer.format_timestamp(stamp) == "2024-01-01 00:00 UTC"

    def test_format_timestamp_naive_is_utc(self, renderer: EmailRenderer):
        assert renderer.format_timestamp(datetime(2024, 1, 1, 12, 30)) == "2024-01-01 12:30 UTC"

    def test_format_timestamp_configured_zone(self):
        """Timestamps are converted to the configured zone."""
        try:
            renderer = EmailRenderer("America/New_York", "%Y-%m-%d %H:%M")
        except ZoneInfoNotFoundError:
            pytest.skip("tz database not available")

        stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)

        assert renderer.format_timestamp(stamp) == "2023-12-31 19:00"

    def test_task_completed_includes_formatted_time(self, renderer: EmailRenderer):
        rendered = renderer.render_task_completed(
            "Ship it", "t1", datetime(2024, 1, 1, tzinfo=timezone.utc)
        )

        assert rendered.subject == "Task Completed"
        assert "Completed at: 2024-01-01 00:00 UTC" in rendered.text
