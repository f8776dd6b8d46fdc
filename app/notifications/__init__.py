"""Notification pipeline: rendering and delivering event emails.

Components:
- email.py: Email sending port, address validation, SES and in-memory senders
- templates.py: Jinja2 email rendering
- handler.py: Bus subscriber dispatching events to renderers and the sender
"""

from app.notifications.email import (
    EmailSender,
    EmailValidationError,
    InMemoryEmailSender,
    SesEmailSender,
    is_valid_email,
    validate_email_message,
)
from app.notifications.handler import NotificationHandler, NotificationOutcome
from app.notifications.templates import EmailRenderer, RenderedEmail

__all__ = [
    "EmailSender",
    "EmailValidationError",
    "InMemoryEmailSender",
    "SesEmailSender",
    "is_valid_email",
    "validate_email_message",
    "NotificationHandler",
    "NotificationOutcome",
    "EmailRenderer",
    "RenderedEmail",
]
