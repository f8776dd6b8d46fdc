"""Email sending port, address validation and delivery adapters."""

import logging
import re
from abc import ABC, abstractmethod
from collections import deque
from typing import Any

import boto3

from app.models.email import EmailMessage

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CHARSET = "UTF-8"
SENT_HISTORY_SIZE = 100


class EmailValidationError(ValueError):
    """Raised when an email message fails validation before delivery."""


def is_valid_email(address: str | None) -> bool:
    """Basic syntax check: something@something.tld with no whitespace."""
    return bool(address) and EMAIL_PATTERN.match(address) is not None


def validate_email_message(message: EmailMessage) -> None:
    """Validate addresses and required fields.

    Raises:
        EmailValidationError: On the first problem found
    """
    if not message.to:
        raise EmailValidationError("Recipient email address is required")
    if not is_valid_email(message.to):
        raise EmailValidationError(f"Invalid recipient email address: {message.to}")
    if not message.subject:
        raise EmailValidationError("Email subject is required")
    if not message.body:
        raise EmailValidationError("Email body is required")
    if message.sender and not is_valid_email(message.sender):
        raise EmailValidationError(f"Invalid sender email address: {message.sender}")
    for cc in message.cc:
        if not is_valid_email(cc):
            raise EmailValidationError(f"Invalid CC email address: {cc}")
    for bcc in message.bcc:
        if not is_valid_email(bcc):
            raise EmailValidationError(f"Invalid BCC email address: {bcc}")


class EmailSender(ABC):
    """Port for sending email.

    ``send_email`` validates first, then hands the message to ``deliver``
    with the sender resolved to the configured default when unset.
    """

    def __init__(self, default_sender: str = "noreply@taskapp.com") -> None:
        self.default_sender = default_sender

    def send_email(self, message: EmailMessage) -> None:
        validate_email_message(message)
        if not message.sender:
            message = message.model_copy(update={"sender": self.default_sender})
        logger.info(
            "Preparing to send email",
            extra={"to": message.to, "subject": message.subject},
        )
        self.deliver(message)

    @abstractmethod
    def deliver(self, message: EmailMessage) -> None:
        """Deliver an already-validated message. Errors propagate."""
        pass


class InMemoryEmailSender(EmailSender):
    """Records messages instead of sending them.

    Only the most recent ``history_size`` messages are kept, so a
    long-running process does not accumulate every notification.
    """

    def __init__(
        self,
        default_sender: str = "noreply@taskapp.com",
        history_size: int = SENT_HISTORY_SIZE,
    ) -> None:
        super().__init__(default_sender)
        self.sent: deque[EmailMessage] = deque(maxlen=history_size)

    def deliver(self, message: EmailMessage) -> None:
        self.sent.append(message)
        logger.info(
            "Email recorded (in-memory backend)",
            extra={"to": message.to, "subject": message.subject},
        )


class SesEmailSender(EmailSender):
    """Sends email through Amazon SES with a single SendEmail call."""

    def __init__(
        self,
        default_sender: str = "noreply@taskapp.com",
        region: str = "us-east-1",
        client: Any = None,
    ) -> None:
        """Initialize the SES sender.

        Args:
            default_sender: Source address when a message has none
            region: AWS region of the SES endpoint
            client: Pre-built ``ses`` client (tests pass a stubbed one)
        """
        super().__init__(default_sender)
        self.region = region
        self._client = client

    @property
    def client(self) -> Any:
        """Lazy-initialize the SES client."""
        if self._client is None:
            self._client = boto3.client("ses", region_name=self.region)
        return self._client

    def deliver(self, message: EmailMessage) -> None:
        body: dict[str, Any] = {}
        if message.is_html:
            body["Html"] = {"Data": message.body, "Charset": CHARSET}
            if message.text_body:
                body["Text"] = {"Data": message.text_body, "Charset": CHARSET}
        else:
            body["Text"] = {"Data": message.body, "Charset": CHARSET}

        response = self.client.send_email(
            Source=message.sender or self.default_sender,
            Destination={
                "ToAddresses": [message.to],
                "CcAddresses": list(message.cc),
                "BccAddresses": list(message.bcc),
            },
            Message={
                "Subject": {"Data": message.subject, "Charset": CHARSET},
                "Body": body,
            },
        )

        logger.info(
            "Email sent successfully",
            extra={"to": message.to, "message_id": response.get("MessageId")},
        )
