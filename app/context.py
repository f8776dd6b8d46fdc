"""Application context: adapters and services wired once per process.

Inbound adapters (the FastAPI app and the event entry points) receive an
``AppContext`` explicitly instead of constructing services at import time.
"""

import logging
from dataclasses import dataclass

from app.config import Settings
from app.events.bus import NOTIFICATION_TARGET, LocalEventBus
from app.events.publisher import EventBridgePublisher, EventPublisher
from app.notifications.email import EmailSender, InMemoryEmailSender, SesEmailSender
from app.notifications.handler import NotificationHandler
from app.notifications.templates import EmailRenderer
from app.repositories.base import TaskRepository, UserRepository
from app.repositories.memory import InMemoryTaskRepository, InMemoryUserRepository
from app.services.tasks import TaskService
from app.services.users import UserService

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Everything an invocation needs, built by ``build_context``."""

    settings: Settings
    task_repository: TaskRepository
    user_repository: UserRepository
    publisher: EventPublisher | None
    email_sender: EmailSender
    notification_handler: NotificationHandler
    task_service: TaskService
    user_service: UserService


def build_repositories(settings: Settings) -> tuple[TaskRepository, UserRepository]:
    """Create task and user repositories for the configured backend."""
    if settings.STORAGE_BACKEND == "dynamodb":
        from app.repositories.dynamodb import DynamoDBTaskRepository, DynamoDBUserRepository

        return (
            DynamoDBTaskRepository(settings.TASK_TABLE_NAME, settings.AWS_REGION),
            DynamoDBUserRepository(settings.USER_TABLE_NAME, settings.AWS_REGION),
        )

    if settings.STORAGE_BACKEND == "sql":
        from app.db.session import build_engine, create_tables
        from app.repositories.sql import SqlTaskRepository

        engine = build_engine(settings.DATABASE_URL)
        create_tables(engine)
        # User profiles are only written by the registration trigger
        return SqlTaskRepository(engine), InMemoryUserRepository()

    return InMemoryTaskRepository(), InMemoryUserRepository()


def build_email_sender(settings: Settings) -> EmailSender:
    if settings.EMAIL_BACKEND == "ses":
        return SesEmailSender(settings.DEFAULT_SENDER, settings.AWS_REGION)
    return InMemoryEmailSender(settings.DEFAULT_SENDER)


def build_publisher(
    settings: Settings, notification_handler: NotificationHandler
) -> EventPublisher | None:
    """Create the event publisher, or None when events are disabled."""
    if settings.EVENT_BUS_BACKEND == "none":
        return None

    if settings.EVENT_BUS_BACKEND == "eventbridge":
        if not settings.EVENT_BUS_NAME:
            logger.warning("EVENT_BUS_NAME is not set, events are disabled")
            return None
        return EventBridgePublisher(settings.EVENT_BUS_NAME, settings.AWS_REGION)

    bus = LocalEventBus()
    bus.register_target(NOTIFICATION_TARGET, notification_handler.handle)
    return bus


def build_context(settings: Settings) -> AppContext:
    """Wire adapters and services from settings.

    Raises:
        ValueError: If settings name an unknown backend
    """
    settings.validate()

    task_repository, user_repository = build_repositories(settings)
    email_sender = build_email_sender(settings)
    notification_handler = NotificationHandler(
        email_sender,
        EmailRenderer(settings.NOTIFICATION_TIMEZONE, settings.NOTIFICATION_DATE_FORMAT),
        user_repository,
    )
    publisher = build_publisher(settings, notification_handler)

    logger.info(
        "Application context built",
        extra={
            "storage_backend": settings.STORAGE_BACKEND,
            "event_bus_backend": settings.EVENT_BUS_BACKEND,
            "email_backend": settings.EMAIL_BACKEND,
        },
    )

    return AppContext(
        settings=settings,
        task_repository=task_repository,
        user_repository=user_repository,
        publisher=publisher,
        email_sender=email_sender,
        notification_handler=notification_handler,
        task_service=TaskService(task_repository, publisher),
        user_service=UserService(user_repository, publisher),
    )
