"""Shared fixtures: in-memory adapters, services and an API client."""

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.context import AppContext, build_context
from app.main import create_app
from app.notifications.email import InMemoryEmailSender
from app.notifications.handler import NotificationHandler
from app.notifications.templates import EmailRenderer
from app.repositories.memory import InMemoryTaskRepository
from app.services.tasks import TaskService

from fakes import RecordingPublisher


@pytest.fixture
def task_repository() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def task_service(task_repository: InMemoryTaskRepository, publisher: RecordingPublisher) -> TaskService:
    return TaskService(task_repository, publisher)


@pytest.fixture
def email_sender() -> InMemoryEmailSender:
    return InMemoryEmailSender("noreply@taskapp.com")


@pytest.fixture
def renderer() -> EmailRenderer:
    return EmailRenderer("UTC", "%Y-%m-%d %H:%M %Z")


@pytest.fixture
def notification_handler(email_sender: InMemoryEmailSender, renderer: EmailRenderer) -> NotificationHandler:
    return NotificationHandler(email_sender, renderer)


@pytest.fixture
def settings() -> Settings:
    """Local settings independent of the host environment."""
    settings = Settings()
    settings.ENVIRONMENT = "test"
    settings.STORAGE_BACKEND = "memory"
    settings.EVENT_BUS_BACKEND = "local"
    settings.EVENT_BUS_NAME = ""
    settings.EMAIL_BACKEND = "memory"
    settings.DEFAULT_SENDER = "noreply@taskapp.com"
    settings.NOTIFICATION_TIMEZONE = "UTC"
    settings.NOTIFICATION_DATE_FORMAT = "%Y-%m-%d %H:%M %Z"
    settings.JWT_SECRET = ""
    settings.AWS_REGION = "us-east-1"
    return settings


@pytest.fixture
def app_context(settings: Settings) -> AppContext:
    return build_context(settings)


@pytest.fixture
def client(app_context: AppContext) -> TestClient:
    return TestClient(create_app(app_context))
