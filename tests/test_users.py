"""Tests for the User entity, UserService and notification preferences."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from pydantic import ValidationError

from app.context import AppContext
from app.events.types import DomainEvent
from app.models.user import User, UserPreferences
from app.notifications.email import InMemoryEmailSender
from app.notifications.handler import NotificationHandler, NotificationOutcome
from app.notifications.templates import EmailRenderer
from app.repositories.memory import InMemoryUserRepository
from app.services.users import UserAlreadyExistsError, UserNotFoundError, UserService

from fakes import FailingPublisher, RecordingPublisher


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def user_service(user_repository: InMemoryUserRepository, publisher: RecordingPublisher) -> UserService:
    return UserService(user_repository, publisher)


class TestUserEntity:
    """Tests for User preferences."""

    def test_default_preferences(self):
        user = User(user_id="u1", username="ada", email="ada@example.com")

        assert user.preferences == UserPreferences(notifications=True, theme="light")
        assert user.updated_at is None

    def test_update_preferences_merges(self):
        """Only the supplied preferences change."""
        user = User(user_id="u1", username="ada", email="ada@example.com")

        user.update_preferences(theme="dark")

        assert user.preferences.theme == "dark"
        assert user.preferences.notifications is True
        assert user.updated_at is not None

    def test_update_preferences_rejects_unknown_or_invalid(self):
        user = User(user_id="u1", username="ada", email="ada@example.com")

        with pytest.raises(ValidationError):
            user.update_preferences(language="fr")
        with pytest.raises(ValidationError):
            user.update_preferences(theme="purple")

        assert user.preferences == UserPreferences()

    def test_item_round_trip(self):
        """Preferences are stored as a nested map."""
        user = User(
            user_id="u1",
            username="ada",
            email="ada@example.com",
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        user.update_preferences(notifications=False)

        item = user.to_item()

        assert item["preferences"] == {"notifications": False, "theme": "light"}
        assert User.from_item(item) == user


class TestUserServiceRegister:
    """Tests for UserService.register_confirmed_user."""

    def test_register_publishes_user_registration(
        self, user_service: UserService, publisher: RecordingPublisher
    ):
        user = user_service.register_confirmed_user("u1", "ada", "ada@example.com")

        assert user_service.get_user("u1") == user
        assert publisher.events == [
            (
                "com.taskapp.auth",
                "UserRegistration",
                {"username": "ada", "email": "ada@example.com", "userId": "u1"},
            )
        ]

    def test_register_duplicate_raises(self, user_service: UserService):
        user_service.register_confirmed_user("u1", "ada", "ada@example.com")

        with pytest.raises(UserAlreadyExistsError):
            user_service.register_confirmed_user("u1", "ada", "ada@example.com")


class TestUserServicePreferences:
    """Tests for UserService.update_user_preferences."""

    def test_update_persists_and_publishes(
        self, user_service: UserService, publisher: RecordingPublisher
    ):
        user_service.register_confirmed_user("u1", "ada", "ada@example.com")

        user = user_service.update_user_preferences("u1", notifications=False)

        assert user.preferences.notifications is False
        assert user_service.get_user("u1").preferences.notifications is False
        assert publisher.events[-1] == (
            "com.taskapp.auth",
            "UserPreferencesUpdated",
            {"userId": "u1", "preferences": {"notifications": False, "theme": "light"}},
        )

    def test_update_missing_user(self, user_service: UserService, publisher: RecordingPublisher):
        with pytest.raises(UserNotFoundError):
            user_service.update_user_preferences("missing", theme="dark")

        assert publisher.events == []

    def test_update_survives_publisher_failure(self, user_repository: InMemoryUserRepository):
        service = UserService(user_repository, FailingPublisher())
        service.register_confirmed_user("u1", "ada", "ada@example.com")

        service.update_user_preferences("u1", theme="dark")

        assert service.get_user("u1").preferences.theme == "dark"


class TestNotificationPreferences:
    """Task emails respect the user's notifications preference."""

    def _creation(self, user_id: str) -> DomainEvent:
        return DomainEvent(
            source="com.taskapp.tasks",
            detail_type="TaskCreation",
            detail={"taskId": "t1", "title": "Buy milk", "userId": user_id, "userEmail": "ada@example.com"},
        )

    def test_opted_out_user_is_skipped(
        self, user_repository: InMemoryUserRepository, renderer: EmailRenderer
    ):
        sender = InMemoryEmailSender()
        handler = NotificationHandler(sender, renderer, user_repository)
        user = User(user_id="u1", username="ada", email="ada@example.com")
        user.update_preferences(notifications=False)
        user_repository.save_user(user)

        assert handler.handle(self._creation("u1")) is NotificationOutcome.SKIPPED
        assert len(sender.sent) == 0

    def test_unknown_user_still_notified(
        self, user_repository: InMemoryUserRepository, renderer: EmailRenderer
    ):
        sender = InMemoryEmailSender()
        handler = NotificationHandler(sender, renderer, user_repository)

        assert handler.handle(self._creation("stranger")) is NotificationOutcome.SENT
        assert len(sender.sent) == 1

    def test_opt_out_through_the_api(self, client: TestClient, app_context: AppContext):
        """After opting out, creating a task sends no email."""
        app_context.user_service.register_confirmed_user("u1", "ada", "u1@x.com")
        app_context.user_service.update_user_preferences("u1", notifications=False)
        welcome_count = len(app_context.email_sender.sent)
        token = jwt.encode({"sub": "u1", "email": "u1@x.com"}, "secret", algorithm="HS256")

        response = client.post(
            "/tasks", json={"title": "Buy milk"}, headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 201
        assert len(app_context.email_sender.sent) == welcome_count
