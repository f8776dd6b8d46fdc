"""User service: confirmed registrations, preferences and their events."""

import logging
from typing import Any

from app.events.publisher import EventPublisher, publish_best_effort
from app.events.types import (
    EventSource,
    EventType,
    UserPreferencesUpdatedDetail,
    UserRegistrationDetail,
)
from app.models.user import User
from app.repositories.base import UserRepository

logger = logging.getLogger(__name__)


class UserAlreadyExistsError(Exception):
    """Raised when registering a user id that already has a profile."""


class UserNotFoundError(Exception):
    """Raised when a user id has no profile."""


class UserService:
    """Creates user profiles once the identity provider confirms a sign-up."""

    def __init__(
        self,
        repository: UserRepository,
        publisher: EventPublisher | None = None,
    ) -> None:
        self.repository = repository
        self.publisher = publisher

    def register_confirmed_user(
        self,
        user_id: str,
        username: str,
        email: str,
        phone_number: str | None = None,
    ) -> User:
        """Persist a new user profile and emit UserRegistration.

        Raises:
            UserAlreadyExistsError: If a profile for user_id exists
        """
        if self.repository.get_user_by_id(user_id) is not None:
            raise UserAlreadyExistsError(f"User with ID {user_id} already exists")

        user = self.repository.save_user(
            User(
                user_id=user_id,
                username=username,
                email=email,
                phone_number=phone_number,
            )
        )

        logger.info("User profile created", extra={"user_id": user_id})

        publish_best_effort(
            self.publisher,
            EventSource.AUTH.value,
            EventType.USER_REGISTRATION.value,
            UserRegistrationDetail(
                username=user.username,
                email=user.email,
                user_id=user.user_id,
            ).to_detail(),
        )
        return user

    def get_user(self, user_id: str) -> User | None:
        return self.repository.get_user_by_id(user_id)

    def update_user_preferences(self, user_id: str, **changes: Any) -> User:
        """Merge preference changes, persist, then emit UserPreferencesUpdated.

        Raises:
            UserNotFoundError: If no profile exists for user_id
            ValidationError: On an unknown preference or invalid value
        """
        user = self.repository.get_user_by_id(user_id)
        if user is None:
            raise UserNotFoundError(f"User with ID {user_id} not found")

        user.update_preferences(**changes)
        user = self.repository.save_user(user)

        logger.info(
            "User preferences updated",
            extra={"user_id": user_id, "changed": sorted(changes)},
        )

        publish_best_effort(
            self.publisher,
            EventSource.AUTH.value,
            EventType.USER_PREFERENCES_UPDATED.value,
            UserPreferencesUpdatedDetail(
                user_id=user.user_id,
                preferences=user.preferences.model_dump(),
            ).to_detail(),
        )
        return user
