"""User entity model."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.task import as_utc, utcnow


class UserPreferences(BaseModel):
    """Per-user settings. ``notifications`` gates task emails."""

    model_config = ConfigDict(extra="forbid")

    notifications: bool = True
    theme: Literal["light", "dark"] = "light"


class User(BaseModel):
    """A confirmed user, created from the identity provider's trigger."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    username: str
    email: str
    phone_number: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime | None = None
    preferences: UserPreferences = Field(default_factory=UserPreferences)

    def update_preferences(self, **changes: Any) -> None:
        """Merge ``changes`` into the current preferences.

        Raises:
            ValidationError: On an unknown preference or invalid value
        """
        self.preferences = UserPreferences.model_validate(
            {**self.preferences.model_dump(), **changes}
        )
        self.updated_at = utcnow()

    def to_item(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "User":
        user = cls.model_validate(item)
        user.created_at = as_utc(user.created_at)
        if user.updated_at is not None:
            user.updated_at = as_utc(user.updated_at)
        return user
