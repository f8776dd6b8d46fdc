"""Environment configuration for the TaskApp backend."""

import os
import re
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

STORAGE_BACKENDS = ("memory", "sql", "dynamodb")
EVENT_BUS_BACKENDS = ("local", "eventbridge", "none")
EMAIL_BACKENDS = ("memory", "ses")

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class Settings:
    """Application settings loaded from environment variables.

    Every value has a hard-coded fallback so a bare environment still
    produces a working local setup (in-memory storage, in-process bus).
    """

    def __init__(self) -> None:
        self.ENVIRONMENT: str = os.getenv("ENVIRONMENT", "dev")
        self.AWS_REGION: str = os.getenv("AWS_REGION") or os.getenv("REGION") or "us-east-1"
        self.FRONTEND_URL: str = os.getenv("FRONTEND_URL", "http://localhost:3000")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

        # Persistence
        self.STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "memory").lower()
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./taskapp.db")
        self.TASK_TABLE_NAME: str = os.getenv("TASK_TABLE_NAME", "tasks")
        self.USER_TABLE_NAME: str = os.getenv("USER_TABLE_NAME", "users")

        # Event bus
        self.EVENT_BUS_BACKEND: str = os.getenv("EVENT_BUS_BACKEND", "local").lower()
        self.EVENT_BUS_NAME: str = os.getenv("EVENT_BUS_NAME", "")

        # Notifications
        self.EMAIL_BACKEND: str = os.getenv("EMAIL_BACKEND", "memory").lower()
        self.DEFAULT_SENDER: str = os.getenv("DEFAULT_SENDER", "noreply@taskapp.com")
        self.NOTIFICATION_TIMEZONE: str = os.getenv("NOTIFICATION_TIMEZONE", "UTC")
        self.NOTIFICATION_DATE_FORMAT: str = os.getenv(
            "NOTIFICATION_DATE_FORMAT", "%B %d, %Y %H:%M %Z"
        )

        # Bearer tokens are issued by the identity provider. JWT_SECRET is
        # the HS256 secret, or the PEM public key when JWT_ALGORITHM is RS256.
        # Empty means claims are trusted unverified (gateway authorizer only).
        self.JWT_SECRET: str = os.getenv("JWT_SECRET", "")
        self.JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

    def validate(self) -> None:
        """Validate backend selections and the default sender address."""
        if self.STORAGE_BACKEND not in STORAGE_BACKENDS:
            raise ValueError(f"Unknown STORAGE_BACKEND: {self.STORAGE_BACKEND}")
        if self.EVENT_BUS_BACKEND not in EVENT_BUS_BACKENDS:
            raise ValueError(f"Unknown EVENT_BUS_BACKEND: {self.EVENT_BUS_BACKEND}")
        if self.EMAIL_BACKEND not in EMAIL_BACKENDS:
            raise ValueError(f"Unknown EMAIL_BACKEND: {self.EMAIL_BACKEND}")
        if not _EMAIL_PATTERN.match(self.DEFAULT_SENDER):
            raise ValueError(f"DEFAULT_SENDER is not a valid email address: {self.DEFAULT_SENDER}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()
    return settings
