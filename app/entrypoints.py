"""Event-triggered entry points.

- handle_bus_event: EventBridge rule target running the notification handler
- handle_post_confirmation: identity-provider post-confirmation trigger

Both take an explicit ``AppContext``. The ``*_handler(event, lambda_context)``
functions adapt them to the function-host calling convention and reuse one
context per process.
"""

import logging
from functools import lru_cache
from typing import Any

from app.config import get_settings
from app.context import AppContext, build_context
from app.events.types import DomainEvent
from app.logging_config import configure_logging
from app.notifications.handler import NotificationOutcome

logger = logging.getLogger(__name__)


def handle_bus_event(context: AppContext, event: dict[str, Any]) -> NotificationOutcome:
    """Process one bus event; failures are re-raised for the host's retry policy."""
    domain_event = DomainEvent.from_eventbridge(event)
    try:
        return context.notification_handler.handle(domain_event)
    except Exception:
        logger.error(
            "Error processing notification event",
            extra={"source": domain_event.source, "detail_type": domain_event.detail_type},
            exc_info=True,
        )
        raise


def handle_post_confirmation(context: AppContext, event: dict[str, Any]) -> dict[str, Any]:
    """Register a confirmed user and return the trigger event unchanged.

    The event is always returned so a failure here never blocks the
    user's confirmation with the identity provider.
    """
    username = event.get("userName", "")
    attributes = event.get("request", {}).get("userAttributes", {})

    try:
        context.user_service.register_confirmed_user(
            user_id=attributes.get("sub") or username,
            username=username,
            email=attributes.get("email", ""),
            phone_number=attributes.get("phone_number"),
        )
        logger.info("User profile created for %s", username)
    except Exception:
        logger.error(
            "Error in post confirmation handler",
            extra={"username": username},
            exc_info=True,
        )

    return event


@lru_cache
def get_process_context() -> AppContext:
    """Build the context once per process."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    return build_context(settings)


def notification_handler(event: dict[str, Any], lambda_context: Any = None) -> dict[str, str]:
    outcome = handle_bus_event(get_process_context(), event)
    return {"outcome": outcome.value}


def post_confirmation_handler(event: dict[str, Any], lambda_context: Any = None) -> dict[str, Any]:
    return handle_post_confirmation(get_process_context(), event)
