"""Event-driven architecture module.

Components:
- types.py: Event sources, detail types and payload shapes
- publisher.py: Publisher port, best-effort publishing, EventBridge adapter
- bus.py: Routing rules and the in-process event bus
"""

from app.events.types import (
    DomainEvent,
    EventSource,
    EventType,
    PublishOutcome,
    TaskCompletionDetail,
    TaskCreationDetail,
    UserPreferencesUpdatedDetail,
    UserRegistrationDetail,
)
from app.events.publisher import (
    EventBridgePublisher,
    EventPublisher,
    EventPublishError,
    publish_best_effort,
)
from app.events.bus import (
    NOTIFICATION_RULES,
    NOTIFICATION_TARGET,
    EventRule,
    LocalEventBus,
    match_rule,
)

__all__ = [
    # Types
    "DomainEvent",
    "EventSource",
    "EventType",
    "PublishOutcome",
    "TaskCompletionDetail",
    "TaskCreationDetail",
    "UserPreferencesUpdatedDetail",
    "UserRegistrationDetail",
    # Publisher
    "EventBridgePublisher",
    "EventPublisher",
    "EventPublishError",
    "publish_best_effort",
    # Bus
    "NOTIFICATION_RULES",
    "NOTIFICATION_TARGET",
    "EventRule",
    "LocalEventBus",
    "match_rule",
]
