"""Event bus routing rules and an in-process bus.

Each rule matches one (source, detail-type) pair and is bound to exactly
one target. The same rule set drives the in-process ``LocalEventBus`` and
the EventBridge patterns provisioned for deployed environments.

Event Flow:
    TaskService → EventPublisher → rule match → NotificationHandler
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from app.events.publisher import EventPublisher
from app.events.types import DomainEvent, EventSource, EventType

logger = logging.getLogger(__name__)

NOTIFICATION_TARGET = "notification"

EventTarget = Callable[[DomainEvent], Any]


@dataclass(frozen=True)
class EventRule:
    """A static predicate over (source, detail-type) bound to one target."""

    name: str
    source: str
    detail_type: str
    target: str
    description: str = ""

    def matches(self, source: str, detail_type: str) -> bool:
        return source == self.source and detail_type == self.detail_type

    def to_event_pattern(self) -> dict[str, list[str]]:
        """EventBridge event pattern for this rule."""
        return {"source": [self.source], "detail-type": [self.detail_type]}

    def rule_name(self, environment: str) -> str:
        return f"{self.name}-{environment}"


NOTIFICATION_RULES: tuple[EventRule, ...] = (
    EventRule(
        name="user-registration-rule",
        source=EventSource.AUTH.value,
        detail_type=EventType.USER_REGISTRATION.value,
        target=NOTIFICATION_TARGET,
        description="Rule to capture user registration events",
    ),
    EventRule(
        name="task-creation-rule",
        source=EventSource.TASKS.value,
        detail_type=EventType.TASK_CREATION.value,
        target=NOTIFICATION_TARGET,
        description="Rule to capture task creation events",
    ),
    EventRule(
        name="task-completion-rule",
        source=EventSource.TASKS.value,
        detail_type=EventType.TASK_COMPLETION.value,
        target=NOTIFICATION_TARGET,
        description="Rule to capture task completion events",
    ),
)


def match_rule(rules: Iterable[EventRule], source: str, detail_type: str) -> EventRule | None:
    """Return the rule matching the pair, or None.

    Patterns do not overlap, so the first match is the only match.
    """
    for rule in rules:
        if rule.matches(source, detail_type):
            return rule
    return None


class LocalEventBus(EventPublisher):
    """In-process bus that routes published events to registered targets.

    Delivery is synchronous; exceptions raised by a target propagate to the
    publisher's caller, where ``publish_best_effort`` contains them.
    """

    def __init__(self, rules: Iterable[EventRule] = NOTIFICATION_RULES) -> None:
        self._rules: list[EventRule] = list(rules)
        self._targets: dict[str, EventTarget] = {}

    @property
    def rules(self) -> list[EventRule]:
        return list(self._rules)

    def register_target(self, name: str, target: EventTarget) -> None:
        """Bind a callable to a rule target name.

        Args:
            name: Target name referenced by rules
            target: Callable receiving the DomainEvent
        """
        self._targets[name] = target

    def publish_event(self, source: str, detail_type: str, detail: dict[str, Any]) -> None:
        event = DomainEvent(source=source, detail_type=detail_type, detail=detail)
        self.dispatch(event)

    def dispatch(self, event: DomainEvent) -> Any:
        """Route an event to the target of its matching rule.

        Returns:
            Whatever the target returned, or None if nothing matched
        """
        rule = match_rule(self._rules, event.source, event.detail_type)
        if rule is None:
            logger.debug(
                "No rule matched event, dropping",
                extra={"source": event.source, "detail_type": event.detail_type},
            )
            return None

        target = self._targets.get(rule.target)
        if target is None:
            logger.warning(
                "Rule target not registered, dropping event",
                extra={"rule": rule.name, "target": rule.target},
            )
            return None

        logger.debug(
            "Dispatching event",
            extra={"rule": rule.name, "detail_type": event.detail_type},
        )
        return target(event)
