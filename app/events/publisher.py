"""Event publisher port and the EventBridge adapter.

Publishing is fire-and-forget from the caller's point of view:
1. Services hand an event to a publisher after the state change is persisted
2. ``publish_best_effort`` reports the outcome instead of raising
3. A failed publish is never retried; task state stays authoritative
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.events.types import PublishOutcome

logger = logging.getLogger(__name__)


class EventPublishError(Exception):
    """Raised when the bus rejects an event."""


class EventPublisher(ABC):
    """Port for publishing domain events to a bus."""

    @abstractmethod
    def publish_event(self, source: str, detail_type: str, detail: dict[str, Any]) -> None:
        """Publish a single event.

        Args:
            source: Dotted event source (e.g. com.taskapp.tasks)
            detail_type: Event type (e.g. TaskCreation)
            detail: JSON-serializable payload

        Raises:
            Exception: Any failure; callers treat raising as "not delivered"
        """
        pass


def publish_best_effort(
    publisher: EventPublisher | None,
    source: str,
    detail_type: str,
    detail: dict[str, Any],
) -> PublishOutcome:
    """Publish an event without letting failures reach the caller.

    Returns:
        PublishOutcome: DELIVERED, SKIPPED (no publisher) or FAILED
    """
    if publisher is None:
        logger.debug(
            "No event publisher configured, event skipped",
            extra={"source": source, "detail_type": detail_type},
        )
        return PublishOutcome.SKIPPED

    try:
        publisher.publish_event(source, detail_type, detail)
    except Exception as e:
        logger.error(
            "Failed to publish %s event",
            detail_type,
            extra={"source": source, "detail_type": detail_type, "error": str(e)},
            exc_info=True,
        )
        return PublishOutcome.FAILED

    logger.info(
        "Published %s event",
        detail_type,
        extra={"source": source, "detail_type": detail_type},
    )
    return PublishOutcome.DELIVERED


class EventBridgePublisher(EventPublisher):
    """Publishes events to an EventBridge bus with a single PutEvents call."""

    def __init__(self, event_bus_name: str, region: str = "us-east-1", client: Any = None) -> None:
        """Initialize the publisher.

        Args:
            event_bus_name: Name of the EventBridge event bus
            region: AWS region of the bus
            client: Pre-built ``events`` client (tests pass a stubbed one)
        """
        self.event_bus_name = event_bus_name
        self.region = region
        self._client = client

    @property
    def client(self) -> Any:
        """Lazy-initialize the EventBridge client."""
        if self._client is None:
            self._client = boto3.client("events", region_name=self.region)
        return self._client

    def publish_event(self, source: str, detail_type: str, detail: dict[str, Any]) -> None:
        entry = {
            "EventBusName": self.event_bus_name,
            "Source": source,
            "DetailType": detail_type,
            "Detail": json.dumps(detail, default=str),
        }

        try:
            response = self.client.put_events(Entries=[entry])
        except (BotoCoreError, ClientError) as e:
            raise EventPublishError(
                f"Error publishing event to {self.event_bus_name}: {e}"
            ) from e

        if response.get("FailedEntryCount", 0):
            failed = response.get("Entries", [{}])[0]
            raise EventPublishError(
                f"EventBridge rejected {detail_type} event: "
                f"{failed.get('ErrorCode')} {failed.get('ErrorMessage')}"
            )

        logger.debug(
            "Event sent to EventBridge",
            extra={
                "event_bus": self.event_bus_name,
                "detail_type": detail_type,
                "event_id": response.get("Entries", [{}])[0].get("EventId"),
            },
        )
