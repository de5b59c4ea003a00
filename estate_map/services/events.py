"""Domain event construction and publishing."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Protocol

from estate_map.models import Event

logger = logging.getLogger(__name__)

EVENT_SOURCE = "estate-map"


class EventSink(Protocol):
    """Anything events can be published to (see ``estate_map.sinks``)."""

    def publish(self, topic: str, event: Event) -> None: ...


def build_event(event_type: str, subject: str, data: dict[str, Any], **metadata: Any) -> Event:
    """Wrap ``data`` in the standard event envelope."""
    return Event(
        event_id=uuid.uuid4().hex,
        event_type=event_type,
        event_time=datetime.now(timezone.utc),
        source=EVENT_SOURCE,
        subject=subject,
        data=data,
        metadata=dict(metadata),
    )


class EventPublisher:
    """Publishes committed changes of one aggregate to a single topic."""

    def __init__(self, sink: EventSink | None, topic: str) -> None:
        self.sink = sink
        self.topic = topic

    def publish(self, event_type: str, subject: str, data: dict[str, Any], **metadata: Any) -> Event | None:
        """Publish an event; a no-op when no sink is configured.

        Only called after the change it describes has committed. The change
        stands either way, so a sink failure is logged with its traceback
        and reported by returning None instead of raising to the caller.
        """
        if self.sink is None:
            return None
        event = build_event(event_type, subject, data, **metadata)
        try:
            self.sink.publish(self.topic, event)
        except Exception:
            logger.exception("Failed to publish %s for %s to %s", event_type, subject, self.topic)
            return None
        return event
