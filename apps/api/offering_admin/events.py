from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from offering_admin.context import get_correlation_id


@dataclass(slots=True)
class DomainEvent:
    event_type: str
    envelope: dict[str, Any]


EventHandler = Callable[[DomainEvent], None]


class EventBus:
    """Synchronous in-process fan-out; handlers run on the publishing thread."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_types: Iterable[str], handler: EventHandler) -> None:
        for event_type in event_types:
            if handler not in self._handlers[event_type]:
                self._handlers[event_type].append(handler)

    def unsubscribe(self, event_types: Iterable[str], handler: EventHandler) -> None:
        for event_type in event_types:
            handlers = self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)

    def dispatch(self, event: DomainEvent) -> None:
        for handler in list(self._handlers.get(event.event_type, [])):
            handler(event)


event_bus = EventBus()
PUBLISHED_EVENTS_LIMIT = 500

# Recent envelopes only; subscribers on the bus see every event.
published_events: deque[dict[str, Any]] = deque(maxlen=PUBLISHED_EVENTS_LIMIT)


def publish(envelope: dict[str, Any]) -> None:
    if envelope.get("correlation_id") is None:
        envelope["correlation_id"] = get_correlation_id()
    envelope.setdefault("occurred_at", datetime.now(timezone.utc).isoformat())

    published_events.append(envelope)
    event_type = envelope.get("event_type")
    if isinstance(event_type, str) and event_type:
        event_bus.dispatch(DomainEvent(event_type=event_type, envelope=envelope))
