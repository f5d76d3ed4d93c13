"""In-process domain events.

Lifecycle operations publish a ``DomainEvent`` after their transaction commits,
so collaborators (audit, notifications) can react without the engine knowing
about them.

Usage:
    from libs.common.events import get_event_bus

    bus = get_event_bus()
    bus.subscribe("review.accepted", notify_student)
    await bus.publish(DomainEvent(name="review.accepted", ...))
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from functools import lru_cache
from typing import Any, Awaitable, Callable, Union

from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger

logger = get_logger(__name__)

ALL_EVENTS = "*"


@dataclass(frozen=True)
class DomainEvent:
    name: str
    entity_type: str
    entity_id: Union[int, str]
    actor_id: int
    payload: dict[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=utc_now)


EventHandler = Callable[[DomainEvent], Awaitable[None]]


class EventBus:
    """Fan out events to async subscribers, in subscription order."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def subscribe(self, name: str, handler: EventHandler) -> None:
        if handler not in self._handlers[name]:
            self._handlers[name].append(handler)

    def unsubscribe(self, name: str, handler: EventHandler) -> None:
        if handler in self._handlers[name]:
            self._handlers[name].remove(handler)

    def clear(self) -> None:
        self._handlers.clear()

    async def publish(self, event: DomainEvent) -> None:
        handlers = [*self._handlers[event.name], *self._handlers[ALL_EVENTS]]
        for handler in handlers:
            # Runs after commit; a failing handler is only logged.
            try:
                await handler(event)
            except Exception:
                logger.exception(
                    "Event handler %s failed for %s %s",
                    getattr(handler, "__name__", handler),
                    event.name,
                    event.entity_id,
                )


@lru_cache
def get_event_bus() -> EventBus:
    """Return the process-wide event bus."""
    return EventBus()


async def log_domain_event(event: DomainEvent) -> None:
    """Audit subscriber: one INFO line per event."""
    logger.info(
        "%s %s=%s by user %s",
        event.name,
        event.entity_type,
        event.entity_id,
        event.actor_id,
        extra={"extra_fields": {"event": event.name, **event.payload}},
    )
