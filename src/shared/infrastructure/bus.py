"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, List, Type

import structlog
from django.db import transaction

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    """Synchronous in-process event bus.

    Events are published after the business data is already committed, so a
    failing handler must not turn a successful request into an error: the
    failure is logged and the remaining handlers still run.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.get(event_class, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: DomainEvent) -> None:
        for handler in list(self._handlers.get(type(event), [])):
            try:
                handler.handle(event)
            except Exception:
                logger.exception(
                    "event_bus.handler_failed",
                    event_name=event.event_name,
                    aggregate_id=event.aggregate_id,
                    handler=type(handler).__name__,
                )

    def publish_on_commit(self, *events: DomainEvent) -> None:
        """Publish *events* once the current transaction commits.

        Nothing is published if it rolls back.
        """
        for event in events:
            transaction.on_commit(lambda event=event: self.publish(event))


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
