"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import OrderCreated
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            "order.event.created",
            order_id=event.aggregate_id,
            customer_id=event.customer_id,
            total=str(event.total),
            item_count=event.item_count,
            event_id=str(event.event_id),
        )


order_created_handler = OrderCreatedHandler()
