"""Order service layer (Use Cases).

``create_order`` is the order-creation transaction: it validates stock,
snapshots prices, computes totals, writes the order with its line items
and decrements inventory as one all-or-nothing unit, under concurrent
access from other callers competing for the same products.

The remaining methods are single-entity ledger operations (read, list,
status update, delete) with existence checks only.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

import structlog
from django.db import DatabaseError, transaction
from pydantic import ValidationError as PydanticValidationError

from modules.core.db import is_retryable
from modules.core.exceptions import format_validation_error
from modules.orders.dtos import CreateOrderDTO, UpdateOrderStatusDTO
from modules.orders.events import OrderCreated
from modules.orders.exceptions import (
    InsufficientStock,
    OrderNotFound,
    OrderRejected,
    ProductNotFound,
)
from modules.orders.pricing import line_total, order_total
from modules.orders.results import OrderError, OrderErrorKind, OrderResult
from shared.infrastructure.bus import event_bus

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).  Holds no
    per-call state: every ``create_order`` call opens its own transaction
    on the calling thread's connection.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_repository: IProductRepository,
        bus: Optional[IEventBus] = None,
    ) -> None:
        self._order_repo = order_repository
        self._product_repo = product_repository
        self._bus = bus or event_bus

    # ------------------------------------------------------------------
    # Order creation
    # ------------------------------------------------------------------

    def create_order(self, customer_id: Any, items: Any) -> OrderResult:
        """Validate a raw request and run the order-creation transaction.

        Invalid input (missing customer, empty item list, non-positive
        quantity, wrong types) yields ``InvalidRequest`` without touching
        the database.
        """
        try:
            dto = CreateOrderDTO(customer_id=customer_id, items=items)
        except PydanticValidationError as exc:
            error = OrderError(
                kind=OrderErrorKind.INVALID_REQUEST,
                message=format_validation_error(exc),
            )
            logger.info("order.invalid_request", detail=error.message)
            return OrderResult.failure(error)
        return self.place_order(dto)

    def place_order(self, dto: CreateOrderDTO) -> OrderResult:
        """Run the order-creation transaction for a validated request.

        Steps, all inside one durable atomic block:
        1. Insert a provisional header (total 0.00) to obtain the order id.
        2. Lock every referenced product row (SELECT FOR UPDATE) in
           ascending product-id order.  A single global lock order means two
           overlapping orders can never wait on each other in a cycle.
        3. Walk the lines in caller order: check existence and stock under
           the lock, snapshot the unit price, round the line total once,
           persist the line and decrement stock.
        4. Write the accumulated total.

        Any rejection or database error leaves the atomic block, which rolls
        back header, lines and decrements together before a failure result
        is returned.  If the rollback itself fails Django discards the
        connection; the original error is still the one reported.
        """
        log = logger.bind(customer_id=dto.customer_id, item_count=len(dto.items))
        log.info("order.creation_started")

        try:
            with transaction.atomic(durable=True):
                order = self._reserve_and_record(dto, log)
                self._bus.publish_on_commit(*order.pull_domain_events())
        except OrderRejected as exc:
            log.warning(
                "order.rejected",
                error=exc.kind.value,
                product_id=exc.product_id,
                detail=str(exc),
            )
            return OrderResult.failure(exc.to_error())
        except DatabaseError as exc:
            retryable = is_retryable(exc)
            log.error(
                "order.storage_failure",
                error=str(exc),
                retryable=retryable,
                exc_info=exc,
            )
            return OrderResult.failure(
                OrderError(
                    kind=OrderErrorKind.STORAGE_FAILURE,
                    message="Database error while creating order.",
                    retryable=retryable,
                )
            )

        log.info("order.created", order_id=order.id, total=str(order.total))
        return self._read_back(order.id, log)

    def _reserve_and_record(self, dto: CreateOrderDTO, log) -> Order:
        order = self._order_repo.create_header(dto.customer_id)
        log = log.bind(order_id=order.id)

        locked = self._lock_products(dto.product_ids)

        amounts: List[Decimal] = []
        for item in dto.items:
            product = locked.get(item.product_id)
            if product is None:
                raise ProductNotFound(
                    f"Product {item.product_id} not found",
                    product_id=item.product_id,
                )
            if product.quantity < item.quantity:
                raise InsufficientStock(
                    f"Insufficient stock for product {item.product_id}: "
                    f"requested {item.quantity}, available {product.quantity}",
                    product_id=item.product_id,
                )

            unit_price = product.price
            amount = line_total(unit_price, item.quantity)
            amounts.append(amount)

            self._order_repo.add_item(
                order,
                product_id=product.pk,
                unit_price=unit_price,
                quantity=item.quantity,
                line_total=amount,
            )
            self._product_repo.decrement_stock(product, item.quantity)

            log.info(
                "order.stock_reserved",
                product_id=product.pk,
                quantity=item.quantity,
                remaining=product.quantity,
            )

        order = self._order_repo.set_total(order, order_total(amounts))
        order.add_domain_event(
            OrderCreated(
                aggregate_id=order.id,
                customer_id=order.customer_id,
                total=order.total,
                item_count=len(dto.items),
            )
        )
        return order

    def _lock_products(self, product_ids: List[int]) -> Dict[int, Product]:
        """Lock each product row once, in the given (ascending) order.

        Missing products map to nothing; the caller reports them in the
        order the client listed its lines.
        """
        locked: Dict[int, Product] = {}
        for product_id in product_ids:
            product = self._product_repo.get_for_update(product_id)
            if product is not None:
                locked[product_id] = product
        return locked

    def _read_back(self, order_id: int, log) -> OrderResult:
        # Runs after commit: the result reflects exactly what was persisted.
        try:
            order = self._order_repo.get_by_id(order_id)
        except DatabaseError as exc:
            log.error("order.read_back_failed", order_id=order_id, error=str(exc))
            order = None
        if order is None:
            return OrderResult.failure(
                OrderError(
                    kind=OrderErrorKind.STORAGE_FAILURE,
                    message=f"Order {order_id} was created but could not be read back.",
                )
            )
        return OrderResult.success(order)

    # ------------------------------------------------------------------
    # Single-entity commands
    # ------------------------------------------------------------------

    def update_status(self, order_id: Any, dto: UpdateOrderStatusDTO) -> Order:
        """Change an order's status label.  Total and items never change.

        Raises:
            OrderNotFound: order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        old_status = order.status
        order = self._order_repo.update_status(order, dto.status)
        logger.info(
            "order.status_updated",
            order_id=order.id,
            old_status=old_status,
            new_status=order.status,
        )
        return order

    def delete_order(self, order_id: Any) -> None:
        """Delete an order together with its line items.

        Stock is not restored.

        Raises:
            OrderNotFound: order does not exist.
        """
        if not self._order_repo.delete(order_id):
            raise OrderNotFound(f"Order {order_id} not found.")
        logger.info("order.removed", order_id=order_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: Any) -> Order:
        """Retrieve a single order with its items.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        ordering: Optional[Sequence[str]] = None,
    ) -> List[Order]:
        """Return order headers matching the query parameters.

        Raises:
            InvalidFilters: a filter parameter failed validation.
        """
        return self._order_repo.list(filters, ordering)
