"""Unit tests for domain events and the in-memory event bus."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.orders.events import OrderCreated
from modules.orders.models import Order
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


class _Recorder:
    def __init__(self):
        self.events = []

    def handle(self, event):
        self.events.append(event)


class _Exploding:
    def handle(self, event):
        raise RuntimeError("handler broke")


def _event(order_id=1):
    return OrderCreated(
        aggregate_id=order_id, customer_id=2, total=Decimal("9.99"), item_count=1
    )


def test_order_collects_and_pulls_domain_events():
    order = Order(customer_id=2)
    assert order.domain_events == []

    event = _event()
    order.add_domain_event(event)
    assert order.domain_events == [event]
    assert event.event_name == "OrderCreated"

    assert order.pull_domain_events() == [event]
    assert order.domain_events == []


class TestInMemoryEventBus:
    def test_publish_to_subscribers(self):
        bus = InMemoryEventBus()
        recorder = _Recorder()
        bus.subscribe(OrderCreated, recorder)
        bus.subscribe(OrderCreated, recorder)

        bus.publish(_event())

        assert len(recorder.events) == 1

    def test_unsubscribe(self):
        bus = InMemoryEventBus()
        recorder = _Recorder()
        bus.subscribe(OrderCreated, recorder)
        bus.unsubscribe(OrderCreated, recorder)

        bus.publish(_event())

        assert recorder.events == []

    def test_failing_handler_does_not_stop_others(self):
        bus = InMemoryEventBus()
        recorder = _Recorder()
        bus.subscribe(OrderCreated, _Exploding())
        bus.subscribe(OrderCreated, recorder)

        bus.publish(_event())

        assert len(recorder.events) == 1

    def test_publish_on_commit_waits_for_commit(self, django_capture_on_commit_callbacks):
        bus = InMemoryEventBus()
        recorder = _Recorder()
        bus.subscribe(OrderCreated, recorder)

        with django_capture_on_commit_callbacks() as callbacks:
            bus.publish_on_commit(_event(1), _event(2))
            assert recorder.events == []

        assert len(callbacks) == 2
        for callback in callbacks:
            callback()
        assert [e.aggregate_id for e in recorder.events] == [1, 2]
