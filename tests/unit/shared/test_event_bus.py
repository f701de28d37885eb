from dataclasses import FrozenInstanceError
from unittest.mock import patch

import pytest

from modules.orders.events import OrderCreated, OrderDeleted, OrderUpdated
from modules.orders.exceptions import InsufficientStock
from modules.orders.handlers import OrderCreatedHandler
from shared.infrastructure.bus import InMemoryEventBus, event_bus

pytestmark = pytest.mark.unit


class RecordingHandler:
    def __init__(self):
        self.events = []

    def handle(self, event):
        self.events.append(event)


class TestDomainEvents:
    def test_event_name_and_identity(self):
        event = OrderCreated(aggregate_id=7, stock_delta={1: 2})
        assert event.event_name == "OrderCreated"
        assert event.aggregate_id == 7
        assert event.event_id != OrderCreated(aggregate_id=7).event_id

    def test_events_are_immutable(self):
        event = OrderDeleted(aggregate_id=1)
        with pytest.raises(FrozenInstanceError):
            event.aggregate_id = 2


class TestInMemoryEventBus:
    def test_dispatches_by_exact_event_class(self):
        bus = InMemoryEventBus()
        created, updated = RecordingHandler(), RecordingHandler()
        bus.subscribe(OrderCreated, created)
        bus.subscribe(OrderUpdated, updated)

        bus.publish(OrderCreated(aggregate_id=1))

        assert len(created.events) == 1
        assert updated.events == []

    def test_same_handler_subscribed_once(self):
        bus = InMemoryEventBus()
        handler = RecordingHandler()
        bus.subscribe(OrderCreated, handler)
        bus.subscribe(OrderCreated, handler)

        bus.publish(OrderCreated(aggregate_id=1))

        assert len(handler.events) == 1

    def test_publish_without_handlers_is_noop(self):
        InMemoryEventBus().publish(OrderDeleted(aggregate_id=1))

    def test_order_handlers_registered_on_startup(self):
        handlers = event_bus._handlers[OrderCreated]
        assert any(isinstance(h, OrderCreatedHandler) for h in handlers)


class TestPublishAfterCommit:
    def test_events_published_only_on_commit(
        self, order_service, make_product, create_dto, django_capture_on_commit_callbacks
    ):
        product = make_product(stock=5)

        with patch.object(event_bus, "publish") as publish:
            with django_capture_on_commit_callbacks(execute=True) as callbacks:
                order = order_service.create_order(create_dto((product, 2)))
                publish.assert_not_called()

        assert len(callbacks) == 1
        [event] = [call.args[0] for call in publish.call_args_list]
        assert isinstance(event, OrderCreated)
        assert event.aggregate_id == order.id
        assert event.stock_delta == {product.id: 2}

    def test_failed_operation_publishes_nothing(
        self, order_service, make_product, create_dto, django_capture_on_commit_callbacks
    ):
        product = make_product(stock=1)

        with patch.object(event_bus, "publish") as publish:
            with django_capture_on_commit_callbacks(execute=True) as callbacks:
                with pytest.raises(InsufficientStock):
                    order_service.create_order(create_dto((product, 2)))

        assert callbacks == []
        publish.assert_not_called()
