"""Event kinds shared by the test suite."""

from typing import TypedDict

from strong_events import BaseEvent


class OrderData(TypedDict):
    orderId: str


class BaseOrderEvent(BaseEvent[OrderData]):
    pass


class OrderCreatedEvent(BaseOrderEvent):
    pass


class OrderShippedEvent(BaseOrderEvent):
    pass


class ExpressOrderCreatedEvent(OrderCreatedEvent):
    pass


class UnrelatedEvent(BaseEvent[dict]):
    pass
