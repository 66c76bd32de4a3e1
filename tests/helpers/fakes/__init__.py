"""Fake implementations for the event-bus boundary used in tests."""

from .bus import FakeEventBus, FakeMessage, FakeSubscription
from .kafka import FakeAIOKafkaAdminClient, FakeAIOKafkaConsumer, FakeRecord

__all__ = [
    "FakeAIOKafkaAdminClient",
    "FakeAIOKafkaConsumer",
    "FakeEventBus",
    "FakeMessage",
    "FakeRecord",
    "FakeSubscription",
]
