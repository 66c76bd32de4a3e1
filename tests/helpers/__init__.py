"""Helper utilities for tests (fake bus clients, fake Kafka consumer)."""

from .fakes import FakeAIOKafkaConsumer, FakeEventBus, FakeRecord

__all__ = ["FakeAIOKafkaConsumer", "FakeEventBus", "FakeRecord"]
