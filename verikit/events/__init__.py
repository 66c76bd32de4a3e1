from verikit.events.bus import BusMessage, EventBus, Subscription
from verikit.events.config import EventBusConfig, EventBusType
from verikit.events.keys import (
    DEFAULT_KEY_EXTRACTOR,
    EventKeyExtractor,
    KeyStrategy,
    RawTextKey,
    StructuredFieldKey,
)
from verikit.events.waiter import EventCorrelationWaiter, wait_for_event

__all__ = [
    "BusMessage",
    "DEFAULT_KEY_EXTRACTOR",
    "EventBus",
    "EventBusConfig",
    "EventBusType",
    "EventCorrelationWaiter",
    "EventKeyExtractor",
    "KeyStrategy",
    "RawTextKey",
    "StructuredFieldKey",
    "Subscription",
    "wait_for_event",
]
