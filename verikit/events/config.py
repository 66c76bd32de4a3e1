from enum import StrEnum

import structlog
from prometheus_client import CollectorRegistry
from pydantic import BaseModel, ConfigDict, Field

from verikit.core.metrics import BusMetrics
from verikit.events.bus import EventBus
from verikit.events.kafka import KafkaEventBus
from verikit.settings import Settings


class EventBusType(StrEnum):
    KAFKA = "kafka"


class EventBusConfig(BaseModel):
    """How to reach the platform's event bus."""

    model_config = ConfigDict(frozen=True)

    bus_type: EventBusType = EventBusType.KAFKA
    bootstrap_servers: str = "localhost:9092"
    topic_prefix: str = ""
    request_timeout_ms: int = Field(default=40000, gt=0)
    max_records: int = Field(default=500, gt=0)

    @classmethod
    def from_settings(cls, settings: Settings) -> "EventBusConfig":
        return cls(
            bus_type=EventBusType(settings.EVENT_BUS_TYPE),
            bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
            topic_prefix=settings.KAFKA_TOPIC_PREFIX,
            request_timeout_ms=settings.KAFKA_REQUEST_TIMEOUT_MS,
        )

    def create(
        self,
        registry: CollectorRegistry,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> EventBus:
        """Build a bus client whose metrics are registered on ``registry``.

        Counters are registered once per call, so pass a registry that has not
        been handed to ``create`` before.
        """
        metrics = BusMetrics(registry)
        match self.bus_type:
            case EventBusType.KAFKA:
                return KafkaEventBus(
                    self.bootstrap_servers,
                    metrics,
                    topic_prefix=self.topic_prefix,
                    request_timeout_ms=self.request_timeout_ms,
                    max_records=self.max_records,
                    logger=logger,
                )
        raise ValueError(f"Unsupported event bus type: {self.bus_type}")
