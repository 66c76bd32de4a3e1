import pytest
from prometheus_client import CollectorRegistry
from pydantic import ValidationError

from verikit.events.config import EventBusConfig, EventBusType
from verikit.events.kafka import KafkaEventBus
from verikit.settings import Settings

pytestmark = pytest.mark.unit


def test_from_settings_copies_kafka_fields(test_settings: Settings) -> None:
    config = EventBusConfig.from_settings(test_settings)

    assert config.bus_type is EventBusType.KAFKA
    assert config.bootstrap_servers == "localhost:9092"
    assert config.topic_prefix == "test."
    assert config.request_timeout_ms == test_settings.KAFKA_REQUEST_TIMEOUT_MS


def test_create_returns_kafka_bus_with_metrics_on_registry(registry: CollectorRegistry) -> None:
    bus = EventBusConfig(bootstrap_servers="kafka:29092").create(registry)

    assert isinstance(bus, KafkaEventBus)
    # Counters are registered even before any traffic
    assert "verikit_bus_messages_received" in registry._names_to_collectors  # type: ignore[attr-defined]


def test_create_twice_on_one_registry_is_rejected(registry: CollectorRegistry) -> None:
    config = EventBusConfig()
    config.create(registry)

    with pytest.raises(ValueError):
        config.create(registry)


def test_config_is_frozen() -> None:
    config = EventBusConfig()
    with pytest.raises(ValidationError):
        config.topic_prefix = "other."  # type: ignore[misc]


def test_unknown_bus_type_is_rejected() -> None:
    with pytest.raises(ValidationError):
        EventBusConfig(bus_type="sqs")  # type: ignore[arg-type]
