"""Integration tests conftest - needs a reachable Kafka broker.

Tests are skipped when the broker from config.test.toml cannot be reached.
"""
from typing import AsyncIterator

import pytest
import pytest_asyncio
from aiokafka import AIOKafkaProducer
from aiokafka.admin import AIOKafkaAdminClient, NewTopic
from aiokafka.errors import KafkaConnectionError

from verikit.core.ids import new_id
from verikit.events.config import EventBusConfig
from verikit.settings import Settings


@pytest.fixture(scope="session")
def bus_config(test_settings: Settings) -> EventBusConfig:
    # Topics are created unprefixed below
    return EventBusConfig.from_settings(test_settings).model_copy(update={"topic_prefix": ""})


@pytest_asyncio.fixture
async def admin(bus_config: EventBusConfig) -> AsyncIterator[AIOKafkaAdminClient]:
    client = AIOKafkaAdminClient(bootstrap_servers=bus_config.bootstrap_servers, request_timeout_ms=5000)
    try:
        await client.start()
    except KafkaConnectionError:
        pytest.skip(f"Kafka broker not reachable at {bus_config.bootstrap_servers}")
    try:
        yield client
    finally:
        await client.close()


@pytest_asyncio.fixture
async def topic(admin: AIOKafkaAdminClient) -> AsyncIterator[str]:
    name = new_id("verikit-it")
    await admin.create_topics([NewTopic(name=name, num_partitions=3, replication_factor=1)])
    yield name
    await admin.delete_topics([name])


@pytest_asyncio.fixture
async def producer(bus_config: EventBusConfig, admin: AIOKafkaAdminClient) -> AsyncIterator[AIOKafkaProducer]:
    client = AIOKafkaProducer(bootstrap_servers=bus_config.bootstrap_servers)
    await client.start()
    try:
        yield client
    finally:
        await client.stop()
