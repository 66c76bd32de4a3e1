from collections import deque
from contextlib import asynccontextmanager
from typing import AsyncIterator, Sequence

import structlog
from aiokafka import AIOKafkaConsumer, TopicPartition
from aiokafka.admin import AIOKafkaAdminClient
from aiokafka.errors import KafkaError
from aiokafka.structs import ConsumerRecord

from verikit.core.exceptions import BusError
from verikit.core.metrics import BusMetrics


class KafkaMessage:
    def __init__(self, record: ConsumerRecord) -> None:
        self._record = record

    @property
    def topic(self) -> str:
        return self._record.topic

    def payload(self) -> bytes:
        # Tombstones carry no value
        return self._record.value or b""


class KafkaSubscription:
    """Pulls batches from one consumer and hands messages out one at a time."""

    def __init__(self, consumer: AIOKafkaConsumer, metrics: BusMetrics, max_records: int = 500) -> None:
        self._consumer = consumer
        self._metrics = metrics
        self._max_records = max_records
        self._buffer: deque[KafkaMessage] = deque()

    async def next(self, timeout: float = 0.0) -> KafkaMessage | None:
        if not self._buffer:
            batches = await self._consumer.getmany(timeout_ms=int(timeout * 1000), max_records=self._max_records)
            for records in batches.values():
                for record in records:
                    self._metrics.record_message(record.topic)
                    self._buffer.append(KafkaMessage(record))
        return self._buffer.popleft() if self._buffer else None


class KafkaEventBus:
    """Kafka-backed harness bus.

    Partitions are looked up through the admin API. Each subscription then
    gets its own consumer, manually assigned to every partition of the
    requested topics and pinned to the current log end before ``subscribe``
    yields. There is no group rebalancing, so concurrent waiters on the same
    topic each see every message, and nothing published after the
    subscription opens is missed.
    """

    def __init__(
        self,
        bootstrap_servers: str,
        metrics: BusMetrics,
        *,
        topic_prefix: str = "",
        request_timeout_ms: int = 40000,
        max_records: int = 500,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._bootstrap_servers = bootstrap_servers
        self._metrics = metrics
        self._topic_prefix = topic_prefix
        self._request_timeout_ms = request_timeout_ms
        self._max_records = max_records
        self._logger = logger or structlog.get_logger(__name__)

    @asynccontextmanager
    async def subscribe(self, consumer_name: str, topics: Sequence[str]) -> AsyncIterator[KafkaSubscription]:
        topic_names = [f"{self._topic_prefix}{topic}" for topic in topics]
        try:
            partitions = await self._describe_partitions(consumer_name, topic_names)
        except KafkaError as exc:
            raise BusError(f"Failed to subscribe '{consumer_name}' to {topic_names}: {exc}") from exc

        consumer = AIOKafkaConsumer(
            bootstrap_servers=self._bootstrap_servers,
            group_id=consumer_name,
            client_id=consumer_name,
            enable_auto_commit=False,
            auto_offset_reset="latest",
            request_timeout_ms=self._request_timeout_ms,
        )
        try:
            try:
                await consumer.start()
                await self._assign_at_end(consumer, partitions)
            except KafkaError as exc:
                raise BusError(f"Failed to subscribe '{consumer_name}' to {topic_names}: {exc}") from exc

            self._metrics.record_subscription(consumer_name)
            self._logger.info(
                "Subscription opened",
                consumer=consumer_name,
                topics=topic_names,
                partitions=len(partitions),
            )
            yield KafkaSubscription(consumer, self._metrics, self._max_records)
        finally:
            await consumer.stop()
            self._logger.debug("Subscription closed", consumer=consumer_name, topics=topic_names)

    async def _describe_partitions(self, consumer_name: str, topic_names: list[str]) -> list[TopicPartition]:
        admin = AIOKafkaAdminClient(
            bootstrap_servers=self._bootstrap_servers,
            client_id=consumer_name,
            request_timeout_ms=self._request_timeout_ms,
        )
        try:
            await admin.start()
            existing = set(await admin.list_topics())
            missing = [topic for topic in topic_names if topic not in existing]
            if missing:
                raise BusError(f"Topic(s) {missing} do not exist on {self._bootstrap_servers}")
            described = await admin.describe_topics(topic_names)
        finally:
            await admin.close()

        # describe_topics returns a list of topic metadata dicts
        partition_ids: dict[str, list[int]] = {}
        for topic_meta in described:
            ids = [p["partition"] for p in topic_meta.get("partitions", []) if p.get("partition") is not None]
            partition_ids[topic_meta["topic"]] = sorted(ids)

        partitions: list[TopicPartition] = []
        for topic in topic_names:
            ids = partition_ids.get(topic)
            if not ids:
                raise BusError(f"Topic '{topic}' has no partitions on {self._bootstrap_servers}")
            partitions.extend(TopicPartition(topic, p) for p in ids)
        return partitions

    async def _assign_at_end(self, consumer: AIOKafkaConsumer, partitions: list[TopicPartition]) -> None:
        consumer.assign(partitions)
        await consumer.seek_to_end(*partitions)
        # Resolve the end offsets now so the position is fixed before the action runs
        for tp in partitions:
            await consumer.position(tp)
