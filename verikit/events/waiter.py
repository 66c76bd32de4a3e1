import asyncio
import inspect
from typing import Any, Awaitable, Callable

import structlog
from prometheus_client import CollectorRegistry

from verikit.core.timeout import run_with_timeout
from verikit.events.bus import EventBus, Subscription
from verikit.events.config import EventBusConfig
from verikit.events.keys import DEFAULT_KEY_EXTRACTOR, EventKeyExtractor

TEST_CONSUMER_NAME = "test-client"
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_WAIT_TIMEOUT = 30.0

Action = Callable[[], Awaitable[Any]] | Awaitable[Any]


class EventCorrelationWaiter:
    """Waits for a bus event whose key ends with a correlation id.

    Every ``wait`` opens its own subscription before the triggering action
    runs, so events the action publishes right away cannot slip past. The
    action and the polling loop share a single deadline.
    """

    def __init__(
        self,
        bus: EventBus,
        *,
        consumer_name: str = TEST_CONSUMER_NAME,
        default_timeout: float = DEFAULT_WAIT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        receive_timeout: float = 0.0,
        extractor: EventKeyExtractor = DEFAULT_KEY_EXTRACTOR,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._bus = bus
        self._consumer_name = consumer_name
        self._default_timeout = default_timeout
        self._poll_interval = poll_interval
        self._receive_timeout = receive_timeout
        self._extractor = extractor
        self._logger = logger or structlog.get_logger(__name__)

    @property
    def default_timeout(self) -> float:
        return self._default_timeout

    async def wait(self, timeout: float | None, topic: str, correlation_id: str, action: Action) -> str:
        """Run ``action`` and return the key of the first event on ``topic`` correlated to it.

        ``timeout=None`` uses the waiter's default timeout.

        Raises:
            TimedOut: no matching event arrived within ``timeout`` seconds.
            MalformedEvent: a message on the topic could not be decoded.
        """
        if timeout is None:
            timeout = self._default_timeout
        with structlog.contextvars.bound_contextvars(topic=topic, correlation_id=correlation_id):
            try:
                async with self._bus.subscribe(self._consumer_name, [topic]) as subscription:
                    key = await run_with_timeout(timeout, self._run_and_poll(subscription, correlation_id, action))
            except BaseException:
                # An action passed as a coroutine object may never have been awaited
                if inspect.iscoroutine(action):
                    action.close()
                raise
            self._logger.info("Correlated event received", key=key)
            return key

    async def _run_and_poll(self, subscription: Subscription, correlation_id: str, action: Action) -> str:
        await (action() if callable(action) else action)

        skipped = 0
        while True:
            message = await subscription.next(timeout=self._receive_timeout)
            if message is None:
                await asyncio.sleep(self._poll_interval)
                continue

            key = self._extractor.extract(message.payload())
            if key.endswith(correlation_id):
                return key
            skipped += 1
            self._logger.debug("Skipping uncorrelated event", key=key, skipped=skipped)


async def wait_for_event(
    timeout: float,
    events: EventBusConfig,
    topic: str,
    correlation_id: str,
    action: Action,
    *,
    registry: CollectorRegistry | None = None,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> str:
    """One-shot form of ``EventCorrelationWaiter.wait`` that builds the bus from ``events``."""
    bus = events.create(registry if registry is not None else CollectorRegistry())
    waiter = EventCorrelationWaiter(bus, poll_interval=poll_interval)
    return await waiter.wait(timeout, topic, correlation_id, action)
