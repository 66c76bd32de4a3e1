from prometheus_client import CollectorRegistry, Counter


class BusMetrics:
    """Counters for bus traffic observed by the harness, bound to one registry."""

    def __init__(self, registry: CollectorRegistry) -> None:
        self.registry = registry
        self.messages_received = Counter(
            "verikit_bus_messages_received_total",
            "Total number of bus messages pulled by harness subscriptions",
            ["topic"],
            registry=registry,
        )
        self.subscriptions_opened = Counter(
            "verikit_bus_subscriptions_total",
            "Total number of bus subscriptions opened by the harness",
            ["consumer"],
            registry=registry,
        )

    def record_message(self, topic: str) -> None:
        self.messages_received.labels(topic=topic).inc()

    def record_subscription(self, consumer: str) -> None:
        self.subscriptions_opened.labels(consumer=consumer).inc()
