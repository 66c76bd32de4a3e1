from dishka import AsyncContainer, make_async_container

from verikit.core.providers import (
    AuthProvider,
    EventBusProvider,
    LoggingProvider,
    MetricsProvider,
    SettingsProvider,
)
from verikit.settings import Settings


def create_harness_container(settings: Settings) -> AsyncContainer:
    """
    Create the harness DI container.
    """
    return make_async_container(
        SettingsProvider(settings),
        LoggingProvider(),
        MetricsProvider(),
        EventBusProvider(),
        AuthProvider(),
    )
