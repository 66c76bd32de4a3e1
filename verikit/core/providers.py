from typing import AsyncIterator

import structlog
from dishka import Provider, Scope, provide
from prometheus_client import CollectorRegistry

from verikit.core.logging import setup_logger
from verikit.events.bus import EventBus
from verikit.events.config import EventBusConfig
from verikit.events.waiter import EventCorrelationWaiter
from verikit.services.auth import AuthenticatorConfig, ProviderContext
from verikit.services.http_assert import AuthenticatedHttpAsserter
from verikit.settings import Settings


class SettingsProvider(Provider):
    scope = Scope.APP

    def __init__(self, settings: Settings) -> None:
        super().__init__()
        self._settings = settings

    @provide
    def get_settings(self) -> Settings:
        return self._settings


class LoggingProvider(Provider):
    scope = Scope.APP

    @provide
    def get_logger(self, settings: Settings) -> structlog.stdlib.BoundLogger:
        return setup_logger(settings.LOG_LEVEL, json_output=settings.LOG_JSON, project_name=settings.PROJECT_NAME)


class MetricsProvider(Provider):
    scope = Scope.APP

    @provide
    def get_registry(self) -> CollectorRegistry:
        return CollectorRegistry()


class EventBusProvider(Provider):
    scope = Scope.APP

    @provide
    def get_event_bus_config(self, settings: Settings) -> EventBusConfig:
        return EventBusConfig.from_settings(settings)

    @provide
    def get_event_bus(
            self,
            config: EventBusConfig,
            registry: CollectorRegistry,
            logger: structlog.stdlib.BoundLogger,
    ) -> EventBus:
        return config.create(registry, logger=logger)

    @provide
    def get_event_waiter(
            self,
            bus: EventBus,
            settings: Settings,
            logger: structlog.stdlib.BoundLogger,
    ) -> EventCorrelationWaiter:
        return EventCorrelationWaiter(
            bus,
            consumer_name=settings.TEST_CONSUMER_NAME,
            default_timeout=settings.EVENT_WAIT_TIMEOUT_SECONDS,
            poll_interval=settings.EVENT_POLL_INTERVAL_SECONDS,
            receive_timeout=settings.EVENT_RECEIVE_TIMEOUT_SECONDS,
            logger=logger,
        )


class AuthProvider(Provider):
    scope = Scope.APP

    @provide
    def get_authenticator_config(self, settings: Settings) -> AuthenticatorConfig:
        return AuthenticatorConfig.from_settings(settings)

    @provide
    async def get_provider_context(
            self,
            settings: Settings,
            logger: structlog.stdlib.BoundLogger,
    ) -> AsyncIterator[ProviderContext]:
        context = ProviderContext.from_settings(settings, logger=logger)
        yield context
        await context.aclose()

    @provide
    def get_http_asserter(
            self,
            context: ProviderContext,
            settings: Settings,
            logger: structlog.stdlib.BoundLogger,
    ) -> AuthenticatedHttpAsserter:
        return AuthenticatedHttpAsserter(
            context.provider_manager,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
            logger=logger,
        )
