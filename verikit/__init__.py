"""Verification primitives for integration tests of event-driven services."""

from verikit.core.exceptions import (
    AuthenticationError,
    BusError,
    HarnessError,
    MalformedBody,
    MalformedEvent,
    StatusMismatch,
    TimedOut,
    UrlResolutionError,
    VerificationError,
)
from verikit.core.ids import new_id
from verikit.core.timeout import assert_within_timeout, run_with_timeout
from verikit.core.urls import ServiceEndpoint, Urlifier
from verikit.events import EventBusConfig, EventCorrelationWaiter, wait_for_event
from verikit.services import AuthenticatedHttpAsserter, ProviderContext, get_response
from verikit.settings import Settings

__all__ = [
    "AuthenticatedHttpAsserter",
    "AuthenticationError",
    "BusError",
    "EventBusConfig",
    "EventCorrelationWaiter",
    "HarnessError",
    "MalformedBody",
    "MalformedEvent",
    "ProviderContext",
    "ServiceEndpoint",
    "Settings",
    "StatusMismatch",
    "TimedOut",
    "UrlResolutionError",
    "Urlifier",
    "VerificationError",
    "assert_within_timeout",
    "get_response",
    "new_id",
    "run_with_timeout",
    "wait_for_event",
]
