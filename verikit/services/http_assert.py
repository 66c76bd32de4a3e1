from typing import Any

import httpx
import structlog

from verikit.core.exceptions import MalformedBody, StatusMismatch, TimedOut
from verikit.services.auth import BearerTokenAuth, ProviderContext, TokenProvider

# Error statuses for which the body is not inspected
NO_BODY_STATUSES: frozenset[int] = frozenset({httpx.codes.BAD_REQUEST, httpx.codes.NOT_FOUND})


class AuthenticatedHttpAsserter:
    """Issues authenticated GETs and asserts on status and body shape.

    Each call opens a fresh client: no connection reuse, no retry, no cache.
    """

    def __init__(
        self,
        provider: TokenProvider,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._auth = BearerTokenAuth(provider)
        self._timeout = timeout
        self._transport = transport
        self._logger = logger or structlog.get_logger(__name__)

    async def get(self, url: httpx.URL | str, expected_status: int) -> Any | None:
        """GET ``url``, assert the status, and return the JSON body.

        Returns ``None`` for the no-body statuses (400, 404) even when the
        server sends a body. Any other expected status requires a JSON body.

        Raises:
            TimedOut: no response within the client timeout.
            StatusMismatch: observed status differs from ``expected_status``.
            MalformedBody: the body is not valid JSON.
        """
        async with httpx.AsyncClient(auth=self._auth, timeout=self._timeout, transport=self._transport) as client:
            try:
                response = await client.get(url)
            except httpx.TimeoutException as exc:
                raise TimedOut(self._timeout) from exc

        self._logger.debug("GET completed", url=str(url), status=response.status_code)
        if response.status_code != expected_status:
            raise StatusMismatch(int(expected_status), response.status_code, str(url))
        if expected_status in NO_BODY_STATUSES:
            return None

        try:
            return response.json()
        except ValueError as exc:
            raise MalformedBody(str(url), str(exc)) from exc


async def get_response(
    url: httpx.URL | str,
    expected_status: int,
    context: ProviderContext,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any | None:
    """Authenticated GET as the testing manager; see ``AuthenticatedHttpAsserter.get``."""
    asserter = AuthenticatedHttpAsserter(context.provider_manager, transport=transport)
    return await asserter.get(url, expected_status)
