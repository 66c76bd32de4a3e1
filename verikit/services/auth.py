import asyncio
import time
from dataclasses import dataclass
from typing import AsyncGenerator, Protocol, runtime_checkable

import httpx
import structlog

from verikit.core.exceptions import AuthenticationError
from verikit.settings import Settings


@runtime_checkable
class TokenProvider(Protocol):
    async def provide_access_token(self) -> str | None:
        """Return a bearer token, or ``None`` to send the request unauthenticated."""
        ...


class NoTokenProvider:
    async def provide_access_token(self) -> str | None:
        return None


class StaticTokenProvider:
    def __init__(self, token: str) -> None:
        self._token = token

    async def provide_access_token(self) -> str | None:
        return self._token


class OpenIdTokenProvider:
    """Client-credentials token source for an OpenID Connect realm.

    The token endpoint is discovered from the issuer's well-known
    configuration on first use. Tokens are cached and refreshed
    ``refresh_before`` seconds ahead of expiry; concurrent callers share one
    refresh.
    """

    def __init__(
        self,
        issuer_url: str,
        client_id: str,
        client_secret: str,
        *,
        refresh_before: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self.issuer_url = issuer_url.rstrip("/")
        self.client_id = client_id
        self._client_secret = client_secret
        self._refresh_before = refresh_before
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=30.0)
        self._logger = logger or structlog.get_logger(__name__)
        self._lock = asyncio.Lock()
        self._token_endpoint: str | None = None
        self._access_token: str | None = None
        self._expires_at = 0.0

    async def provide_access_token(self) -> str | None:
        async with self._lock:
            if self._access_token is None or time.monotonic() >= self._expires_at - self._refresh_before:
                await self._refresh()
            return self._access_token

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def _refresh(self) -> None:
        endpoint = await self._discover_token_endpoint()
        try:
            response = await self._http.post(
                endpoint,
                data={"grant_type": "client_credentials"},
                auth=(self.client_id, self._client_secret),
            )
        except httpx.HTTPError as exc:
            raise AuthenticationError(f"Token request for '{self.client_id}' failed: {exc}") from exc
        if response.status_code != 200:
            raise AuthenticationError(
                f"Token endpoint rejected '{self.client_id}': {response.status_code} {response.text}"
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise AuthenticationError(f"Token response for '{self.client_id}' is not JSON") from exc
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not isinstance(token, str):
            raise AuthenticationError(f"Token response for '{self.client_id}' has no access_token")
        expires_in = float(payload.get("expires_in", 60))

        self._access_token = token
        self._expires_at = time.monotonic() + expires_in
        self._logger.debug("Access token refreshed", client_id=self.client_id, expires_in=expires_in)

    async def _discover_token_endpoint(self) -> str:
        if self._token_endpoint is not None:
            return self._token_endpoint

        url = f"{self.issuer_url}/.well-known/openid-configuration"
        try:
            response = await self._http.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise AuthenticationError(f"OIDC discovery at {url} failed: {exc}") from exc

        try:
            document = response.json()
        except ValueError as exc:
            raise AuthenticationError(f"OIDC discovery at {url} returned invalid JSON") from exc
        endpoint = document.get("token_endpoint") if isinstance(document, dict) else None
        if not isinstance(endpoint, str):
            raise AuthenticationError(f"OIDC discovery at {url} returned no token_endpoint")
        self._token_endpoint = endpoint
        return endpoint


class BearerTokenAuth(httpx.Auth):
    """Injects a token from a ``TokenProvider`` as an ``Authorization: Bearer`` header."""

    def __init__(self, provider: TokenProvider) -> None:
        self._provider = provider

    async def async_auth_flow(self, request: httpx.Request) -> AsyncGenerator[httpx.Request, httpx.Response]:
        token = await self._provider.provide_access_token()
        if token is not None:
            request.headers["Authorization"] = f"Bearer {token}"
        yield request


@dataclass(frozen=True)
class ProviderContext:
    """Token sources for the two test identities."""

    provider_user: TokenProvider
    provider_manager: TokenProvider

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> "ProviderContext":
        if settings.AUTH_DISABLED:
            return cls(provider_user=NoTokenProvider(), provider_manager=NoTokenProvider())

        def _provider(client_id: str) -> OpenIdTokenProvider:
            return OpenIdTokenProvider(
                settings.SSO_ENDPOINT,
                client_id,
                settings.SSO_TESTING_CLIENT_SECRET,
                refresh_before=settings.TOKEN_REFRESH_BEFORE_SECONDS,
                logger=logger,
            )

        return cls(
            provider_user=_provider(settings.SSO_USER_CLIENT_ID),
            provider_manager=_provider(settings.SSO_MANAGER_CLIENT_ID),
        )

    async def aclose(self) -> None:
        for provider in (self.provider_user, self.provider_manager):
            if isinstance(provider, OpenIdTokenProvider):
                await provider.aclose()


@dataclass(frozen=True)
class AuthenticatorConfig:
    """OIDC clients a service under test must accept from the test realm."""

    issuer_url: str
    client_ids: tuple[str, ...]
    disabled: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthenticatorConfig":
        return cls(
            issuer_url=settings.SSO_ENDPOINT,
            client_ids=(
                settings.SSO_FRONTEND_CLIENT_ID,
                settings.SSO_USER_CLIENT_ID,
                settings.SSO_MANAGER_CLIENT_ID,
            ),
            disabled=settings.AUTH_DISABLED,
        )

    def accepts(self, client_id: str) -> bool:
        return self.disabled or client_id in self.client_ids


@dataclass(frozen=True)
class SwaggerUiOidcConfig:
    """Login settings for a service's interactive API docs."""

    issuer_url: str
    client_id: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "SwaggerUiOidcConfig":
        return cls(issuer_url=settings.SSO_ENDPOINT, client_id=settings.SSO_FRONTEND_CLIENT_ID)
