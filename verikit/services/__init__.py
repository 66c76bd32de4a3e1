from verikit.services.auth import (
    AuthenticatorConfig,
    BearerTokenAuth,
    NoTokenProvider,
    OpenIdTokenProvider,
    ProviderContext,
    StaticTokenProvider,
    SwaggerUiOidcConfig,
    TokenProvider,
)
from verikit.services.http_assert import NO_BODY_STATUSES, AuthenticatedHttpAsserter, get_response

__all__ = [
    "AuthenticatedHttpAsserter",
    "AuthenticatorConfig",
    "BearerTokenAuth",
    "NO_BODY_STATUSES",
    "NoTokenProvider",
    "OpenIdTokenProvider",
    "ProviderContext",
    "StaticTokenProvider",
    "SwaggerUiOidcConfig",
    "TokenProvider",
    "get_response",
]
