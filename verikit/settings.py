import tomllib
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from verikit.core.urls import ServiceEndpoint


class Settings(BaseModel):
    """Harness settings loaded from TOML configuration files.

    All config is read from TOML: no environment variables, no .env files.

    Load order (each layer overrides the previous):
        1. config_path    : base settings (committed to git)
        2. secrets_path   : sensitive overrides (gitignored, e.g. the SSO client secret)
        3. override_path  : per-environment overrides (CI realm, remote broker, etc.)

    Usage:
        Settings()                                        # config.toml + secrets
        Settings(config_path="config.test.toml")          # test config (has own secrets)
        Settings(override_path="config.ci.toml")          # base + secrets + CI
    """

    model_config = ConfigDict(extra="forbid")

    def __init__(
        self,
        config_path: str = "config.toml",
        override_path: str | None = None,
        secrets_path: str = "secrets.toml",
    ) -> None:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        if Path(secrets_path).is_file():
            with open(secrets_path, "rb") as f:
                data |= tomllib.load(f)
        if override_path:
            with open(override_path, "rb") as f:
                data |= tomllib.load(f)
        super().__init__(**data)

    PROJECT_NAME: str = "verikit"

    # OIDC test realm
    SSO_ENDPOINT: str = "http://localhost:8090/realms/chicken"
    SSO_TESTING_CLIENT_SECRET: str = Field(
        ...,
        min_length=1,
        description="Static client secret shared by the testing-user and testing-manager clients.",
    )
    SSO_USER_CLIENT_ID: str = "testing-user"
    SSO_MANAGER_CLIENT_ID: str = "testing-manager"
    SSO_FRONTEND_CLIENT_ID: str = "frontend"
    AUTH_DISABLED: bool = False
    TOKEN_REFRESH_BEFORE_SECONDS: float = Field(default=30.0, ge=0.0)

    # Object storage
    STORAGE_ENDPOINT: str = "http://localhost:9000"

    # Event bus
    EVENT_BUS_TYPE: Literal["kafka"] = "kafka"
    KAFKA_BOOTSTRAP_SERVERS: str = "localhost:9092"
    KAFKA_TOPIC_PREFIX: str = ""
    KAFKA_REQUEST_TIMEOUT_MS: int = 40000

    # Event correlation
    TEST_CONSUMER_NAME: str = "test-client"
    EVENT_POLL_INTERVAL_SECONDS: float = Field(default=1.0, gt=0.0)
    EVENT_RECEIVE_TIMEOUT_SECONDS: float = Field(default=0.0, ge=0.0)  # 0 = non-blocking poll
    EVENT_WAIT_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0.0)

    # HTTP
    HTTP_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0.0)
    SERVICE_URLS: dict[str, str] = Field(default_factory=dict)

    # Logging configuration
    LOG_LEVEL: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    LOG_JSON: bool = True

    def endpoint(self, name: str) -> ServiceEndpoint:
        """Return the configured service endpoint called ``name``.

        ``"storage"`` resolves to ``STORAGE_ENDPOINT`` unless ``SERVICE_URLS`` overrides it.
        """
        urls = {"storage": self.STORAGE_ENDPOINT} | self.SERVICE_URLS
        try:
            return ServiceEndpoint(urls[name])
        except KeyError:
            raise KeyError(f"No service URL configured for '{name}'") from None
