from pathlib import Path

import pytest
import structlog
from prometheus_client import CollectorRegistry

from tests.helpers.fakes import FakeEventBus
from verikit.settings import Settings

ROOT = Path(__file__).resolve().parent.parent
TEST_CONFIG = ROOT / "config.test.toml"
# Never present; keeps a developer's local secrets.toml out of unit tests.
NO_SECRETS = ROOT / "tests" / "secrets.none.toml"


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return Settings(config_path=str(TEST_CONFIG), secrets_path=str(NO_SECRETS))


@pytest.fixture
def write_toml(tmp_path: Path):  # type: ignore[no-untyped-def]
    """Write a TOML file under tmp_path and return its path as str."""

    def _write(name: str, body: str) -> str:
        path = tmp_path / name
        path.write_text(body)
        return str(path)

    return _write


@pytest.fixture
def registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
def fake_bus() -> FakeEventBus:
    return FakeEventBus()


@pytest.fixture
def logger() -> structlog.stdlib.BoundLogger:
    return structlog.get_logger("test.verikit")
