import os
import sys
from collections.abc import Generator

# Clear settings overrides BEFORE importing the package so the settings singleton sees defaults
_IPFS_PIN_STORE_ENV_PREFIX = "IPFS_PIN_STORE_"
for _var_name in [name for name in os.environ if name.startswith(_IPFS_PIN_STORE_ENV_PREFIX)]:
    del os.environ[_var_name]

import pytest
from loguru import logger
from pytest import LogCaptureFixture

from ipfs_pin_store import PROVIDER_NAME, ipfs_pin_store_settings
from ipfs_pin_store.backends import IdentifierGenerator, PinataBackend
from ipfs_pin_store.logging_config import PACKAGE_LOGGER_NAME
from ipfs_pin_store.pin_store import PinStore
from ipfs_pin_store.provider_config import get_provider_config
from ipfs_pin_store.state import CredentialStore, InMemoryKeyValueStore
from ipfs_pin_store.update_orchestrator import UpdateOrchestrator
from tests.helpers import make_sequential_ids


@pytest.fixture(scope="session", autouse=True)
def env_var_checks() -> None:
    """Make sure no IPFS_PIN_STORE_ variable leaked into the settings singleton."""
    remaining = [name for name in os.environ if name.startswith(_IPFS_PIN_STORE_ENV_PREFIX)]
    if remaining:
        pytest.fail(f"Environment variables would change settings defaults: {remaining}")

    assert ipfs_pin_store_settings.public_gateway_url is None
    assert ipfs_pin_store_settings.provider_priority == [PROVIDER_NAME.pinata, PROVIDER_NAME.infura]


@pytest.fixture
def caplog(caplog: LogCaptureFixture) -> Generator[LogCaptureFixture, None, None]:
    """Fixture to capture log messages during tests.

    See https://loguru.readthedocs.io/en/stable/resources/migration.html#migration-caplog for more information.
    """
    handler_id = logger.add(caplog.handler, format="{message}", level="DEBUG")
    yield caplog
    logger.remove(handler_id)


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Set up logging for tests."""
    logger.remove()
    logger.enable(PACKAGE_LOGGER_NAME)
    logger.add(
        sys.stderr,
        format="{time:YYYY-MM-DD HH:mm:ss} | {name}:{function}:{line} | {level} | {message}",
        level="DEBUG",
    )


@pytest.fixture
def sequential_ids() -> IdentifierGenerator:
    return make_sequential_ids()


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def credential_store(kv_store: InMemoryKeyValueStore) -> CredentialStore:
    return CredentialStore(kv_store)


@pytest.fixture
def orchestrator() -> UpdateOrchestrator:
    return UpdateOrchestrator()


@pytest.fixture
def pinata_backend(sequential_ids: IdentifierGenerator) -> PinataBackend:
    return PinataBackend(
        config=get_provider_config(PROVIDER_NAME.pinata),
        credential="token-123",
        id_generator=sequential_ids,
    )


@pytest.fixture
def pin_store(
    kv_store: InMemoryKeyValueStore,
    sequential_ids: IdentifierGenerator,
    orchestrator: UpdateOrchestrator,
) -> PinStore:
    return PinStore(kv_store, id_generator=sequential_ids, orchestrator=orchestrator)
