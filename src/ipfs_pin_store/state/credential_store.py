"""Provider credentials and the content pointer, persisted through a `KeyValueStore`."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from ipfs_pin_store import PROVIDER_NAME
from ipfs_pin_store.provider_config import PROVIDER_CONFIGS, ProviderConfig
from ipfs_pin_store.state.key_value_store import KeyValueStore

POINTER_KEY = "pointer"
"""Key holding the serialised `StoredPointer`."""


class StoredPointer(BaseModel):
    """The address currently holding a caller's logical content, and when it was last set."""

    model_config = ConfigDict(frozen=True, use_attribute_docstrings=True)

    current_address: str = Field(min_length=1)
    """The single live content address of the pointer."""

    last_modified: datetime = Field(default_factory=lambda: datetime.now(UTC))
    """When `current_address` was committed."""


class CredentialStore:
    """Reads and writes credentials and the pointer. Does nothing on its own initiative.

    Credentials live under each provider's `credential_slot`. Values are never logged.
    Errors from the underlying store propagate unchanged.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        provider_configs: dict[PROVIDER_NAME, ProviderConfig] | None = None,
    ) -> None:
        self._store = store
        self._provider_configs = provider_configs if provider_configs is not None else PROVIDER_CONFIGS

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def providers(self) -> Iterable[PROVIDER_NAME]:
        return self._provider_configs.keys()

    def _slot(self, provider: PROVIDER_NAME | str) -> str:
        return self._provider_configs[PROVIDER_NAME(provider)].credential_slot

    async def get_credential(self, provider: PROVIDER_NAME | str) -> str | None:
        """Return the credential stored for `provider`, or None if there is none."""
        value = await self._store.get(self._slot(provider))
        return value or None

    async def set_credential(self, provider: PROVIDER_NAME | str, value: str) -> None:
        """Store `value` as the credential of `provider`. A blank value clears it.

        Raises:
            ValueError: `provider` is unknown.
        """
        slot = self._slot(provider)
        if not value.strip():
            await self._store.delete(slot)
            logger.info(f"Cleared credential for {provider}")
            return

        await self._store.set(slot, value.strip())
        logger.info(f"Stored credential for {provider}")

    async def clear_credential(self, provider: PROVIDER_NAME | str) -> None:
        await self._store.delete(self._slot(provider))
        logger.info(f"Cleared credential for {provider}")

    async def get_credentials(self) -> dict[PROVIDER_NAME, str | None]:
        """Return the stored credential of every known provider, None where unset."""
        return {provider: await self.get_credential(provider) for provider in self._provider_configs}

    async def get_pointer(self) -> StoredPointer | None:
        raw = await self._store.get(POINTER_KEY)
        if raw is None:
            return None
        return StoredPointer.model_validate_json(raw)

    async def set_pointer(self, pointer: StoredPointer) -> None:
        await self._store.set(POINTER_KEY, pointer.model_dump_json())
        logger.debug(f"Committed pointer {pointer.current_address}")

    async def clear_pointer(self) -> None:
        await self._store.delete(POINTER_KEY)

    async def get_persisted_state(self) -> dict[str, Any]:
        """Return everything persisted, with credentials reduced to whether they are set."""
        pointer = await self.get_pointer()
        credentials = await self.get_credentials()
        return {
            "credentials": {str(provider): value is not None for provider, value in credentials.items()},
            "pointer": pointer.model_dump(mode="json") if pointer is not None else None,
        }

    async def clear(self) -> None:
        """Remove all credentials and the pointer."""
        await self._store.clear()
        logger.info("Cleared persisted state")
