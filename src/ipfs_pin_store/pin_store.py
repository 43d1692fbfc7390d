"""Caller-facing API: content CRUD through the active backend, plus credential and pointer management."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import httpx
from loguru import logger

from ipfs_pin_store import PROVIDER_NAME, IpfsPinStoreSettings, ipfs_pin_store_settings
from ipfs_pin_store.backend_selector import select_backend
from ipfs_pin_store.backends import IdentifierGenerator, StorageBackend, random_identifier
from ipfs_pin_store.provider_config import PROVIDER_CONFIGS, ProviderConfig, build_provider_configs
from ipfs_pin_store.state import CredentialStore, KeyValueStore, StoredPointer, create_key_value_store
from ipfs_pin_store.update_orchestrator import UpdateOrchestrator, default_orchestrator


class PinStore:
    """Stores content on IPFS through whichever provider has a credential.

    The backend is chosen again on every call from the credentials currently persisted, so
    `set_credential` takes effect immediately. Nothing is persisted implicitly: after a
    successful `put_content` or `update_content` the caller decides whether to record the new
    address with `commit_pointer`.

    Example:
        ```python
        store = PinStore(InMemoryKeyValueStore())
        await store.set_credential("pinata", "<jwt>")
        address = await store.put_content("hello")
        await store.commit_pointer(address)
        ```
    """

    def __init__(
        self,
        key_value_store: KeyValueStore | None = None,
        *,
        settings: IpfsPinStoreSettings = ipfs_pin_store_settings,
        id_generator: IdentifierGenerator = random_identifier,
        httpx_client: httpx.AsyncClient | None = None,
        orchestrator: UpdateOrchestrator = default_orchestrator,
    ) -> None:
        """Initialize the store.

        Args:
            key_value_store: Where credentials and the pointer are persisted. Defaults to the
                store selected by `settings.state_backend`.
            settings: Settings for provider priority, gateways and timeouts.
            id_generator: Generator for per-upload names, injectable for deterministic tests.
            httpx_client: Optional client shared by all requests. It is not closed by this class.
            orchestrator: Orchestrator handed to every backend this store selects. Updates of the
                same address through one orchestrator are rejected while one is in flight.
        """
        self._settings = settings
        self._provider_configs: dict[PROVIDER_NAME, ProviderConfig] = (
            PROVIDER_CONFIGS if settings is ipfs_pin_store_settings else build_provider_configs(settings)
        )
        self._credential_store = CredentialStore(
            key_value_store if key_value_store is not None else create_key_value_store(settings),
            provider_configs=self._provider_configs,
        )
        self._id_generator = id_generator
        self._httpx_client = httpx_client
        self._orchestrator = orchestrator

    @property
    def credential_store(self) -> CredentialStore:
        return self._credential_store

    async def backend(self) -> StorageBackend:
        """Return the backend selected from the credentials currently stored."""
        credentials = await self._credential_store.get_credentials()
        return select_backend(
            credentials,
            priority=self._settings.provider_priority,
            public_gateway_url=self._settings.public_gateway_url,
            provider_configs=self._provider_configs,
            id_generator=self._id_generator,
            httpx_client=self._httpx_client,
            timeout_seconds=self._settings.request_timeout_seconds,
            orchestrator=self._orchestrator,
        )

    async def active_provider(self) -> str | None:
        """Name of the provider mutating calls would use, or None if none is configured."""
        backend = await self.backend()
        return backend.config.name if backend.has_credential else None

    async def put_content(self, content: str) -> str:
        backend = await self.backend()
        return await backend.put(content)

    async def get_content(self, address: str) -> Any:
        backend = await self.backend()
        return await backend.get(address)

    async def update_content(self, address: str, content: str) -> str:
        """Replace the content at `address`, returning the new address.

        Raises:
            AuthError: No credential is stored.
            UpdateInProgressError: `address` is already being updated.
            DeleteError: The old content could not be unpinned; nothing changed.
            UpdateInconsistentError: The old content was unpinned but the new content could not
                be pinned. The committed pointer, if it named `address`, now names lost content.
        """
        backend = await self.backend()
        return await backend.update(address, content)

    async def delete_content(self, address: str) -> bool:
        backend = await self.backend()
        return await backend.delete(address)

    async def set_credential(self, provider: PROVIDER_NAME | str, value: str) -> None:
        await self._credential_store.set_credential(provider, value)

    async def clear_credential(self, provider: PROVIDER_NAME | str) -> None:
        await self._credential_store.clear_credential(provider)

    async def get_credentials(self) -> dict[PROVIDER_NAME, str | None]:
        return await self._credential_store.get_credentials()

    async def commit_pointer(self, address: str) -> StoredPointer:
        """Persist `address` as the current content of the pointer."""
        pointer = StoredPointer(current_address=address, last_modified=datetime.now(UTC))
        await self._credential_store.set_pointer(pointer)
        logger.info(f"Pointer now at {address}")
        return pointer

    async def get_pointer(self) -> StoredPointer | None:
        return await self._credential_store.get_pointer()

    async def get_persisted_state(self) -> dict[str, Any]:
        return await self._credential_store.get_persisted_state()

    async def clear_state(self) -> None:
        """Remove every stored credential and the pointer. Pinned content is left alone."""
        await self._credential_store.clear()
