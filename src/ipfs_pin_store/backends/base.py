"""The storage contract every pinning backend satisfies."""

from __future__ import annotations

import uuid
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from ipfs_pin_store.provider_config import ProviderConfig
from ipfs_pin_store.update_orchestrator import UpdateOrchestrator

IdentifierGenerator = Callable[[], str]
"""Produces the unique per-upload name suffix sent to a provider."""


def random_identifier() -> str:
    """Default `IdentifierGenerator`: 12 random hex characters."""
    return uuid.uuid4().hex[:12]


@runtime_checkable
class StorageBackend(Protocol):
    """CRUD over IPFS content addresses for a single provider.

    Implementations are plain value objects closed over a `ProviderConfig` and a credential.
    They do not share state and do not inherit from one another; anything common lives in
    `ipfs_pin_store.backends.http_common`.

    Contract:
    - Mutating operations (`put`, `delete`, `update`) raise `AuthError` without sending a
      request when `has_credential` is False.
    - `get` needs no credential.
    - Non-2xx answers are raised as typed errors, never returned as empty or falsy values.
    - Nothing is retried. Timeouts raise `RequestTimeoutError`.

    Example implementation:
        @dataclass(frozen=True)
        class MyBackend:
            config: ProviderConfig
            credential: str | None = None
            orchestrator: UpdateOrchestrator = default_orchestrator

            @property
            def has_credential(self) -> bool:
                return bool(self.credential)

            async def put(self, content: str) -> str: ...
            async def get(self, address: str) -> Any: ...
            async def delete(self, address: str) -> bool: ...

            async def update(self, address: str, content: str) -> str:
                return await self.orchestrator.replace(self, address, content)
    """

    @property
    def config(self) -> ProviderConfig:
        """The provider this backend talks to."""
        ...

    @property
    def orchestrator(self) -> UpdateOrchestrator:
        """Runs `update`. Backends sharing one reject concurrent updates of the same address."""
        ...

    @property
    def has_credential(self) -> bool:
        """Whether a non-empty credential is available for mutating operations."""
        ...

    async def put(self, content: str) -> str:
        """Pin `content` and return its new content address.

        Raises:
            AuthError: No credential is configured.
            UploadError: The provider did not answer 2xx or the response lacks an address.
        """
        ...

    async def get(self, address: str) -> Any:
        """Read the content at `address` through the gateway.

        The JSON-decoded body is returned as is. For content stored with `put` that is the
        original string.

        Raises:
            NotFoundError: The gateway answered 404.
            FetchError: Any other non-2xx answer, or a body that is not JSON.
        """
        ...

    async def delete(self, address: str) -> bool:
        """Unpin `address`. Returns True once the provider confirmed it.

        Raises:
            AuthError: No credential is configured.
            DeleteError: The provider did not answer 2xx.
        """
        ...

    async def update(self, address: str, content: str) -> str:
        """Replace the content at `address` with `content`, returning the new address.

        Runs through the `UpdateOrchestrator` the backend was built with, so updates sharing an
        orchestrator see each other's in-flight addresses. See
        `ipfs_pin_store.update_orchestrator.UpdateOrchestrator.replace`.
        """
        ...
