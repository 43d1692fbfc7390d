"""Replace-on-write updates on top of a backend's put and delete.

IPFS content cannot change in place: every write produces a new address. An update therefore
unpins the old address and pins the new content, handing the new address back to the caller
who keeps it as the current value of its logical pointer.

The old content is unpinned first. A failed unpin aborts the update with nothing changed. A
failed pin after a successful unpin leaves the pointer with no live content and raises
`UpdateInconsistentError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from loguru import logger

from ipfs_pin_store.errors import (
    AuthError,
    DeleteError,
    UpdateInconsistentError,
    UpdateInProgressError,
)

if TYPE_CHECKING:
    from ipfs_pin_store.backends.base import StorageBackend


class UpdateOrchestrator:
    """Runs delete-then-put updates and rejects concurrent updates of the same address."""

    _in_flight: set[str]

    def __init__(self) -> None:
        self._in_flight = set()

    def is_updating(self, address: str) -> bool:
        """Whether an update of `address` is currently running."""
        return address in self._in_flight

    async def replace(self, backend: StorageBackend, address: str, content: str) -> str:
        """Unpin `address` on `backend`, pin `content` and return the new address.

        Args:
            backend: The backend holding `address`.
            address: The address being replaced.
            content: The new content.

        Returns:
            str: The new content address. The caller is responsible for persisting it.

        Raises:
            AuthError: The backend has no credential. Nothing was sent.
            UpdateInProgressError: `address` is already being updated. Nothing was sent.
            DeleteError: Unpinning the old content failed. The new content was not pinned.
            UpdateInconsistentError: The old content was unpinned but pinning the new content
                failed. No address is live any more.
        """
        if not backend.has_credential:
            raise AuthError(f"{backend.config.name} credential not found", provider=backend.config.name)

        if address in self._in_flight:
            raise UpdateInProgressError(
                f"An update of {address} is already in progress",
                provider=backend.config.name,
            )

        self._in_flight.add(address)
        try:
            return await self._replace(backend, address, content)
        finally:
            self._in_flight.discard(address)

    async def _replace(self, backend: StorageBackend, address: str, content: str) -> str:
        provider = backend.config.name

        try:
            deleted = await backend.delete(address)
        except DeleteError:
            logger.warning(f"Update of {address} on {provider} aborted: unpin failed")
            raise
        except AuthError:
            raise
        except Exception as e:
            logger.warning(f"Update of {address} on {provider} aborted: unpin failed")
            raise DeleteError(
                f"{provider}: could not unpin {address}: {e}",
                provider=provider,
                status_code=getattr(e, "status_code", None),
            ) from e

        if deleted is not True:
            logger.warning(f"Update of {address} on {provider} aborted: unpin was not confirmed")
            raise DeleteError(f"{provider}: unpin of {address} was not confirmed", provider=provider)

        try:
            new_address = await backend.put(content)
        except Exception as e:
            logger.error(f"Update of {address} on {provider} lost content: unpinned but new content was not pinned")
            raise UpdateInconsistentError(
                f"{provider}: {address} was unpinned but the new content could not be pinned",
                deleted_address=address,
                provider=provider,
                status_code=getattr(e, "status_code", None),
            ) from e

        if not new_address:
            raise UpdateInconsistentError(
                f"{provider}: {address} was unpinned but no new address was returned",
                deleted_address=address,
                provider=provider,
            )

        logger.info(f"Replaced {address} with {new_address} on {provider}")
        return new_address


default_orchestrator = UpdateOrchestrator()
"""Orchestrator used by backends that were not given one."""
