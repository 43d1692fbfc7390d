"""The host key-value store that persists credentials and the content pointer."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal persistent string mapping, scoped to one installed instance.

    Each operation is atomic for a single key. There are no multi-key transactions; every
    credential is stored under its own key. Failures are raised to the caller unchanged.
    """

    async def get(self, key: str) -> str | None:
        """Return the value stored under `key`, or None."""
        ...

    async def set(self, key: str, value: str) -> None:
        """Store `value` under `key`, replacing any previous value."""
        ...

    async def delete(self, key: str) -> None:
        """Remove `key`. Missing keys are ignored."""
        ...

    async def clear(self) -> None:
        """Remove every key of this instance."""
        ...
