"""Read-only backend for a public IPFS gateway."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

from ipfs_pin_store import ipfs_pin_store_settings
from ipfs_pin_store.backends.http_common import gateway_get
from ipfs_pin_store.errors import AuthError
from ipfs_pin_store.provider_config import ProviderConfig
from ipfs_pin_store.update_orchestrator import UpdateOrchestrator, default_orchestrator


@dataclass(frozen=True)
class GatewayBackend:
    """Serves reads from a gateway. Every mutating call raises `AuthError` without a request."""

    config: ProviderConfig
    httpx_client: httpx.AsyncClient | None = field(default=None, repr=False, compare=False)
    timeout_seconds: float = ipfs_pin_store_settings.request_timeout_seconds
    orchestrator: UpdateOrchestrator = field(default=default_orchestrator, repr=False, compare=False)

    @property
    def has_credential(self) -> bool:
        return False

    async def put(self, content: str) -> str:
        raise AuthError(f"{self.config.name} is a read-only gateway, cannot put", provider=self.config.name)

    async def get(self, address: str) -> Any:
        return await gateway_get(
            self.config,
            address,
            httpx_client=self.httpx_client,
            timeout_seconds=self.timeout_seconds,
        )

    async def delete(self, address: str) -> bool:
        raise AuthError(f"{self.config.name} is a read-only gateway, cannot delete", provider=self.config.name)

    async def update(self, address: str, content: str) -> str:
        return await self.orchestrator.replace(self, address, content)
