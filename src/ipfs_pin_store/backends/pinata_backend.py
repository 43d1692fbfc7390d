"""Backend for the Pinata pinning service (bearer token authentication)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx
from loguru import logger

from ipfs_pin_store import PROVIDER_NAME, ipfs_pin_store_settings
from ipfs_pin_store.backends.base import IdentifierGenerator, random_identifier
from ipfs_pin_store.backends.http_common import client_scope, gateway_get, read_address, require_credential, send
from ipfs_pin_store.errors import DeleteError, UploadError
from ipfs_pin_store.provider_config import ProviderConfig, get_provider_config
from ipfs_pin_store.update_orchestrator import UpdateOrchestrator, default_orchestrator


@dataclass(frozen=True)
class PinataBackend:
    """Pins JSON content with Pinata and reads it back through a gateway.

    - put: `POST {api}/pinning/pinJSONToIPFS` with a uniquely named `pinataMetadata` wrapper
    - delete: `DELETE {api}/pinning/unpin/{address}`
    - get: `GET {gateway}/ipfs/{address}`, no authentication
    """

    config: ProviderConfig = field(default_factory=lambda: get_provider_config(PROVIDER_NAME.pinata))
    credential: str | None = field(default=None, repr=False)
    id_generator: IdentifierGenerator = random_identifier
    httpx_client: httpx.AsyncClient | None = field(default=None, repr=False, compare=False)
    timeout_seconds: float = ipfs_pin_store_settings.request_timeout_seconds
    orchestrator: UpdateOrchestrator = field(default=default_orchestrator, repr=False, compare=False)

    @property
    def has_credential(self) -> bool:
        return self.config.credential_is_usable(self.credential)

    def _headers(self, token: str) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }

    async def put(self, content: str) -> str:
        token = require_credential(self.config, self.credential, "put")
        name = f"{self.config.metadata_name_prefix}{self.id_generator()}"
        body = {
            "pinataMetadata": {"name": name},
            "pinataContent": content,
        }

        async with client_scope(self.httpx_client, self.timeout_seconds) as client:
            response = await send(
                client,
                "POST",
                self.config.upload_url(),
                config=self.config,
                error_cls=UploadError,
                timeout_seconds=self.timeout_seconds,
                headers=self._headers(token),
                json=body,
            )

        address = read_address(response, self.config)
        logger.info(f"Pinned {name} to Pinata as {address}")
        return address

    async def get(self, address: str) -> Any:
        return await gateway_get(
            self.config,
            address,
            httpx_client=self.httpx_client,
            timeout_seconds=self.timeout_seconds,
        )

    async def delete(self, address: str) -> bool:
        token = require_credential(self.config, self.credential, "delete")

        async with client_scope(self.httpx_client, self.timeout_seconds) as client:
            await send(
                client,
                self.config.unpin_method,
                self.config.unpin_url(address),
                config=self.config,
                error_cls=DeleteError,
                timeout_seconds=self.timeout_seconds,
                headers=self._headers(token),
            )

        logger.info(f"Unpinned {address} from Pinata")
        return True

    async def update(self, address: str, content: str) -> str:
        return await self.orchestrator.replace(self, address, content)
