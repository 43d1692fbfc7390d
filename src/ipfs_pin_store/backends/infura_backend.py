"""Backend for the Infura IPFS API (project id and secret, HTTP basic auth)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import httpx
from loguru import logger

from ipfs_pin_store import PROVIDER_NAME, ipfs_pin_store_settings
from ipfs_pin_store.backends.base import IdentifierGenerator, random_identifier
from ipfs_pin_store.backends.http_common import client_scope, gateway_get, read_address, require_credential, send
from ipfs_pin_store.errors import AuthError, DeleteError, UploadError
from ipfs_pin_store.provider_config import ProviderConfig, get_provider_config, split_key_secret
from ipfs_pin_store.update_orchestrator import UpdateOrchestrator, default_orchestrator


@dataclass(frozen=True)
class InfuraBackend:
    """Adds and pins content through the Infura IPFS HTTP API.

    The credential is `project_id:project_secret`. Content is uploaded as a JSON document so
    the gateway read decodes it back to the original string, as with the Pinata backend.
    """

    config: ProviderConfig = field(default_factory=lambda: get_provider_config(PROVIDER_NAME.infura))
    credential: str | None = field(default=None, repr=False)
    id_generator: IdentifierGenerator = random_identifier
    httpx_client: httpx.AsyncClient | None = field(default=None, repr=False, compare=False)
    timeout_seconds: float = ipfs_pin_store_settings.request_timeout_seconds
    orchestrator: UpdateOrchestrator = field(default=default_orchestrator, repr=False, compare=False)

    @property
    def has_credential(self) -> bool:
        return self.config.credential_is_usable(self.credential)

    def _auth(self, operation: str) -> httpx.BasicAuth:
        credential = require_credential(self.config, self.credential, operation)
        parts = split_key_secret(credential)
        if parts is None:
            raise AuthError(
                f"{self.config.name} credential must be 'project_id:project_secret'",
                provider=self.config.name,
            )
        return httpx.BasicAuth(*parts)

    async def put(self, content: str) -> str:
        auth = self._auth("put")
        filename = f"{self.config.metadata_name_prefix}{self.id_generator()}.json"
        payload = json.dumps(content).encode("utf-8")

        async with client_scope(self.httpx_client, self.timeout_seconds) as client:
            response = await send(
                client,
                "POST",
                self.config.upload_url(),
                config=self.config,
                error_cls=UploadError,
                timeout_seconds=self.timeout_seconds,
                auth=auth,
                files={"file": (filename, payload, "application/json")},
            )

        address = read_address(response, self.config)
        logger.info(f"Added {filename} to Infura as {address}")
        return address

    async def get(self, address: str) -> Any:
        return await gateway_get(
            self.config,
            address,
            httpx_client=self.httpx_client,
            timeout_seconds=self.timeout_seconds,
        )

    async def delete(self, address: str) -> bool:
        auth = self._auth("delete")

        async with client_scope(self.httpx_client, self.timeout_seconds) as client:
            await send(
                client,
                self.config.unpin_method,
                self.config.unpin_url(address),
                config=self.config,
                error_cls=DeleteError,
                timeout_seconds=self.timeout_seconds,
                auth=auth,
            )

        logger.info(f"Unpinned {address} from Infura")
        return True

    async def update(self, address: str, content: str) -> str:
        return await self.orchestrator.replace(self, address, content)
