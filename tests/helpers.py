import asyncio
import itertools
from dataclasses import dataclass, field
from typing import Any

from ipfs_pin_store.backends import IdentifierGenerator
from ipfs_pin_store.errors import AuthError, NotFoundError
from ipfs_pin_store.provider_config import ProviderConfig
from ipfs_pin_store.update_orchestrator import UpdateOrchestrator, default_orchestrator

PINATA_API = "https://api.pinata.cloud"
PINATA_GATEWAY = "https://gateway.pinata.cloud"
INFURA_API = "https://ipfs.infura.io:5001/api/v0"
INFURA_GATEWAY = "https://ipfs.io"

STUB_CONFIG = ProviderConfig(
    name="stub",
    api_base_url="https://stub.invalid/api",
    gateway_url="https://stub.invalid",
    credential_slot="stub_token",
)


def make_sequential_ids(prefix: str = "id") -> IdentifierGenerator:
    """Return a generator producing `id-0`, `id-1`, ..."""
    counter = itertools.count()

    def generate() -> str:
        return f"{prefix}-{next(counter)}"

    return generate


@dataclass
class StubBackend:
    """In-memory backend that behaves like a pinning service and records every call.

    Addresses are handed out from `addresses` in order. `put_error` / `delete_error` make the
    corresponding call raise; `delete_gate` makes delete wait until the event is set.
    """

    credential: str | None = "token-123"
    addresses: list[str] = field(default_factory=lambda: ["cidA", "cidB", "cidC", "cidD"])
    put_error: Exception | None = None
    delete_error: Exception | None = None
    delete_result: bool = True
    delete_gate: asyncio.Event | None = None
    config: ProviderConfig = STUB_CONFIG
    orchestrator: UpdateOrchestrator = default_orchestrator

    pinned: dict[str, str] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._address_iter = iter(self.addresses)

    @property
    def has_credential(self) -> bool:
        return bool(self.credential)

    async def put(self, content: str) -> str:
        if not self.has_credential:
            raise AuthError("stub credential not found", provider="stub")
        self.calls.append(("put", content))
        if self.put_error is not None:
            raise self.put_error
        address = next(self._address_iter)
        self.pinned[address] = content
        return address

    async def get(self, address: str) -> Any:
        self.calls.append(("get", address))
        if address not in self.pinned:
            raise NotFoundError(f"{address} not found", provider="stub", status_code=404)
        return self.pinned[address]

    async def delete(self, address: str) -> bool:
        if not self.has_credential:
            raise AuthError("stub credential not found", provider="stub")
        self.calls.append(("delete", address))
        if self.delete_gate is not None:
            await self.delete_gate.wait()
        if self.delete_error is not None:
            raise self.delete_error
        self.pinned.pop(address, None)
        return self.delete_result

    async def update(self, address: str, content: str) -> str:
        return await self.orchestrator.replace(self, address, content)
