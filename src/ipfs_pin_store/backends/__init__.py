"""Storage backends for IPFS pinning providers.

Every backend satisfies the `StorageBackend` protocol:

- PinataBackend: bearer token, JSON pinning API
- InfuraBackend: `project_id:project_secret` basic auth, IPFS HTTP API
- GatewayBackend: read-only access to a public gateway

Exactly one backend is active at a time, see `ipfs_pin_store.backend_selector`.
"""

from .base import IdentifierGenerator, StorageBackend, random_identifier
from .gateway_backend import GatewayBackend
from .infura_backend import InfuraBackend
from .pinata_backend import PinataBackend

__all__ = [
    "GatewayBackend",
    "IdentifierGenerator",
    "InfuraBackend",
    "PinataBackend",
    "StorageBackend",
    "random_identifier",
]
