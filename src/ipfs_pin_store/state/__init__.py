"""Persistence of provider credentials and the content pointer.

- KeyValueStore: protocol for the host-managed store
- InMemoryKeyValueStore, JsonFileKeyValueStore, RedisKeyValueStore: implementations
- CredentialStore: credentials and `StoredPointer` on top of a KeyValueStore
"""

from ipfs_pin_store import STATE_BACKEND, IpfsPinStoreSettings, ipfs_pin_store_settings

from .credential_store import POINTER_KEY, CredentialStore, StoredPointer
from .file_store import JsonFileKeyValueStore
from .key_value_store import KeyValueStore
from .memory_store import InMemoryKeyValueStore
from .redis_store import RedisKeyValueStore

__all__ = [
    "POINTER_KEY",
    "CredentialStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "RedisKeyValueStore",
    "StoredPointer",
    "create_key_value_store",
]


def create_key_value_store(settings: IpfsPinStoreSettings = ipfs_pin_store_settings) -> KeyValueStore:
    """Create the key-value store selected by `settings.state_backend`.

    Args:
        settings: Settings to read the backend choice, file path or redis settings from.

    Returns:
        KeyValueStore: A store namespaced by `settings.instance_id`.
    """
    if settings.state_backend == STATE_BACKEND.file:
        return JsonFileKeyValueStore(settings.state_file_path, namespace=settings.instance_id)
    if settings.state_backend == STATE_BACKEND.redis:
        return RedisKeyValueStore.from_settings(settings.redis, namespace=settings.instance_id)
    return InMemoryKeyValueStore()
