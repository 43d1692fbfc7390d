"""Key-value store backed by redis."""

from __future__ import annotations

import redis.asyncio
from loguru import logger

from ipfs_pin_store import RedisSettings


class RedisKeyValueStore:
    """Stores values as plain redis strings under `{key_prefix}:{namespace}:{key}`.

    The client must be created with `decode_responses=True`; `from_settings` does that.
    """

    def __init__(
        self,
        client: redis.asyncio.Redis,
        *,
        key_prefix: str = "ipfs_pin_store",
        namespace: str = "default",
    ) -> None:
        self._client = client
        self._key_prefix = key_prefix
        self._namespace = namespace

    @classmethod
    def from_settings(cls, redis_settings: RedisSettings, *, namespace: str = "default") -> RedisKeyValueStore:
        """Create a store with a connection pool built from `redis_settings`."""
        client = redis.asyncio.from_url(
            redis_settings.url,
            socket_timeout=redis_settings.socket_timeout,
            socket_connect_timeout=redis_settings.socket_connect_timeout,
            decode_responses=True,
        )
        logger.debug(f"Redis state store using {redis_settings.key_prefix}:{namespace}")
        return cls(client, key_prefix=redis_settings.key_prefix, namespace=namespace)

    def _key(self, key: str) -> str:
        return f"{self._key_prefix}:{self._namespace}:{key}"

    async def get(self, key: str) -> str | None:
        value = await self._client.get(self._key(key))
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        await self._client.set(self._key(key), value)

    async def delete(self, key: str) -> None:
        await self._client.delete(self._key(key))

    async def clear(self) -> None:
        keys = [key async for key in self._client.scan_iter(match=self._key("*"))]
        if keys:
            await self._client.delete(*keys)
        logger.debug(f"Cleared {len(keys)} redis keys for {self._key_prefix}:{self._namespace}")

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()
