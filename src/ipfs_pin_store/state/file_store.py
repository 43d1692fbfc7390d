"""Key-value store persisted as a JSON file."""

from __future__ import annotations

import asyncio
import contextlib
import json
import time
import weakref
from pathlib import Path

import aiofiles
from loguru import logger

_file_locks: weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, dict[Path, asyncio.Lock]] = (
    weakref.WeakKeyDictionary()
)
"""Write locks per event loop and resolved state file path."""


def _lock_for(path: Path) -> asyncio.Lock:
    """Return the write lock shared by every store on `path` in the running event loop."""
    locks = _file_locks.setdefault(asyncio.get_running_loop(), {})
    return locks.setdefault(path, asyncio.Lock())


class JsonFileKeyValueStore:
    """Stores values in a JSON file, one top-level object per namespace.

    The file looks like `{"<namespace>": {"<key>": "<value>", ...}, ...}` so several instances
    can share a file without seeing each other's credentials. Stores on the same file share one
    write lock within an event loop. Writes go to a temp file that then replaces the original.
    Separate processes writing the same file are not coordinated.
    """

    def __init__(self, path: str | Path, *, namespace: str = "default") -> None:
        self._path = Path(path)
        self._namespace = namespace

    @property
    def path(self) -> Path:
        return self._path

    @property
    def _lock(self) -> asyncio.Lock:
        return _lock_for(self._path.resolve())

    async def _read_all(self) -> dict[str, dict[str, str]]:
        if not self._path.exists():
            return {}

        async with aiofiles.open(self._path, encoding="utf-8") as f:
            raw = await f.read()

        if not raw.strip():
            return {}

        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"State file {self._path} does not contain a JSON object")
        return data

    async def _write_all(self, data: dict[str, dict[str, str]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._path.with_suffix(f".tmp.{time.time()}")
        try:
            async with aiofiles.open(temp_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(data, indent=2, ensure_ascii=False))
                await f.flush()
            temp_path.replace(self._path)
        except Exception:
            with contextlib.suppress(OSError):
                temp_path.unlink()
            raise

        logger.debug(f"Wrote state file {self._path}")

    async def get(self, key: str) -> str | None:
        data = await self._read_all()
        return data.get(self._namespace, {}).get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            data = await self._read_all()
            data.setdefault(self._namespace, {})[key] = value
            await self._write_all(data)

    async def delete(self, key: str) -> None:
        async with self._lock:
            data = await self._read_all()
            namespace_data = data.get(self._namespace)
            if not namespace_data or key not in namespace_data:
                return
            del namespace_data[key]
            await self._write_all(data)

    async def clear(self) -> None:
        async with self._lock:
            data = await self._read_all()
            if self._namespace not in data:
                return
            del data[self._namespace]
            await self._write_all(data)
