"""HTTP plumbing shared by the backends: client handling, error mapping and gateway reads."""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx
from loguru import logger

from ipfs_pin_store.errors import (
    AuthError,
    FetchError,
    NotFoundError,
    PinStoreError,
    RequestTimeoutError,
    UploadError,
)
from ipfs_pin_store.provider_config import ProviderConfig


@asynccontextmanager
async def client_scope(
    httpx_client: httpx.AsyncClient | None,
    timeout_seconds: float,
) -> AsyncIterator[httpx.AsyncClient]:
    """Yield `httpx_client` if given, otherwise a temporary client closed on exit.

    A caller-supplied client is never closed here.
    """
    if httpx_client is not None:
        yield httpx_client
        return

    async with httpx.AsyncClient(timeout=timeout_seconds) as client:
        yield client


def require_credential(config: ProviderConfig, credential: str | None, operation: str) -> str:
    """Return `credential`, or raise `AuthError` if it is missing or blank."""
    if credential is None or not credential.strip():
        logger.debug(f"Refusing {operation} on {config.name}: no credential configured")
        raise AuthError(f"{config.name} credential not found", provider=config.name)
    return credential


async def send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    config: ProviderConfig,
    error_cls: type[PinStoreError],
    timeout_seconds: float,
    **kwargs: Any,
) -> httpx.Response:
    """Send a request and raise `error_cls` for anything but a 2xx answer.

    Timeouts raise `RequestTimeoutError` whatever the operation. Any other
    `httpx.RequestError` raises `error_cls`. A 404 on a read raises `NotFoundError`.
    """
    try:
        response = await client.request(method, url, timeout=timeout_seconds, **kwargs)
    except httpx.TimeoutException as e:
        logger.warning(f"{config.name}: {method} request timed out after {timeout_seconds}s")
        raise RequestTimeoutError(
            f"{config.name} request timed out after {timeout_seconds}s",
            provider=config.name,
        ) from e
    except httpx.RequestError as e:
        logger.warning(f"{config.name}: {method} request failed: {e.__class__.__name__}")
        raise error_cls(f"{config.name} request failed: {e}", provider=config.name) from e

    if response.is_success:
        return response

    logger.debug(f"{config.name}: {method} answered {response.status_code}")
    if response.status_code == 404 and issubclass(error_cls, FetchError):
        raise NotFoundError(
            f"{config.name}: content not found",
            provider=config.name,
            status_code=response.status_code,
        )

    raise error_cls(
        f"{config.name}: {method} failed with status {response.status_code}",
        provider=config.name,
        status_code=response.status_code,
    )


def read_address(response: httpx.Response, config: ProviderConfig) -> str:
    """Extract the new content address from an upload response.

    Raises:
        UploadError: The body is not JSON or lacks a non-empty `config.address_field`.
    """
    try:
        payload = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise UploadError(
            f"{config.name}: upload response is not JSON",
            provider=config.name,
            status_code=response.status_code,
        ) from e

    address = payload.get(config.address_field) if isinstance(payload, dict) else None
    if not isinstance(address, str) or not address:
        raise UploadError(
            f"{config.name}: upload response has no '{config.address_field}' field",
            provider=config.name,
            status_code=response.status_code,
        )

    return address


async def gateway_get(
    config: ProviderConfig,
    address: str,
    *,
    httpx_client: httpx.AsyncClient | None,
    timeout_seconds: float,
) -> Any:
    """Read `address` from the gateway of `config` and return the JSON-decoded body."""
    url = config.gateway_content_url(address)

    async with client_scope(httpx_client, timeout_seconds) as client:
        response = await send(
            client,
            "GET",
            url,
            config=config,
            error_cls=FetchError,
            timeout_seconds=timeout_seconds,
        )

    try:
        data = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FetchError(
            f"{config.name}: content at {address} is not JSON",
            provider=config.name,
            status_code=response.status_code,
        ) from e

    logger.debug(f"Fetched {address} from {config.gateway_url}")
    return data
