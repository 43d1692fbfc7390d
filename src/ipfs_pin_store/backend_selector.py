"""Pick the single active backend from the stored credentials."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence

import httpx
from loguru import logger

from ipfs_pin_store import PROVIDER_NAME, ipfs_pin_store_settings
from ipfs_pin_store.backends import (
    GatewayBackend,
    IdentifierGenerator,
    InfuraBackend,
    PinataBackend,
    StorageBackend,
    random_identifier,
)
from ipfs_pin_store.provider_config import PROVIDER_CONFIGS, ProviderConfig, gateway_only_config
from ipfs_pin_store.update_orchestrator import UpdateOrchestrator, default_orchestrator

BackendFactory = Callable[..., StorageBackend]

BACKEND_FACTORIES: dict[PROVIDER_NAME, BackendFactory] = {
    PROVIDER_NAME.pinata: PinataBackend,
    PROVIDER_NAME.infura: InfuraBackend,
}
"""Backend type for each provider. Each is called with `config`, `credential`, `id_generator`,
`httpx_client`, `timeout_seconds` and `orchestrator`."""


def configured_providers(
    credentials: Mapping[PROVIDER_NAME, str | None],
    priority: Sequence[PROVIDER_NAME],
    provider_configs: Mapping[PROVIDER_NAME, ProviderConfig] | None = None,
) -> list[PROVIDER_NAME]:
    """Providers from `priority` whose stored credential is usable, in priority order.

    A credential in the wrong format for its provider (an Infura value without
    `project_id:project_secret`) counts as absent so it cannot hide a usable lower-priority one.
    """
    provider_configs = provider_configs if provider_configs is not None else PROVIDER_CONFIGS

    configured = []
    for provider in priority:
        credential = credentials.get(provider)
        if provider_configs[provider].credential_is_usable(credential):
            configured.append(provider)
        elif credential is not None and credential.strip():
            logger.warning(f"Ignoring {provider} credential: not in the format {provider} expects")
    return configured


def select_backend(
    credentials: Mapping[PROVIDER_NAME, str | None],
    *,
    priority: Sequence[PROVIDER_NAME] | None = None,
    public_gateway_url: str | None = ipfs_pin_store_settings.public_gateway_url,
    provider_configs: Mapping[PROVIDER_NAME, ProviderConfig] | None = None,
    id_generator: IdentifierGenerator = random_identifier,
    httpx_client: httpx.AsyncClient | None = None,
    timeout_seconds: float = ipfs_pin_store_settings.request_timeout_seconds,
    orchestrator: UpdateOrchestrator = default_orchestrator,
    factories: Mapping[PROVIDER_NAME, BackendFactory] | None = None,
) -> StorageBackend:
    """Return the backend for the first provider in `priority` with a stored credential.

    If no provider has a credential, reads still work: a `GatewayBackend` for
    `public_gateway_url` is returned when it is set, otherwise the primary provider's backend
    without a credential (it reads from its own gateway and refuses every write with
    `AuthError`).

    Args:
        credentials: Stored credential per provider. Missing or blank values count as absent.
        priority: Provider order, primary first. Defaults to `provider_priority` from settings.
        public_gateway_url: Gateway used for reads when no credential is stored.
        provider_configs: Config per provider. Defaults to the built-in configs.
        id_generator: Identifier generator passed to the backend.
        httpx_client: Optional client shared by the backend's requests.
        timeout_seconds: Request timeout passed to the backend.
        orchestrator: Orchestrator the backend runs `update` through.
        factories: Backend type per provider. Defaults to `BACKEND_FACTORIES`.

    Returns:
        StorageBackend: The active backend.
    """
    priority = list(priority) if priority is not None else list(ipfs_pin_store_settings.provider_priority)
    if not priority:
        raise ValueError("priority must name at least one provider")

    provider_configs = provider_configs if provider_configs is not None else PROVIDER_CONFIGS
    factories = factories if factories is not None else BACKEND_FACTORIES

    configured = configured_providers(credentials, priority, provider_configs)
    if len(configured) > 1:
        logger.debug(f"Several providers configured ({configured}), using {configured[0]}")

    if configured:
        provider = configured[0]
        logger.debug(f"Selected {provider} backend")
        return factories[provider](
            config=provider_configs[provider],
            credential=credentials[provider],
            id_generator=id_generator,
            httpx_client=httpx_client,
            timeout_seconds=timeout_seconds,
            orchestrator=orchestrator,
        )

    if public_gateway_url:
        logger.debug(f"No credential stored, reading from public gateway {public_gateway_url}")
        return GatewayBackend(
            config=gateway_only_config(public_gateway_url),
            httpx_client=httpx_client,
            timeout_seconds=timeout_seconds,
            orchestrator=orchestrator,
        )

    primary = priority[0]
    logger.debug(f"No credential stored, using {primary} backend for reads only")
    return factories[primary](
        config=provider_configs[primary],
        credential=None,
        id_generator=id_generator,
        httpx_client=httpx_client,
        timeout_seconds=timeout_seconds,
        orchestrator=orchestrator,
    )
