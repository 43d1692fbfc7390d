"""Static per-provider settings: endpoints, response fields and the credential slot."""

from __future__ import annotations

from enum import auto
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator
from strenum import StrEnum

from ipfs_pin_store import (
    INFURA_API_BASE_URL,
    PINATA_API_BASE_URL,
    PROVIDER_NAME,
    IpfsPinStoreSettings,
    ipfs_pin_store_settings,
)


class AUTH_SCHEME(StrEnum):
    """How a credential is presented to the provider."""

    bearer = auto()
    """`Authorization: Bearer <token>`."""
    basic = auto()
    """HTTP basic auth from a `key:secret` credential."""


class ProviderConfig(BaseModel):
    """Immutable description of one provider's HTTP surface."""

    model_config = ConfigDict(frozen=True, use_attribute_docstrings=True)

    name: str
    """Provider name, also used in error messages and logs."""

    api_base_url: str
    """Base URL of the authenticated pinning API."""

    gateway_url: str
    """Base URL of the unauthenticated gateway serving `/ipfs/{address}`."""

    credential_slot: str
    """Key under which the credential for this provider is persisted."""

    upload_path: str = ""
    """Path, relative to `api_base_url`, that pins new content."""

    unpin_path: str = ""
    """Path, relative to `api_base_url`, that unpins content. `{address}` is substituted."""

    unpin_method: Literal["DELETE", "POST"] = "DELETE"
    """HTTP method of the unpin endpoint."""

    address_field: str = "IpfsHash"
    """Field of the upload response holding the new content address."""

    auth_scheme: AUTH_SCHEME = AUTH_SCHEME.bearer
    """How the credential is sent."""

    metadata_name_prefix: str = "snap-"
    """Prefix of the per-upload unique name sent to the provider."""

    @field_validator("api_base_url", "gateway_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Normalise base URLs so paths can be appended with a single slash."""
        return value.rstrip("/")

    def credential_is_usable(self, credential: str | None) -> bool:
        """Whether `credential` is non-blank and, for basic auth, of the form `key:secret`."""
        if credential is None or not credential.strip():
            return False
        if self.auth_scheme == AUTH_SCHEME.basic:
            return split_key_secret(credential) is not None
        return True

    def upload_url(self) -> str:
        return f"{self.api_base_url}{self.upload_path}"

    def unpin_url(self, address: str) -> str:
        return f"{self.api_base_url}{self.unpin_path.format(address=address)}"

    def gateway_content_url(self, address: str) -> str:
        return f"{self.gateway_url}/ipfs/{address}"


def split_key_secret(credential: str) -> tuple[str, str] | None:
    """Split a `key:secret` credential, or return None if either part is missing."""
    key, separator, secret = credential.strip().partition(":")
    if not separator or not key or not secret:
        return None
    return key, secret


def build_provider_configs(
    settings: IpfsPinStoreSettings = ipfs_pin_store_settings,
) -> dict[PROVIDER_NAME, ProviderConfig]:
    """Build the config of every known provider, applying gateway overrides from `settings`."""
    return {
        PROVIDER_NAME.pinata: ProviderConfig(
            name=PROVIDER_NAME.pinata,
            api_base_url=PINATA_API_BASE_URL,
            gateway_url=settings.pinata_gateway_url,
            credential_slot="pinata_token",
            upload_path="/pinning/pinJSONToIPFS",
            unpin_path="/pinning/unpin/{address}",
            unpin_method="DELETE",
            address_field="IpfsHash",
            auth_scheme=AUTH_SCHEME.bearer,
        ),
        PROVIDER_NAME.infura: ProviderConfig(
            name=PROVIDER_NAME.infura,
            api_base_url=INFURA_API_BASE_URL,
            gateway_url=settings.infura_gateway_url,
            credential_slot="infura_credentials",
            upload_path="/add?pin=true",
            unpin_path="/pin/rm?arg={address}",
            unpin_method="POST",
            address_field="Hash",
            auth_scheme=AUTH_SCHEME.basic,
        ),
    }


PROVIDER_CONFIGS: dict[PROVIDER_NAME, ProviderConfig] = build_provider_configs()
"""The provider configs for the settings loaded at import time."""


def get_provider_config(provider: PROVIDER_NAME | str) -> ProviderConfig:
    """Return the config of `provider`.

    Raises:
        ValueError: If the provider is unknown.
    """
    return PROVIDER_CONFIGS[PROVIDER_NAME(provider)]


def gateway_only_config(gateway_url: str) -> ProviderConfig:
    """Config for a read-only public gateway. It has no API and no credential slot."""
    return ProviderConfig(
        name="gateway",
        api_base_url="",
        gateway_url=gateway_url,
        credential_slot="",
    )
