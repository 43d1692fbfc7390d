"""Typed errors raised by backends, the update orchestrator and the facade."""

from __future__ import annotations


class PinStoreError(Exception):
    """Base class for every error raised by ipfs-pin-store.

    Attributes:
        provider: Name of the provider involved, if any.
        status_code: HTTP status returned by the provider, if a response was received.
    """

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class AuthError(PinStoreError):
    """No usable credential is configured. Raised before any request is sent."""


class UploadError(PinStoreError):
    """Pinning new content failed or the provider answered with a malformed body."""


class DeleteError(PinStoreError):
    """Unpinning content failed."""


class FetchError(PinStoreError):
    """Reading content failed, or a request could not be completed at the transport level."""


class NotFoundError(FetchError):
    """The gateway does not know the requested address."""


class RequestTimeoutError(FetchError):
    """A request to a provider or gateway did not complete within the configured timeout."""


class UpdateInconsistentError(PinStoreError):
    """The old content of an update was unpinned but pinning the new content failed.

    The logical pointer no longer has live content: `deleted_address` is gone and no new
    address was created.
    """

    def __init__(
        self,
        message: str,
        *,
        deleted_address: str,
        provider: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, provider=provider, status_code=status_code)
        self.deleted_address = deleted_address


class UpdateInProgressError(PinStoreError):
    """Another update of the same address has not finished yet."""


__all__ = [
    "AuthError",
    "DeleteError",
    "FetchError",
    "NotFoundError",
    "PinStoreError",
    "RequestTimeoutError",
    "UpdateInProgressError",
    "UpdateInconsistentError",
    "UploadError",
]
