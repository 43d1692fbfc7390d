import asyncio

import pytest

from ipfs_pin_store.errors import (
    AuthError,
    DeleteError,
    FetchError,
    NotFoundError,
    RequestTimeoutError,
    UpdateInconsistentError,
    UpdateInProgressError,
    UploadError,
)
from ipfs_pin_store.update_orchestrator import UpdateOrchestrator, default_orchestrator
from tests.helpers import StubBackend


@pytest.mark.asyncio
async def test_update_deletes_then_puts_and_returns_new_address(orchestrator: UpdateOrchestrator) -> None:
    backend = StubBackend()
    old_address = await backend.put("hello")

    new_address = await orchestrator.replace(backend, old_address, "world")

    assert (old_address, new_address) == ("cidA", "cidB")
    assert backend.calls == [("put", "hello"), ("delete", "cidA"), ("put", "world")]
    assert await backend.get("cidB") == "world"
    with pytest.raises(NotFoundError):
        await backend.get("cidA")


@pytest.mark.asyncio
async def test_update_without_credential_touches_nothing(orchestrator: UpdateOrchestrator) -> None:
    backend = StubBackend(credential=None)

    with pytest.raises(AuthError):
        await orchestrator.replace(backend, "cidA", "world")

    assert backend.calls == []


@pytest.mark.asyncio
async def test_failed_delete_aborts_before_upload(orchestrator: UpdateOrchestrator) -> None:
    backend = StubBackend(delete_error=DeleteError("unpin failed", provider="stub", status_code=500))

    with pytest.raises(DeleteError) as exc_info:
        await orchestrator.replace(backend, "cidA", "world")

    assert exc_info.value.status_code == 500
    assert backend.calls == [("delete", "cidA")]


@pytest.mark.asyncio
async def test_delete_timeout_is_reported_as_delete_error(orchestrator: UpdateOrchestrator) -> None:
    backend = StubBackend(delete_error=RequestTimeoutError("timed out", provider="stub"))

    with pytest.raises(DeleteError) as exc_info:
        await orchestrator.replace(backend, "cidA", "world")

    assert isinstance(exc_info.value.__cause__, RequestTimeoutError)
    assert ("put", "world") not in backend.calls


@pytest.mark.asyncio
async def test_unconfirmed_delete_aborts_update(orchestrator: UpdateOrchestrator) -> None:
    backend = StubBackend(delete_result=False)

    with pytest.raises(DeleteError):
        await orchestrator.replace(backend, "cidA", "world")

    assert backend.calls == [("delete", "cidA")]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "put_error",
    [
        UploadError("upload failed", provider="stub", status_code=500),
        FetchError("connection reset", provider="stub"),
        RuntimeError("boom"),
    ],
)
async def test_failed_put_after_delete_is_inconsistent(
    orchestrator: UpdateOrchestrator,
    put_error: Exception,
) -> None:
    """Once the old content is unpinned, any pin failure means the content is gone."""
    backend = StubBackend(put_error=put_error)
    backend.pinned["cidA"] = "hello"

    with pytest.raises(UpdateInconsistentError) as exc_info:
        await orchestrator.replace(backend, "cidA", "world")

    error = exc_info.value
    assert not isinstance(error, UploadError)
    assert error.deleted_address == "cidA"
    assert error.__cause__ is put_error
    assert backend.pinned == {}


@pytest.mark.asyncio
async def test_concurrent_update_of_same_address_is_rejected(orchestrator: UpdateOrchestrator) -> None:
    gate = asyncio.Event()
    backend = StubBackend(delete_gate=gate, addresses=["cidB"])
    backend.pinned["cidA"] = "hello"

    first = asyncio.create_task(orchestrator.replace(backend, "cidA", "world"))
    while not orchestrator.is_updating("cidA"):
        await asyncio.sleep(0)

    with pytest.raises(UpdateInProgressError):
        await orchestrator.replace(backend, "cidA", "again")

    gate.set()
    assert await first == "cidB"
    assert not orchestrator.is_updating("cidA")
    assert backend.calls.count(("delete", "cidA")) == 1


@pytest.mark.asyncio
async def test_address_is_released_after_failure(orchestrator: UpdateOrchestrator) -> None:
    backend = StubBackend(delete_error=DeleteError("unpin failed", provider="stub"))

    with pytest.raises(DeleteError):
        await orchestrator.replace(backend, "cidA", "world")

    assert not orchestrator.is_updating("cidA")


@pytest.mark.asyncio
async def test_backend_update_uses_default_orchestrator() -> None:
    backend = StubBackend()
    address = await backend.put("hello")

    new_address = await backend.update(address, "world")

    assert new_address == "cidB"
    assert not default_orchestrator.is_updating(address)


@pytest.mark.asyncio
async def test_backend_update_shares_its_orchestrator_in_flight_set(orchestrator: UpdateOrchestrator) -> None:
    gate = asyncio.Event()
    backend = StubBackend(delete_gate=gate, addresses=["cidB"], orchestrator=orchestrator)
    backend.pinned["cidA"] = "hello"

    first = asyncio.create_task(orchestrator.replace(backend, "cidA", "world"))
    while not orchestrator.is_updating("cidA"):
        await asyncio.sleep(0)

    with pytest.raises(UpdateInProgressError):
        await backend.update("cidA", "again")
    assert not default_orchestrator.is_updating("cidA")

    gate.set()
    assert await first == "cidB"
