import base64
import json

import pytest
from pytest_httpx import HTTPXMock

from ipfs_pin_store.backends import InfuraBackend, StorageBackend
from ipfs_pin_store.errors import AuthError, DeleteError, NotFoundError, UploadError
from tests.helpers import INFURA_API, INFURA_GATEWAY, make_sequential_ids

BASIC_AUTH = "Basic " + base64.b64encode(b"project:secret").decode("ascii")


@pytest.fixture
def infura_backend() -> InfuraBackend:
    return InfuraBackend(credential="project:secret", id_generator=make_sequential_ids())


def test_infura_backend_satisfies_protocol(infura_backend: InfuraBackend) -> None:
    assert isinstance(infura_backend, StorageBackend)


@pytest.mark.asyncio
async def test_put_uploads_json_document_with_basic_auth(
    httpx_mock: HTTPXMock,
    infura_backend: InfuraBackend,
) -> None:
    httpx_mock.add_response(
        method="POST",
        url=f"{INFURA_API}/add?pin=true",
        match_headers={"Authorization": BASIC_AUTH},
        json={"Name": "snap-id-0.json", "Hash": "QmInfura", "Size": "15"},
    )

    assert await infura_backend.put("hello") == "QmInfura"

    request = httpx_mock.get_request()
    assert request is not None
    assert request.headers["Content-Type"].startswith("multipart/form-data")
    body = request.read()
    assert b'filename="snap-id-0.json"' in body
    assert json.dumps("hello").encode() in body
    assert b"project" not in request.url.query


@pytest.mark.asyncio
@pytest.mark.parametrize("credential", ["no-separator", ":secret", "project:"])
async def test_malformed_credential_is_rejected_before_any_request(
    httpx_mock: HTTPXMock,
    credential: str,
) -> None:
    backend = InfuraBackend(credential=credential)

    assert not backend.has_credential
    with pytest.raises(AuthError):
        await backend.put("hello")
    with pytest.raises(AuthError):
        await backend.delete("QmInfura")

    assert httpx_mock.get_requests() == []


@pytest.mark.asyncio
async def test_missing_credential_raises_auth_error(httpx_mock: HTTPXMock) -> None:
    backend = InfuraBackend()

    assert not backend.has_credential
    with pytest.raises(AuthError):
        await backend.put("hello")

    assert httpx_mock.get_requests() == []


@pytest.mark.asyncio
async def test_put_failure_raises_upload_error(httpx_mock: HTTPXMock, infura_backend: InfuraBackend) -> None:
    httpx_mock.add_response(method="POST", url=f"{INFURA_API}/add?pin=true", status_code=403)

    with pytest.raises(UploadError) as exc_info:
        await infura_backend.put("hello")

    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_delete_posts_pin_rm(httpx_mock: HTTPXMock, infura_backend: InfuraBackend) -> None:
    httpx_mock.add_response(
        method="POST",
        url=f"{INFURA_API}/pin/rm?arg=QmInfura",
        match_headers={"Authorization": BASIC_AUTH},
        json={"Pins": ["QmInfura"]},
    )

    assert await infura_backend.delete("QmInfura") is True


@pytest.mark.asyncio
async def test_delete_failure_raises_delete_error(httpx_mock: HTTPXMock, infura_backend: InfuraBackend) -> None:
    httpx_mock.add_response(method="POST", url=f"{INFURA_API}/pin/rm?arg=QmInfura", status_code=500)

    with pytest.raises(DeleteError):
        await infura_backend.delete("QmInfura")


@pytest.mark.asyncio
async def test_get_reads_infura_gateway(httpx_mock: HTTPXMock, infura_backend: InfuraBackend) -> None:
    httpx_mock.add_response(method="GET", url=f"{INFURA_GATEWAY}/ipfs/QmInfura", json="hello")
    httpx_mock.add_response(method="GET", url=f"{INFURA_GATEWAY}/ipfs/QmGone", status_code=404)

    assert await infura_backend.get("QmInfura") == "hello"
    with pytest.raises(NotFoundError):
        await infura_backend.get("QmGone")
