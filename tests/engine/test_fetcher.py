from __future__ import annotations

import socket
import ssl
from typing import Callable

import httpx
import pytest

from fact_poller.config import RemoteServiceConfig
from fact_poller.engine import Fact, FailureCategory, FetchFailure, HttpFactService

pytestmark = pytest.mark.asyncio

URL = "https://facts.example.com/fact"


def _service(handler: Callable[[httpx.Request], httpx.Response], **overrides) -> HttpFactService:
    config = RemoteServiceConfig(url=URL, **overrides)
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpFactService(config, client=client)


def _connect_error(cause: BaseException) -> Callable[[httpx.Request], httpx.Response]:
    def handler(request: httpx.Request) -> httpx.Response:
        try:
            raise cause
        except BaseException as exc:
            raise httpx.ConnectError("connect failed", request=request) from exc

    return handler


async def test_returns_fact_from_json_payload() -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["accept"] = request.headers.get("Accept")
        return httpx.Response(200, json={"fact": "cats sleep 70% of life", "length": 22})

    service = _service(handler)
    fact = await service.fetch_fact()
    assert fact == Fact("cats sleep 70% of life")
    assert seen == {"url": URL, "accept": "application/json"}


async def test_custom_fact_field() -> None:
    service = _service(lambda request: httpx.Response(200, json={"text": "hello"}), fact_field="text")
    assert await service.fetch_fact() == Fact("hello")


@pytest.mark.parametrize("status", [301, 404, 429, 500, 503])
async def test_non_success_status_is_protocol_error(status: int) -> None:
    service = _service(lambda request: httpx.Response(status, json={"fact": "ignored"}))
    with pytest.raises(FetchFailure) as excinfo:
        await service.fetch_fact()
    assert excinfo.value.category is FailureCategory.PROTOCOL_ERROR
    assert excinfo.value.status_code == status


async def test_timeout_is_tagged() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(FetchFailure) as excinfo:
        await _service(handler).fetch_fact()
    assert excinfo.value.category is FailureCategory.TIMEOUT
    assert isinstance(excinfo.value.__cause__, httpx.ReadTimeout)


@pytest.mark.parametrize(
    ("cause", "category"),
    [
        (socket.gaierror(-2, "Name or service not known"), FailureCategory.HOST_RESOLUTION),
        (ssl.SSLError(1, "handshake failure"), FailureCategory.TLS_HANDSHAKE),
        (ConnectionRefusedError(111, "Connection refused"), FailureCategory.CONNECTION_REFUSED),
    ],
)
async def test_connect_errors_are_tagged_by_cause(cause: BaseException, category: FailureCategory) -> None:
    with pytest.raises(FetchFailure) as excinfo:
        await _service(_connect_error(cause)).fetch_fact()
    assert excinfo.value.category is category


async def test_unrecognised_transport_error_propagates_untagged() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.RemoteProtocolError("peer closed connection", request=request)

    with pytest.raises(httpx.RemoteProtocolError):
        await _service(handler).fetch_fact()


async def test_malformed_payload_raises_value_error() -> None:
    service = _service(lambda request: httpx.Response(200, json=["not", "an", "object"]))
    with pytest.raises(ValueError):
        await service.fetch_fact()

    missing = _service(lambda request: httpx.Response(200, json={"other": 1}))
    with pytest.raises(ValueError):
        await missing.fetch_fact()


async def test_owned_client_uses_windows_user_agent() -> None:
    config = RemoteServiceConfig(
        url=URL,
        user_agent_list=["Mozilla/5.0 (X11; Linux x86_64)", "Mozilla/5.0 (Windows NT 10.0; Win64; x64)"],
    )
    service = HttpFactService(config)
    assert service._client.headers["User-Agent"] == "Mozilla/5.0 (Windows NT 10.0; Win64; x64)"
    await service.aclose()
    assert service._client.is_closed


async def test_injected_client_is_not_closed() -> None:
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
    service = HttpFactService(RemoteServiceConfig(url=URL), client=client)
    await service.aclose()
    assert not client.is_closed
    await client.aclose()
