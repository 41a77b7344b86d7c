"""Remote fact retrieval over HTTP."""

from __future__ import annotations

import socket
import ssl
from typing import Any, Iterator, Protocol

import httpx
import structlog

from ..config import RemoteServiceConfig
from .errors import FailureCategory, FetchFailure
from .models import Fact


class FactService(Protocol):
    """Remote collaborator: fetch one fact, may fail."""

    async def fetch_fact(self) -> Fact:
        """Return the next fact from the remote service."""


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    pending: list[BaseException] = [exc]
    while pending:
        current = pending.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        # anyio reports multi-address connect failures as an exception group
        pending.extend(getattr(current, "exceptions", ()) or ())
        if current.__cause__ is not None:
            pending.append(current.__cause__)
        if current.__context__ is not None:
            pending.append(current.__context__)


def _transport_category(exc: httpx.TransportError) -> FailureCategory | None:
    if isinstance(exc, httpx.TimeoutException):
        return FailureCategory.TIMEOUT
    for cause in _exception_chain(exc):
        if isinstance(cause, socket.gaierror):
            return FailureCategory.HOST_RESOLUTION
        if isinstance(cause, ssl.SSLError):
            return FailureCategory.TLS_HANDSHAKE
        if isinstance(cause, ConnectionRefusedError):
            return FailureCategory.CONNECTION_REFUSED
        if isinstance(cause, TimeoutError):
            return FailureCategory.TIMEOUT
    return None


class HttpFactService:
    """Fetch facts from a JSON endpoint and tag transport failures."""

    def __init__(
        self,
        config: RemoteServiceConfig,
        client: httpx.AsyncClient | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self.logger = logger or structlog.get_logger("fact_poller.fetcher")
        # Prefer a Windows UA from the configured list; fall back to its first entry.
        default_ua: str | None = None
        if config.user_agent_list:
            default_ua = next(
                (ua for ua in config.user_agent_list if "Windows NT" in ua),
                config.user_agent_list[0],
            )
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            follow_redirects=True,
            timeout=config.timeout,
            headers={"User-Agent": default_ua} if default_ua else None,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_fact(self) -> Fact:
        try:
            response = await self._client.get(
                self.config.url,
                headers={"Accept": "application/json"},
                timeout=self.config.timeout,
            )
        except httpx.TransportError as exc:
            category = _transport_category(exc)
            if category is None:
                raise
            raise FetchFailure(category, str(exc)) from exc

        if not response.is_success:
            raise FetchFailure(
                FailureCategory.PROTOCOL_ERROR,
                f"Unexpected status {response.status_code}",
                status_code=response.status_code,
            )
        fact = Fact(text=self._extract_text(response.json()))
        self.logger.debug("fact_fetched", url=self.config.url, status=response.status_code)
        return fact

    def _extract_text(self, payload: Any) -> str:
        if not isinstance(payload, dict):
            raise ValueError("Fact payload must be a JSON object")
        value = payload.get(self.config.fact_field)
        if not isinstance(value, str):
            raise ValueError(f"Fact payload has no string field '{self.config.fact_field}'")
        return value


__all__ = ["FactService", "HttpFactService"]
