"""Failure taxonomy and the network/other classifier used by the fetch stage."""

from __future__ import annotations

import socket
import ssl
from enum import Enum


class FailureCategory(str, Enum):
    """Transport-level failure categories treated as "remote unreachable"."""

    HOST_RESOLUTION = "host_resolution"
    TIMEOUT = "timeout"
    TLS_HANDSHAKE = "tls_handshake"
    CONNECTION_REFUSED = "connection_refused"
    PROTOCOL_ERROR = "protocol_error"


class FailureKind(str, Enum):
    NETWORK = "network"
    OTHER = "other"


NETWORK_CATEGORIES: frozenset[FailureCategory] = frozenset(FailureCategory)


class FetchFailure(Exception):
    """Structured failure raised by a remote fact service.

    The ``category`` tag is what classification relies on; the message is for
    humans only.
    """

    def __init__(
        self,
        category: FailureCategory,
        message: str = "",
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message or category.value)
        self.category = category
        self.status_code = status_code


# Exact types only: subclasses are deliberately not matched.
_SOCKET_CATEGORIES: dict[type[BaseException], FailureCategory] = {
    socket.gaierror: FailureCategory.HOST_RESOLUTION,
    TimeoutError: FailureCategory.TIMEOUT,
    ssl.SSLError: FailureCategory.TLS_HANDSHAKE,
    ssl.SSLCertVerificationError: FailureCategory.TLS_HANDSHAKE,
    ConnectionRefusedError: FailureCategory.CONNECTION_REFUSED,
}


def failure_category(failure: BaseException) -> FailureCategory | None:
    """Return the network category of ``failure`` or ``None`` when it has none."""

    if isinstance(failure, FetchFailure):
        return failure.category
    return _SOCKET_CATEGORIES.get(type(failure))


def classify(failure: BaseException) -> FailureKind:
    category = failure_category(failure)
    if category is not None and category in NETWORK_CATEGORIES:
        return FailureKind.NETWORK
    return FailureKind.OTHER


__all__ = [
    "FailureCategory",
    "FailureKind",
    "FetchFailure",
    "NETWORK_CATEGORIES",
    "classify",
    "failure_category",
]
