"""Value types flowing through the polling pipeline."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Fact:
    """A single short text value; two facts are equal when their text is."""

    text: str


class Result:
    """Base of the values delivered to a pipeline subscriber."""

    __slots__ = ()


@dataclass(frozen=True, slots=True)
class Success(Result):
    fact: Fact


@dataclass(frozen=True, slots=True)
class Error(Result):
    """Terminal failure of the pipeline machinery, never a per-fetch failure."""

    message: str


class ServerError(Result):
    """Reserved for a distinct server-side failure path; nothing emits it yet."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "ServerError()"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ServerError)

    def __hash__(self) -> int:
        return hash(ServerError)


SERVER_ERROR = ServerError()


__all__ = ["Error", "Fact", "Result", "SERVER_ERROR", "ServerError", "Success"]
