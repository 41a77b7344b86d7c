"""Default message lookup and result mapping."""

from __future__ import annotations

from typing import Mapping

from ..config import DEFAULT_ERROR_KEY, DEFAULT_ERROR_TEXT
from .models import Error, Fact, Success


class MessageCatalog:
    """Plain key -> text lookup for user-facing messages."""

    def __init__(self, messages: Mapping[str, str] | None = None) -> None:
        self._messages = {DEFAULT_ERROR_KEY: DEFAULT_ERROR_TEXT}
        if messages:
            self._messages.update(messages)

    def lookup(self, key: str) -> str:
        return self._messages[key]


class ResultMapper:
    """Wrap facts and terminal pipeline failures into subscriber results."""

    def __init__(self, messages: MessageCatalog) -> None:
        self.messages = messages

    def success(self, fact: Fact) -> Success:
        return Success(fact)

    def failure(self, exc: BaseException) -> Error:
        message = str(exc)
        if not message:
            message = self.messages.lookup(DEFAULT_ERROR_KEY)
        return Error(message)


__all__ = ["MessageCatalog", "ResultMapper"]
