"""Consecutive-duplicate suppression for emitted facts."""

from __future__ import annotations

from .models import Fact

_NOTHING_EMITTED = object()


class DeduplicationFilter:
    """Drop a fact whose text equals the text of the last emitted fact.

    Only the immediately preceding emission is remembered, so a text can come
    back once something different was emitted in between. The first fact
    always passes.
    """

    def __init__(self) -> None:
        self._last_text: object = _NOTHING_EMITTED

    @property
    def last_text(self) -> str | None:
        if self._last_text is _NOTHING_EMITTED:
            return None
        return self._last_text  # type: ignore[return-value]

    def accept(self, fact: Fact) -> bool:
        if self._last_text is not _NOTHING_EMITTED and fact.text == self._last_text:
            return False
        self._last_text = fact.text
        return True


__all__ = ["DeduplicationFilter"]
