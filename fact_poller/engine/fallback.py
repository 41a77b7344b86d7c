"""Locally generated facts used while the remote service is unreachable."""

from __future__ import annotations

import random
from typing import Iterable, Protocol

from .models import Fact


class FactGenerator(Protocol):
    """Local collaborator: produce one fact, never fails."""

    async def generate_fact(self) -> Fact:
        """Return a locally generated fact."""


class LocalFactGenerator:
    """Return random facts from a fixed in-memory list."""

    def __init__(self, facts: Iterable[str], rng: random.Random | None = None) -> None:
        self._facts = [fact for fact in facts if fact]
        if not self._facts:
            raise ValueError("LocalFactGenerator requires at least one fact")
        self._rng = rng or random.Random()

    @property
    def facts(self) -> list[str]:
        return list(self._facts)

    async def generate_fact(self) -> Fact:
        return Fact(text=self._rng.choice(self._facts))


class FallbackProvider:
    """Expose a generator behind the same async contract as the remote service."""

    def __init__(self, generator: FactGenerator) -> None:
        self.generator = generator

    async def provide(self) -> Fact:
        return await self.generator.generate_fact()


__all__ = ["FactGenerator", "FallbackProvider", "LocalFactGenerator"]
