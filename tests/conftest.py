"""Shared fixtures: scripted collaborators and temporary configuration."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Iterable, Sequence

import pytest

from fact_poller.config import ConfigLocator, ConfigRepository, PollerConfig
from fact_poller.engine import Fact


class ScriptedFactService:
    """Replay a script of outcomes; exceptions are raised, facts returned.

    Once the script is exhausted the last outcome is repeated.
    """

    def __init__(self, outcomes: Sequence[Fact | BaseException], delay: float = 0.0) -> None:
        if not outcomes:
            raise ValueError("script needs at least one outcome")
        self.outcomes = list(outcomes)
        self.delay = delay
        self.calls = 0
        self.closed = False

    async def fetch_fact(self) -> Fact:
        outcome = self.outcomes[min(self.calls, len(self.outcomes) - 1)]
        self.calls += 1
        await asyncio.sleep(self.delay)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        self.closed = True


class BlockingFactService:
    """Never completes a fetch until ``release`` is set."""

    def __init__(self, fact: Fact) -> None:
        self.fact = fact
        self.calls = 0
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.cancelled = False

    async def fetch_fact(self) -> Fact:
        self.calls += 1
        self.started.set()
        try:
            await self.release.wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return self.fact


class RecordingGenerator:
    """Local generator returning a fixed fact and counting calls."""

    def __init__(self, text: str = "local: cats purr") -> None:
        self.text = text
        self.calls = 0

    async def generate_fact(self) -> Fact:
        self.calls += 1
        return Fact(self.text)


class BrokenGenerator:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    async def generate_fact(self) -> Fact:
        raise self.exc


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("FACT_POLLER_HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def scripted_service() -> Callable[..., ScriptedFactService]:
    def _builder(outcomes: Iterable[Fact | BaseException], delay: float = 0.0) -> ScriptedFactService:
        return ScriptedFactService(list(outcomes), delay=delay)

    return _builder


@pytest.fixture
def recording_generator() -> RecordingGenerator:
    return RecordingGenerator()


@pytest.fixture
def sample_config() -> PollerConfig:
    return PollerConfig.model_validate(
        {
            "remote": {"url": "https://facts.example.com/fact", "timeout": 2.5},
            "fallback": {"facts": ["local one", "local two"], "seed": 7},
            "messages": {"default_error_text": "Something went wrong"},
        }
    )


@pytest.fixture
def temp_config_repository(isolated_home: Path) -> ConfigRepository:
    locator = ConfigLocator(project_root=isolated_home)
    return ConfigRepository(locator)


@pytest.fixture
def blocking_service() -> Callable[[Fact], BlockingFactService]:
    return BlockingFactService


@pytest.fixture
def broken_generator() -> Callable[[Exception], BrokenGenerator]:
    return BrokenGenerator
