"""Per-tick fetch step: remote call with fallback substitution."""

from __future__ import annotations

import structlog

from .errors import FailureKind, classify, failure_category
from .fallback import FallbackProvider
from .fetcher import FactService
from .models import Fact

EMPTY_FACT = Fact(text="")


class FetchStage:
    """Turn one remote call into exactly one fact.

    Network failures are replaced by a fallback fact. Any other failure becomes
    ``EMPTY_FACT`` and is intentionally neither logged nor re-raised. Failures
    of the fallback itself propagate to the caller.
    """

    def __init__(
        self,
        service: FactService,
        fallback: FallbackProvider,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.service = service
        self.fallback = fallback
        self.logger = logger or structlog.get_logger("fact_poller.stage")

    async def fetch(self, tick_index: int | None = None) -> Fact:
        try:
            return await self.service.fetch_fact()
        except Exception as exc:  # noqa: BLE001
            if classify(exc) is not FailureKind.NETWORK:
                return EMPTY_FACT
            category = failure_category(exc)
            self.logger.warning(
                "remote_unreachable",
                tick=tick_index,
                category=category.value if category else None,
                error=str(exc),
            )
        return await self.fallback.provide()


__all__ = ["EMPTY_FACT", "FetchStage"]
