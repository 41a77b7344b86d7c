"""Tick scheduling."""

from .apsched_adapter import TICK_PERIOD_SECONDS, Tick, TickCallback, Ticker

__all__ = ["TICK_PERIOD_SECONDS", "Tick", "TickCallback", "Ticker"]
