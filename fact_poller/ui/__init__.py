"""User interaction helpers."""

from .display import DisplayState, ResultPrinter

__all__ = ["DisplayState", "ResultPrinter"]
