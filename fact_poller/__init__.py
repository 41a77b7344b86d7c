"""Periodic fact polling with local fallback and duplicate suppression."""

__version__ = "0.1.0"
