"""Shared workspace content cache with per-user progress overlay and metrics."""

__version__ = "0.1.0"
