"""Compatibility wrapper that exposes the shared logging utilities."""
from __future__ import annotations

from .log import get_logger, init_logging, log_context, progress_manager, timeit

__all__ = [
    "get_logger",
    "init_logging",
    "log_context",
    "progress_manager",
    "timeit",
]
