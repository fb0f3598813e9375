"""Request pipeline construction and built-in stages."""

from __future__ import annotations

from .logging import LoggingMiddleware
from .pipeline import build_pipeline, run_pipeline

__all__ = [
    "LoggingMiddleware",
    "build_pipeline",
    "run_pipeline",
]
