"""Resource registration and the per-operation request pipeline."""

from __future__ import annotations

from .app import DocRest
from .options import ResourceOptions
from .resource import Resource

__all__ = [
    "DocRest",
    "Resource",
    "ResourceOptions",
]
