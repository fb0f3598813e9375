"""Field visibility — per-resource private/protected paths and redaction."""

from __future__ import annotations

from .filter import ResourceFilter
from .index import FieldVisibilityIndex, get_excluded
from .paths import delete_path, iter_path
from .registry import ResourceRegistry

__all__ = [
    "FieldVisibilityIndex",
    "ResourceFilter",
    "ResourceRegistry",
    "delete_path",
    "get_excluded",
    "iter_path",
]
