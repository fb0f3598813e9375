"""Access resolution — sync or async specs mapped onto access levels."""

from __future__ import annotations

from .context import get_current_access, reset_current_access, set_current_access
from .resolver import AccessMiddleware, AccessResolver
from .specs import AccessSpec, AsyncAccessSpec, SyncAccessSpec, fixed_access

__all__ = [
    "AccessMiddleware",
    "AccessResolver",
    "AccessSpec",
    "AsyncAccessSpec",
    "SyncAccessSpec",
    "fixed_access",
    "get_current_access",
    "reset_current_access",
    "set_current_access",
]
