"""Access level context management using ContextVar.

Lets code running inside a request (hooks, store adapters) read the
caller's access level without passing it through every call.
"""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docrest_core.primitives.access import AccessLevel


_access_context: ContextVar[AccessLevel | None] = ContextVar(
    "docrest_access", default=None
)


def get_current_access() -> AccessLevel | None:
    """Get the access level resolved for the current request, if any."""
    return _access_context.get()


def set_current_access(level: AccessLevel) -> Token[AccessLevel | None]:
    """Set the access level in the current async context."""
    return _access_context.set(level)


def reset_current_access(token: Token[AccessLevel | None]) -> None:
    """Reset the access level to its previous value."""
    _access_context.reset(token)


__all__: list[str] = [
    "get_current_access",
    "reset_current_access",
    "set_current_access",
]
