"""AccessLevel — the three visibility tiers attached to every request."""

from __future__ import annotations

from enum import Enum

from .exceptions import UnsupportedAccessError


class AccessLevel(str, Enum):
    """Visibility tiers, ordered ``private ⊇ protected ⊇ public``."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"

    @classmethod
    def parse(cls, value: object) -> AccessLevel:
        """Return the level named by *value* or raise UnsupportedAccessError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedAccessError(value) from None

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def sees(self, other: AccessLevel) -> bool:
        """True when fields classified *other* are visible at this level."""
        return self.rank >= other.rank


_RANKS = {
    AccessLevel.PUBLIC: 0,
    AccessLevel.PROTECTED: 1,
    AccessLevel.PRIVATE: 2,
}
