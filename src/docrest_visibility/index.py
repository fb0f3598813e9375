"""FieldVisibilityIndex — which dotted paths of a resource are restricted."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from docrest_core.primitives.access import AccessLevel
from docrest_core.primitives.exceptions import ConfigurationError


def get_excluded(
    access: AccessLevel | str,
    private_paths: Sequence[str] = (),
    protected_paths: Sequence[str] = (),
) -> tuple[str, ...]:
    """Return the paths hidden from *access*.

    ``public`` loses private and protected paths, ``protected`` loses
    private paths, ``private`` loses nothing. Order is private paths
    followed by protected paths; duplicates are kept.
    """
    level = AccessLevel.parse(access)
    excluded: list[str] = []
    if not level.sees(AccessLevel.PRIVATE):
        excluded.extend(private_paths)
    if not level.sees(AccessLevel.PROTECTED):
        excluded.extend(protected_paths)
    return tuple(excluded)


@dataclass(frozen=True)
class FieldVisibilityIndex:
    """Private and protected paths of one resource type."""

    resource: str
    private_paths: tuple[str, ...] = ()
    protected_paths: tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        resource: str,
        private: Iterable[str] | None = None,
        protected: Iterable[str] | None = None,
    ) -> FieldVisibilityIndex:
        private_paths = tuple(private or ())
        protected_paths = tuple(protected or ())
        overlap = sorted(set(private_paths) & set(protected_paths))
        if overlap:
            raise ConfigurationError(
                f"{resource}: paths listed as both private and protected: "
                + ", ".join(overlap)
            )
        return cls(resource, private_paths, protected_paths)

    def excluded_for(self, access: AccessLevel | str) -> tuple[str, ...]:
        return get_excluded(access, self.private_paths, self.protected_paths)
