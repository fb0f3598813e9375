"""Dotted-path walking over plain document trees.

Documents are nested ``dict``/``list`` values. A list met at any segment
fans out: the rest of the path is applied to every element. Missing
segments are never an error.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any


def split_path(path: str) -> list[str]:
    return [segment for segment in path.split(".") if segment]


def delete_path(target: Any, path: str) -> None:
    """Remove *path* from *target* in place, wherever it exists."""
    segments = split_path(path)
    if segments:
        _delete(target, segments)


def _delete(node: Any, segments: list[str]) -> None:
    if isinstance(node, list):
        for element in node:
            _delete(element, segments)
        return
    if not isinstance(node, MutableMapping):
        return
    head, rest = segments[0], segments[1:]
    if head not in node:
        return
    if rest:
        _delete(node[head], rest)
    else:
        del node[head]


def iter_path(target: Any, path: str) -> Iterator[Any]:
    """Yield every value found at *path*, fanning out through lists."""
    segments = split_path(path)
    if segments:
        yield from _iter(target, segments)


def _iter(node: Any, segments: list[str]) -> Iterator[Any]:
    if isinstance(node, list):
        for element in node:
            yield from _iter(element, segments)
        return
    if not isinstance(node, Mapping):
        return
    head, rest = segments[0], segments[1:]
    if head not in node:
        return
    value = node[head]
    if rest:
        yield from _iter(value, rest)
    elif value is not None:
        yield value


def is_within(path: str, ancestor: str) -> bool:
    """True when *path* equals *ancestor* or is nested under it."""
    return path == ancestor or path.startswith(ancestor + ".")
