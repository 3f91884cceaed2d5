"""Recursive search for a named field anywhere in decoded JSON."""

from __future__ import annotations

import logging
from typing import Any

from stream_inspector.config import get_max_depth

logger = logging.getLogger(__name__)

_UNSET: Any = object()


def _recurse(current: Any, key: str, results: list[Any], depth: int, max_depth: int | None) -> None:
    if max_depth is not None and depth > max_depth:
        logger.debug("deep_find stopped at depth %d looking for %r", depth, key)
        return

    if isinstance(current, dict):
        value = current.get(key, _UNSET)
        if isinstance(value, list):
            results.extend(value)
        elif value is not _UNSET:
            results.append(value)
        children = current.values()
    elif isinstance(current, list):
        children = current
    else:
        return

    for child in children:
        _recurse(child, key, results, depth + 1, max_depth)


def deep_find(obj: Any, key: str, *, max_depth: int | None = _UNSET) -> list[Any]:
    """Collect every value stored under ``key`` at any nesting depth.

    List values are flattened one level; matched values are themselves
    searched too. Order is depth-first.

    Args:
        obj: Decoded JSON value (dict, list or scalar)
        key: Field name to look for
        max_depth: Deepest level to visit. Defaults to the configured bound;
            None means unbounded.

    Returns:
        All matches, in traversal order
    """
    if max_depth is _UNSET:
        max_depth = get_max_depth()
    results: list[Any] = []
    _recurse(obj, key, results, 0, max_depth)
    return results
