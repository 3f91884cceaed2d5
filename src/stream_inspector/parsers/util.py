"""Small helpers shared by the parsers."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

MASK_PLACEHOLDER = "•••"
MASK_ELLIPSIS = "…"
MASK_KEEP = 6


@dataclass(frozen=True)
class JsonParseResult:
    """Outcome of a JSON decode that never raises."""

    success: bool
    value: Any = None


def try_parse_json(text: str) -> JsonParseResult:
    """Decode JSON text, returning failure as a value.

    Args:
        text: Candidate JSON text

    Returns:
        JsonParseResult with success=False and value=None on any decode error
    """
    try:
        return JsonParseResult(success=True, value=json.loads(text))
    except (ValueError, TypeError, RecursionError):
        return JsonParseResult(success=False)


def mask_token(token: str) -> str:
    """Mask a credential, keeping a short prefix and suffix.

    Tokens of 12 characters or fewer are replaced entirely.

    Args:
        token: Secret value

    Returns:
        Masked representation safe to log or export
    """
    if len(token) <= MASK_KEEP * 2:
        return MASK_PLACEHOLDER
    return f"{token[:MASK_KEEP]}{MASK_ELLIPSIS}{token[-MASK_KEEP:]}"


def is_number(value: object) -> bool:
    """Return True for int/float values, excluding bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)
