"""Bearer token decoding and masking.

Tokens are decoded for inspection only. The masked form is the only
representation returned by default; unmasked values are included only
when the caller asks for ``SecretVisibility.VISIBLE``.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from collections.abc import Callable, Iterable
from typing import Any

from stream_inspector.errors import ErrorStore, report_error
from stream_inspector.models import (
    DecoderUnavailableError,
    ErrorSource,
    SecretVisibility,
    SseEvent,
    TokenDecodeError,
    TokenInfo,
)
from stream_inspector.parsers.util import mask_token

logger = logging.getLogger(__name__)

Decoder = Callable[[str], bytes]

# header.claims[.signature], header always starts with base64 of '{"'
TOKEN_PATTERN = re.compile(r"\beyJ[A-Za-z0-9_-]*\.[A-Za-z0-9_-]+(?:\.[A-Za-z0-9_-]*)?")


def _strict_b64decode(value: str) -> bytes:
    return base64.b64decode(value, validate=True)


def _decode_segment(segment: str, decoder: Decoder | None) -> Any:
    if decoder is None:
        raise DecoderUnavailableError()
    pad = (4 - len(segment) % 4) % 4
    padded = (segment + "=" * pad).replace("-", "+").replace("_", "/")
    text = decoder(padded).decode("utf-8", errors="replace")
    return json.loads(text)


def decode_jwt_claims(
    token: str,
    *,
    decoder: Decoder | None = _strict_b64decode,
    store: ErrorStore | None = None,
) -> TokenInfo:
    """Decode the header and claims of a JWT-like token.

    Tokens with fewer than two parts, or an empty header/claims part,
    return only the masked form. That is a valid result, not an error.

    Args:
        token: Token text (``header.claims.signature``)
        decoder: Base64 decoder; None means no decoder is available
        store: Error store for reporting (default: process-wide store)

    Returns:
        TokenInfo with masked token and, when decodable, header and claims

    Raises:
        DecoderUnavailableError: If no decoder is available
        TokenDecodeError: If a segment is not base64url-encoded JSON
    """
    masked = mask_token(token)
    parts = token.split(".")
    if len(parts) < 2:
        return TokenInfo(masked=masked)
    header_part, claims_part = parts[0], parts[1]
    if not header_part or not claims_part:
        return TokenInfo(masked=masked)

    try:
        header = _decode_segment(header_part, decoder)
        claims = _decode_segment(claims_part, decoder)
    except DecoderUnavailableError as e:
        report_error(ErrorSource.PARSER_JWT, e, {"tokenPreview": masked}, store=store)
        raise
    except (binascii.Error, ValueError) as e:
        # json.JSONDecodeError is a ValueError
        error = TokenDecodeError(f"Failed to decode token segment: {e}", details={"tokenPreview": masked})
        report_error(ErrorSource.PARSER_JWT, error, {"tokenPreview": masked}, store=store)
        raise error from e

    return TokenInfo(masked=masked, header=header, claims=claims)


def find_tokens(text: str) -> list[str]:
    """Find JWT-shaped substrings in text, in order of appearance."""
    return TOKEN_PATTERN.findall(text)


def mask_tokens_in_text(text: str) -> str:
    """Replace every JWT-shaped substring with its masked form."""
    return TOKEN_PATTERN.sub(lambda m: mask_token(m.group(0)), text)


def _event_texts(events: Iterable[SseEvent]) -> Iterable[str]:
    for event in events:
        if isinstance(event.data, str):
            yield event.data
        elif event.data is not None:
            yield json.dumps(event.data, ensure_ascii=False)


def scan_event_tokens(
    events: Iterable[SseEvent],
    visibility: SecretVisibility = SecretVisibility.MASKED,
    *,
    store: ErrorStore | None = None,
) -> list[TokenInfo]:
    """Decode every token embedded in event-stream payloads.

    Tokens whose segments fail to decode are reported and skipped so one
    bad token does not hide the others.

    Args:
        events: Parsed events
        visibility: VISIBLE adds the raw token to each result
        store: Error store for reporting

    Returns:
        One TokenInfo per distinct token
    """
    seen: set[str] = set()
    found: list[TokenInfo] = []
    for text in _event_texts(events):
        for token in find_tokens(text):
            if token in seen:
                continue
            seen.add(token)
            try:
                info = decode_jwt_claims(token, store=store)
            except TokenDecodeError:
                logger.warning("Skipping undecodable token %s", mask_token(token))
                continue
            if visibility is SecretVisibility.VISIBLE:
                info = info.model_copy(update={"raw": token})
            found.append(info)
    return found
