"""Pytest configuration and shared fixtures for stream-inspector tests.

This module provides common fixtures used across the unit tests.
"""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Callable, Generator
from typing import Any

import pytest

from stream_inspector.errors import ErrorStore, reset_error_store
from stream_inspector.models import CapturedStream

# ============================================================================
# Error Store Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def fresh_error_store() -> ErrorStore:
    """Replace the process-wide error store before each test.

    Returns:
        The empty default store used during the test.
    """
    return reset_error_store()


@pytest.fixture
def store() -> ErrorStore:
    """Create an isolated error store for explicit injection."""
    return ErrorStore()


@pytest.fixture(autouse=True)
def detach_log_handlers() -> Generator[None, None, None]:
    """Remove handlers added by setup_logging so they do not outlive a test."""
    yield
    logger = logging.getLogger("stream_inspector")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)


# ============================================================================
# Test Data Factories
# ============================================================================


def b64url(data: dict[str, Any]) -> str:
    """Encode a dict as an unpadded base64url JSON segment."""
    raw = json.dumps(data, ensure_ascii=False).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def make_jwt(
    header: dict[str, Any] | None = None,
    claims: dict[str, Any] | None = None,
    signature: str = "c2lnbmF0dXJl",
) -> str:
    """Build a JWT-like token from header and claims dicts.

    Args:
        header: Header object (default HS256/JWT)
        claims: Claims object (default sub/exp)
        signature: Third segment, not verified

    Returns:
        ``header.claims.signature`` token text
    """
    header = header if header is not None else {"alg": "HS256", "typ": "JWT"}
    claims = claims if claims is not None else {"sub": "user-123", "exp": 1700000000}
    return f"{b64url(header)}.{b64url(claims)}.{signature}"


@pytest.fixture
def make_stream() -> Callable[..., CapturedStream]:
    """Factory for CapturedStream records.

    Returns:
        Callable taking body and optional url/request_id.
    """

    def _make(
        body: str,
        url: str = "https://chat.example.com/backend-api/conversation",
        request_id: str = "1",
    ) -> CapturedStream:
        return CapturedStream(timestamp=1700000000000, url=url, request_id=request_id, body=body)

    return _make


SSE_BODY = (
    "event: delta_encoding\n"
    'data: {"v":"v1"}\n'
    "\n"
    "event: delta\n"
    'data: {"v": {"conversation_id": "conv-nested", "message": {"id": "msg-nested", '
    '"metadata": {"request_id": "req-nested", "model_slug": "gpt-4o"}}}}\n'
    "\n"
    'data: {"conversation_id": "conv-top", "request_id": "req-top", '
    '"message_id": "msg-top", "model_slug": "gpt-4o-mini"}\n'
    "\n"
    "data: [DONE]\n"
)


@pytest.fixture
def sse_body() -> str:
    """A representative event-stream body with nested identifiers."""
    return SSE_BODY


@pytest.fixture
def jsonl_body() -> str:
    """A line-delimited JSON body carrying search queries and results."""
    lines = [
        {
            "title": "Trip planning",
            "conversation_id": "conv-1",
            "create_time": 1700000000.5,
            "mapping": {
                "node": {
                    "message": {
                        "metadata": {
                            "search_model_queries": [{"query": "kyoto weather", "timestamp": 1}],
                            "search_result_groups": [
                                {
                                    "domain": "weather.example",
                                    "entries": [
                                        {"url": "https://weather.example/kyoto", "title": "Kyoto", "snippet": "Sunny"}
                                    ],
                                }
                            ],
                        }
                    }
                }
            },
        },
        {"queries": ["kyoto weather", "kyoto temples"]},
    ]
    return "\n".join(json.dumps(line) for line in lines)


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Factory for JWT-like tokens (see make_jwt)."""
    return make_jwt


@pytest.fixture
def encode_segment() -> Callable[[dict[str, Any]], str]:
    """Encoder for single base64url JSON segments."""
    return b64url
