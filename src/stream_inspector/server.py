"""FastMCP server exposing the stream inspection pipeline.

Tools accept raw captured bodies and return JSON documents, so an agent
can classify a stream, decode a token, or review the error log.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Annotated

from fastmcp import FastMCP

from stream_inspector.classifier import classify_stream, row_to_data
from stream_inspector.errors import get_error_store
from stream_inspector.models import CapturedStream, StreamInspectorError
from stream_inspector.parsers.jwt import decode_jwt_claims

logger = logging.getLogger(__name__)

# Create MCP server instance
mcp = FastMCP("stream-inspector")


def inspect_body(
    body: Annotated[str, "Captured response body text"],
    url: Annotated[str, "URL the body was captured from"] = "",
) -> str:
    """Classify a captured response body and return the parsed row as JSON.

    Event-stream bodies return their events and identifier summary;
    line-delimited JSON bodies return each line with extracted search data.
    """
    stream = CapturedStream(
        timestamp=int(time.time() * 1000),
        url=url,
        request_id=uuid.uuid4().hex,
        body=body,
    )
    try:
        row = classify_stream(stream)
    except Exception as e:
        logger.error(f"Failed to inspect body from {url}: {e}")
        return f"Error: {type(e).__name__}: {e}"
    return json.dumps(row_to_data(row), ensure_ascii=False, indent=2)


def decode_token(
    token: Annotated[str, "Bearer token (header.claims.signature)"],
) -> str:
    """Decode a JWT-like token's header and claims.

    The token itself is only ever returned in masked form.
    """
    try:
        info = decode_jwt_claims(token)
    except StreamInspectorError as e:
        return f"Error [{e.code.value}]: {e.message}"
    return json.dumps(info.model_dump(mode="json", exclude_none=True), ensure_ascii=False, indent=2)


def list_errors() -> str:
    """List errors reported by the parsers in this server process."""
    entries = get_error_store().get_errors()
    data = [entry.model_dump(mode="json", exclude_none=True, exclude={"stack"}) for entry in entries]
    return json.dumps(data, ensure_ascii=False, indent=2)


def clear_errors() -> str:
    """Clear the error log."""
    count = len(get_error_store())
    get_error_store().clear()
    return f"Cleared {count} error(s)"


for _tool in (inspect_body, decode_token, list_errors, clear_errors):
    mcp.tool()(_tool)
