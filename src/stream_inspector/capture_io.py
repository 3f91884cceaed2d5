"""Loading captured streams from files.

Captures arrive from an external channel. This module reads the formats
that channel commonly leaves on disk: a JSON array (or JSONL file) of
capture records, a mitmproxy ``.flow`` dump, or a single raw body.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from stream_inspector.models import CapturedStream, CaptureLoadError
from stream_inspector.parsers.util import try_parse_json

logger = logging.getLogger(__name__)

_captures_adapter: TypeAdapter[list[CapturedStream]] = TypeAdapter(list[CapturedStream])


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CaptureLoadError(f"Failed to read {path}: {e}", details={"path": str(path)}) from e


def _records_from_text(text: str) -> list[Any]:
    result = try_parse_json(text)
    if result.success:
        value = result.value
        return value if isinstance(value, list) else [value]

    # Not a single JSON document; treat as one record per line
    records: list[Any] = []
    for number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        parsed = try_parse_json(line)
        if not parsed.success:
            raise CaptureLoadError(f"Line {number} is not valid JSON", details={"line": number})
        records.append(parsed.value)
    return records


def load_captures(path: Path | str) -> list[CapturedStream]:
    """Load capture records from a JSON array or JSONL file.

    Records use the exported key names (``timestamp``, ``url``,
    ``requestId``, ``body``).

    Args:
        path: Capture file

    Returns:
        Validated captures, in file order

    Raises:
        CaptureLoadError: If the file cannot be read or a record is invalid
    """
    file = Path(path)
    records = _records_from_text(_read_text(file))
    try:
        captures = _captures_adapter.validate_python(records)
    except ValidationError as e:
        raise CaptureLoadError(
            f"Invalid capture record in {file}: {e.error_count()} error(s)",
            details={"path": str(file), "errors": e.errors(include_url=False)},
        ) from e
    logger.info("Loaded %d capture(s) from %s", len(captures), file)
    return captures


def load_body(path: Path | str, url: str = "") -> CapturedStream:
    """Wrap a raw response body file as a single capture.

    Args:
        path: File holding the body text
        url: URL to attach (defaults to the file URI)

    Returns:
        CapturedStream for the body
    """
    file = Path(path)
    return CapturedStream(
        timestamp=int(time.time() * 1000),
        url=url or file.resolve().as_uri(),
        request_id=uuid.uuid4().hex,
        body=_read_text(file),
    )


def load_flow_captures(path: Path | str, url_filter: Sequence[str] | None = None) -> list[CapturedStream]:
    """Read HTTP flows with a response from a mitmproxy dump.

    Requires the optional ``mitmproxy`` dependency.

    Args:
        path: ``.flow`` file written by mitmdump
        url_filter: URL substrings to keep (any match); None keeps all

    Returns:
        One capture per matching flow

    Raises:
        CaptureLoadError: If mitmproxy is missing or the file is unreadable
    """
    try:
        from mitmproxy import io as mio
        from mitmproxy.exceptions import FlowReadException
        from mitmproxy.http import HTTPFlow
    except ImportError as e:
        raise CaptureLoadError("mitmproxy is not installed. Install the 'flow' extra.") from e

    file = Path(path)
    captures: list[CapturedStream] = []
    try:
        with open(file, "rb") as f:
            reader = mio.FlowReader(f)
            for flow in reader.stream():
                if not isinstance(flow, HTTPFlow) or flow.response is None:
                    continue
                url = flow.request.url
                if url_filter and not any(part in url for part in url_filter):
                    continue
                finished = flow.response.timestamp_end or flow.request.timestamp_start
                captures.append(
                    CapturedStream(
                        timestamp=int(finished * 1000),
                        url=url,
                        request_id=flow.id,
                        body=flow.response.get_text(strict=False) or "",
                    )
                )
    except (OSError, FlowReadException) as e:
        raise CaptureLoadError(f"Failed to read flows from {file}: {e}", details={"path": str(file)}) from e

    logger.info("Loaded %d flow capture(s) from %s", len(captures), file)
    return captures


def dump_captures(captures: Sequence[CapturedStream]) -> str:
    """Serialize captures in the format ``load_captures`` reads."""
    data = _captures_adapter.dump_python(list(captures), mode="json", by_alias=True)
    return json.dumps(data, ensure_ascii=False, indent=2)
