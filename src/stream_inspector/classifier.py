"""Stream classification: route a captured body to the right parser.

The classifier sniffs the leading characters of the body instead of
trusting a declared content type, so it works on captures with no
format information at all.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any, assert_never

from pydantic import TypeAdapter

from stream_inspector.config import get_sniff_length
from stream_inspector.errors import ErrorStore
from stream_inspector.models import (
    CapturedStream,
    JsonlRow,
    OtherRow,
    ParsedStream,
    SseRow,
    UiStreamRow,
)
from stream_inspector.parsers.jsonl import parse_jsonl
from stream_inspector.parsers.sse import parse_event_stream, summarize

logger = logging.getLogger(__name__)

UNKNOWN_FORMAT_NOTE = "Unknown format"
DEFAULT_EXPORT_NAME = "sse-capture.json"

_row_adapter: TypeAdapter[UiStreamRow] = TypeAdapter(UiStreamRow)
_rows_adapter: TypeAdapter[list[UiStreamRow]] = TypeAdapter(list[UiStreamRow])


def _looks_like_event_stream(sample: str) -> bool:
    return "event:" in sample or "data:" in sample


def _looks_like_jsonl(sample: str) -> bool:
    if sample.lstrip().startswith("{"):
        return True
    return any(line.strip().startswith("{") for line in sample.split("\n"))


def classify_stream(stream: CapturedStream, *, store: ErrorStore | None = None) -> UiStreamRow:
    """Classify a captured body and parse it according to its format.

    Args:
        stream: Captured stream
        store: Error store for parser failure reports

    Returns:
        SseRow, JsonlRow or OtherRow

    Raises:
        TypeError: If a parser rejects the body (already reported)
    """
    sample = stream.body[: get_sniff_length()].lower()

    if _looks_like_event_stream(sample):
        events = parse_event_stream(stream.body, store=store)
        parsed = ParsedStream(url=stream.url, events=events, summary=summarize(events, store=store))
        return SseRow(url=stream.url, events=events, parsed=parsed)

    if _looks_like_jsonl(sample):
        return JsonlRow(url=stream.url, parsed=parse_jsonl(stream.url, stream.body, store=store))

    return OtherRow(url=stream.url, note=UNKNOWN_FORMAT_NOTE)


def classify_streams(streams: Iterable[CapturedStream], *, store: ErrorStore | None = None) -> list[UiStreamRow]:
    """Classify a batch of captures, isolating per-stream failures.

    A stream whose parse fails becomes an OtherRow carrying the error
    message; the remaining streams are still processed.

    Args:
        streams: Captured streams
        store: Error store for parser failure reports

    Returns:
        One row per stream, in input order
    """
    rows: list[UiStreamRow] = []
    for stream in streams:
        try:
            rows.append(classify_stream(stream, store=store))
        except Exception as e:
            logger.warning(f"Failed to classify stream {stream.request_id} ({stream.url}): {e}")
            rows.append(OtherRow(url=stream.url, note=f"Parse error: {e}"))
    return rows


def describe_row(row: UiStreamRow) -> str:
    """One-line, human-readable description of a row."""
    if isinstance(row, SseRow):
        summary = row.parsed.summary
        return (
            f"[sse] {row.url} - {len(row.events)} event(s), "
            f"{len(summary.conversation_ids)} conversation(s), {len(summary.message_ids)} message(s)"
        )
    if isinstance(row, JsonlRow):
        parsed = sum(1 for item in row.parsed.items if item.parsed is not None)
        return f"[jsonl] {row.url} - {len(row.parsed.items)} line(s), {parsed} parsed"
    if isinstance(row, OtherRow):
        return f"[other] {row.url} - {row.note}"
    assert_never(row)


def row_to_data(row: UiStreamRow) -> dict[str, Any]:
    """Convert a row to JSON-compatible data with exported key names."""
    return _row_adapter.dump_python(row, mode="json", by_alias=True, exclude_none=True)


def rows_to_json(rows: list[UiStreamRow]) -> str:
    """Serialize rows as a pretty-printed JSON report."""
    data = _rows_adapter.dump_python(rows, mode="json", by_alias=True, exclude_none=True)
    return json.dumps(data, ensure_ascii=False, indent=2)


def export_rows(rows: list[UiStreamRow], path: Path | str = DEFAULT_EXPORT_NAME) -> Path:
    """Write rows to a JSON report file.

    Args:
        rows: Classified rows
        path: Output file (parent directories are created)

    Returns:
        Path that was written
    """
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(rows_to_json(rows), encoding="utf-8")
    logger.info("Exported %d row(s) to %s", len(rows), output)
    return output
