"""Event-stream (text/event-stream) parsing and summarization.

A body is a sequence of blocks separated by blank lines. Inside a block,
``event:`` names the event and ``data:`` lines carry the payload. Payloads
that look like JSON objects, arrays or strings are decoded; everything
else is kept as raw text.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from stream_inspector.errors import ErrorStore, report_error
from stream_inspector.models import ErrorSource, ParsedStreamSummary, SseEvent
from stream_inspector.parsers.util import try_parse_json

logger = logging.getLogger(__name__)

LINE_SPLIT = re.compile(r"\r?\n")
BODY_PREVIEW_LENGTH = 200
DELTA_ENCODING_EVENT = "delta_encoding"


@dataclass
class _BlockBuilder:
    event: str | None = None
    data: list[str] = field(default_factory=list)
    raw: list[str] = field(default_factory=list)

    def add_line(self, line: str) -> None:
        self.raw.append(line)
        if line.startswith("event:"):
            self.event = line[len("event:") :].strip()
        if line.startswith("data:"):
            self.data.append(line[len("data:") :].strip())

    def build(self) -> SseEvent | None:
        if not self.raw:
            return None
        return SseEvent(
            event=self.event,
            data=_parse_data("\n".join(self.data)),
            raw_block="\n".join(self.raw),
        )

    def reset(self) -> None:
        self.event = None
        self.data = []
        self.raw = []


def _parse_data(text: str) -> Any:
    trimmed = text.strip()
    if not trimmed or trimmed[0] not in '{["':
        return text
    result = try_parse_json(text)
    return result.value if result.success else text


def _flush(builder: _BlockBuilder, events: list[SseEvent]) -> None:
    event = builder.build()
    if event is not None:
        events.append(event)
    builder.reset()


def parse_event_stream(body: str, *, store: ErrorStore | None = None) -> list[SseEvent]:
    """Split an event-stream body into events.

    Args:
        body: Raw body text
        store: Error store for reporting (default: process-wide store)

    Returns:
        One SseEvent per non-empty block, in order

    Raises:
        TypeError: If body is not a string (reported to ``parser-sse``)
    """
    try:
        if not isinstance(body, str):
            raise TypeError(f"event-stream body must be str, got {type(body).__name__}")
        events: list[SseEvent] = []
        builder = _BlockBuilder()
        for line in LINE_SPLIT.split(body):
            if not line.strip():
                _flush(builder, events)
            else:
                builder.add_line(line)
        _flush(builder, events)
        logger.debug("Parsed %d event(s)", len(events))
        return events
    except Exception as e:
        report_error(ErrorSource.PARSER_SSE, e, {"bodyPreview": str(body)[:BODY_PREVIEW_LENGTH]}, store=store)
        raise


def _add_string(target: set[str], value: Any) -> None:
    if isinstance(value, str) and value:
        target.add(value)


def _as_dict(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def _fold_event(summary: dict[str, Any], event: SseEvent) -> None:
    data = _as_dict(event.data)
    if data is None:
        return

    _add_string(summary["conversation_ids"], data.get("conversation_id"))
    _add_string(summary["request_ids"], data.get("request_id"))
    _add_string(summary["message_ids"], data.get("message_id"))
    _add_string(summary["model_slugs"], data.get("model_slug"))

    nested = _as_dict(data.get("v"))
    if nested is not None:
        _add_string(summary["conversation_ids"], nested.get("conversation_id"))
        message = _as_dict(nested.get("message"))
        if message is not None:
            _add_string(summary["message_ids"], message.get("id"))
            meta = _as_dict(message.get("metadata"))
            if meta is not None:
                _add_string(summary["request_ids"], meta.get("request_id"))
                _add_string(summary["model_slugs"], meta.get("model_slug"))

    if event.event == DELTA_ENCODING_EVENT:
        candidate = nested.get("v") if nested is not None and isinstance(nested.get("v"), str) else data.get("v")
        if isinstance(candidate, str):
            summary["delta_encoding"] = candidate


def summarize(events: Iterable[SseEvent], *, store: ErrorStore | None = None) -> ParsedStreamSummary:
    """Fold parsed events into rollup identifier sets.

    Args:
        events: Parsed events, in stream order
        store: Error store for reporting (default: process-wide store)

    Returns:
        ParsedStreamSummary computed from scratch
    """
    try:
        summary: dict[str, Any] = {
            "conversation_ids": set(),
            "request_ids": set(),
            "message_ids": set(),
            "model_slugs": set(),
            "delta_encoding": None,
        }
        for event in events:
            _fold_event(summary, event)
        return ParsedStreamSummary(**summary)
    except Exception as e:
        report_error(ErrorSource.PARSER_SSE, e, {"reason": "summarize"}, store=store)
        raise
