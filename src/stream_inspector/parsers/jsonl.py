"""Line-delimited JSON parsing."""

from __future__ import annotations

import logging
import re

from stream_inspector.errors import ErrorStore, report_error
from stream_inspector.models import ErrorSource, JsonlItem, ParsedJsonl
from stream_inspector.parsers.search_extract import extract_search_data
from stream_inspector.parsers.util import try_parse_json

logger = logging.getLogger(__name__)

LINE_SPLIT = re.compile(r"\r?\n")


def _parse_line(line: str) -> JsonlItem:
    result = try_parse_json(line)
    if not result.success:
        return JsonlItem(line=line)
    value = result.value
    if isinstance(value, dict):
        value = {**value, "extracted": extract_search_data(value)}
    return JsonlItem(line=line, parsed=value)


def parse_jsonl(url: str, body: str, *, store: ErrorStore | None = None) -> ParsedJsonl:
    """Parse a line-delimited JSON body.

    Blank lines are dropped. A line that is not valid JSON is kept with
    ``parsed=None``. Decoded objects are enriched with extracted search
    data under the ``extracted`` key; any other decoded value is kept
    as-is.

    Args:
        url: Source URL
        body: Raw body text
        store: Error store for reporting (default: process-wide store)

    Returns:
        ParsedJsonl with one item per non-blank line

    Raises:
        TypeError: If body is not a string (reported to ``parser-jsonl``)
    """
    try:
        if not isinstance(body, str):
            raise TypeError(f"jsonl body must be str, got {type(body).__name__}")
        items = [_parse_line(line) for line in LINE_SPLIT.split(body) if line.strip()]
        failed = sum(1 for item in items if item.parsed is None)
        if failed:
            logger.debug("%d of %d line(s) from %s are not JSON", failed, len(items), url)
        return ParsedJsonl(url=url, items=items)
    except Exception as e:
        report_error(ErrorSource.PARSER_JSONL, e, {"url": url}, store=store)
        raise
