"""Stream inspector: classify and mine captured network response bodies."""

from stream_inspector.classifier import classify_stream, classify_streams, export_rows, rows_to_json
from stream_inspector.errors import ErrorStore, get_error_store, report_error
from stream_inspector.models import (
    CapturedStream,
    ExtractedData,
    JsonlRow,
    OtherRow,
    ParsedStreamSummary,
    SseEvent,
    SseRow,
    UiStreamRow,
)

__all__ = [
    "CapturedStream",
    "ErrorStore",
    "ExtractedData",
    "JsonlRow",
    "OtherRow",
    "ParsedStreamSummary",
    "SseEvent",
    "SseRow",
    "UiStreamRow",
    "classify_stream",
    "classify_streams",
    "export_rows",
    "get_error_store",
    "report_error",
    "rows_to_json",
]
