"""Parsers and extractors for captured stream bodies."""

from stream_inspector.parsers.deep_find import deep_find
from stream_inspector.parsers.jsonl import parse_jsonl
from stream_inspector.parsers.jwt import decode_jwt_claims, find_tokens, mask_tokens_in_text, scan_event_tokens
from stream_inspector.parsers.search_extract import (
    extract_entry,
    extract_group,
    extract_queries,
    extract_results,
    extract_search_data,
)
from stream_inspector.parsers.sse import parse_event_stream, summarize
from stream_inspector.parsers.util import JsonParseResult, mask_token, try_parse_json

__all__ = [
    "JsonParseResult",
    "decode_jwt_claims",
    "deep_find",
    "extract_entry",
    "extract_group",
    "extract_queries",
    "extract_results",
    "extract_search_data",
    "find_tokens",
    "mask_token",
    "mask_tokens_in_text",
    "parse_event_stream",
    "parse_jsonl",
    "scan_event_tokens",
    "summarize",
    "try_parse_json",
]
