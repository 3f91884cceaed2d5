"""Pydantic data models for stream-inspector.

This module defines the records that flow through the classification
and extraction pipeline: captured streams, parsed event-stream and
line-delimited JSON views, extracted search data, decoded tokens,
error-log entries and the exception types raised by the parsers.

Models whose exported names are camelCase declare camelCase aliases.
Export with ``model_dump(mode="json", by_alias=True, exclude_none=True)``.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for immutable records exported with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class CapturedStream(CamelModel):
    """A finalized response body for one completed HTTP exchange.

    Attributes:
        timestamp: Capture time (epoch milliseconds)
        url: Request URL
        request_id: Identifier assigned by the capture channel
        body: Response body text
    """

    timestamp: int
    url: str
    request_id: str
    body: str


class SseEvent(CamelModel):
    """One blank-line-delimited block of an event-stream body.

    Attributes:
        event: Value of the ``event:`` line, if any
        data: Decoded JSON payload, or the raw joined ``data:`` text
        raw_block: Original block lines joined by newline
    """

    event: str | None = None
    data: Any = None
    raw_block: str


class ParsedStreamSummary(CamelModel):
    """Rollup identifiers folded from an event sequence."""

    conversation_ids: set[str] = Field(default_factory=set)
    request_ids: set[str] = Field(default_factory=set)
    message_ids: set[str] = Field(default_factory=set)
    model_slugs: set[str] = Field(default_factory=set)
    delta_encoding: str | None = None


class ParsedStream(CamelModel):
    """Event-stream view of a captured body."""

    url: str
    content_type: str = "text/event-stream"
    events: list[SseEvent] = Field(default_factory=list)
    summary: ParsedStreamSummary = Field(default_factory=ParsedStreamSummary)


class SearchQuery(BaseModel):
    """A search query issued by the model.

    Attributes:
        query: Query text (never empty)
        timestamp: Optional numeric timestamp
    """

    model_config = ConfigDict(frozen=True)

    query: str = Field(min_length=1)
    timestamp: float | None = None


class SearchResultEntry(BaseModel):
    """A single search hit.

    Attributes:
        url: Result URL (empty string when missing)
        title: Result title (empty string when missing)
        snippet: Result snippet (empty string when missing)
        metadata: Every key of the source object not mapped to a field
    """

    model_config = ConfigDict(frozen=True)

    url: str = ""
    title: str = ""
    snippet: str = ""
    thumbnail: str | None = None
    authority: float | None = None
    favicon: str | None = None
    published_date: str | None = None
    last_updated: str | None = None
    author: str | None = None
    domain: str | None = None
    rank: float | None = None
    score: float | None = None
    metadata: dict[str, Any] | None = None


class SearchResultGroup(BaseModel):
    """Search hits grouped under a domain."""

    model_config = ConfigDict(frozen=True)

    domain: str = ""
    entries: list[SearchResultEntry] = Field(default_factory=list)


class ContentReference(BaseModel):
    """Citation linking a message to search results."""

    cited_message_idx: int
    reference_ids: list[str] = Field(default_factory=list)
    matched_text: str | None = None
    url: str | None = None


class MessageContent(BaseModel):
    """Content block of a conversation message."""

    content_type: str
    parts: list[str] | None = None
    text: str | None = None


class ConversationMessage(BaseModel):
    """A conversation message node."""

    id: str
    author: dict[str, str]
    content: MessageContent | None = None
    create_time: float | None = None
    status: str | None = None
    metadata: dict[str, Any] | None = None
    children: list[str] | None = None
    parent: str | None = None


class ExtractedData(CamelModel):
    """Search data and metadata mined from one decoded JSON object.

    ``content_refs`` and ``messages`` are reserved and currently always empty.
    """

    title: str | None = None
    conversation_id: str | None = None
    model_slug: str | None = None
    create_time: float | None = None
    update_time: float | None = None
    search_queries: list[SearchQuery] = Field(default_factory=list)
    search_results: list[SearchResultGroup] = Field(default_factory=list)
    content_refs: list[ContentReference] = Field(default_factory=list)
    messages: list[ConversationMessage] = Field(default_factory=list)


class JsonlItem(BaseModel):
    """One non-blank line of a line-delimited JSON body.

    Attributes:
        line: Original line text
        parsed: Decoded value, or None when the line is not valid JSON.
            Decoded objects carry an ``extracted`` key holding ExtractedData.
    """

    model_config = ConfigDict(frozen=True)

    line: str
    parsed: Any = None


class ParsedJsonl(BaseModel):
    """Line-delimited JSON view of a captured body."""

    model_config = ConfigDict(frozen=True)

    url: str
    items: list[JsonlItem] = Field(default_factory=list)


class SseRow(BaseModel):
    """Stream row for an event-stream body."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["sse"] = "sse"
    url: str
    events: list[SseEvent]
    parsed: ParsedStream


class JsonlRow(BaseModel):
    """Stream row for a line-delimited JSON body."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["jsonl"] = "jsonl"
    url: str
    parsed: ParsedJsonl


class OtherRow(BaseModel):
    """Stream row for an unrecognized body."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["other"] = "other"
    url: str
    note: str


UiStreamRow = Annotated[SseRow | JsonlRow | OtherRow, Field(discriminator="kind")]


class QueryWithResults(BaseModel):
    """A query paired with the result groups captured alongside it."""

    query: SearchQuery
    results: list[SearchResultGroup] = Field(default_factory=list)
    total_results: int = 0


class SecretVisibility(str, Enum):
    """Whether decoded credentials may be shown unmasked."""

    MASKED = "masked"
    VISIBLE = "visible"


class TokenInfo(BaseModel):
    """Decoded bearer token.

    Attributes:
        masked: Masked token text (always present)
        header: Decoded header segment
        claims: Decoded claims segment
        raw: Unmasked token, only set when explicitly requested
    """

    model_config = ConfigDict(frozen=True)

    masked: str
    header: Any = None
    claims: Any = None
    raw: str | None = None


class ErrorSource(str, Enum):
    """Component that reported an error."""

    PARSER_SSE = "parser-sse"
    PARSER_JSONL = "parser-jsonl"
    PARSER_JWT = "parser-jwt"


class ErrorSeverity(str, Enum):
    """Severity of an error-log entry."""

    ERROR = "error"


class ErrorEntry(BaseModel):
    """A reported error.

    Attributes:
        id: Unique id (``<epoch-ms>-<hex>``)
        timestamp: Report time (epoch milliseconds)
        source: Reporting component
        message: Exception message
        severity: Entry severity
        stack: Formatted traceback, if the exception carried one
        context: Call-specific context (url, body preview, ...)
    """

    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: int
    source: ErrorSource
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    stack: str | None = None
    context: dict[str, Any] | None = None


class ErrorCode(str, Enum):
    """Error codes for stream-inspector errors."""

    TOKEN_DECODE_FAILED = "token_decode_failed"
    DECODER_UNAVAILABLE = "decoder_unavailable"
    CAPTURE_LOAD_FAILED = "capture_load_failed"


class StreamInspectorError(Exception):
    """Base exception for stream-inspector.

    Attributes:
        code: Error code
        message: Human-readable error message
        details: Additional error details
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, object] | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            details: Additional context (e.g., masked token preview)
        """
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class TokenDecodeError(StreamInspectorError):
    """A token segment is not valid base64url-encoded JSON."""

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        super().__init__(ErrorCode.TOKEN_DECODE_FAILED, message, details)


class DecoderUnavailableError(StreamInspectorError):
    """No base64 decoding primitive is available."""

    def __init__(self, message: str = "No base64 decoder available") -> None:
        super().__init__(ErrorCode.DECODER_UNAVAILABLE, message)


class CaptureLoadError(StreamInspectorError):
    """A capture file could not be read."""

    def __init__(self, message: str, details: dict[str, object] | None = None) -> None:
        super().__init__(ErrorCode.CAPTURE_LOAD_FAILED, message, details)
