"""Search query/result extraction from decoded JSON objects.

Queries and result groups show up under many key names and at varying
depths depending on the backend version. Every alias in
``field_names`` is searched with ``deep_find`` and the matches are shaped
into typed records.
"""

from __future__ import annotations

from typing import Any

from stream_inspector.models import ExtractedData, SearchQuery, SearchResultEntry, SearchResultGroup
from stream_inspector.parsers.deep_find import deep_find
from stream_inspector.parsers.field_names import KNOWN_ENTRY_FIELDS, QUERY_FIELD_NAMES, RESULT_FIELD_NAMES
from stream_inspector.parsers.util import is_number


def _get_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    return value if isinstance(value, str) else None


def _get_number(data: dict[str, Any], key: str) -> float | None:
    value = data.get(key)
    return value if is_number(value) else None


def extract_metadata(entry: dict[str, Any]) -> dict[str, Any]:
    """Return the keys of a result entry that have no dedicated field."""
    return {k: v for k, v in entry.items() if k not in KNOWN_ENTRY_FIELDS}


def extract_entry(entry: dict[str, Any]) -> SearchResultEntry:
    """Shape a raw result entry.

    Args:
        entry: Raw entry object

    Returns:
        SearchResultEntry; url/title/snippet default to empty strings
    """
    metadata = extract_metadata(entry)
    return SearchResultEntry(
        url=_get_str(entry, "url") or "",
        title=_get_str(entry, "title") or "",
        snippet=_get_str(entry, "snippet") or "",
        thumbnail=_get_str(entry, "thumbnail"),
        authority=_get_number(entry, "authority"),
        favicon=_get_str(entry, "favicon"),
        published_date=_get_str(entry, "published_date"),
        last_updated=_get_str(entry, "last_updated"),
        author=_get_str(entry, "author"),
        domain=_get_str(entry, "domain"),
        rank=_get_number(entry, "rank"),
        score=_get_number(entry, "score"),
        metadata=metadata or None,
    )


def extract_group(group: dict[str, Any]) -> SearchResultGroup:
    """Shape a raw result group, dropping entries that are not objects."""
    entries = group.get("entries")
    shaped: list[SearchResultEntry] = []
    if isinstance(entries, list):
        shaped = [extract_entry(e) for e in entries if isinstance(e, dict)]
    return SearchResultGroup(domain=_get_str(group, "domain") or "", entries=shaped)


def _shape_query(value: Any) -> SearchQuery | None:
    if isinstance(value, str):
        return SearchQuery(query=value) if value else None
    if isinstance(value, dict):
        text = value.get("query")
        if not isinstance(text, str) or not text:
            return None
        return SearchQuery(query=text, timestamp=_get_number(value, "timestamp"))
    return None


def extract_queries(obj: Any) -> list[SearchQuery]:
    """Find all search queries in a decoded structure.

    Matches from every query alias are concatenated in table order and
    deduplicated by exact query text, keeping the first occurrence.

    Args:
        obj: Decoded JSON value

    Returns:
        Unique, non-empty queries
    """
    seen: set[str] = set()
    queries: list[SearchQuery] = []
    for name in QUERY_FIELD_NAMES:
        for match in deep_find(obj, name):
            query = _shape_query(match)
            if query is None or query.query in seen:
                continue
            seen.add(query.query)
            queries.append(query)
    return queries


def extract_results(obj: Any) -> list[SearchResultGroup]:
    """Find all search result groups in a decoded structure."""
    groups: list[SearchResultGroup] = []
    for name in RESULT_FIELD_NAMES:
        groups.extend(extract_group(match) for match in deep_find(obj, name) if isinstance(match, dict))
    return groups


def extract_search_data(data: Any) -> ExtractedData:
    """Extract search data and conversation metadata from a decoded value.

    Metadata is read from the top-level object only; queries and results
    are searched recursively. Scalars and None yield an empty result.

    Args:
        data: Decoded JSON value

    Returns:
        ExtractedData (never None)
    """
    if not isinstance(data, (dict, list)):
        return ExtractedData()

    meta: dict[str, Any] = {}
    if isinstance(data, dict):
        meta = {
            "title": _get_str(data, "title"),
            "conversation_id": _get_str(data, "conversation_id"),
            "model_slug": _get_str(data, "model_slug"),
            "create_time": _get_number(data, "create_time"),
            "update_time": _get_number(data, "update_time"),
        }

    return ExtractedData(
        **meta,
        search_queries=extract_queries(data),
        search_results=extract_results(data),
    )
