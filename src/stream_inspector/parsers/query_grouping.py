"""Cross-row aggregation of extracted search data."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import assert_never

from stream_inspector.models import (
    ExtractedData,
    JsonlRow,
    OtherRow,
    QueryWithResults,
    SearchQuery,
    SearchResultGroup,
    SseRow,
    UiStreamRow,
)


def _row_extracted(row: UiStreamRow) -> list[ExtractedData]:
    if isinstance(row, JsonlRow):
        found: list[ExtractedData] = []
        for item in row.parsed.items:
            if isinstance(item.parsed, dict) and isinstance(item.parsed.get("extracted"), ExtractedData):
                found.append(item.parsed["extracted"])
        return found
    if isinstance(row, (SseRow, OtherRow)):
        return []
    assert_never(row)


def aggregate_search_data(rows: Iterable[UiStreamRow]) -> ExtractedData:
    """Merge the extracted search data of every line-JSON row.

    Conversation id and create time come from the first extracted record.

    Args:
        rows: Classified stream rows

    Returns:
        Combined ExtractedData
    """
    extracted = [e for row in rows for e in _row_extracted(row)]
    first = extracted[0] if extracted else None
    return ExtractedData(
        conversation_id=first.conversation_id if first else None,
        create_time=first.create_time if first else None,
        search_queries=[q for e in extracted for q in e.search_queries],
        search_results=[g for e in extracted for g in e.search_results],
    )


def group_results_by_query(
    queries: Sequence[SearchQuery],
    results: Sequence[SearchResultGroup],
) -> list[QueryWithResults]:
    """Pair each query with the result groups captured in the same batch.

    Captured streams do not link individual results to queries, so every
    query carries all groups.

    Args:
        queries: Extracted queries
        results: Extracted result groups

    Returns:
        One QueryWithResults per query
    """
    total = sum(len(group.entries) for group in results)
    return [QueryWithResults(query=query, results=list(results), total_results=total) for query in queries]
