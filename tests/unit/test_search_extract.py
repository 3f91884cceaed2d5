"""Unit tests for search query/result extraction."""

from __future__ import annotations

import json

from stream_inspector.models import ExtractedData, SearchQuery
from stream_inspector.parsers.search_extract import (
    extract_entry,
    extract_group,
    extract_queries,
    extract_results,
    extract_search_data,
)


class TestExtractQueries:
    """Tests for extract_queries."""

    def test_empty_object(self) -> None:
        """An empty object has no queries."""
        assert extract_queries({}) == []

    def test_finds_queries_at_any_depth(self) -> None:
        """Aliased fields are found regardless of nesting level."""
        data = {
            "data": {
                "items": [
                    {"payload": {"search_queries": [{"query": "python asyncio", "timestamp": 1.5}]}},
                ]
            }
        }
        assert extract_queries(data) == [SearchQuery(query="python asyncio", timestamp=1.5)]

    def test_plain_string_match(self) -> None:
        """A string value becomes a query without timestamp."""
        assert extract_queries({"query_text": "hello"}) == [SearchQuery(query="hello")]

    def test_empty_and_invalid_matches_discarded(self) -> None:
        """Empty text, non-string query fields and other types are dropped."""
        data = {"queries": ["", {"query": ""}, {"query": 5}, {"text": "no query"}, 7, None]}
        assert extract_queries(data) == []

    def test_dedup_keeps_first_occurrence(self) -> None:
        """Identical query text collapses to one, in first-seen order."""
        data = {
            "search_model_queries": [{"query": "a", "timestamp": 10}, {"query": "b"}],
            "queries": ["a", "c"],
        }
        result = extract_queries(data)
        assert [q.query for q in result] == ["a", "b", "c"]
        assert result[0].timestamp == 10

    def test_dedup_is_exact_match(self) -> None:
        """Queries differing only in case or spacing are kept."""
        result = extract_queries({"queries": ["Kyoto", "kyoto", "kyoto "]})
        assert [q.query for q in result] == ["Kyoto", "kyoto", "kyoto "]

    def test_non_numeric_timestamp_dropped(self) -> None:
        """Only numeric timestamps are copied."""
        result = extract_queries({"queries": [{"query": "x", "timestamp": "yesterday"}, {"query": "y", "timestamp": True}]})
        assert [q.timestamp for q in result] == [None, None]


class TestExtractResults:
    """Tests for extract_results and group/entry shaping."""

    def test_empty_object(self) -> None:
        """An empty object has no results."""
        assert extract_results({}) == []

    def test_nested_result_group(self) -> None:
        """Result groups are found under nested aliases."""
        data = {"message": {"metadata": {"web_search_results": {"domain": "d.example", "entries": []}}}}
        groups = extract_results(data)
        assert len(groups) == 1
        assert groups[0].domain == "d.example"

    def test_non_object_matches_dropped(self) -> None:
        """Strings and numbers under result aliases are ignored."""
        assert extract_results({"results": ["a", 1, None]}) == []

    def test_group_defaults(self) -> None:
        """Missing domain and entries default to empty."""
        group = extract_group({})
        assert group.domain == ""
        assert group.entries == []

    def test_group_drops_non_object_entries(self) -> None:
        """Entries that are not objects are discarded."""
        group = extract_group({"domain": "x", "entries": [{"url": "u"}, "junk", 3]})
        assert len(group.entries) == 1
        assert group.entries[0].url == "u"

    def test_entry_mapping_and_metadata(self) -> None:
        """Known fields are mapped; unknown keys go to metadata."""
        entry = extract_entry(
            {
                "url": "https://example.com",
                "title": "Example",
                "snippet": "An example",
                "authority": 0.9,
                "rank": 1,
                "published_date": "2024-01-01",
                "ref_id": "turn0search0",
                "pub_date": 1700000000,
            }
        )
        assert entry.url == "https://example.com"
        assert entry.authority == 0.9
        assert entry.rank == 1
        assert entry.published_date == "2024-01-01"
        assert entry.metadata == {"ref_id": "turn0search0", "pub_date": 1700000000}

    def test_entry_type_checks(self) -> None:
        """Wrongly typed fields fall back to defaults."""
        entry = extract_entry({"url": 1, "title": None, "authority": "high", "score": "9"})
        assert entry.url == ""
        assert entry.title == ""
        assert entry.snippet == ""
        assert entry.authority is None
        assert entry.score is None
        assert entry.metadata is None


class TestExtractSearchData:
    """Tests for extract_search_data."""

    def test_scalar_and_none_inputs(self) -> None:
        """Non-container inputs yield an all-empty result."""
        for value in (None, "text", 5, True):
            assert extract_search_data(value) == ExtractedData()

    def test_metadata_from_top_level_only(self) -> None:
        """Metadata fields are not searched recursively."""
        data = {
            "title": "Top",
            "conversation_id": "conv",
            "model_slug": "gpt-4o",
            "create_time": 1.0,
            "update_time": 2,
            "inner": {"title": "Nested", "conversation_id": "other"},
        }
        result = extract_search_data(data)
        assert result.title == "Top"
        assert result.conversation_id == "conv"
        assert result.model_slug == "gpt-4o"
        assert result.create_time == 1.0
        assert result.update_time == 2
        assert result.content_refs == []
        assert result.messages == []

    def test_nested_only_metadata_is_absent(self) -> None:
        """A title that only appears nested is not reported."""
        assert extract_search_data({"inner": {"title": "Nested"}}).title is None

    def test_top_level_list(self) -> None:
        """A list is mined for queries but has no metadata."""
        result = extract_search_data([{"query": "q"}])
        assert [q.query for q in result.search_queries] == ["q"]
        assert result.title is None

    def test_queries_and_results_together(self, jsonl_body: str) -> None:
        """Queries and results from one object are both extracted."""
        first = json.loads(jsonl_body.splitlines()[0])
        result = extract_search_data(first)
        assert [q.query for q in result.search_queries] == ["kyoto weather"]
        assert len(result.search_results) == 1
        assert result.search_results[0].entries[0].title == "Kyoto"
