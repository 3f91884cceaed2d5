"""Unit tests for line-delimited JSON parsing."""

from __future__ import annotations

import json

import pytest

from stream_inspector.errors import ErrorStore
from stream_inspector.models import ErrorSource, ExtractedData, SearchQuery
from stream_inspector.parsers.jsonl import parse_jsonl

URL = "https://chat.example.com/backend-api/conversation/abc"


class TestParseJsonl:
    """Tests for parse_jsonl."""

    def test_mixed_lines(self) -> None:
        """Blank lines are dropped and invalid lines keep parsed=None."""
        body = "\n".join(['{"a":1}', "  ", "invalid", '{"b":2}'])
        result = parse_jsonl(URL, body)

        assert result.url == URL
        assert len(result.items) == 3
        assert result.items[0].parsed["a"] == 1
        assert isinstance(result.items[0].parsed["extracted"], ExtractedData)
        assert result.items[1].line == "invalid"
        assert result.items[1].parsed is None
        assert result.items[2].parsed["b"] == 2

    def test_empty_body(self) -> None:
        """An empty body has no items."""
        assert parse_jsonl(URL, "").items == []

    def test_crlf_lines(self) -> None:
        """CRLF-terminated lines are split like LF lines."""
        items = parse_jsonl(URL, '{"a":1}\r\n{"b":2}\r\n').items
        assert [item.line for item in items] == ['{"a":1}', '{"b":2}']
        assert items[1].parsed["b"] == 2

    def test_line_text_preserved(self) -> None:
        """The original line text is kept verbatim."""
        line = '  {"a": 1}  '
        assert parse_jsonl(URL, line).items[0].line == line

    def test_array_line_not_enriched(self) -> None:
        """A decoded array is kept without an extracted key."""
        item = parse_jsonl(URL, "[1, 2, 3]").items[0]
        assert item.parsed == [1, 2, 3]

    @pytest.mark.parametrize("line", ["42", "3.5", '"text"', "true", "null"])
    def test_scalar_line_kept_without_enrichment(self, line: str) -> None:
        """Lines decoding to scalars keep the decoded value as-is."""
        item = parse_jsonl(URL, line).items[0]
        assert item.line == line
        assert item.parsed == json.loads(line)

    def test_scalars_alongside_objects(self) -> None:
        """Scalar lines keep their values next to enriched objects."""
        items = parse_jsonl(URL, '42\n"text"\n{"a":1}').items

        assert [item.parsed for item in items[:2]] == [42, "text"]
        assert isinstance(items[2].parsed["extracted"], ExtractedData)

    def test_extracted_search_data(self, jsonl_body: str) -> None:
        """Objects are enriched with queries, results and metadata."""
        first, second = parse_jsonl(URL, jsonl_body).items

        extracted = first.parsed["extracted"]
        assert extracted.title == "Trip planning"
        assert extracted.conversation_id == "conv-1"
        assert extracted.create_time == 1700000000.5
        assert extracted.search_queries == [SearchQuery(query="kyoto weather", timestamp=1)]
        assert extracted.search_results[0].domain == "weather.example"
        assert extracted.search_results[0].entries[0].title == "Kyoto"

        assert [q.query for q in second.parsed["extracted"].search_queries] == ["kyoto weather", "kyoto temples"]

    def test_original_keys_kept_alongside_extracted(self) -> None:
        """Enrichment adds a key without dropping decoded fields."""
        parsed = parse_jsonl(URL, '{"title": "t", "n": 1}').items[0].parsed
        assert parsed["title"] == "t"
        assert parsed["n"] == 1
        assert parsed["extracted"].title == "t"

    def test_non_string_body_reports_and_raises(self, store: ErrorStore) -> None:
        """Non-string input is reported to parser-jsonl with the URL."""
        with pytest.raises(TypeError):
            parse_jsonl(URL, None, store=store)  # type: ignore[arg-type]

        errors = store.get_errors()
        assert len(errors) == 1
        assert errors[0].source == ErrorSource.PARSER_JSONL
        assert errors[0].context == {"url": URL}

    def test_invalid_lines_are_not_reported(self, store: ErrorStore) -> None:
        """Per-line decode failures are not errors."""
        parse_jsonl(URL, "not json\nalso not json", store=store)
        assert store.get_errors() == []
