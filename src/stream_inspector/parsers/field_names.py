"""Field names under which search queries and results appear.

Order matters: matches are concatenated in table order before dedup.
"""

QUERY_FIELD_NAMES: tuple[str, ...] = (
    "search_model_queries",
    "queries",
    "query",
    "search_query",
    "search_queries",
    "web_search_queries",
    "model_queries",
    "search",
    "searches",
    "web_searches",
    "web_search",
    "search_request",
    "search_requests",
    "query_text",
)

RESULT_FIELD_NAMES: tuple[str, ...] = (
    "search_result_groups",
    "search_results",
    "results",
    "web_results",
    "web_search_results",
    "search_result",
    "result_groups",
    "result",
    "search_response",
    "search_data",
    "search_output",
)

# Keys mapped onto SearchResultEntry fields; anything else goes to metadata
KNOWN_ENTRY_FIELDS: frozenset[str] = frozenset(
    {
        "url",
        "title",
        "snippet",
        "thumbnail",
        "authority",
        "favicon",
        "published_date",
        "last_updated",
        "author",
        "domain",
        "rank",
        "score",
        "entries",
    }
)
