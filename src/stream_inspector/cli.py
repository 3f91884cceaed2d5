"""CLI interface for stream inspection.

Provides commands for classifying captured response bodies, exporting a
JSON report, and decoding bearer tokens.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from stream_inspector.capture_io import dump_captures, load_body, load_captures, load_flow_captures
from stream_inspector.classifier import classify_streams, describe_row, export_rows
from stream_inspector.config import get_log_level
from stream_inspector.errors import get_error_store
from stream_inspector.models import CapturedStream, SseRow, StreamInspectorError
from stream_inspector.parsers.jwt import decode_jwt_claims, scan_event_tokens
from stream_inspector.parsers.query_grouping import aggregate_search_data
from stream_inspector.utils.logging import setup_logging

app = typer.Typer(
    name="stream-inspector",
    help="Classify captured response streams and extract search data",
)


@app.callback()
def _configure() -> None:
    setup_logging(get_log_level())


def _load(file: Path, flow: bool, raw: bool, url_filter: list[str] | None) -> list[CapturedStream]:
    if flow:
        return load_flow_captures(file, url_filter)
    if raw:
        return [load_body(file)]
    captures = load_captures(file)
    if url_filter:
        captures = [c for c in captures if any(part in c.url for part in url_filter)]
    return captures


@app.command()
def inspect(
    file: Annotated[
        Path,
        typer.Argument(help="Capture file (JSON/JSONL records, .flow dump, or raw body)"),
    ],
    flow: Annotated[
        bool,
        typer.Option("--flow", help="Read a mitmproxy .flow dump"),
    ] = False,
    raw: Annotated[
        bool,
        typer.Option("--raw", help="Treat the file as a single raw response body"),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the JSON report to this file"),
    ] = None,
    url_filter: Annotated[
        list[str] | None,
        typer.Option("--url-filter", "-u", help="Keep only URLs containing this substring (repeatable)"),
    ] = None,
    show_errors: Annotated[
        bool,
        typer.Option("--errors", help="Print the error log after the run"),
    ] = False,
    show_tokens: Annotated[
        bool,
        typer.Option("--tokens", help="List bearer tokens found in event streams (masked)"),
    ] = False,
) -> None:
    """Classify captured streams and summarize them.

    Example:
        python -m stream_inspector inspect captures.json -o report.json
    """
    if not file.exists():
        typer.echo(f"❌ File not found: {file}", err=True)
        raise typer.Exit(1)

    try:
        captures = _load(file, flow, raw, url_filter)
    except StreamInspectorError as e:
        typer.echo(f"❌ Error: {e.message}", err=True)
        raise typer.Exit(1) from e

    rows = classify_streams(captures)
    typer.echo(f"📊 {len(rows)} stream(s) from {file}")
    for row in rows:
        typer.echo(f"  {describe_row(row)}")

    search = aggregate_search_data(rows)
    if search.search_queries:
        typer.echo()
        typer.echo(f"🔍 {len(search.search_queries)} search quer{'y' if len(search.search_queries) == 1 else 'ies'}:")
        for query in search.search_queries:
            typer.echo(f"  - {query.query}")
    entry_count = sum(len(group.entries) for group in search.search_results)
    if entry_count:
        typer.echo(f"📄 {entry_count} search result(s) in {len(search.search_results)} group(s)")

    if show_tokens:
        tokens = [info for row in rows if isinstance(row, SseRow) for info in scan_event_tokens(row.events)]
        typer.echo()
        typer.echo(f"🔑 {len(tokens)} token(s) found")
        for info in tokens:
            claims = info.claims if isinstance(info.claims, dict) else {}
            typer.echo(f"  {info.masked} sub={claims.get('sub')} exp={claims.get('exp')}")

    if output:
        export_rows(rows, output)
        typer.echo(f"✅ Report saved to: {output}")

    if show_errors:
        errors = get_error_store().get_errors()
        typer.echo()
        typer.echo(f"⚠️  {len(errors)} error(s) reported")
        for entry in errors:
            typer.echo(f"  [{entry.source.value}] {entry.message}")


@app.command("decode-token")
def decode_token(
    token: Annotated[str, typer.Argument(help="Bearer token (header.claims.signature)")],
    show: Annotated[
        bool,
        typer.Option("--show", help="Include the unmasked token in the output"),
    ] = False,
) -> None:
    """Decode a JWT-like token's header and claims.

    The token is masked in the output unless --show is given.
    """
    try:
        info = decode_jwt_claims(token)
    except StreamInspectorError as e:
        typer.echo(f"❌ Error: {e.message}", err=True)
        raise typer.Exit(1) from e

    if show:
        info = info.model_copy(update={"raw": token})
    typer.echo(json.dumps(info.model_dump(mode="json", exclude_none=True), ensure_ascii=False, indent=2))


@app.command()
def convert(
    file: Annotated[Path, typer.Argument(help="mitmproxy .flow dump")],
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output file (JSON capture records)"),
    ] = Path("captures.json"),
    url_filter: Annotated[
        list[str] | None,
        typer.Option("--url-filter", "-u", help="Keep only URLs containing this substring (repeatable)"),
    ] = None,
) -> None:
    """Convert a mitmproxy dump into JSON capture records.

    Example:
        python -m stream_inspector convert traffic.flow -o captures.json -u /backend-api/
    """
    if not file.exists():
        typer.echo(f"❌ File not found: {file}", err=True)
        raise typer.Exit(1)

    try:
        captures = load_flow_captures(file, url_filter)
    except StreamInspectorError as e:
        typer.echo(f"❌ Error: {e.message}", err=True)
        raise typer.Exit(1) from e

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(dump_captures(captures), encoding="utf-8")
    typer.echo(f"✅ Converted {len(captures)} flow(s) to: {output}")


@app.command()
def serve(
    http: Annotated[
        bool,
        typer.Option("--http", help="Use HTTP transport instead of stdio"),
    ] = False,
    host: Annotated[str, typer.Option("--host", help="Host to bind HTTP server")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", "-p", help="Port for HTTP transport")] = 9000,
) -> None:
    """Run the MCP server exposing the inspection tools."""
    from stream_inspector.server import mcp

    if http:
        mcp.run(transport="http", host=host, port=port)
    else:
        mcp.run()


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
