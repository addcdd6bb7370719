"""CLI interface for geminirag using Click."""

from __future__ import annotations

import asyncio
import base64
import json
import mimetypes
import sys
from pathlib import Path

import click
import httpx

from geminirag.client.types import Document, Operation, QueryResult, Store
from geminirag.core.errors import ToolError
from geminirag.core.logging import setup_logging
from geminirag.core.service import RAGService
from geminirag.tools.catalog import TOOLS

TEXT_MIME_TYPES = {"application/json", "application/xml", "application/x-yaml", "application/javascript"}


def _build_service(ctx: click.Context) -> RAGService:
    service = RAGService()
    setup_logging(ctx.obj.get("log_level") or service.settings.server.log_level)
    return service


def _encode_file(data: bytes, mime_type: str) -> tuple[str, str]:
    """Send text as-is; binary (or undecodable) content goes base64."""
    if mime_type.startswith("text/") or mime_type in TEXT_MIME_TYPES:
        try:
            return data.decode("utf-8"), "text"
        except UnicodeDecodeError:
            pass
    return base64.b64encode(data).decode("ascii"), "base64"


def _dispatch(service: RAGService, tool_name: str, arguments: dict) -> dict:
    """Run one tool call for a convenience command, turning failures into CLI errors."""
    try:
        return asyncio.run(service.dispatcher.dispatch(tool_name, arguments))
    except (ToolError, httpx.HTTPError) as e:
        raise click.ClickException(str(e)) from e


def _operation(data: dict) -> Operation:
    try:
        return Operation.from_api(data)
    except ValueError as e:
        raise click.ClickException(f"Malformed operation in response: {e}") from e


@click.group()
@click.version_option(version="0.1.0", prog_name="geminirag")
@click.option("--log-level", default=None, help="Logging level (default from settings)")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None):
    """geminirag - Gemini File Search RAG tools"""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level


# ---------------------------------------------------------------------------
# Servers
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--http", "use_http", is_flag=True, help="Serve JSON-RPC over HTTP instead of stdio")
@click.option("--host", default=None, help="HTTP bind address")
@click.option("--port", default=None, type=int, help="HTTP port")
@click.pass_context
def serve(ctx: click.Context, use_http: bool, host: str | None, port: int | None):
    """Run the tool server (stdio by default)."""
    service = _build_service(ctx)

    if use_http:
        import uvicorn

        from geminirag.interfaces.web.app import create_app

        uvicorn.run(
            create_app(service),
            host=host or service.settings.server.host,
            port=port or service.settings.server.port,
            log_level=service.settings.server.log_level.lower(),
        )
        return

    from geminirag.interfaces.protocol import ProtocolHandler
    from geminirag.interfaces.stdio import StdioServer

    asyncio.run(StdioServer(ProtocolHandler(service)).serve())


# ---------------------------------------------------------------------------
# Catalog & generic calls
# ---------------------------------------------------------------------------


@cli.command("tools")
def list_tools():
    """List available tools."""
    click.echo(f"{'Name':<30} {'Category':<12} {'Hints'}")
    click.echo("-" * 70)
    for t in TOOLS:
        flags = (("read-only", t.read_only), ("destructive", t.destructive), ("open-world", t.open_world))
        hints = [label for label, flag in flags if flag]
        click.echo(f"{t.name:<30} {t.category:<12} {', '.join(hints) or '-'}")


@cli.command()
@click.pass_context
def info(ctx: click.Context):
    """Show server info (connection status and tool counts)."""
    service = _build_service(ctx)
    click.echo(json.dumps(service.server_info(), indent=2))


@cli.command()
@click.argument("tool_name")
@click.option("--args", "args_json", default="{}", help="Tool arguments as a JSON object")
@click.pass_context
def call(ctx: click.Context, tool_name: str, args_json: str):
    """Call any tool by name and print the result."""
    try:
        arguments = json.loads(args_json)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--args")

    service = _build_service(ctx)
    result = asyncio.run(service.dispatcher.call_tool(tool_name, arguments))
    if result.is_error:
        click.echo(result.text, err=True)
        sys.exit(1)
    click.echo(result.text)


# ---------------------------------------------------------------------------
# Convenience commands
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--page-size", default=None, type=int, help="Stores per page")
@click.option("--page-token", default=None, help="Continuation token")
@click.pass_context
def stores(ctx: click.Context, page_size: int | None, page_token: str | None):
    """List File Search stores."""
    service = _build_service(ctx)
    page = _dispatch(service, "gemini_list_stores", {"page_size": page_size, "page_token": page_token})
    items = [Store.from_api(s) for s in page.get("fileSearchStores", [])]
    if not items:
        click.echo("No stores found.")
        return

    click.echo(f"{'Name':<45} {'Display name':<25} {'Updated'}")
    click.echo("-" * 90)
    for s in items:
        click.echo(f"{s.name:<45} {s.display_name:<25} {s.update_time or 'N/A'}")
    if page.get("nextPageToken"):
        click.echo(f"\nNext page token: {page['nextPageToken']}")


@cli.command()
@click.argument("store_name")
@click.option("--page-size", default=None, type=int, help="Documents per page")
@click.option("--page-token", default=None, help="Continuation token")
@click.pass_context
def documents(ctx: click.Context, store_name: str, page_size: int | None, page_token: str | None):
    """List documents in a store."""
    service = _build_service(ctx)
    page = _dispatch(
        service,
        "gemini_list_documents",
        {"store_name": store_name, "page_size": page_size, "page_token": page_token},
    )
    items = [Document.from_api(d) for d in page.get("documents", [])]
    if not items:
        click.echo("No documents found.")
        return

    click.echo(f"{'Name':<60} {'State':<8} {'Size':>10} {'MIME type'}")
    click.echo("-" * 100)
    for d in items:
        size = str(d.size_bytes) if d.size_bytes is not None else "-"
        click.echo(f"{d.name:<60} {d.state:<8} {size:>10} {d.mime_type or '-'}")
    if page.get("nextPageToken"):
        click.echo(f"\nNext page token: {page['nextPageToken']}")


@cli.command()
@click.argument("operation_name")
@click.option("--upload", is_flag=True, help="Operation came from a direct upload")
@click.pass_context
def operation(ctx: click.Context, operation_name: str, upload: bool):
    """Show the status of an operation."""
    service = _build_service(ctx)
    tool_name = "gemini_get_upload_operation" if upload else "gemini_get_operation"
    op = _operation(_dispatch(service, tool_name, {"operation_name": operation_name}))

    click.echo(f"Operation: {op.name}")
    click.echo(f"Status:    {op.status}")
    if op.error:
        click.echo(f"Error:     [{op.error.code}] {op.error.message}")
    if op.response:
        click.echo(json.dumps(op.response, indent=2))


@cli.command()
@click.argument("question")
@click.option("--store", "-s", "store_names", multiple=True, required=True, help="Store to search (repeatable)")
@click.option("--model", "-m", default=None, help="Override the Gemini model")
@click.option("--filter", "metadata_filter", default=None, help="Metadata filter expression (AIP-160)")
@click.pass_context
def query(
    ctx: click.Context,
    question: str,
    store_names: tuple[str, ...],
    model: str | None,
    metadata_filter: str | None,
):
    """Ask a question grounded in one or more stores."""
    service = _build_service(ctx)
    result = QueryResult.from_api(_dispatch(
        service,
        "gemini_rag_query",
        {
            "query": question,
            "store_names": list(store_names),
            "model": model,
            "metadata_filter": metadata_filter,
        },
    ))
    if not result.answers:
        click.echo("No answer returned.")
        return

    answer = result.answers[0]
    click.echo(answer.text)
    if answer.citations:
        click.echo("\nSources:")
        for i, citation in enumerate(answer.citations, 1):
            click.echo(f"  [{i}] {citation.title or citation.uri or 'untitled'}")


@cli.command()
@click.argument("store_name")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--mime-type", default=None, help="MIME type (guessed from the file name if omitted)")
@click.option("--display-name", default=None, help="Document display name (defaults to the file name)")
@click.pass_context
def upload(ctx: click.Context, store_name: str, file_path: str, mime_type: str | None, display_name: str | None):
    """Upload a local file to a store."""
    path = Path(file_path)
    mime_type = mime_type or mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    data = path.read_bytes()

    arguments = {
        "store_name": store_name,
        "mime_type": mime_type,
        "display_name": display_name or path.name,
    }
    arguments["content"], arguments["content_encoding"] = _encode_file(data, mime_type)

    service = _build_service(ctx)
    op = _operation(_dispatch(service, "gemini_upload_to_store", arguments))
    click.echo(f"Uploaded '{path.name}' ({len(data)} bytes) to {store_name}")
    click.echo(f"Operation: {op.name} ({op.status})")


def main():
    cli(obj={})
