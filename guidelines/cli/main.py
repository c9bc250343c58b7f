"""CLI entry point for the guidelines catalog."""

import functools
import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from guidelines.api.engine import QueryEngine
from guidelines.contracts.config import SourceConfig
from guidelines.contracts.document import Document
from guidelines.contracts.tool_results import DocumentResult
from guidelines.errors import GuidelinesError
from guidelines.settings import Settings, get_settings

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    """Send log records to stderr; stdout carries command output and MCP frames."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def build_source_config(settings: Settings, **overrides: Any) -> SourceConfig:
    """Merge non-empty CLI overrides into the environment settings."""
    update = {key: value for key, value in overrides.items() if value is not None}
    return settings.model_copy(update=update).to_source_config()


def reports_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Print catalog failures to stderr and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except GuidelinesError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    return wrapper


def echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def echo_documents(docs: list[Document], as_json: bool) -> None:
    if as_json:
        echo_json(
            [DocumentResult.from_document(doc).model_dump(mode="json") for doc in docs]
        )
        return

    if not docs:
        click.echo("No documents found.")
        return

    for doc in docs:
        line = f"{doc.id}  [{doc.type.value}]  {doc.title}"
        if doc.status:
            line += f"  ({doc.status})"
        click.echo(line)
    click.echo(f"\n{len(docs)} document(s)")


def echo_document(doc: Document, as_json: bool) -> None:
    if as_json:
        echo_json(DocumentResult.from_document(doc).model_dump(mode="json"))
        return

    click.echo(f"# {doc.title}")
    click.echo(f"ID:       {doc.id}")
    click.echo(f"Path:     {doc.path}")
    click.echo(f"Type:     {doc.type.value}")
    if doc.category:
        click.echo(f"Category: {doc.category}")
    if doc.language:
        click.echo(f"Language: {doc.language}")
    if doc.status:
        click.echo(f"Status:   {doc.status}")
    if doc.tags:
        click.echo(f"Tags:     {', '.join(doc.tags)}")
    if doc.parse_warning:
        click.echo(f"Warning:  {doc.parse_warning}")
    click.echo()
    click.echo(doc.content)


json_option = click.option("--json", "as_json", is_flag=True, help="Output JSON")


@click.group()
@click.option(
    "--source",
    type=click.Choice(["local", "github"]),
    default=None,
    help="Document source (default: GUIDELINES_SOURCE or local)",
)
@click.option(
    "--base-path",
    "-b",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Corpus directory for the local source",
)
@click.option(
    "--repository",
    "-r",
    type=str,
    default=None,
    help="GitHub repository as owner/repo or owner/repo@branch",
)
@click.option("--branch", type=str, default=None, help="Branch override")
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Timeout in seconds for remote requests",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def app(
    ctx: click.Context,
    source: str | None,
    base_path: Path | None,
    repository: str | None,
    branch: str | None,
    timeout: float | None,
    verbose: bool,
):
    """Guidelines catalog - browse coding guidelines, style guides and ADRs."""
    ctx.ensure_object(dict)

    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level)

    try:
        config = build_source_config(
            settings,
            source_type=source,
            base_path=str(base_path) if base_path is not None else None,
            repository=repository,
            branch=branch,
            request_timeout=timeout,
        )
    except (ValidationError, ValueError) as e:
        raise click.UsageError(f"Invalid source configuration: {e}") from e

    engine = QueryEngine.from_config(config)
    ctx.call_on_close(engine.close)
    ctx.obj["engine"] = engine


def get_engine(ctx: click.Context) -> QueryEngine:
    return ctx.obj["engine"]


@app.command("list")
@json_option
@click.pass_context
@reports_errors
def list_documents(ctx: click.Context, as_json: bool):
    """List all documents with their summaries."""
    summaries = get_engine(ctx).get_all_summaries()

    if as_json:
        echo_json([summary.model_dump(mode="json") for summary in summaries])
        return

    for summary in summaries:
        click.echo(f"{summary.id}  [{summary.type.value}]  {summary.title}")
        if summary.summary:
            click.echo(f"    {summary.summary}")
    click.echo(f"\n{len(summaries)} document(s)")


@app.command()
@click.argument("doc_id", required=False)
@click.option("--path", "-p", "doc_path", type=str, help="Look up by path instead")
@json_option
@click.pass_context
@reports_errors
def show(ctx: click.Context, doc_id: str | None, doc_path: str | None, as_json: bool):
    """Show one document by ID (or by --path)."""
    if (doc_id is None) == (doc_path is None):
        raise click.UsageError("Give either a document ID or --path")

    engine = get_engine(ctx)
    if doc_path is not None:
        doc = engine.get_by_path(doc_path)
        missing = f"Document at path '{doc_path}' not found"
    else:
        doc = engine.get_by_id(doc_id)
        missing = f"Document with ID '{doc_id}' not found"

    if doc is None:
        click.echo(missing, err=True)
        sys.exit(1)

    echo_document(doc, as_json)


@app.command()
@click.argument("term")
@click.option(
    "--excerpts", "-e", is_flag=True, help="Show match counts and matching lines"
)
@json_option
@click.pass_context
@reports_errors
def search(ctx: click.Context, term: str, excerpts: bool, as_json: bool):
    """Search titles, content and tags for a keyword."""
    engine = get_engine(ctx)
    if not excerpts:
        echo_documents(engine.search(term), as_json)
        return

    hits = engine.search_with_excerpts(term)
    if as_json:
        echo_json(
            [DocumentResult.from_hit(hit).model_dump(mode="json") for hit in hits]
        )
        return

    if not hits:
        click.echo("No documents found.")
        return

    for hit in hits:
        doc = hit.document
        click.echo(f"{doc.id}  {doc.title}  ({hit.match_count} matches)")
        for excerpt in hit.excerpts:
            click.echo(f"    {excerpt}")
    click.echo(f"\n{len(hits)} document(s)")


@app.command("by-tags")
@click.argument("tags", nargs=-1, required=True)
@json_option
@click.pass_context
@reports_errors
def by_tags(ctx: click.Context, tags: tuple[str, ...], as_json: bool):
    """List documents carrying any of the given tags."""
    echo_documents(get_engine(ctx).get_by_tags(tags), as_json)


@app.command()
@json_option
@click.pass_context
@reports_errors
def categories(ctx: click.Context, as_json: bool):
    """List document categories."""
    names = get_engine(ctx).list_categories()

    if as_json:
        echo_json(names)
        return

    for name in names:
        click.echo(name)


@app.command("by-type")
@click.argument("doc_type", metavar="TYPE")
@json_option
@click.pass_context
@reports_errors
def by_type(ctx: click.Context, doc_type: str, as_json: bool):
    """List documents of a type (CodingGuideline, StyleGuide, ADR, Recommendation)."""
    echo_documents(get_engine(ctx).get_by_type(doc_type), as_json)


@app.command("by-category")
@click.argument("category")
@json_option
@click.pass_context
@reports_errors
def by_category(ctx: click.Context, category: str, as_json: bool):
    """List documents in a category."""
    echo_documents(get_engine(ctx).get_by_category(category), as_json)


@app.command("by-language")
@click.argument("language")
@json_option
@click.pass_context
@reports_errors
def by_language(ctx: click.Context, language: str, as_json: bool):
    """List documents for a programming language."""
    echo_documents(get_engine(ctx).get_by_language(language), as_json)


@app.command()
@click.argument("status")
@json_option
@click.pass_context
@reports_errors
def adrs(ctx: click.Context, status: str, as_json: bool):
    """List ADRs with a status (Proposed, Accepted, Deprecated, Superseded)."""
    echo_documents(get_engine(ctx).get_adrs_by_status(status), as_json)


@app.command()
@json_option
@click.pass_context
@reports_errors
def stats(ctx: click.Context, as_json: bool):
    """Show catalog statistics."""
    statistics = get_engine(ctx).statistics()

    if as_json:
        echo_json(statistics)
        return

    click.echo(f"Generation: {statistics['generation']}")
    click.echo(f"Documents:  {statistics['total_documents']}")
    for doc_type, count in sorted(statistics["documents_by_type"].items()):
        click.echo(f"  {doc_type}: {count}")
    if statistics["categories"]:
        click.echo(f"Categories: {', '.join(statistics['categories'])}")
    if statistics["languages"]:
        click.echo(f"Languages:  {', '.join(statistics['languages'])}")
    if statistics["parse_warnings"]:
        click.echo(f"Parse warnings: {statistics['parse_warnings']}")


@app.command()
@click.pass_context
def serve(ctx: click.Context):
    """Run the MCP server over stdio."""
    # Lazy import to keep the mcp SDK out of plain queries
    from guidelines.server import serve as run_server

    run_server(get_engine(ctx))


if __name__ == "__main__":
    app()
