"""Search, suggestion and lookup commands."""

import json

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from versesearch.core.models import Testament
from versesearch.core.references import parse_reference
from versesearch.search import AutocompleteProvider, Highlighter, SearchResult

_highlighter = Highlighter()


def get_search_service(ctx: click.Context):
    """Get the search service from context."""
    return ctx.obj.search_service


@click.command()
@click.argument("query", required=True)
@click.option("--limit", "-n", type=int, default=None, help="Maximum results to show")
@click.option("--book", "-b", help="Only search this book")
@click.option("--chapter", "-C", type=int, help="Only search this chapter")
@click.option(
    "--chapter-only",
    is_flag=True,
    help="Restrict to the chapter given by --book and --chapter",
)
@click.option(
    "--testament",
    "-t",
    type=click.Choice([t.value for t in Testament]),
    help="Only search one testament",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["table", "plain", "json"]),
    default="table",
    help="Output format",
)
@click.pass_context
def search(ctx: click.Context, query: str, **kwargs) -> None:
    """Search verse text and book names.

    Every word of QUERY is matched as a word prefix; verses matching more
    words rank higher.
    """
    console = ctx.obj.console

    if kwargs["chapter_only"] and not (kwargs["book"] and kwargs["chapter"]):
        raise click.UsageError("--chapter-only requires --book and --chapter")

    limit = kwargs["limit"]
    if limit is None:
        limit = ctx.obj.config.get("limit", 10)

    service = get_search_service(ctx)
    with console.status(f"Searching for '{escape(query)}'..."):
        results = service.search(
            query,
            limit=limit,
            book=kwargs["book"],
            chapter=kwargs["chapter"],
            current_chapter_only=kwargs["chapter_only"],
            testament=kwargs["testament"],
        )

    _display_results(console, results, query, kwargs["output_format"])


@click.command()
@click.argument("prefix", required=True)
@click.option("--limit", "-n", type=int, default=None, help="Maximum suggestions")
@click.pass_context
def suggest(ctx: click.Context, prefix: str, limit: int | None) -> None:
    """Suggest book names and well-known references for PREFIX."""
    console = ctx.obj.console
    if limit is None:
        limit = ctx.obj.config.get("suggest_limit", 5)

    # Suggestions come from static data; no corpus is needed.
    suggestions = AutocompleteProvider().suggest(prefix, limit)
    if not suggestions:
        console.print(f"[yellow]No suggestions for '{escape(prefix)}'[/yellow]")
        return

    for suggestion in suggestions:
        console.print(suggestion)


@click.command()
@click.argument("reference", required=True)
@click.pass_context
def show(ctx: click.Context, reference: str) -> None:
    """Print the verses of REFERENCE, e.g. "John 3:16" or "Psalm 23"."""
    console = ctx.obj.console

    parsed = parse_reference(reference)
    if parsed is None:
        raise click.BadParameter(f"Not a reference: {reference}", param_hint="REFERENCE")

    results = get_search_service(ctx).lookup(parsed)
    if not results:
        console.print(f"[yellow]No verses found for {escape(parsed.display)}[/yellow]")
        return

    console.print(f"[bold]{escape(parsed.display)}[/bold]")
    for result in results:
        console.print(f"[dim]{result.verse}[/dim] {escape(result.text)}")


@click.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Build the index and show its statistics."""
    console = ctx.obj.console
    service = get_search_service(ctx)

    with console.status("Building search index..."):
        service.ensure_index()

    statistics = service.get_statistics()["index"]

    table = Table(title="Search Index", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Verses", str(statistics["total_verses"]))
    table.add_row("Books", str(statistics["total_books"]))
    table.add_row("Skipped records", str(statistics["skipped_records"]))
    for field_name, count in statistics["distinct_tokens"].items():
        table.add_row(f"Distinct {field_name} tokens", str(count))
    table.add_row("Build time", f"{statistics['build_time_ms']:.2f} ms")

    console.print(table)


def _display_results(
    console: Console, results: list[SearchResult], query: str, output_format: str
) -> None:
    if output_format == "json":
        click.echo(json.dumps([result.to_dict() for result in results], indent=2))
        return

    if not results:
        console.print(f"[yellow]No results for '{escape(query)}'[/yellow]")
        return

    if output_format == "plain":
        for result in results:
            console.print(f"{escape(result.reference)}  {_highlighted(result)}")
        return

    table = Table(title=f"Results for '{escape(query)}'", show_lines=False)
    table.add_column("Reference", style="cyan", no_wrap=True)
    table.add_column("Text")
    table.add_column("Score", justify="right", style="dim")

    for result in results:
        table.add_row(escape(result.reference), _highlighted(result), str(result.score))

    console.print(table)
    console.print(f"[dim]{len(results)} result(s)[/dim]")


def _highlighted(result: SearchResult) -> str:
    """Verse text as rich markup with the matched words emphasized."""
    if not result.highlights:
        return escape(result.text)

    spans = _highlighter.spans(result.text, result.highlights)
    parts = []
    position = 0
    for span in spans:
        parts.append(escape(result.text[position : span.start_offset]))
        parts.append(f"[bold yellow]{escape(span.text)}[/bold yellow]")
        position = span.end_offset
    parts.append(escape(result.text[position:]))
    return "".join(parts)
