"""Main CLI entry point and application setup."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import click
from click.exceptions import Exit
from rich.console import Console

from versesearch import __version__
from versesearch.cli.commands import search, show, stats, suggest
from versesearch.cli.config import load_config
from versesearch.errors import CorpusUnavailable
from versesearch.search import SearchService, create_search_service

UNAVAILABLE_EXIT_CODE = 2


@dataclass
class Context:
    """CLI context that holds shared resources."""

    console: Console
    config: dict[str, Any] = field(default_factory=dict)
    debug: bool = False
    _service: SearchService | None = None

    @property
    def search_service(self) -> SearchService:
        """The search service, created on first use from the configured corpus."""
        if self._service is None:
            corpus = self.config.get("corpus")
            if not corpus:
                raise CorpusUnavailable(
                    "No corpus configured; pass --corpus or set VERSESEARCH_CORPUS"
                )
            self._service = create_search_service(Path(corpus).expanduser())
        return self._service


def setup_logging(
    verbose: bool = False, quiet: bool = False, debug: bool = False
) -> None:
    """Send log records to stderr at the level the global flags ask for.

    By default only warnings are shown, such as skipped corpus entries.
    ``--verbose`` adds index build reports, ``--debug`` adds timestamps and
    logger names, and ``--quiet`` leaves errors only.
    """
    if debug:
        level = logging.DEBUG
        log_format = "%(asctime)s %(name)s %(levelname)s: %(message)s"
    elif verbose:
        level = logging.INFO
        log_format = "%(levelname)s: %(message)s"
    else:
        level = logging.ERROR if quiet else logging.WARNING
        log_format = "%(levelname)s: %(message)s"

    logging.basicConfig(level=level, format=log_format, datefmt="%H:%M:%S")


def create_console(no_color: bool = False, width: int | None = None) -> Console:
    """Create the Rich console; ``width`` of None lets Rich detect the terminal."""
    if no_color:
        return Console(width=width, no_color=True, highlight=False, color_system=None)
    return Console(width=width)


class VerseSearchGroup(click.Group):
    """Custom group that turns failures into friendly messages."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except KeyboardInterrupt:
            console = getattr(ctx.obj, "console", None) if ctx.obj else None
            if console:
                console.print("[yellow]Interrupted[/yellow]")
            ctx.exit(130)
        except (click.ClickException, click.Abort, Exit, SystemExit):
            raise
        except CorpusUnavailable as e:
            if getattr(ctx.obj, "debug", False):
                raise
            _report(ctx, f"[red]Search unavailable:[/red] {e}", f"Search unavailable: {e}")
            ctx.exit(UNAVAILABLE_EXIT_CODE)
        except Exception as e:
            if getattr(ctx.obj, "debug", False):
                raise
            _report(ctx, f"[red]Error:[/red] {e}", f"Error: {e}")
            ctx.exit(1)


def _report(ctx: click.Context, markup: str, plain: str) -> None:
    console = getattr(ctx.obj, "console", None) if ctx.obj else None
    if console:
        console.print(markup)
    else:
        click.echo(plain, err=True)


@click.group(cls=VerseSearchGroup)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--debug", is_flag=True, help="Enable debug mode with full tracebacks")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--corpus",
    type=click.Path(path_type=Path),
    help="Path to the corpus JSON file",
)
@click.version_option(
    version=__version__,
    prog_name="versesearch",
    message="versesearch version %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    no_color: bool,
    debug: bool,
    config: Path | None,
    corpus: Path | None,
) -> None:
    """Search the Bible from the command line.

    Words match as prefixes, so partial words already find verses.
    """
    setup_logging(verbose=verbose, quiet=quiet, debug=debug)

    try:
        config_data = load_config(config)
    except ValueError as e:
        if debug:
            raise
        click.echo(f"Error loading config file: {e}", err=True)
        ctx.exit(1)

    if corpus is not None:
        config_data["corpus"] = str(corpus)

    ctx.obj = Context(
        console=create_console(no_color=no_color, width=config_data.get("width")),
        config=config_data,
        debug=debug,
    )


cli.add_command(search)
cli.add_command(suggest)
cli.add_command(show)
cli.add_command(stats)


def main() -> None:
    """Entry point for the CLI."""
    cli(prog_name="versesearch")


if __name__ == "__main__":
    main()
