"""Command-line interface for SeriesDiff.

Commands:
- run: Compare (and optionally load test) the queries of one or more test files
- diff: Diff two saved response bodies with the comparator's rules

Example:
    $ seriesdiff run tests/basic.json --url http://graphite:8080/render --verbose
    $ seriesdiff run tests/*.json --load --rate 50 --duration 30
    $ seriesdiff diff reference.json candidate.json
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from .comparison import compare_bodies
from .core.config import HarnessConfig
from .core.errors import ConfigError
from .core.logging import configure_logging
from .display import ConsoleReporter, format_diff
from .execution import run_files
from .version import __version__

# Initialize Typer app
app = typer.Typer(
    name="seriesdiff",
    help="SeriesDiff - differential testing of time-series render backends",
    add_completion=False,
    no_args_is_help=True,
)

# Initialize Rich console for output
console = Console()

EXIT_INTERRUPTED = 130


def _version_callback(value: bool):
    if value:
        console.print(f"seriesdiff {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """SeriesDiff - differential testing of time-series render backends."""


# ============================================================================
# Run Command
# ============================================================================


@app.command()
def run(
    files: list[Path] = typer.Argument(..., help="Test definition files (JSON object of name -> target)"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Render endpoint shared by both backends"),
    range_seconds: Optional[int] = typer.Option(
        None, "--range", "-r", help="How many seconds to fetch results for"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show URLs, per-file subtotals and raw bodies"
    ),
    compare: Optional[bool] = typer.Option(
        None, "--compare/--no-compare", help="Compare responses (default: on)"
    ),
    load: Optional[bool] = typer.Option(None, "--load/--no-load", help="Run load tests (default: off)"),
    rate: Optional[float] = typer.Option(None, "--rate", help="Load requests per second, per backend"),
    duration: Optional[float] = typer.Option(None, "--duration", help="Load duration in seconds, per backend"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Per-request timeout in seconds"),
    concurrency: Optional[int] = typer.Option(None, "--concurrency", help="Parallel comparisons"),
    fail_on_diff: bool = typer.Option(
        False, "--fail-on-diff", help="Exit with status 1 if any test failed (for CI)"
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level (default: WARNING)"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this file"),
):
    """Compare reference and candidate responses for every test in FILES.

    This command:
    1. Loads each test file (unreadable files are reported and skipped)
    2. Builds reference and candidate URLs over one shared time window
    3. Compares the responses of every test
    4. In load mode, drives both backends with the same queries
    5. Prints per-test results and run totals

    Example:
        $ seriesdiff run tests/basic.json --url http://localhost:6060/render
        $ seriesdiff run tests/basic.json --no-compare --load --rate 20 --duration 5
    """
    if log_level or log_file:
        configure_logging(level=log_level or "WARNING", log_file=log_file)

    try:
        config = HarnessConfig.resolve(
            {
                "endpoint": url,
                "range_seconds": range_seconds,
                "verbose": verbose or None,
                "compare": compare,
                "load": load,
                "load_rate": rate,
                "load_duration": duration,
                "timeout": timeout,
                "concurrency": concurrency,
            }
        )
    except ConfigError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    if not config.compare and not config.load:
        console.print("[bold red]Error:[/bold red] Nothing to do: both comparison and load testing are disabled")
        raise typer.Exit(code=1)

    reporter = ConsoleReporter(console, verbose=config.verbose)

    try:
        summary = run_files(files, config, on_file=reporter.file_result)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        raise typer.Exit(code=EXIT_INTERRUPTED) from None

    reporter.run_summary(summary)

    if summary.files and all(f.skipped for f in summary.files):
        raise typer.Exit(code=1)
    if summary.interrupted:
        raise typer.Exit(code=EXIT_INTERRUPTED)
    if fail_on_diff and summary.failed:
        raise typer.Exit(code=1)


# ============================================================================
# Diff Command
# ============================================================================


@app.command()
def diff(
    reference: Path = typer.Argument(..., help="Saved reference response body"),
    candidate: Path = typer.Argument(..., help="Saved candidate response body"),
    show_unchanged: bool = typer.Option(
        False, "--show-unchanged", help="Include unchanged values in the diff"
    ),
):
    """Diff two saved response bodies the way `run` compares live responses.

    Exits with status 0 when equivalent, 1 when different or not JSON, and
    2 when a file cannot be read.

    Example:
        $ curl -s "$URL&process=none" > ref.json
        $ curl -s "$URL&process=any" > cand.json
        $ seriesdiff diff ref.json cand.json
    """
    try:
        reference_body = reference.read_bytes()
        candidate_body = candidate.read_bytes()
    except OSError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=2) from e

    verdict = compare_bodies(
        f"{reference} vs {candidate}", reference_body, candidate_body, show_unchanged=show_unchanged
    )

    if verdict.equivalent:
        console.print("[green]Identical[/green]")
        return

    if verdict.diff_report:
        console.print(format_diff(verdict.diff_report))
    else:
        console.print("[red]Invalid response[/red]")
        console.print(verdict.error, markup=False, highlight=False)
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
