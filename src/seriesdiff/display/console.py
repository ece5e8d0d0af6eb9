"""Console reporting of verdicts, file subtotals, run totals and load tables."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from ..core.models import (
    LATENCY_STATS,
    ComparisonVerdict,
    FileSummary,
    LatencyComparison,
    LatencyDistribution,
    RunSummary,
    VerdictStatus,
)

DIFF_STYLES = {"~": "yellow", "+": "green", "-": "red"}

STAT_LABELS = {"mean": "Mean", "p50": "P50", "p95": "P95", "p99": "P99", "max": "Max"}


class ConsoleReporter:
    """Print SeriesDiff results with Rich."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        """Initialize reporter.

        Args:
            console: Rich console to print to (a new stdout console otherwise)
            verbose: Show URLs, per-file subtotals and raw bodies on failure
        """
        self.console = console or Console()
        self.verbose = verbose

    def file_result(self, summary: FileSummary) -> None:
        """Print everything known about one processed file."""
        self.console.print()
        self.console.print(f"[bold]===== Testing {escape(summary.source)} =====[/bold]")

        if summary.skipped:
            self.console.print(f"[bold red]Error:[/bold red] {escape(summary.error)}")
            return

        for verdict in summary.verdicts:
            self.verdict(verdict)

        if self.verbose and summary.verdicts:
            self.file_subtotal(summary)

        if summary.load is not None:
            self.load_result(summary.load)

    def verdict(self, verdict: ComparisonVerdict) -> None:
        self.console.print()
        self.console.print(f"[cyan]----- Comparing {escape(verdict.name)} -----[/cyan]")
        if self.verbose and verdict.reference_url:
            self.console.print(verdict.reference_url, markup=False, highlight=False)
            self.console.print(verdict.candidate_url, markup=False, highlight=False)

        if verdict.equivalent:
            if self.verbose:
                self.console.print("[green]Identical[/green]")
            return

        if verdict.status == VerdictStatus.TRANSPORT_ERROR:
            self.console.print(Text(verdict.error or "", style="red"))
            if self.verbose:
                self._bodies(verdict)
        elif verdict.status == VerdictStatus.PARSE_ERROR:
            self.console.print("[red]Invalid response[/red]")
            self.console.print(verdict.error, markup=False, highlight=False)
            self._bodies(verdict)
        else:
            self.console.print("Differences found:")
            self.console.print(format_diff(verdict.diff_report or ""))
            if self.verbose:
                self._bodies(verdict)

        self.console.print("[bold red]FAILED[/bold red]")

    def _bodies(self, verdict: ComparisonVerdict) -> None:
        for label, body in (("Reference", verdict.reference_body), ("Candidate", verdict.candidate_body)):
            if body is not None:
                self.console.print(f"{label} response: {body}", markup=False, highlight=False)

    def file_subtotal(self, summary: FileSummary) -> None:
        self.console.print()
        if summary.failed == 0:
            self.console.print(f"- All tests passed in {escape(summary.source)}")
        else:
            self.console.print(f"- {summary.passed} tests passed in {escape(summary.source)}")
            self.console.print(f"- [red]{summary.failed} tests FAILED in {escape(summary.source)}[/red]")

    def load_result(self, comparison: LatencyComparison) -> None:
        self.console.print()
        self.console.print(latency_table(comparison))
        self.console.print(ratio_table(comparison))
        undefined = comparison.undefined_ratios()
        if undefined:
            self.console.print(
                f"[yellow]Undefined ratios ({', '.join(undefined)}): reference statistic is zero[/yellow]"
            )

        for label, distribution in (("Reference", comparison.reference), ("Candidate", comparison.candidate)):
            if distribution.errors:
                self.console.print(error_table(label, distribution))

        if comparison.interrupted:
            self.console.print("[yellow]Load test interrupted; statistics are partial[/yellow]")

    def run_summary(self, summary: RunSummary) -> None:
        """Print run totals; always printed, even when every test failed."""
        self.console.print()
        self.console.print()
        if summary.failed == 0:
            self.console.print("[bold green]== All tests passed ==[/bold green]")
        else:
            self.console.print(f"[bold]== {summary.passed} tests passed ==[/bold]")
            self.console.print(f"[bold red]== {summary.failed} tests FAILED ==[/bold red]")

        skipped = [f for f in summary.files if f.skipped]
        if skipped:
            self.console.print(f"[yellow]== {len(skipped)} files skipped ==[/yellow]")
        if summary.interrupted:
            self.console.print("[yellow]== Run interrupted ==[/yellow]")


def format_diff(report: str) -> Text:
    """Colour a rendered diff by its line markers."""
    text = Text()
    for line in report.splitlines(keepends=True):
        text.append(line, style=DIFF_STYLES.get(line[:1]))
    return text


def format_duration(seconds: float) -> str:
    return f"{seconds * 1000:.2f}ms"


def format_ratio(ratio: Optional[float]) -> str:
    if ratio is None:
        return "undefined"
    return f"{ratio:.3f}x"


def latency_table(comparison: LatencyComparison) -> Table:
    """Side-by-side latency statistics of both backends."""
    table = Table(title="Latency")
    table.add_column("Backend", style="cyan")
    table.add_column("Requests", justify="right")
    table.add_column("Failed", justify="right")
    table.add_column("Success", justify="right")
    for name in LATENCY_STATS:
        table.add_column(STAT_LABELS[name], justify="right")

    for label, distribution in (("Reference", comparison.reference), ("Candidate", comparison.candidate)):
        table.add_row(
            label,
            str(distribution.requests),
            str(distribution.failures),
            f"{distribution.success_rate:.2%}",
            *(format_duration(distribution.stat(name)) for name in LATENCY_STATS),
        )
    return table


def ratio_table(comparison: LatencyComparison) -> Table:
    """Candidate / reference ratio per statistic."""
    table = Table(title="Candidate / Reference")
    for name in LATENCY_STATS:
        table.add_column(STAT_LABELS[name], justify="right")
    table.add_row(*(format_ratio(comparison.ratios.get(name)) for name in LATENCY_STATS))
    return table


def error_table(label: str, distribution: LatencyDistribution) -> Table:
    table = Table(title=f"{label} errors")
    table.add_column("Error", style="red")
    table.add_column("Count", justify="right")
    for error, count in sorted(distribution.errors.items(), key=lambda item: -item[1]):
        table.add_row(Text(error), str(count))
    return table
