"""Fold verdicts and load results into file and run summaries.

Everything here is pure: each function returns a new value and nothing is
accumulated in shared state, so files and tests can be processed in any
order or in parallel and combined afterwards.
"""

from typing import Iterable, Optional, Sequence

from ..core.models import (
    LATENCY_STATS,
    ComparisonVerdict,
    FileSummary,
    LatencyComparison,
    LatencyDistribution,
    RunSummary,
)


def compute_ratio(candidate: float, reference: float) -> Optional[float]:
    """Candidate / reference, or None (undefined) when the reference is zero."""
    if reference == 0:
        return None
    return float(candidate) / float(reference)


def compute_ratios(
    reference: LatencyDistribution, candidate: LatencyDistribution
) -> dict[str, Optional[float]]:
    """Candidate/reference ratio for each of mean, p50, p95, p99 and max.

    Example:
        >>> ratios = compute_ratios(reference, candidate)
        >>> ratios["p99"]   # 1.25 means the candidate is 25% slower
        1.25
    """
    return {
        name: compute_ratio(candidate.stat(name), reference.stat(name))
        for name in LATENCY_STATS
    }


def summarize_file(
    source: str,
    verdicts: Sequence[ComparisonVerdict],
    load: Optional[LatencyComparison] = None,
) -> FileSummary:
    """Count passed and failed verdicts of one file."""
    failed = sum(1 for verdict in verdicts if not verdict.equivalent)
    return FileSummary(
        source=source,
        total=len(verdicts),
        failed=failed,
        verdicts=list(verdicts),
        load=load,
    )


def failed_file(source: str, error: str) -> FileSummary:
    """Summary for a file that could not be loaded; it counts no tests."""
    return FileSummary(source=source, error=error)


def fold_run(files: Iterable[FileSummary], interrupted: bool = False) -> RunSummary:
    """Combine file summaries into the run summary."""
    files = list(files)
    return RunSummary(
        files=files,
        total=sum(f.total for f in files),
        failed=sum(f.failed for f in files),
        interrupted=interrupted,
    )
