"""Tests for run aggregation."""

import pytest

from seriesdiff.core.models import ComparisonVerdict, LatencyDistribution, VerdictStatus
from seriesdiff.reporting import (
    compute_ratio,
    compute_ratios,
    failed_file,
    fold_run,
    summarize_file,
)


def verdict(name, status=VerdictStatus.EQUIVALENT):
    return ComparisonVerdict(name=name, status=status)


def distribution(value):
    return LatencyDistribution(
        requests=10, completed=10, successes=10, mean=value,
        p50=value, p95=value, p99=value, max=value, success_rate=1.0,
    )


class TestRatios:
    """Test candidate/reference latency ratios."""

    def test_equal_distributions(self):
        ratios = compute_ratios(distribution(0.05), distribution(0.05))
        assert ratios == {name: pytest.approx(1.0) for name in ("mean", "p50", "p95", "p99", "max")}

    def test_slower_candidate(self):
        ratios = compute_ratios(distribution(0.04), distribution(0.05))
        assert ratios["p99"] == pytest.approx(1.25)

    def test_zero_reference_is_undefined(self):
        assert compute_ratio(0.5, 0.0) is None
        assert compute_ratio(0.0, 0.0) is None
        ratios = compute_ratios(LatencyDistribution(), distribution(0.05))
        assert all(value is None for value in ratios.values())

    def test_zero_candidate(self):
        assert compute_ratio(0.0, 0.5) == 0.0


class TestSummaries:
    """Test folding verdicts into file and run summaries."""

    def test_summarize_file(self):
        verdicts = [
            verdict("a"),
            verdict("b", VerdictStatus.DIVERGENT),
            verdict("c", VerdictStatus.TRANSPORT_ERROR),
        ]

        summary = summarize_file("basic.json", verdicts)

        assert summary.total == 3
        assert summary.failed == 2
        assert summary.passed == 1
        assert [v.name for v in summary.verdicts] == ["a", "b", "c"]

    def test_summarize_empty_file(self):
        summary = summarize_file("empty.json", [])
        assert summary.total == 0
        assert summary.failed == 0

    def test_failed_file_counts_nothing(self):
        summary = failed_file("missing.json", "Test file not found: missing.json")
        assert summary.skipped
        assert summary.total == 0

    def test_fold_run(self):
        run = fold_run(
            [
                summarize_file("a.json", [verdict("x"), verdict("y", VerdictStatus.PARSE_ERROR)]),
                failed_file("b.json", "broken"),
                summarize_file("c.json", [verdict("z")]),
            ]
        )

        assert run.total == 3
        assert run.failed == 1
        assert run.passed == 2
        assert not run.all_passed
        assert [f.source for f in run.files] == ["a.json", "b.json", "c.json"]

    def test_fold_empty_run(self):
        run = fold_run([])
        assert run.total == 0
        assert run.all_passed
