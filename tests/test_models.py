"""Tests for SeriesDiff data models."""

import pytest
from pydantic import ValidationError

from seriesdiff.core.models import (
    ComparisonVerdict,
    FileSummary,
    LatencyComparison,
    LatencyDistribution,
    RunSummary,
    TestDefinition,
    TimeWindow,
    VerdictStatus,
)


class TestTimeWindow:
    """Test TimeWindow model."""

    def test_ending_at(self):
        window = TimeWindow.ending_at(1_000_000, 300)
        assert window.from_ == 999_700
        assert window.until == 1_000_000
        assert window.range_seconds == 300

    def test_accepts_from_alias(self):
        window = TimeWindow.model_validate({"from": 10, "until": 20})
        assert window.from_ == 10

    def test_empty_window_rejected(self):
        with pytest.raises(ValidationError, match="must be before its end"):
            TimeWindow(from_=20, until=20)

    def test_frozen(self):
        window = TimeWindow(from_=0, until=1)
        with pytest.raises(ValidationError):
            window.until = 5


class TestTestDefinition:
    """Test TestDefinition model."""

    def test_len_and_order(self):
        definition = TestDefinition(source="a.json", tests={"b": "x.b", "a": "x.a"})
        assert len(definition) == 2
        assert list(definition.tests) == ["b", "a"]


class TestComparisonVerdict:
    """Test ComparisonVerdict model."""

    @pytest.mark.parametrize(
        "status,equivalent",
        [
            (VerdictStatus.EQUIVALENT, True),
            (VerdictStatus.DIVERGENT, False),
            (VerdictStatus.TRANSPORT_ERROR, False),
            (VerdictStatus.PARSE_ERROR, False),
        ],
    )
    def test_equivalent(self, status, equivalent):
        assert ComparisonVerdict(name="t", status=status).equivalent is equivalent


class TestLatencyDistribution:
    """Test LatencyDistribution validation."""

    def test_defaults_are_zero(self):
        distribution = LatencyDistribution()
        assert distribution.requests == 0
        assert distribution.mean == 0.0
        assert distribution.success_rate == 1.0
        assert distribution.errors == {}

    def test_valid_distribution(self):
        distribution = LatencyDistribution(
            requests=10, completed=10, successes=8, mean=0.05,
            p50=0.04, p95=0.08, p99=0.09, max=0.1, success_rate=0.8,
            errors={"500 Internal Server Error": 2},
        )
        assert distribution.failures == 2
        assert distribution.stat("p95") == 0.08

    def test_unordered_percentiles_rejected(self):
        with pytest.raises(ValidationError, match="p50 <= p95 <= p99 <= max"):
            LatencyDistribution(requests=1, p50=0.2, p95=0.1, p99=0.3, max=0.3, success_rate=1.0)

    def test_max_below_p99_rejected(self):
        with pytest.raises(ValidationError):
            LatencyDistribution(requests=1, p50=0.1, p95=0.1, p99=0.3, max=0.2, success_rate=1.0)

    @pytest.mark.parametrize("rate", [-0.1, 1.5])
    def test_success_rate_bounds(self, rate):
        with pytest.raises(ValidationError, match="Success rate"):
            LatencyDistribution(requests=1, success_rate=rate)

    def test_successes_cannot_exceed_requests(self):
        with pytest.raises(ValidationError, match="cannot exceed requests"):
            LatencyDistribution(requests=1, successes=2, success_rate=1.0)

    def test_unknown_stat(self):
        with pytest.raises(KeyError):
            LatencyDistribution().stat("p90")


class TestLatencyComparison:
    """Test LatencyComparison model."""

    def test_undefined_ratios(self):
        comparison = LatencyComparison(
            reference=LatencyDistribution(),
            candidate=LatencyDistribution(),
            ratios={"mean": 1.0, "p50": None, "p95": 1.0, "p99": None, "max": 1.0},
        )
        assert comparison.undefined_ratios() == ["p50", "p99"]
        assert not comparison.interrupted


class TestSummaries:
    """Test FileSummary and RunSummary models."""

    def test_file_summary_counts(self):
        summary = FileSummary(source="a.json", total=3, failed=1)
        assert summary.passed == 2
        assert not summary.skipped

    def test_skipped_file(self):
        summary = FileSummary(source="a.json", error="Test file not found: a.json")
        assert summary.skipped
        assert summary.total == 0

    def test_failed_cannot_exceed_total(self):
        with pytest.raises(ValidationError, match="Failed count"):
            FileSummary(source="a.json", total=1, failed=2)

    def test_negative_failed_rejected(self):
        with pytest.raises(ValidationError):
            RunSummary(total=1, failed=-1)

    def test_run_summary(self):
        run = RunSummary(
            files=[FileSummary(source="a.json", total=4), FileSummary(source="b.json")],
            total=4,
            failed=0,
        )
        assert run.all_passed
        assert run.passed == 4
