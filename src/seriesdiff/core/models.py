"""Data models for SeriesDiff.

This module defines the Pydantic models that flow between the query builder,
the comparator, the load harness and the aggregator. Every model lives for a
single run; nothing here is persisted.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Statistics reported for a latency distribution, in display order
LATENCY_STATS = ("mean", "p50", "p95", "p99", "max")

# ============================================================================
# Query Models
# ============================================================================


class TestDefinition(BaseModel):
    """Named query targets loaded from one test file."""

    __test__ = False  # not a pytest test class

    model_config = ConfigDict(frozen=True)

    source: str
    tests: dict[str, str]

    def __len__(self) -> int:
        return len(self.tests)


class TimeWindow(BaseModel):
    """Shared [from, until] window in Unix seconds for every query of a run."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: int = Field(alias="from")
    until: int

    @model_validator(mode="after")
    def validate_order(self) -> "TimeWindow":
        """Ensure the window is not empty."""
        if self.from_ >= self.until:
            raise ValueError(
                f"Time window start ({self.from_}) must be before its end ({self.until})"
            )
        return self

    @classmethod
    def ending_at(cls, until: int, range_seconds: int) -> "TimeWindow":
        return cls(from_=until - range_seconds, until=until)

    @property
    def range_seconds(self) -> int:
        return self.until - self.from_


class BuiltQuery(BaseModel):
    """A test entry resolved to one URL per backend."""

    model_config = ConfigDict(frozen=True)

    name: str
    target: str
    reference_url: str
    candidate_url: str


# ============================================================================
# Comparison Models
# ============================================================================


class VerdictStatus(str, Enum):
    """How a comparison ended."""

    EQUIVALENT = "equivalent"
    DIVERGENT = "divergent"  # valid JSON, structurally different
    TRANSPORT_ERROR = "transport_error"
    PARSE_ERROR = "parse_error"


class ComparisonVerdict(BaseModel):
    """Outcome of comparing one pair of responses."""

    name: str
    status: VerdictStatus
    diff_report: Optional[str] = None
    error: Optional[str] = None
    reference_url: Optional[str] = None
    candidate_url: Optional[str] = None
    # Raw bodies, kept for verbose output and for parse failures
    reference_body: Optional[str] = None
    candidate_body: Optional[str] = None

    @property
    def equivalent(self) -> bool:
        return self.status == VerdictStatus.EQUIVALENT


# ============================================================================
# Load Models
# ============================================================================


class RequestOutcome(BaseModel):
    """Result of a single load request.

    ``elapsed`` is None when the request never completed (cancelled before
    it was sent); such outcomes count toward success/error accounting only.
    """

    elapsed: Optional[float] = None  # seconds
    success: bool
    status_code: Optional[int] = None
    error: Optional[str] = None


class LatencyDistribution(BaseModel):
    """Statistical summary of the outcomes collected for one backend.

    Durations are in seconds.
    """

    requests: int = 0
    completed: int = 0
    successes: int = 0
    mean: float = 0.0
    p50: float = 0.0
    p95: float = 0.0
    p99: float = 0.0
    max: float = 0.0
    success_rate: float = 1.0  # vacuously 1.0 with no requests
    errors: dict[str, int] = Field(default_factory=dict)

    @field_validator("success_rate")
    @classmethod
    def validate_success_rate(cls, v: float) -> float:
        """Ensure success rate is a fraction."""
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"Success rate must be within [0, 1] (got {v})")
        return v

    @model_validator(mode="after")
    def validate_percentiles(self) -> "LatencyDistribution":
        """Ensure percentiles are ordered."""
        if not (self.p50 <= self.p95 <= self.p99 <= self.max):
            raise ValueError(
                "Percentiles must satisfy p50 <= p95 <= p99 <= max "
                f"(got {self.p50}, {self.p95}, {self.p99}, {self.max})"
            )
        if self.successes > self.requests or self.completed > self.requests:
            raise ValueError("Success and completion counts cannot exceed requests")
        return self

    @property
    def failures(self) -> int:
        return self.requests - self.successes

    def stat(self, name: str) -> float:
        """Return one of LATENCY_STATS by name."""
        if name not in LATENCY_STATS:
            raise KeyError(f"Unknown latency statistic: {name}")
        return getattr(self, name)


class LatencyComparison(BaseModel):
    """Reference and candidate distributions plus candidate/reference ratios.

    A ratio of None is undefined: the reference statistic was zero.
    """

    reference: LatencyDistribution
    candidate: LatencyDistribution
    ratios: dict[str, Optional[float]]
    interrupted: bool = False

    def undefined_ratios(self) -> list[str]:
        return [name for name in LATENCY_STATS if self.ratios.get(name) is None]


# ============================================================================
# Summary Models
# ============================================================================


class FileSummary(BaseModel):
    """Results for one test-definition file."""

    source: str
    total: int = 0
    failed: int = 0
    verdicts: list[ComparisonVerdict] = Field(default_factory=list)
    load: Optional[LatencyComparison] = None
    error: Optional[str] = None  # set when the file could not be loaded

    @model_validator(mode="after")
    def validate_counts(self) -> "FileSummary":
        if not 0 <= self.failed <= self.total:
            raise ValueError(
                f"Failed count ({self.failed}) must be within [0, total={self.total}]"
            )
        return self

    @property
    def passed(self) -> int:
        return self.total - self.failed

    @property
    def skipped(self) -> bool:
        return self.error is not None


class RunSummary(BaseModel):
    """Aggregate results across every processed file."""

    files: list[FileSummary] = Field(default_factory=list)
    total: int = 0
    failed: int = 0
    interrupted: bool = False

    @model_validator(mode="after")
    def validate_counts(self) -> "RunSummary":
        if not 0 <= self.failed <= self.total:
            raise ValueError(
                f"Failed count ({self.failed}) must be within [0, total={self.total}]"
            )
        return self

    @property
    def passed(self) -> int:
        return self.total - self.failed

    @property
    def all_passed(self) -> bool:
        return self.failed == 0
