"""SeriesDiff - differential testing of time-series render backends.

SeriesDiff checks a candidate backend against a reference backend that serve
the same render protocol behind one endpoint. For every named query it
confirms both return semantically identical JSON and, optionally, drives both
with matched synthetic load to compare their latency.

Basic Usage:
    >>> from seriesdiff import HarnessConfig, run_files
    >>>
    >>> config = HarnessConfig(endpoint="http://localhost:6060/render", load=True)
    >>> summary = run_files(["tests/basic.json"], config)
    >>> print(f"{summary.passed} passed, {summary.failed} failed")

Public API:
    Execution:
        - run_files: Process test files and return a RunSummary

    Comparison:
        - ResponseComparator: Fetch and judge a reference/candidate pair
        - compare_bodies: Judge two already-fetched bodies

    Load:
        - run_load: Matched load against both backends

    Models:
        - HarnessConfig, TestDefinition, BuiltQuery, ComparisonVerdict,
          LatencyDistribution, LatencyComparison, FileSummary, RunSummary

    Errors:
        - SeriesDiffError, ConfigError, SetupError
"""

from .comparison import ResponseComparator, compare_bodies, diff_documents, render_diff
from .core.config import HarnessConfig
from .core.errors import ConfigError, ParseError, SeriesDiffError, SetupError, TransportError
from .core.loaders import load_test_definition
from .core.models import (
    BuiltQuery,
    ComparisonVerdict,
    FileSummary,
    LatencyComparison,
    LatencyDistribution,
    RequestOutcome,
    RunSummary,
    TestDefinition,
    TimeWindow,
    VerdictStatus,
)
from .execution import run_files
from .load import DualLoadHarness, run_load
from .query import build_queries, build_query
from .reporting import compute_ratios, fold_run, summarize_file
from .version import __version__

__all__ = [
    # Version
    "__version__",
    # Execution
    "run_files",
    # Query building
    "build_query",
    "build_queries",
    "load_test_definition",
    # Comparison
    "ResponseComparator",
    "compare_bodies",
    "diff_documents",
    "render_diff",
    # Load
    "DualLoadHarness",
    "run_load",
    # Aggregation
    "compute_ratios",
    "fold_run",
    "summarize_file",
    # Models
    "HarnessConfig",
    "TestDefinition",
    "TimeWindow",
    "BuiltQuery",
    "ComparisonVerdict",
    "VerdictStatus",
    "RequestOutcome",
    "LatencyDistribution",
    "LatencyComparison",
    "FileSummary",
    "RunSummary",
    # Errors
    "SeriesDiffError",
    "ConfigError",
    "SetupError",
    "TransportError",
    "ParseError",
]
