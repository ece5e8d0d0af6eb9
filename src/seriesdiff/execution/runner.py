"""Run execution for SeriesDiff.

For each test file: load the definition, build both URLs per test, compare
the responses, then (in load mode) drive both backends with the same
queries. Each step returns a value; the run summary is folded at the end.

Key features:
- Per-file setup errors skip the file without stopping the run
- Parallel comparisons with configurable concurrency, results kept in file order
- One shared time window for every query of the run
- Per-file callback so callers can report progress as files finish

Example:
    >>> config = HarnessConfig(endpoint="http://graphite:8080/render", load=True)
    >>> summary = run_files(["tests/cpu.json"], config)
    >>> print(f"{summary.passed} passed, {summary.failed} failed")
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from ..comparison import ResponseComparator
from ..core.config import HarnessConfig
from ..core.errors import SetupError
from ..core.loaders import load_test_definition
from ..core.logging import get_logger
from ..core.models import BuiltQuery, ComparisonVerdict, FileSummary, RunSummary, TimeWindow
from ..load import DualLoadHarness
from ..query import build_queries, window_ending_now
from ..reporting import failed_file, fold_run, summarize_file

logger = get_logger(__name__)

# Type alias for per-file progress callback
FileCallback = Callable[[FileSummary], None]


def run_files(
    paths: Sequence[Union[str, Path]],
    config: HarnessConfig,
    comparator: Optional[ResponseComparator] = None,
    harness: Optional[DualLoadHarness] = None,
    on_file: Optional[FileCallback] = None,
    now: Optional[float] = None,
) -> RunSummary:
    """Process every test file and return the run summary.

    Args:
        paths: Test-definition files, processed in order
        config: Harness configuration
        comparator: Optional comparator (created from config if omitted)
        harness: Optional load harness (created from config in load mode if omitted)
        on_file: Optional callback invoked with each FileSummary as it completes
        now: Optional run start time in Unix seconds (defaults to the current time)

    Returns:
        RunSummary over all files. Files that failed to load are included
        with their error and count toward no totals. After an interrupt the
        summary covers the files finished so far and ``interrupted`` is set.
    """
    window = window_ending_now(config.range_seconds, now)
    logger.info(
        f"Starting run: {len(paths)} files, endpoint={config.endpoint}, "
        f"window={window.range_seconds}s ending {window.until}, compare={config.compare}, load={config.load}"
    )

    owns_comparator = comparator is None and config.compare
    if owns_comparator:
        comparator = ResponseComparator.from_config(config)
    if harness is None and config.load:
        harness = DualLoadHarness.from_config(config)

    files = []
    interrupted = False
    try:
        for path in paths:
            try:
                summary = run_file(path, config, window, comparator, harness)
            except KeyboardInterrupt:
                interrupted = True
                logger.warning(f"Run interrupted while testing {path}; reporting finished files only")
                break
            files.append(summary)

            if on_file:
                on_file(summary)

            if summary.load is not None and summary.load.interrupted:
                interrupted = True
                logger.warning(f"Run interrupted during load test of {path}; skipping remaining files")
                break
    finally:
        if owns_comparator:
            comparator.close()

    result = fold_run(files, interrupted=interrupted)
    logger.info(f"Run complete: {result.passed} passed, {result.failed} failed")
    return result


def run_file(
    path: Union[str, Path],
    config: HarnessConfig,
    window: TimeWindow,
    comparator: Optional[ResponseComparator] = None,
    harness: Optional[DualLoadHarness] = None,
) -> FileSummary:
    """Compare (and optionally load test) every query of one file."""
    try:
        definition = load_test_definition(path)
    except SetupError as e:
        logger.error(f"Skipping {path}: {e}")
        return failed_file(str(path), str(e))

    queries = build_queries(definition, window, config)
    logger.info(f"Loaded {len(queries)} tests from {definition.source}")

    verdicts = []
    if config.compare and comparator is not None:
        verdicts = compare_queries(queries, comparator, config.concurrency)

    load = None
    if config.load and harness is not None:
        if queries:
            load = harness.run(queries)
        else:
            logger.warning(f"No tests in {definition.source}; skipping load test")

    return summarize_file(definition.source, verdicts, load)


def compare_queries(
    queries: Sequence[BuiltQuery],
    comparator: ResponseComparator,
    concurrency: int = 4,
) -> list[ComparisonVerdict]:
    """Compare queries in parallel using ThreadPoolExecutor.

    Returns:
        List of ComparisonVerdict objects (same order as input queries)
    """
    if not queries:
        return []

    with ThreadPoolExecutor(max_workers=min(concurrency, len(queries))) as executor:
        # map keeps input order; the comparator turns every failure into a verdict
        return list(executor.map(comparator.compare_query, queries))
