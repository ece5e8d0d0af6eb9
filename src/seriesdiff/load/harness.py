"""Dual load harness: matched synthetic traffic against both backends.

Example:
    >>> comparison = run_load(queries, rate=10, duration=2)
    >>> comparison.reference.p95, comparison.candidate.p95
    (0.051, 0.049)
    >>> comparison.ratios["p95"]
    0.96
"""

import math
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, Optional, Sequence

from ..core.config import HarnessConfig
from ..core.logging import get_logger
from ..core.models import BuiltQuery, LatencyComparison, LatencyDistribution
from ..reporting.summary import compute_ratios
from .generator import LoadGenerator, Sender
from .requester import HttpRequester

logger = get_logger(__name__)

REFERENCE = "reference"
CANDIDATE = "candidate"

# How often the waiting thread wakes up so an interrupt is noticed promptly
_POLL_INTERVAL = 0.2


class DualLoadHarness:
    """Run one load generator per backend and compare their distributions."""

    def __init__(
        self,
        rate: float,
        duration: float,
        timeout: float = 10.0,
        max_workers: int = 64,
        parallel: bool = True,
        sender_factory: Optional[Callable[[str], Sender]] = None,
    ):
        """Initialize harness.

        Args:
            rate: Requests per second, per backend
            duration: Seconds of load, per backend
            timeout: Per-request timeout in seconds (HTTP sender only)
            max_workers: Concurrent requests per backend. Raised to
                ``ceil(rate * timeout)`` when lower, the most requests that
                can be in flight at once without a permit waiting for a worker.
            parallel: Drive both backends at the same time (default) or one after the other
            sender_factory: Optional backend label -> request function. Defaults
                to an HttpRequester per backend.
        """
        self.rate = rate
        self.duration = duration
        self.timeout = timeout
        self.max_workers = max(max_workers, required_workers(rate, timeout))
        if self.max_workers > max_workers:
            logger.info(
                f"Raising load workers from {max_workers} to {self.max_workers} "
                f"to sustain {rate:g}/s with a {timeout:g}s timeout"
            )
        self.parallel = parallel
        self.sender_factory = sender_factory

    @classmethod
    def from_config(cls, config: HarnessConfig, **kwargs) -> "DualLoadHarness":
        return cls(
            rate=config.load_rate,
            duration=config.load_duration,
            timeout=config.timeout,
            max_workers=config.load_workers,
            parallel=config.load_parallel,
            **kwargs,
        )

    def run(self, queries: Sequence[BuiltQuery]) -> LatencyComparison:
        """Drive both backends and block until both streams are drained.

        Never raises for backend failures. A KeyboardInterrupt stops both
        generators and returns the partial distributions with
        ``interrupted`` set.
        """
        senders = {}
        owned = []
        for backend in (REFERENCE, CANDIDATE):
            if self.sender_factory is not None:
                senders[backend] = self.sender_factory(backend)
            else:
                requester = HttpRequester(timeout=self.timeout, pool_size=self.max_workers)
                owned.append(requester)
                senders[backend] = requester

        generators = {
            REFERENCE: self._generator(REFERENCE, [q.reference_url for q in queries], senders[REFERENCE]),
            CANDIDATE: self._generator(CANDIDATE, [q.candidate_url for q in queries], senders[CANDIDATE]),
        }

        try:
            results, interrupted = self._run_generators(generators)
        finally:
            for requester in owned:
                requester.close()

        return LatencyComparison(
            reference=results[REFERENCE],
            candidate=results[CANDIDATE],
            ratios=compute_ratios(results[REFERENCE], results[CANDIDATE]),
            interrupted=interrupted,
        )

    def _generator(self, backend: str, targets: list[str], send: Sender) -> LoadGenerator:
        return LoadGenerator(
            name=backend,
            targets=targets,
            rate=self.rate,
            duration=self.duration,
            send=send,
            max_workers=self.max_workers,
        )

    def _run_generators(
        self, generators: dict[str, LoadGenerator]
    ) -> tuple[dict[str, LatencyDistribution], bool]:
        interrupted = False
        results = {}

        with ThreadPoolExecutor(max_workers=len(generators), thread_name_prefix="seriesdiff-load") as executor:
            if self.parallel:
                futures = {backend: executor.submit(g.run) for backend, g in generators.items()}
                interrupted = _wait_or_stop(list(futures.values()), generators.values())
                for backend, future in futures.items():
                    results[backend] = future.result()
            else:
                for backend, generator in generators.items():
                    if interrupted:
                        # Still run it so the result is an empty, consistent distribution
                        generator.stop()
                    future = executor.submit(generator.run)
                    interrupted = _wait_or_stop([future], generators.values()) or interrupted
                    results[backend] = future.result()

        if interrupted:
            logger.warning("Load run interrupted; reporting partial distributions")
        return results, interrupted


def required_workers(rate: float, timeout: float) -> int:
    """Workers needed so no permit waits while every request runs to its timeout."""
    return max(1, math.ceil(rate * timeout - 1e-9))


def _wait_or_stop(futures, generators) -> bool:
    """Wait for ``futures``; on interrupt stop every generator and drain.

    Returns:
        True if the wait was interrupted
    """
    try:
        while not all(f.done() for f in futures):
            wait(futures, timeout=_POLL_INTERVAL)
    except KeyboardInterrupt:
        for generator in generators:
            generator.stop()
        wait(futures)
        return True
    return False


def run_load(
    queries: Sequence[BuiltQuery],
    rate: float,
    duration: float,
    **kwargs,
) -> LatencyComparison:
    """Run matched load against both backends of ``queries``.

    Args:
        queries: Built queries; reference URLs feed one generator, candidate URLs the other
        rate: Requests per second, per backend
        duration: Seconds of load, per backend
        **kwargs: Passed to DualLoadHarness (timeout, max_workers, parallel, sender_factory)

    Returns:
        LatencyComparison with both distributions and candidate/reference ratios
    """
    return DualLoadHarness(rate=rate, duration=duration, **kwargs).run(queries)
