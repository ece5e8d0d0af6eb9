"""Fold request outcomes into a LatencyDistribution."""

from collections import Counter
from typing import Iterable

import numpy as np

from ..core.models import LatencyDistribution, RequestOutcome


class DistributionBuilder:
    """Accumulates outcomes for one backend; owned by a single consumer."""

    def __init__(self):
        self._elapsed: list[float] = []
        self._requests = 0
        self._successes = 0
        self._errors: Counter = Counter()

    def add(self, outcome: RequestOutcome) -> None:
        self._requests += 1
        if outcome.elapsed is not None:
            self._elapsed.append(outcome.elapsed)
        if outcome.success:
            self._successes += 1
        else:
            self._errors[outcome.error or "unknown error"] += 1

    def build(self) -> LatencyDistribution:
        """Compute the distribution of everything added so far.

        Timing statistics cover every completed request, failed or not.
        With no completed request they are all zero. With no recorded
        request at all the success rate is 1.0: no outcome failed.
        """
        success_rate = self._successes / self._requests if self._requests else 1.0

        if not self._elapsed:
            return LatencyDistribution(
                requests=self._requests,
                successes=self._successes,
                success_rate=success_rate,
                errors=dict(self._errors),
            )

        elapsed = np.asarray(self._elapsed, dtype=float)
        maximum = float(elapsed.max())
        # Clamp against float rounding so the ordering invariant always holds
        percentiles = np.minimum(np.maximum.accumulate(np.percentile(elapsed, [50, 95, 99])), maximum)

        return LatencyDistribution(
            requests=self._requests,
            completed=len(self._elapsed),
            successes=self._successes,
            mean=float(elapsed.mean()),
            p50=float(percentiles[0]),
            p95=float(percentiles[1]),
            p99=float(percentiles[2]),
            max=maximum,
            success_rate=success_rate,
            errors=dict(self._errors),
        )


def build_distribution(outcomes: Iterable[RequestOutcome]) -> LatencyDistribution:
    builder = DistributionBuilder()
    for outcome in outcomes:
        builder.add(outcome)
    return builder.build()
