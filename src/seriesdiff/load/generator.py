"""Fixed-rate load generator for one backend.

Producer/consumer layout:

    pacer thread --submit--> worker pool --done callback--> queue --> consumer

The pacer only submits, so in-flight requests overlap freely. Latency is
measured from the moment a permit was due, so time spent waiting for a free
worker counts against the backend instead of vanishing. Every
finished (or cancelled) request puts exactly one RequestOutcome on the
queue. The consumer is the only writer of the DistributionBuilder and the
distribution is built after the pool has shut down and the queue has been
drained up to the end-of-stream marker.
"""

import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Sequence

from ..core.logging import get_logger
from ..core.models import LatencyDistribution, RequestOutcome
from .pacer import Pacer
from .stats import DistributionBuilder

logger = get_logger(__name__)

# Type alias for the request function: url -> outcome
Sender = Callable[[str], RequestOutcome]

_END_OF_STREAM = object()


class LoadGenerator:
    """Issue GETs against a fixed target list at a constant rate."""

    def __init__(
        self,
        name: str,
        targets: Sequence[str],
        rate: float,
        duration: float,
        send: Sender,
        max_workers: int = 64,
    ):
        """Initialize generator.

        Args:
            name: Backend label used in logs and thread names
            targets: URLs to request, cycled to fill every permit
            rate: Requests per second
            duration: Seconds to generate load for
            send: Function performing one request
            max_workers: Upper bound on concurrently executing requests
        """
        self.name = name
        self.targets = list(targets)
        self.send = send
        self.max_workers = max_workers
        self.pacer = Pacer(rate, duration)
        self.late = 0
        self._late_lock = threading.Lock()

    def stop(self) -> None:
        """Stop issuing new requests; queued ones are cancelled."""
        self.pacer.stop()

    def run(self) -> LatencyDistribution:
        """Generate load for the configured duration and return the distribution.

        Blocks until every issued request has finished or been cancelled and
        its outcome has been consumed.
        """
        builder = DistributionBuilder()
        outcomes: queue.Queue = queue.Queue()
        consumer = threading.Thread(
            target=_consume,
            args=(outcomes, builder),
            name=f"{self.name}-outcomes",
            daemon=True,
        )
        consumer.start()

        if not self.targets:
            logger.warning(f"No targets for {self.name} load generator")

        logger.info(
            f"Starting {self.name} load: {self.pacer.ticks} requests at "
            f"{self.pacer.rate:g}/s over {len(self.targets)} targets"
        )

        issued = 0
        self.late = 0
        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix=f"{self.name}-load")
        try:
            if self.targets:
                for tick in self.pacer:
                    url = self.targets[tick % len(self.targets)]
                    future = executor.submit(self._send_scheduled, url, self.pacer.due(tick))
                    future.add_done_callback(lambda f: outcomes.put(_outcome_of(f)))
                    issued += 1
        finally:
            executor.shutdown(wait=True, cancel_futures=self.pacer.stopped)
            outcomes.put(_END_OF_STREAM)
            consumer.join()

        if self.late:
            logger.warning(
                f"{self.name}: {self.late} of {issued} requests were sent late; "
                f"waiting time is included in their latency"
            )

        distribution = builder.build()
        logger.info(
            f"Finished {self.name} load: {issued} issued, {distribution.requests} recorded, "
            f"success rate {distribution.success_rate:.2%}"
        )
        return distribution

    def _send_scheduled(self, url: str, due: float) -> RequestOutcome:
        delay = self.pacer.clock() - due
        if delay > self.pacer.interval:
            self._record_late(delay)

        outcome = self.send(url)
        if delay > 0 and outcome.elapsed is not None:
            outcome = outcome.model_copy(update={"elapsed": outcome.elapsed + delay})
        return outcome

    def _record_late(self, delay: float) -> None:
        with self._late_lock:
            self.late += 1
            first = self.late == 1

        if first:
            logger.warning(
                f"{self.name} load is falling behind: a request went out {delay:.3f}s "
                f"after its permit with all {self.max_workers} workers busy"
            )
        else:
            logger.debug(f"{self.name} request sent {delay:.3f}s late")


def _outcome_of(future: Future) -> RequestOutcome:
    if future.cancelled():
        return RequestOutcome(elapsed=None, success=False, error="request cancelled")

    error = future.exception()
    if error is not None:
        # Sender bugs still count as failed requests rather than vanishing
        return RequestOutcome(elapsed=None, success=False, error=type(error).__name__)

    return future.result()


def _consume(outcomes: queue.Queue, builder: DistributionBuilder) -> None:
    while True:
        item = outcomes.get()
        if item is _END_OF_STREAM:
            return
        builder.add(item)
