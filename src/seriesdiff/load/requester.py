"""Timed HTTP GET used by the load generators."""

import time

import requests
from requests.adapters import HTTPAdapter

from ..core.logging import get_logger
from ..core.models import RequestOutcome

logger = get_logger(__name__)


class HttpRequester:
    """Issue a GET and turn whatever happens into a RequestOutcome.

    No retries: a failed request is recorded once and never reissued. The
    session's connection pool is sized to the worker count so concurrent
    requests do not queue on connections.
    """

    def __init__(self, timeout: float = 10.0, pool_size: int = 64):
        self.timeout = timeout
        self.session = requests.Session()
        adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size, max_retries=0)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def __call__(self, url: str) -> RequestOutcome:
        start_time = time.perf_counter()
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            elapsed = time.perf_counter() - start_time
            logger.debug(f"Load request to {url} failed: {e}")
            return RequestOutcome(elapsed=elapsed, success=False, error=describe_error(e))

        elapsed = time.perf_counter() - start_time
        if 200 <= response.status_code < 300:
            return RequestOutcome(elapsed=elapsed, success=True, status_code=response.status_code)

        return RequestOutcome(
            elapsed=elapsed,
            success=False,
            status_code=response.status_code,
            error=f"{response.status_code} {response.reason}".strip(),
        )

    def close(self) -> None:
        self.session.close()


def describe_error(error: Exception) -> str:
    """Stable description for tallying: exception messages embed URLs and addresses."""
    if isinstance(error, requests.exceptions.Timeout):
        return f"timeout ({type(error).__name__})"
    if isinstance(error, requests.exceptions.ConnectionError):
        return f"connection error ({type(error).__name__})"
    return type(error).__name__
