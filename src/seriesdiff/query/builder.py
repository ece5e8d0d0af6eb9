"""Build backend-specific render URLs for named targets.

Both backends sit behind one endpoint; a routing query parameter decides
which implementation serves the request. The reference and candidate URLs of
a query are identical apart from that parameter.
"""

import time
from typing import Optional
from urllib.parse import urlencode

from ..core.config import HarnessConfig
from ..core.models import BuiltQuery, TestDefinition, TimeWindow

# Graphite target syntax characters left readable in the query string
TARGET_SAFE_CHARS = "*,(){}[]:"


def window_ending_now(range_seconds: int, now: Optional[float] = None) -> TimeWindow:
    """Window covering the last ``range_seconds`` seconds, ending at ``now``."""
    until = int(time.time() if now is None else now)
    return TimeWindow.ending_at(until, range_seconds)


def render_url(endpoint: str, target: str, window: TimeWindow, routing: tuple[str, str]) -> str:
    params = [
        ("target", target),
        ("from", window.from_),
        ("until", window.until),
        ("format", "json"),
        routing,
    ]
    separator = "&" if "?" in endpoint else "?"
    return endpoint + separator + urlencode(params, safe=TARGET_SAFE_CHARS)


def build_query(name: str, target: str, window: TimeWindow, config: HarnessConfig) -> BuiltQuery:
    """Resolve one named target into its reference and candidate URLs.

    Example:
        >>> q = build_query("cpu", "server.*.cpu", TimeWindow(from_=0, until=300), HarnessConfig())
        >>> q.reference_url
        'http://localhost:6060/render?target=server.*.cpu&from=0&until=300&format=json&process=none'
    """
    return BuiltQuery(
        name=name,
        target=target,
        reference_url=render_url(
            config.endpoint, target, window, (config.routing_param, config.reference_marker)
        ),
        candidate_url=render_url(
            config.endpoint, target, window, (config.routing_param, config.candidate_marker)
        ),
    )


def build_queries(
    definition: TestDefinition, window: TimeWindow, config: HarnessConfig
) -> list[BuiltQuery]:
    """Build every query of a test file, in file order."""
    return [
        build_query(name, target, window, config)
        for name, target in definition.tests.items()
    ]
