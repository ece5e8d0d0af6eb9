"""Response comparator for reference and candidate backends.

The comparator fetches both responses of a query concurrently, parses and
normalizes them, runs the structural diff and classifies the pair. It never
prints; the rendered diff and raw bodies travel in the ComparisonVerdict and
the display layer decides what to show.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Union

import requests

from ..core.config import HarnessConfig
from ..core.errors import ParseError, TransportError
from ..core.logging import get_logger
from ..core.models import BuiltQuery, ComparisonVerdict, VerdictStatus
from .diff import diff_documents
from .normalize import parse_body, wrap_response
from .render import render_diff

logger = get_logger(__name__)

REFERENCE = "reference"
CANDIDATE = "candidate"


class ResponseComparator:
    """Compare the reference and candidate responses of named queries."""

    def __init__(
        self,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        show_unchanged: bool = False,
    ):
        """Initialize comparator.

        Args:
            timeout: Per-request timeout in seconds; expiry is a transport failure
            session: Optional requests session (a new one is created otherwise)
            show_unchanged: Include unchanged nodes in rendered diffs
        """
        self.timeout = timeout
        self.session = session or requests.Session()
        self.show_unchanged = show_unchanged

    @classmethod
    def from_config(cls, config: HarnessConfig, session: Optional[requests.Session] = None) -> "ResponseComparator":
        return cls(timeout=config.timeout, session=session)

    def compare_query(self, query: BuiltQuery) -> ComparisonVerdict:
        return self.compare(query.name, query.reference_url, query.candidate_url)

    def compare(self, name: str, reference_url: str, candidate_url: str) -> ComparisonVerdict:
        """Fetch both URLs and judge whether the responses are equivalent.

        Args:
            name: Test name, carried into the verdict
            reference_url: URL routed to the reference backend
            candidate_url: URL routed to the candidate backend

        Returns:
            ComparisonVerdict. Transport and parse failures produce a
            non-equivalent verdict instead of raising.
        """
        logger.debug(f"Comparing '{name}': {reference_url} vs {candidate_url}")

        bodies, errors = self._fetch_pair(reference_url, candidate_url)
        if errors:
            error = "; ".join(errors)
            logger.warning(f"Transport failure for '{name}': {error}")
            return ComparisonVerdict(
                name=name,
                status=VerdictStatus.TRANSPORT_ERROR,
                error=error,
                reference_url=reference_url,
                candidate_url=candidate_url,
                reference_body=bodies.get(REFERENCE),
                candidate_body=bodies.get(CANDIDATE),
            )

        return compare_bodies(
            name,
            bodies[REFERENCE],
            bodies[CANDIDATE],
            show_unchanged=self.show_unchanged,
            reference_url=reference_url,
            candidate_url=candidate_url,
        )

    def _fetch_pair(self, reference_url: str, candidate_url: str) -> tuple[dict[str, str], list[str]]:
        """Issue both GETs concurrently and wait for both to finish.

        Returns:
            Tuple of (bodies by backend, error messages). A failed backend
            has a body only when it answered with a non-2xx status.
        """
        bodies = {}
        errors = []

        with ThreadPoolExecutor(max_workers=2) as executor:
            futures = {
                REFERENCE: executor.submit(self._fetch, REFERENCE, reference_url),
                CANDIDATE: executor.submit(self._fetch, CANDIDATE, candidate_url),
            }

            for backend, future in futures.items():
                try:
                    bodies[backend] = future.result()
                except TransportError as e:
                    errors.append(str(e))
                    if e.body is not None:
                        bodies[backend] = e.body

        return bodies, errors

    def _fetch(self, backend: str, url: str) -> str:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise TransportError(backend, url, f"timed out after {self.timeout}s ({e})") from e
        except requests.exceptions.HTTPError as e:
            body = e.response.text if e.response is not None else None
            raise TransportError(backend, url, str(e), body=body) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(backend, url, str(e)) from e

        logger.debug(f"{backend} answered {response.status_code} with {len(response.content)} bytes")
        return response.text

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ResponseComparator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def compare_bodies(
    name: str,
    reference_body: Union[str, bytes],
    candidate_body: Union[str, bytes],
    show_unchanged: bool = False,
    reference_url: Optional[str] = None,
    candidate_url: Optional[str] = None,
) -> ComparisonVerdict:
    """Judge two already-fetched response bodies.

    Both bodies are parsed, wrapped under the same synthetic root key and
    diffed. A body that is not valid JSON yields a parse_error verdict that
    carries both raw bodies; no partial diff is attempted.
    """
    reference_text = _as_text(reference_body)
    candidate_text = _as_text(candidate_body)
    verdict_fields = {
        "name": name,
        "reference_url": reference_url,
        "candidate_url": candidate_url,
        "reference_body": reference_text,
        "candidate_body": candidate_text,
    }

    errors = []
    documents = {}
    for backend, body in ((REFERENCE, reference_body), (CANDIDATE, candidate_body)):
        try:
            documents[backend] = wrap_response(parse_body(body, backend))
        except ParseError as e:
            errors.append(str(e))

    if errors:
        logger.warning(f"Invalid response for '{name}': {'; '.join(errors)}")
        return ComparisonVerdict(
            status=VerdictStatus.PARSE_ERROR, error="; ".join(errors), **verdict_fields
        )

    root = diff_documents(documents[REFERENCE], documents[CANDIDATE])
    if root.changed:
        return ComparisonVerdict(
            status=VerdictStatus.DIVERGENT,
            diff_report=render_diff(root, show_unchanged=show_unchanged),
            **verdict_fields,
        )

    return ComparisonVerdict(status=VerdictStatus.EQUIVALENT, **verdict_fields)


def _as_text(body: Union[str, bytes]) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body
