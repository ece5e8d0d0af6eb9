"""Exception hierarchy for SeriesDiff.

All custom exceptions inherit from SeriesDiffError, making it easy to catch
every SeriesDiff-specific error in a single except clause.

Only SetupError and ConfigError ever escape to the caller. TransportError and
ParseError are raised inside the comparator and folded into a
ComparisonVerdict; load request failures are never raised at all, they are
tallied in the LatencyDistribution.
"""

from typing import Optional


class SeriesDiffError(Exception):
    """Base exception for all SeriesDiff errors.

    Example:
        try:
            seriesdiff.run_files(paths, config)
        except SeriesDiffError as e:
            print(f"SeriesDiff error: {e}")
    """

    pass


class ConfigError(SeriesDiffError):
    """Invalid harness configuration.

    Raised when:
    - A HarnessConfig field fails validation (negative rate, empty endpoint)
    - An environment variable holds a value of the wrong type

    This is the only fatal error: the CLI exits with status 1.
    """

    pass


class SetupError(SeriesDiffError):
    """A test-definition file cannot be used.

    Raised when:
    - The file is missing or unreadable
    - The content is not valid JSON/YAML
    - The top level is not a mapping of test name to target string

    Examples:
        - "Test file not found: tests/cpu.json"
        - "Invalid JSON in tests/cpu.json: Expecting value: line 1 column 1"
        - "Test 'cpu' in tests/cpu.json: target must be a string, got int"

    Note: the executor skips the file and continues with the rest of the run.
    """

    pass


class TransportError(SeriesDiffError):
    """A backend request failed before a usable body was received.

    Covers connection failures, timeouts and non-2xx responses. For a non-2xx
    response ``body`` holds what the backend sent, typically an error page.
    """

    def __init__(self, backend: str, url: str, message: str, body: Optional[str] = None):
        self.backend = backend
        self.url = url
        self.body = body
        super().__init__(f"{backend} request failed: {message}")


class ParseError(SeriesDiffError):
    """A backend response body is not valid JSON."""

    def __init__(self, backend: str, message: str):
        self.backend = backend
        super().__init__(f"{backend} response is not valid JSON: {message}")
