"""Body parsing and root normalization for the structural diff.

The render protocol may answer with a bare JSON array or scalar, while the
diff tree is rooted at an object. Every parsed body is therefore wrapped as
the value of a single synthetic key before diffing. The wrapping is applied
identically to both sides, so it never produces a difference on its own.
Callers hand raw bodies to the comparator and must not wrap them first.
"""

import json
from typing import Any, Union

from ..core.errors import ParseError

ROOT_KEY = "response"


def parse_body(body: Union[str, bytes], backend: str) -> Any:
    """Decode a response body as JSON.

    Raises:
        ParseError: If the body is empty or not valid JSON
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(backend, str(e)) from e

    if not body.strip():
        raise ParseError(backend, "empty body")

    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        raise ParseError(backend, str(e)) from e


def wrap_response(document: Any) -> dict[str, Any]:
    """Give a parsed document an object root: ``B`` becomes ``{"response": B}``."""
    return {ROOT_KEY: document}
