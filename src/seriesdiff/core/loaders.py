"""File loaders for SeriesDiff test definitions.

A test file maps human-readable test names to query targets:

    {
        "cpu": "server.*.cpu",
        "sum of load": "sumSeries(server.*.load)"
    }

JSON is the native format; .yaml/.yml files with the same shape are also
accepted.
"""

import json
from pathlib import Path
from typing import Any, Union

import yaml

from .errors import SetupError
from .logging import get_logger
from .models import TestDefinition

logger = get_logger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


def load_test_definition(path: Union[str, Path]) -> TestDefinition:
    """Load and validate one test-definition file.

    Args:
        path: Path to a JSON (or YAML) test file

    Returns:
        TestDefinition with tests in file order

    Raises:
        SetupError: If the file is missing, unreadable or malformed

    Example:
        >>> definition = load_test_definition("tests/cpu.json")
        >>> definition.tests
        {'cpu': 'server.*.cpu'}
    """
    path = Path(path)
    logger.debug(f"Loading test definition from {path}")

    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError:
        raise SetupError(f"Test file not found: {path}") from None
    except OSError as e:
        raise SetupError(f"Failed to read {path}: {e}") from e

    data = _parse(path, text)
    return TestDefinition(source=str(path), tests=_validate_tests(path, data))


def _parse(path: Path, text: str) -> Any:
    if path.suffix.lower() in YAML_SUFFIXES:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise SetupError(f"Invalid YAML syntax in {path}: {e}") from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise SetupError(f"Invalid JSON in {path}: {e}") from e


def _validate_tests(path: Path, data: Any) -> dict[str, str]:
    if not isinstance(data, dict):
        raise SetupError(
            f"Invalid test file {path}: expected an object of test name to target, "
            f"got {type(data).__name__}"
        )

    tests = {}
    for name, target in data.items():
        if not isinstance(target, str):
            raise SetupError(
                f"Test '{name}' in {path}: target must be a string, "
                f"got {type(target).__name__}"
            )
        if not target.strip():
            raise SetupError(f"Test '{name}' in {path}: target cannot be empty")
        tests[str(name)] = target

    if not tests:
        logger.warning(f"Test file {path} defines no tests")
    return tests
