"""Configuration management for the SeriesDiff harness.

HarnessConfig is built once at startup and passed explicitly into the core;
no module reads configuration from global state.

Resolution order (highest priority first):
    1. Explicit overrides (CLI options)
    2. Process environment variables (SERIESDIFF_*)
    3. .env file in the working directory (via load_dotenv)
    4. Field defaults
"""

import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError
from .logging import get_logger

logger = get_logger(__name__)

ENV_PREFIX = "SERIESDIFF_"

# Field name -> environment variable suffix
ENV_FIELDS = {
    "endpoint": "ENDPOINT",
    "range_seconds": "RANGE",
    "verbose": "VERBOSE",
    "compare": "COMPARE",
    "load": "LOAD",
    "load_rate": "LOAD_RATE",
    "load_duration": "LOAD_DURATION",
    "load_parallel": "LOAD_PARALLEL",
    "load_workers": "LOAD_WORKERS",
    "timeout": "TIMEOUT",
    "concurrency": "CONCURRENCY",
    "routing_param": "ROUTING_PARAM",
    "reference_marker": "REFERENCE_MARKER",
    "candidate_marker": "CANDIDATE_MARKER",
}


class HarnessConfig(BaseModel):
    """Settings for one SeriesDiff run."""

    model_config = ConfigDict(frozen=True)

    endpoint: str = "http://localhost:6060/render"
    range_seconds: int = Field(default=300, gt=0)
    verbose: bool = False
    compare: bool = True
    load: bool = False
    load_rate: float = Field(default=10.0, gt=0)  # requests per second
    load_duration: float = Field(default=10.0, gt=0)  # seconds
    load_parallel: bool = True
    load_workers: int = Field(default=64, gt=0)
    timeout: float = Field(default=10.0, gt=0)  # per request, seconds
    concurrency: int = Field(default=4, gt=0)
    routing_param: str = "process"
    reference_marker: str = "none"
    candidate_marker: str = "any"

    @field_validator("endpoint", "routing_param", "reference_marker", "candidate_marker")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Value cannot be empty")
        return v.strip()

    @field_validator("candidate_marker")
    @classmethod
    def validate_markers_differ(cls, v: str, info) -> str:
        """Both backends behind one endpoint need distinct routing markers."""
        if v == info.data.get("reference_marker"):
            raise ValueError(
                f"Candidate marker must differ from reference marker (both '{v}')"
            )
        return v

    @classmethod
    def resolve(
        cls,
        overrides: Optional[dict[str, Any]] = None,
        env_file: Optional[Path] = None,
    ) -> "HarnessConfig":
        """Build a config from defaults, environment and explicit overrides.

        Args:
            overrides: Field values that take precedence over the environment.
                None values are ignored so unset CLI options fall through.
            env_file: Optional .env file. Defaults to .env in the working directory.

        Raises:
            ConfigError: If any resulting value fails validation
        """
        load_env_file(env_file)

        values = read_env()
        for key, value in (overrides or {}).items():
            if value is not None:
                values[key] = value

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e


def load_env_file(env_file: Optional[Path] = None) -> None:
    """Load SERIESDIFF_* variables from a .env file.

    Variables already set in the environment take precedence.
    """
    if env_file is None:
        env_file = Path.cwd() / ".env"

    if env_file.exists():
        logger.debug(f"Loading environment variables from {env_file}")
        load_dotenv(env_file, override=False)


def read_env(environ: Optional[dict[str, str]] = None) -> dict[str, str]:
    """Collect config values from SERIESDIFF_* environment variables.

    Values stay strings; pydantic coerces them ("true", "300", "2.5").
    """
    environ = os.environ if environ is None else environ
    values = {}
    for field_name, suffix in ENV_FIELDS.items():
        raw = environ.get(ENV_PREFIX + suffix)
        if raw is not None and raw != "":
            values[field_name] = raw
    return values
