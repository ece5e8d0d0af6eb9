"""Tests for configuration resolution."""

import os

import pytest

from seriesdiff.core.config import ENV_PREFIX, HarnessConfig, read_env
from seriesdiff.core.errors import ConfigError


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run with no SERIESDIFF_* variables and an empty working directory."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestHarnessConfig:
    """Test HarnessConfig defaults and validation."""

    def test_defaults(self):
        config = HarnessConfig()
        assert config.endpoint == "http://localhost:6060/render"
        assert config.range_seconds == 300
        assert config.compare is True
        assert config.load is False
        assert config.routing_param == "process"
        assert config.reference_marker == "none"
        assert config.candidate_marker == "any"

    def test_markers_must_differ(self):
        with pytest.raises(ValueError, match="must differ"):
            HarnessConfig(reference_marker="any", candidate_marker="any")

    def test_empty_endpoint_rejected(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            HarnessConfig(endpoint="  ")

    @pytest.mark.parametrize("field", ["range_seconds", "load_rate", "load_duration", "timeout"])
    def test_non_positive_rejected(self, field):
        with pytest.raises(ValueError):
            HarnessConfig(**{field: 0})


class TestResolve:
    """Test resolution order: overrides > environment > .env > defaults."""

    def test_defaults_without_environment(self, clean_env):
        assert HarnessConfig.resolve() == HarnessConfig()

    def test_environment_values(self, clean_env, monkeypatch):
        monkeypatch.setenv("SERIESDIFF_ENDPOINT", "http://graphite:8080/render")
        monkeypatch.setenv("SERIESDIFF_RANGE", "600")
        monkeypatch.setenv("SERIESDIFF_LOAD", "true")

        config = HarnessConfig.resolve()

        assert config.endpoint == "http://graphite:8080/render"
        assert config.range_seconds == 600
        assert config.load is True

    def test_overrides_beat_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("SERIESDIFF_RANGE", "600")
        config = HarnessConfig.resolve({"range_seconds": 60})
        assert config.range_seconds == 60

    def test_none_overrides_fall_through(self, clean_env, monkeypatch):
        monkeypatch.setenv("SERIESDIFF_TIMEOUT", "2.5")
        config = HarnessConfig.resolve({"timeout": None, "endpoint": None})
        assert config.timeout == 2.5
        assert config.endpoint == "http://localhost:6060/render"

    def test_env_file(self, clean_env, monkeypatch):
        env_file = clean_env / ".env"
        env_file.write_text("SERIESDIFF_CONCURRENCY=9\n")
        monkeypatch.delenv("SERIESDIFF_CONCURRENCY", raising=False)

        try:
            config = HarnessConfig.resolve()
        finally:
            # load_dotenv writes into os.environ
            monkeypatch.delenv("SERIESDIFF_CONCURRENCY", raising=False)

        assert config.concurrency == 9

    def test_invalid_value_raises_config_error(self, clean_env, monkeypatch):
        monkeypatch.setenv("SERIESDIFF_RANGE", "soon")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            HarnessConfig.resolve()


class TestReadEnv:
    """Test environment variable collection."""

    def test_ignores_empty_and_unknown(self):
        values = read_env(
            {"SERIESDIFF_ENDPOINT": "", "SERIESDIFF_RATE_LIMIT": "1", "SERIESDIFF_LOAD_RATE": "25"}
        )
        assert values == {"load_rate": "25"}
