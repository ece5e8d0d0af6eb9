"""Tests for test-definition loading."""

import json

import pytest

from seriesdiff.core.errors import SetupError
from seriesdiff.core.loaders import load_test_definition


def write_json(path, data):
    path.write_text(json.dumps(data))
    return path


class TestLoadTestDefinition:
    """Test loading JSON and YAML test files."""

    def test_load_json(self, tmp_path):
        path = write_json(tmp_path / "basic.json", {"cpu": "server.*.cpu", "sum": "sumSeries(a.*)"})

        definition = load_test_definition(path)

        assert definition.source == str(path)
        assert definition.tests == {"cpu": "server.*.cpu", "sum": "sumSeries(a.*)"}
        assert list(definition.tests) == ["cpu", "sum"]

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "basic.yaml"
        path.write_text("cpu: server.*.cpu\nload: 'sumSeries(server.*.load)'\n")

        definition = load_test_definition(path)

        assert definition.tests == {"cpu": "server.*.cpu", "load": "sumSeries(server.*.load)"}

    def test_empty_object_is_valid(self, tmp_path):
        definition = load_test_definition(write_json(tmp_path / "empty.json", {}))
        assert len(definition) == 0

    def test_missing_file(self, tmp_path):
        with pytest.raises(SetupError, match="Test file not found"):
            load_test_definition(tmp_path / "missing.json")

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text('{"cpu": ')
        with pytest.raises(SetupError, match="Invalid JSON"):
            load_test_definition(path)

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "broken.yml"
        path.write_text("cpu: [unclosed\n")
        with pytest.raises(SetupError, match="Invalid YAML"):
            load_test_definition(path)

    def test_not_an_object(self, tmp_path):
        path = write_json(tmp_path / "list.json", ["server.*.cpu"])
        with pytest.raises(SetupError, match="expected an object"):
            load_test_definition(path)

    def test_non_string_target(self, tmp_path):
        path = write_json(tmp_path / "bad.json", {"cpu": 42})
        with pytest.raises(SetupError, match="target must be a string"):
            load_test_definition(path)

    def test_blank_target(self, tmp_path):
        path = write_json(tmp_path / "blank.json", {"cpu": "  "})
        with pytest.raises(SetupError, match="target cannot be empty"):
            load_test_definition(path)
