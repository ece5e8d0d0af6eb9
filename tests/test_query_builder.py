"""Tests for URL building."""

from urllib.parse import parse_qsl, urlsplit

from seriesdiff.core.config import HarnessConfig
from seriesdiff.core.models import TestDefinition, TimeWindow
from seriesdiff.query import build_queries, build_query, render_url, window_ending_now

WINDOW = TimeWindow(from_=1_700_000_000, until=1_700_000_300)


class TestWindow:
    """Test time window construction."""

    def test_window_ending_now(self):
        window = window_ending_now(300, now=1_700_000_300.7)
        assert window.until == 1_700_000_300
        assert window.from_ == 1_700_000_000


class TestBuildQuery:
    """Test reference/candidate URL pairs."""

    def test_default_urls(self):
        query = build_query("cpu", "server.*.cpu", WINDOW, HarnessConfig())

        assert query.reference_url == (
            "http://localhost:6060/render?target=server.*.cpu"
            "&from=1700000000&until=1700000300&format=json&process=none"
        )
        assert query.candidate_url.endswith("&process=any")
        assert query.name == "cpu"
        assert query.target == "server.*.cpu"

    def test_urls_differ_only_by_routing(self):
        query = build_query("sum", "sumSeries(a.{b,c}.d)", WINDOW, HarnessConfig())

        reference = parse_qsl(urlsplit(query.reference_url).query)
        candidate = parse_qsl(urlsplit(query.candidate_url).query)

        assert reference[:-1] == candidate[:-1]
        assert reference[-1] == ("process", "none")
        assert candidate[-1] == ("process", "any")
        assert ("target", "sumSeries(a.{b,c}.d)") in reference

    def test_unsafe_characters_encoded(self):
        query = build_query("space", "alias(a.b, 'x y')", WINDOW, HarnessConfig())
        assert " " not in query.reference_url
        assert dict(parse_qsl(urlsplit(query.reference_url).query))["target"] == "alias(a.b, 'x y')"

    def test_custom_routing(self):
        config = HarnessConfig(
            endpoint="http://graphite:8080/render",
            routing_param="backend",
            reference_marker="graphite",
            candidate_marker="metrictank",
        )
        query = build_query("cpu", "a.b", WINDOW, config)
        assert query.reference_url.startswith("http://graphite:8080/render?")
        assert query.reference_url.endswith("&backend=graphite")
        assert query.candidate_url.endswith("&backend=metrictank")

    def test_endpoint_with_query_string(self):
        url = render_url("http://proxy/render?org=1", "a.b", WINDOW, ("process", "none"))
        assert url.startswith("http://proxy/render?org=1&target=a.b&")


class TestBuildQueries:
    """Test building every query of a file."""

    def test_file_order_and_shared_window(self):
        definition = TestDefinition(source="t.json", tests={"z": "z.*", "a": "a.*"})

        queries = build_queries(definition, WINDOW, HarnessConfig())

        assert [q.name for q in queries] == ["z", "a"]
        for query in queries:
            assert "from=1700000000&until=1700000300" in query.reference_url
            assert "from=1700000000&until=1700000300" in query.candidate_url

    def test_empty_definition(self):
        definition = TestDefinition(source="t.json", tests={})
        assert build_queries(definition, WINDOW, HarnessConfig()) == []
