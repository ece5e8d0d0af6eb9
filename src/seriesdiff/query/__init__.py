"""Query building: named targets to reference/candidate URLs."""

from .builder import build_queries, build_query, render_url, window_ending_now

__all__ = ["build_queries", "build_query", "render_url", "window_ending_now"]
