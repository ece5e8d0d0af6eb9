"""Display module for printing SeriesDiff results."""

from .console import (
    ConsoleReporter,
    error_table,
    format_diff,
    format_duration,
    format_ratio,
    latency_table,
    ratio_table,
)

__all__ = [
    "ConsoleReporter",
    "error_table",
    "format_diff",
    "format_duration",
    "format_ratio",
    "latency_table",
    "ratio_table",
]
