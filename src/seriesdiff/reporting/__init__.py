"""Aggregation of verdicts and load results into run summaries."""

from .summary import (
    compute_ratio,
    compute_ratios,
    failed_file,
    fold_run,
    summarize_file,
)

__all__ = [
    "compute_ratio",
    "compute_ratios",
    "failed_file",
    "fold_run",
    "summarize_file",
]
