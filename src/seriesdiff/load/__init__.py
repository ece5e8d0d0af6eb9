"""Dual load harness: fixed-rate synthetic load and latency statistics.

Public API:
    - run_load: Drive both backends and compare latency distributions
    - DualLoadHarness: Configurable harness behind run_load
    - LoadGenerator: Fixed-rate generator for a single backend
"""

from .generator import LoadGenerator, Sender
from .harness import DualLoadHarness, required_workers, run_load
from .pacer import Pacer
from .requester import HttpRequester
from .stats import DistributionBuilder, build_distribution

__all__ = [
    "run_load",
    "DualLoadHarness",
    "required_workers",
    "LoadGenerator",
    "Sender",
    "Pacer",
    "HttpRequester",
    "DistributionBuilder",
    "build_distribution",
]
