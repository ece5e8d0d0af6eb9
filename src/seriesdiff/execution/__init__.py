"""SeriesDiff run execution.

Public API:
    - run_files: Process test files and return the run summary
    - run_file: Process a single test file
    - compare_queries: Compare built queries in parallel
"""

from .runner import compare_queries, run_file, run_files

__all__ = ["compare_queries", "run_file", "run_files"]
