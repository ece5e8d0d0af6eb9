"""Response comparison: fetch, normalize, diff and judge backend responses."""

from .comparator import ResponseComparator, compare_bodies
from .diff import Change, ChangeKind, DiffNode, diff_documents
from .normalize import ROOT_KEY, parse_body, wrap_response
from .render import render_diff

__all__ = [
    "ResponseComparator",
    "compare_bodies",
    "Change",
    "ChangeKind",
    "DiffNode",
    "diff_documents",
    "ROOT_KEY",
    "parse_body",
    "wrap_response",
    "render_diff",
]
