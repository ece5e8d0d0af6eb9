"""Render a diff tree as indented text for operator inspection.

Each line starts with a one-character marker followed by the tree
indentation:

    ' '  unchanged (containers on the path to a change)
    '~'  modified, shown as ``old => new``
    '+'  added (present only in the candidate)
    '-'  removed (present only in the reference)

Array elements carry their index, so a reordered series is reported at the
exact position that differs:

     {
       "response": {
         "series": [
    ~      2: 3 => 4
         ]
       }
     }
"""

import json
from typing import Any

from .diff import ChangeKind, DiffNode

MARKERS = {
    ChangeKind.UNCHANGED: " ",
    ChangeKind.MODIFIED: "~",
    ChangeKind.ADDED: "+",
    ChangeKind.REMOVED: "-",
}

BRACKETS = {"object": ("{", "}"), "array": ("[", "]")}


def render_diff(root: DiffNode, show_unchanged: bool = False, indent: int = 2) -> str:
    """Render ``root`` as text, one line per changed leaf.

    Unchanged siblings of a change are omitted unless ``show_unchanged`` is
    set. Returns an empty string when nothing changed and unchanged nodes
    are hidden.
    """
    if not root.changed and not show_unchanged:
        return ""

    lines: list[str] = []
    _render(root, 0, "", lines, show_unchanged, indent)
    return "\n".join(lines) + "\n"


def _render(
    node: DiffNode,
    depth: int,
    label: str,
    lines: list[str],
    show_unchanged: bool,
    indent: int,
) -> None:
    pad = " " * (depth * indent)

    if node.container is not None:
        opening, closing = BRACKETS[node.container]
        lines.append(f" {pad}{label}{opening}")
        for child in node.children:
            if child.changed or show_unchanged:
                _render(child, depth + 1, _label(child.key, node.container), lines, show_unchanged, indent)
        lines.append(f" {pad}{closing}")
        return

    marker = MARKERS[node.kind]
    if node.kind == ChangeKind.MODIFIED:
        value = f"{_dump(node.old)} => {_dump(node.new)}"
    elif node.kind == ChangeKind.ADDED:
        value = _dump(node.new)
    else:
        value = _dump(node.old)
    lines.append(f"{marker}{pad}{label}{value}")


def _label(key: Any, container: str) -> str:
    if container == "array":
        return f"{key}: "
    return f"{json.dumps(key, ensure_ascii=False)}: "


def _dump(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)
