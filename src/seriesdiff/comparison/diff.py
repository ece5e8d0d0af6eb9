"""Structural diff of two JSON documents.

Mappings are compared key by key and sequences index by index, producing a
tree of DiffNode objects. Each leaf is classified as unchanged, modified,
added (present only in the candidate) or removed (present only in the
reference). A container node is modified when any descendant changed.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional, Union

Key = Union[str, int, None]


class ChangeKind(str, Enum):
    """Classification of a diff node."""

    UNCHANGED = "unchanged"
    MODIFIED = "modified"
    ADDED = "added"
    REMOVED = "removed"


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


# Marks the absent side of an added or removed node
MISSING: Any = _Missing()


@dataclass
class Change:
    """One changed leaf, addressed by its path from the document root."""

    path: str
    kind: ChangeKind
    old: Any = MISSING
    new: Any = MISSING


@dataclass
class DiffNode:
    """A node of the diff tree.

    ``container`` is "object" or "array" when both sides hold the same kind
    of container and the node has per-key/per-index children; it is None for
    leaves, including values whose type changed between the two sides.
    """

    key: Key
    kind: ChangeKind
    old: Any = MISSING
    new: Any = MISSING
    container: Optional[str] = None
    children: list["DiffNode"] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.kind != ChangeKind.UNCHANGED

    def changes(self, path: str = "") -> Iterator[Change]:
        """Yield every changed leaf below (and including) this node."""
        if self.container is not None:
            for child in self.children:
                yield from child.changes(_join_path(path, child.key, self.container))
        elif self.changed:
            yield Change(path=path, kind=self.kind, old=self.old, new=self.new)


def diff_documents(reference: Any, candidate: Any) -> DiffNode:
    """Diff two parsed JSON documents.

    Example:
        >>> root = diff_documents({"series": [1, 2, 3]}, {"series": [1, 2, 4]})
        >>> [(c.path, c.old, c.new) for c in root.changes()]
        [('series[2]', 3, 4)]
    """
    return _diff(None, reference, candidate)


def _diff(key: Key, old: Any, new: Any) -> DiffNode:
    if isinstance(old, dict) and isinstance(new, dict):
        children = [_diff(k, old[k], new[k]) if k in new else _removed(k, old[k]) for k in old]
        children.extend(_added(k, new[k]) for k in new if k not in old)
        return _container(key, "object", old, new, children)

    if isinstance(old, list) and isinstance(new, list):
        children = []
        for index in range(max(len(old), len(new))):
            if index >= len(new):
                children.append(_removed(index, old[index]))
            elif index >= len(old):
                children.append(_added(index, new[index]))
            else:
                children.append(_diff(index, old[index], new[index]))
        return _container(key, "array", old, new, children)

    kind = ChangeKind.UNCHANGED if _same_value(old, new) else ChangeKind.MODIFIED
    return DiffNode(key=key, kind=kind, old=old, new=new)


def _container(key: Key, container: str, old: Any, new: Any, children: list[DiffNode]) -> DiffNode:
    changed = any(child.changed for child in children)
    return DiffNode(
        key=key,
        kind=ChangeKind.MODIFIED if changed else ChangeKind.UNCHANGED,
        old=old,
        new=new,
        container=container,
        children=children,
    )


def _added(key: Key, value: Any) -> DiffNode:
    return DiffNode(key=key, kind=ChangeKind.ADDED, new=value)


def _removed(key: Key, value: Any) -> DiffNode:
    return DiffNode(key=key, kind=ChangeKind.REMOVED, old=value)


def _same_value(old: Any, new: Any) -> bool:
    # JSON numbers compare by value (1 == 1.0) but true is not 1
    if isinstance(old, bool) or isinstance(new, bool):
        return type(old) is type(new) and old == new
    if isinstance(old, (dict, list)) or isinstance(new, (dict, list)):
        return False
    if isinstance(old, float) and isinstance(new, float) and math.isnan(old):
        return math.isnan(new)
    return old == new


def _join_path(path: str, key: Key, container: str) -> str:
    if container == "array":
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else str(key)
