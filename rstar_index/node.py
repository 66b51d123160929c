from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Optional

from .envelope import Envelope, union_all


@dataclass
class Entry:
    """A (box, reference) pair. `ref` is a child Node in internal nodes and a stored value in leaves."""
    box: Envelope
    ref: Any = None

    @property
    def child(self) -> "Node":
        if not isinstance(self.ref, Node):
            raise TypeError("Leaf entries have no child node")
        return self.ref


class Node:
    is_leaf = False

    def __init__(self, entries: Optional[List[Entry]] = None):
        self.entries: List[Entry] = list(entries or [])

    def __len__(self) -> int:
        return len(self.entries)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(entries={len(self.entries)})"

    def envelope(self) -> Envelope:
        # Union of the entries' boxes; the parent entry stores a copy of it.
        return union_all(e.box for e in self.entries)


class InternalNode(Node):
    pass


class Leaf(Node):
    is_leaf = True


def relative_level(node: Node) -> int:
    """Edges from `node` down to the leaf level (0 for a leaf). Assumes a balanced tree."""
    level = 0
    while not node.is_leaf:
        node = node.entries[0].child
        level += 1
    return level
