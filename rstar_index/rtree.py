from __future__ import annotations
from typing import Any, Iterator, List, Optional, Tuple
import logging
import numpy as np

from .subtree import choose_subtree
from .envelope import Envelope, area, overlap, to_envelope
from .node import Entry, InternalNode, Leaf, Node
from .options import RTreeOptions

logger = logging.getLogger(__name__)


# ------------------------------- Split ---------------------------------------

def _prefix_suffix_bounds(mins: np.ndarray, maxs: np.ndarray):
    """Running MBRs over rows of (n, D) arrays: prefix [0..i] and suffix [i..n-1]."""
    left_min = np.minimum.accumulate(mins, axis=0)
    left_max = np.maximum.accumulate(maxs, axis=0)
    right_min = np.minimum.accumulate(mins[::-1], axis=0)[::-1]
    right_max = np.maximum.accumulate(maxs[::-1], axis=0)[::-1]
    return left_min, left_max, right_min, right_max


def _distributions(mins: np.ndarray, maxs: np.ndarray, order: np.ndarray, min_entries: int):
    """Yield (k, left, right) for every split of `order` leaving >= min_entries on each side."""
    n = order.size
    left_min, left_max, right_min, right_max = _prefix_suffix_bounds(mins[order], maxs[order])
    for k in range(min_entries, n - min_entries + 1):
        left = Envelope(left_min[k - 1], left_max[k - 1])
        right = Envelope(right_min[k], right_max[k])
        yield k, left, right


def split_entries(entries: List[Entry], min_entries: int) -> Tuple[List[Entry], List[Entry]]:
    """
    R*-style split of an overflowing entry list into two groups.
    - Per axis, sort by lower then by upper bound; the split axis is the one with the
      smallest sum of margins over all candidate distributions
    - On that axis: minimal overlap of the two group MBRs
    - Tie-breaker: minimal total area
    """
    n = len(entries)
    if n < 2 * min_entries:
        raise ValueError(f"Cannot split {n} entries with min_entries={min_entries}")
    mins = np.vstack([e.box.mins for e in entries])  # (n, D)
    maxs = np.vstack([e.box.maxs for e in entries])
    D = mins.shape[1]

    best_axis = None  # (margin_sum, axis, orders)
    for axis in range(D):
        orders = (np.lexsort((maxs[:, axis], mins[:, axis])),
                  np.lexsort((mins[:, axis], maxs[:, axis])))
        margin_sum = 0.0
        for order in orders:
            for _, left, right in _distributions(mins, maxs, order, min_entries):
                margin_sum += left.margin() + right.margin()
        if best_axis is None or margin_sum < best_axis[0]:
            best_axis = (margin_sum, axis, orders)

    _, axis, orders = best_axis
    best = None  # ((overlap, area), order, k)
    for order in orders:
        for k, left, right in _distributions(mins, maxs, order, min_entries):
            cand = (overlap(left, right), area(left) + area(right))
            if best is None or cand < best[0]:
                best = (cand, order, k)

    (score_overlap, score_area), order, k = best
    logger.debug("split: n=%d axis=%d k=%d overlap=%s area=%s", n, axis, k, score_overlap, score_area)
    return [entries[i] for i in order[:k]], [entries[i] for i in order[k:]]


# ------------------------------- Tree ----------------------------------------

class RTree:
    """
    Height-balanced R*-style tree over N-D envelopes.

    Insertion descends from the root with `choose_subtree`, passing each node's
    relative level; overflowing nodes are split and the split propagates upwards.
    Not thread-safe: callers serialize inserts.
    """

    def __init__(self, options: Optional[RTreeOptions] = None, dimension: Optional[int] = None):
        self.options = options if options is not None else RTreeOptions()
        self.max_entries = self.options.max_entries()
        self.min_entries = self.options.min_entries()
        self.root: Node = Leaf()
        self._height = 1
        self._size = 0
        self._dimension = dimension
        logger.debug("RTree created: max_entries=%d min_entries=%d dimension=%s",
                     self.max_entries, self.min_entries, dimension)

    def __len__(self) -> int:
        return self._size

    @property
    def height(self) -> int:
        """Number of node levels, 1 for a tree that is a single leaf."""
        return self._height

    @property
    def dimension(self) -> Optional[int]:
        return self._dimension

    def bounds(self) -> Optional[Envelope]:
        if not self.root.entries:
            return None
        return self.root.envelope()

    def _coerce(self, box) -> Envelope:
        env = to_envelope(box, self._dimension)
        d = env.getCoordinateDimension()
        if self._dimension is None:
            self._dimension = d
        elif d != self._dimension:
            raise ValueError(f"Envelope has dimension {d}, tree has dimension {self._dimension}")
        return env

    def insert(self, box, value: Any = None) -> Envelope:
        env = self._coerce(box)

        path: List[Tuple[Node, int]] = []
        node = self.root
        level = self._height - 1
        while not node.is_leaf:
            idx = choose_subtree(node.entries, env, level)
            path.append((node, idx))
            node = node.entries[idx].child
            level -= 1

        # the tree owns its boxes; callers may reuse or mutate `box`
        node.entries.append(Entry(env.copy(), value))
        self._size += 1
        split = self._split(node) if len(node.entries) > self.max_entries else None

        # Adjust covering boxes bottom-up and hand splits to the parent.
        for parent, idx in reversed(path):
            entry = parent.entries[idx]
            entry.box = entry.child.envelope()
            if split is not None:
                parent.entries.append(Entry(split.envelope(), split))
                split = self._split(parent) if len(parent.entries) > self.max_entries else None

        if split is not None:
            old_root = self.root
            self.root = InternalNode([Entry(old_root.envelope(), old_root), Entry(split.envelope(), split)])
            self._height += 1
            logger.debug("Root split, height is now %d", self._height)
        return env

    def _split(self, node: Node) -> Node:
        keep, move = split_entries(node.entries, self.min_entries)
        node.entries = keep
        sibling = Leaf(move) if node.is_leaf else InternalNode(move)
        return sibling

    def search(self, query) -> List[Tuple[Any, Envelope]]:
        """All (value, envelope) pairs whose envelope intersects `query` (boundaries inclusive)."""
        if not self.root.entries:
            return []
        q = self._coerce_query(query)
        result: List[Tuple[Any, Envelope]] = []
        stack: List[Node] = [self.root]
        while stack:
            node = stack.pop()
            for entry in node.entries:
                if not entry.box.intersects(q):
                    continue
                if node.is_leaf:
                    result.append((entry.ref, entry.box))
                else:
                    stack.append(entry.child)
        return result

    def _coerce_query(self, query) -> Envelope:
        q = to_envelope(query, self._dimension)
        if q.getCoordinateDimension() != self._dimension:
            raise ValueError(f"Query has dimension {q.getCoordinateDimension()}, tree has dimension {self._dimension}")
        return q

    def levels(self) -> Iterator[List[Node]]:
        """Nodes grouped by level, root level first."""
        current: List[Node] = [self.root]
        while current:
            yield current
            if current[0].is_leaf:
                break
            current = [e.child for node in current for e in node.entries]

    def leaves(self) -> Iterator[Leaf]:
        for level in self.levels():
            if level[0].is_leaf:
                yield from level
