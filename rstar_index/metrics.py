from __future__ import annotations
from typing import Dict, List

from .envelope import overlap
from .node import Node
from .rtree import RTree


def node_sibling_overlap(node: Node) -> float:
    """Summed pairwise overlap of the entry boxes of one node."""
    boxes = [e.box for e in node.entries]
    total = 0.0
    for i in range(len(boxes)):
        for j in range(i + 1, len(boxes)):
            total += overlap(boxes[i], boxes[j])
    return total


def _leaf_stats(tree: RTree):
    # (num_leaves, total_entries); an empty tree has no leaves worth counting
    leaves = [len(leaf.entries) for leaf in tree.leaves()]
    if sum(leaves) == 0:
        return 0, 0
    return len(leaves), sum(leaves)


def tree_stats(tree: RTree) -> Dict[str, object]:
    """Shape and quality figures for a built tree.

    `sibling_overlap` has one value per level, root level first: the summed
    pairwise overlap of sibling boxes inside each node of that level. Lower is
    better; range queries fan out wherever siblings overlap.
    """
    num_leaves, total_entries = _leaf_stats(tree)
    avg_ent = (total_entries / num_leaves) if num_leaves > 0 else 0
    lf = avg_ent / tree.max_entries

    sibling_overlap: List[float] = []
    if len(tree) > 0:
        for level in tree.levels():
            sibling_overlap.append(sum(node_sibling_overlap(n) for n in level))

    return {
        "size": len(tree),
        "height": tree.height,
        "num_leaves": num_leaves,
        "avg_entries_per_leaf": avg_ent,
        "load_factor": lf,
        "sibling_overlap": sibling_overlap,
    }
