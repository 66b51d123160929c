import numpy as np

from rstar_index.envelope import Envelope
from rstar_index.metrics import node_sibling_overlap, tree_stats
from rstar_index.node import Entry, Leaf
from rstar_index.options import RTreeOptions
from rstar_index.rtree import RTree


def test_node_sibling_overlap():
    node = Leaf([
        Entry(Envelope([0, 0], [10, 10])),
        Entry(Envelope([5, 5], [15, 15])),
        Entry(Envelope([9, 0], [12, 1])),
    ])
    # a and b share 25, a and c share 1, b and c are disjoint along y
    assert node_sibling_overlap(node) == 26.0
    assert node_sibling_overlap(Leaf()) == 0.0


def test_stats_of_empty_tree():
    stats = tree_stats(RTree())
    assert stats["size"] == 0
    assert stats["height"] == 1
    assert stats["num_leaves"] == 0
    assert stats["avg_entries_per_leaf"] == 0
    assert stats["load_factor"] == 0
    assert stats["sibling_overlap"] == []


def test_stats_of_grid_tree():
    opts = RTreeOptions({RTreeOptions.MaxEntries: 4, RTreeOptions.MinFill: 0.5})
    tree = RTree(opts)
    n = 0
    for x in range(10):
        for y in range(10):
            tree.insert(Envelope([x, y], [x + 0.5, y + 0.5]), (x, y))
            n += 1

    stats = tree_stats(tree)
    assert stats["size"] == n
    assert stats["height"] == tree.height
    assert len(stats["sibling_overlap"]) == tree.height
    assert all(v >= 0.0 for v in stats["sibling_overlap"])
    # data boxes are pairwise disjoint
    assert stats["sibling_overlap"][-1] == 0.0
    assert 2 <= stats["avg_entries_per_leaf"] <= 4
    assert np.isclose(stats["load_factor"], stats["avg_entries_per_leaf"] / 4)
    assert np.isclose(stats["num_leaves"] * stats["avg_entries_per_leaf"], n)
