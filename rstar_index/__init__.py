from .envelope import AREA_MAX, Envelope, area, expand, overlap, to_envelope, union_all
from .node import Entry, InternalNode, Leaf, Node, relative_level
from .subtree import choose_subtree, choose_by_minimum_area_cost, choose_by_minimum_overlap_cost
from .options import RTreeOptions
from .rtree import RTree

__all__ = [
    "AREA_MAX", "Envelope", "area", "expand", "overlap", "to_envelope", "union_all",
    "Entry", "InternalNode", "Leaf", "Node", "relative_level",
    "choose_subtree", "choose_by_minimum_area_cost", "choose_by_minimum_overlap_cost",
    "RTreeOptions", "RTree",
]
