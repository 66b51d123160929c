"""
R*-tree ChooseSubtree: pick the child of an internal node that should receive a new indexable.

Two cost functions, selected by the node's relative level (edges down to the leaves):

  - level <= 1 (children are leaves): least overlap enlargement, then least area
    enlargement, then smallest area.
  - level > 1 (children are internal nodes): least area enlargement, then smallest
    enlarged area.

Both scans walk the entries in ascending order and only replace the running best on a
strict improvement, so exact ties go to the first entry.
"""
from __future__ import annotations
from typing import List, Sequence
import logging

from .envelope import AREA_MAX, Envelope, area, expand, overlap, to_envelope

logger = logging.getLogger(__name__)


def _entry_boxes(entries: Sequence) -> List[Envelope]:
    # Entries expose `.box`; bare envelopes are accepted as their own box.
    return [e if isinstance(e, Envelope) else e.box for e in entries]


def _prepare(entries: Sequence, indexable):
    if len(entries) == 0:
        raise ValueError("choose_subtree called on a node without entries")
    boxes = _entry_boxes(entries)
    env = to_envelope(indexable, boxes[0].getCoordinateDimension())
    return boxes, env


def choose_subtree(entries: Sequence, indexable, relative_level: int) -> int:
    """
    Return the index of the entry whose subtree should absorb `indexable`.

    `entries` is the (non-empty) entry sequence of an internal node, `relative_level`
    that node's distance to the leaf level as tracked by the insertion driver.
    Nothing passed in is modified.
    """
    if relative_level < 0:
        raise ValueError(f"relative_level must be >= 0, got {relative_level}")
    if relative_level <= 1:
        chosen = choose_by_minimum_overlap_cost(entries, indexable)
        strategy = "overlap"
    else:
        chosen = choose_by_minimum_area_cost(entries, indexable)
        strategy = "area"
    logger.debug("choose_subtree: level=%d strategy=%s chosen=%d of %d",
                 relative_level, strategy, chosen, len(entries))
    return chosen


def choose_by_minimum_overlap_cost(entries: Sequence, indexable) -> int:
    boxes, env = _prepare(entries, indexable)
    n = len(boxes)

    chosen_index = 0
    smallest_overlap_diff = AREA_MAX
    smallest_area_diff = AREA_MAX
    smallest_area = AREA_MAX

    for i in range(n):
        box_i = boxes[i]
        box_exp = expand(box_i, env)

        area_i = area(box_i)
        area_diff = area(box_exp) - area_i

        overlap_before = 0.0
        overlap_after = 0.0
        for j in range(n):
            if i != j:
                overlap_before += overlap(box_i, boxes[j])
                overlap_after += overlap(box_exp, boxes[j])
        overlap_diff = overlap_after - overlap_before

        # third clause checks area_diff equality only, not overlap_diff
        if (overlap_diff < smallest_overlap_diff
                or (overlap_diff == smallest_overlap_diff and area_diff < smallest_area_diff)
                or (area_diff == smallest_area_diff and area_i < smallest_area)):
            smallest_overlap_diff = overlap_diff
            smallest_area_diff = area_diff
            smallest_area = area_i
            chosen_index = i

    return chosen_index


def choose_by_minimum_area_cost(entries: Sequence, indexable) -> int:
    boxes, env = _prepare(entries, indexable)

    chosen_index = 0
    smallest_area_diff = AREA_MAX
    smallest_area = AREA_MAX

    for i, box_i in enumerate(boxes):
        area_exp = area(expand(box_i, env))
        area_diff = area_exp - area(box_i)

        if area_diff < smallest_area_diff or (area_diff == smallest_area_diff and area_exp < smallest_area):
            smallest_area_diff = area_diff
            smallest_area = area_exp
            chosen_index = i

    return chosen_index
