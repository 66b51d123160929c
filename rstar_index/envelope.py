from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence
import numpy as np


# Seed for "best so far" accumulators. Every finite area or overlap compares
# strictly below it.
AREA_MAX: float = float(np.finfo(np.float64).max)


# ------------------------------- Geometry ------------------------------------

@dataclass(eq=False)
class Envelope:
    """N-D axis-aligned box (min/max per dimension)."""
    mins: np.ndarray  # shape (D,)
    maxs: np.ndarray  # shape (D,)

    def __post_init__(self):
        self.mins = np.array(self.mins, dtype=float, ndmin=1)
        self.maxs = np.array(self.maxs, dtype=float, ndmin=1)
        if self.mins.ndim != 1 or self.mins.shape != self.maxs.shape:
            raise ValueError(f"mins and maxs must be 1-D with equal length, got {self.mins.shape} and {self.maxs.shape}")
        if self.mins.size == 0:
            raise ValueError("Envelope needs at least one dimension")
        if np.any(np.isnan(self.mins)) or np.any(np.isnan(self.maxs)):
            raise ValueError("Envelope coordinates must not be NaN")
        bad = self.mins > self.maxs
        if np.any(bad):
            d = int(np.nonzero(bad)[0][0])
            raise ValueError(f"Malformed envelope: min > max in dimension {d} ({self.mins[d]} > {self.maxs[d]})")

    def __eq__(self, other) -> bool:
        if not isinstance(other, Envelope):
            return NotImplemented
        return bool(np.array_equal(self.mins, other.mins) and np.array_equal(self.maxs, other.maxs))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Envelope(mins={self.mins.tolist()}, maxs={self.maxs.tolist()})"

    def getCoordinateDimension(self) -> int:
        return int(self.mins.size)

    def copy(self) -> "Envelope":
        return Envelope(self.mins.copy(), self.maxs.copy())

    def margin(self) -> float:
        # R*-tree margin: sum of edge lengths (perimeter / 2 in 2D)
        return float(np.sum(self.maxs - self.mins))

    def contains(self, other: "Envelope") -> bool:
        _check_same_dimension(self, other)
        return bool(np.all(self.mins <= other.mins) and np.all(other.maxs <= self.maxs))

    def intersects(self, other: "Envelope") -> bool:
        _check_same_dimension(self, other)
        return bool(np.all(self.mins <= other.maxs) and np.all(other.mins <= self.maxs))

    def to_bounds(self) -> tuple:
        """Flat (min_0, ..., min_D-1, max_0, ..., max_D-1) tuple; (minx, miny, maxx, maxy) in 2D."""
        return tuple(self.mins.tolist()) + tuple(self.maxs.tolist())

    @staticmethod
    def from_point(coord: Sequence[float]) -> "Envelope":
        c = np.asarray(coord, dtype=float)
        return Envelope(c, c.copy())


def _check_same_dimension(a: Envelope, b: Envelope) -> None:
    if a.mins.size != b.mins.size:
        raise ValueError(f"Dimension mismatch: {a.mins.size} vs {b.mins.size}")


def _volume(side: np.ndarray) -> float:
    # A zero side wins over an infinite one (inf * 0 would give NaN).
    if np.any(side <= 0.0):
        return 0.0
    return float(np.prod(side))


def area(box: Envelope) -> float:
    """Product of the per-dimension extents; zero for a degenerate box."""
    return _volume(box.maxs - box.mins)


def overlap(a: Envelope, b: Envelope) -> float:
    """Volume of the intersection of two boxes, 0.0 when they are disjoint along any axis."""
    _check_same_dimension(a, b)
    lo = np.maximum(a.mins, b.mins)
    hi = np.minimum(a.maxs, b.maxs)
    return _volume(hi - lo)


def expand(box: Envelope, indexable) -> Envelope:
    """Smallest box containing both `box` and the indexable. Inputs are left untouched."""
    other = to_envelope(indexable, box.getCoordinateDimension())
    _check_same_dimension(box, other)
    return Envelope(np.minimum(box.mins, other.mins), np.maximum(box.maxs, other.maxs))


def union_all(boxes: Iterable[Envelope]) -> Envelope:
    boxes = list(boxes)
    if not boxes:
        raise ValueError("union_all needs at least one envelope")
    mins = np.min(np.vstack([b.mins for b in boxes]), axis=0)
    maxs = np.max(np.vstack([b.maxs for b in boxes]), axis=0)
    return Envelope(mins, maxs)


def to_envelope(obj, dimension: Optional[int] = None) -> Envelope:
    """
    Derive an Envelope from an indexable.

    Accepted inputs:
      - Envelope (returned as is)
      - objects with a shapely-style `.bounds` -> (minx, miny, maxx, maxy)
      - a (mins, maxs) pair of coordinate sequences
      - a flat (minx, miny, maxx, maxy) sequence, when `dimension` is None or 2
      - a single point (flat sequence of `dimension` numbers)
    """
    if isinstance(obj, Envelope):
        return obj

    bounds = getattr(obj, "bounds", None)
    if bounds is not None and not callable(bounds):
        if len(bounds) != 4:
            raise ValueError(f"Expected 4 bound values from {type(obj).__name__}.bounds, got {len(bounds)}")
        if any(np.isnan(v) for v in bounds):
            raise ValueError(f"{type(obj).__name__} has empty bounds")
        minx, miny, maxx, maxy = bounds
        return Envelope([minx, miny], [maxx, maxy])

    if isinstance(obj, (str, bytes)) or not hasattr(obj, "__len__"):
        raise TypeError(f"Cannot derive an envelope from {type(obj).__name__}")

    if len(obj) == 2 and all(np.ndim(part) == 1 for part in obj):
        mins, maxs = obj
        return Envelope(mins, maxs)

    flat = np.asarray(obj, dtype=float)
    if flat.ndim != 1 or flat.size == 0:
        raise ValueError(f"Cannot derive an envelope from array of shape {flat.shape}")
    n = int(flat.size)
    if dimension is not None and n == dimension:
        return Envelope.from_point(flat)
    if n == 4 and dimension in (None, 2):
        return Envelope(flat[:2], flat[2:])
    if dimension is None:
        return Envelope.from_point(flat)
    raise ValueError(f"Cannot read {n} values as a {dimension}-D point or box")
