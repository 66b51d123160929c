from __future__ import annotations
import math


class RTreeOptions(dict):
    """Tree configuration as a plain dict with typed getters."""

    # Config keys
    MaxEntries = "rtree.max_entries"
    MinFill = "rtree.min_fill"

    DEFAULT_MAX_ENTRIES = 16
    DEFAULT_MIN_FILL = 0.4

    def getInt(self, key: str, default: int) -> int:
        return int(self.get(key, default))

    def getDouble(self, key: str, default: float) -> float:
        return float(self.get(key, default))

    def max_entries(self) -> int:
        m = self.getInt(self.MaxEntries, self.DEFAULT_MAX_ENTRIES)
        if m < 2:
            raise ValueError(f"{self.MaxEntries} must be >= 2, got {m}")
        return m

    def min_fill(self) -> float:
        f = self.getDouble(self.MinFill, self.DEFAULT_MIN_FILL)
        if not (0.0 < f <= 0.5):
            raise ValueError(f"{self.MinFill} must be in (0, 0.5], got {f}")
        return f

    def min_entries(self) -> int:
        M = self.max_entries()
        m = max(1, int(math.floor(self.min_fill() * M)))
        return min(m, M // 2)
