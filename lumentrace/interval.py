"""
Interval class for bounding ray parameters.

Intersection tests only accept hits whose ``t`` lies inside an interval.
Scene aggregates shrink the upper end as closer hits are found.
"""

from __future__ import annotations
from dataclasses import dataclass
import math


@dataclass(frozen=True)
class Interval:
    """A half-open range ``[start, end)``."""
    start: float = math.inf
    end: float = -math.inf

    def contains(self, x: float) -> bool:
        return self.start <= x < self.end

    def with_end(self, end: float) -> Interval:
        """Return a copy of this interval ending at ``end``."""
        return Interval(self.start, end)

    def __repr__(self) -> str:
        return f"Interval({self.start}, {self.end})"


Interval.EMPTY = Interval(math.inf, -math.inf)
Interval.UNIVERSE = Interval(-math.inf, math.inf)
