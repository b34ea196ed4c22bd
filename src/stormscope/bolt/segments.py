"""
Committed bolt geometry.

Every polyline the path and branch generators produce ends up here as an
immutable Segment. The accumulator is the only writer and is owned by a
single generation call.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

Point = Tuple[float, float]

# Depth recorded for the main channel; branches use 0, 1, 2.
MAIN_PATH_DEPTH = -1


@dataclass(frozen=True)
class Segment:
    """A committed polyline with a stroke width."""
    points: Tuple[Point, ...]
    width: float
    depth: int = MAIN_PATH_DEPTH

    def flat(self) -> List[float]:
        """Returns [x0, y0, x1, y1, ...]."""
        coords: List[float] = []
        for x, y in self.points:
            coords.append(x)
            coords.append(y)
        return coords

    def __len__(self) -> int:
        return len(self.points)


class SegmentAccumulator:
    """
    Ordered, append-only collection of segments for one generation call.

    Tracks the widest stroke committed and whether anything was committed
    at all. Degenerate polylines (fewer than two points) are dropped.
    """

    def __init__(self, min_width: float = 0.5):
        self.min_width = min_width
        self._segments: List[Segment] = []
        self.max_width = 0.0
        self.did_strike = False

    def commit(
        self,
        points: Sequence[Point],
        width: float,
        depth: int = MAIN_PATH_DEPTH,
    ) -> Optional[Segment]:
        if not points or len(points) < 2:
            return None

        segment = Segment(
            points=tuple((float(x), float(y)) for x, y in points),
            width=max(self.min_width, width),
            depth=depth,
        )
        self._segments.append(segment)
        # Unclamped width drives the shake scalar
        self.max_width = max(self.max_width, width)
        self.did_strike = True
        return segment

    def all_segments(self) -> Tuple[Segment, ...]:
        return tuple(self._segments)

    def __len__(self) -> int:
        return len(self._segments)
