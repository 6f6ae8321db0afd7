from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

LineSegment = Tuple[int, int, int, int]


class Point(NamedTuple):
    x: int
    y: int


@dataclass(frozen=True)
class Lane:
    """Straight lane boundary clipped to the image rectangle."""

    top: Point
    bottom: Point


@dataclass(frozen=True)
class OrientedLine:
    """
    Candidate lane line anchored at the vanishing point.

    ``angle`` is the lean of the line in ``(-pi/2, pi/2]``: lines reaching the
    bottom-left of the frame are negative, bottom-right ones positive.
    """

    top: Point
    bottom: Point
    angle: float


@dataclass
class VanishingPointCluster:
    point: Tuple[float, float, float]
    segments: List[LineSegment] = field(default_factory=list)

    @property
    def is_finite(self) -> bool:
        return self.point[2] != 0

    def to_point(self) -> Point:
        x, y, w = self.point
        return Point(int(x / w), int(y / w))


@dataclass
class RoadRoiResult:
    left: Lane
    right: Lane
    vanishing_point: Point
    road_mask: np.ndarray
    roi_image: np.ndarray
    middle: Optional[Lane] = None
    markers: Optional[np.ndarray] = None

    @property
    def lanes(self) -> List[Lane]:
        if self.middle is None:
            return [self.left, self.right]
        return [self.left, self.middle, self.right]


@dataclass
class FrameLanes:
    frame_index: int
    timestamp: float
    result: Optional[RoadRoiResult] = None
    failure: Optional[str] = None
