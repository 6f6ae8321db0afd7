from __future__ import annotations

from typing import Sequence, Tuple, Union

from .types import Lane, OrientedLine, Point
from .utils import clamp

LineLike = Union[Lane, OrientedLine]


def select_lane_pair(lines: Sequence[OrientedLine]) -> Tuple[OrientedLine, OrientedLine]:
    """
    Pick the (left, right) lane lines by angle.

    When the angles change sign the pair straddling zero wins: the last
    negative and the first positive line. Otherwise the two extremes are used,
    the largest angle as left and the smallest as right.
    """
    if not lines:
        raise ValueError("no lane candidates to choose from")

    ordered = sorted(lines, key=lambda line: line.angle)
    if ordered[0].angle >= 0 or ordered[-1].angle <= 0:
        return ordered[-1], ordered[0]

    left = [line for line in ordered if line.angle < 0][-1]
    right = next(line for line in ordered if line.angle > 0)
    return left, right


def clip_lane(line: LineLike, image_size: Tuple[int, int]) -> Lane:
    """
    Extend ``line`` through the image and clip it to the frame.

    The bottom is first pushed to the last row using the unadjusted top. A top
    above the frame then slides down to row 0, and a bottom beyond a side
    border is pulled back onto that border using the adjusted top.
    """
    width, height = image_size
    max_x = width - 1
    max_y = height - 1

    tx, ty = float(line.top.x), float(line.top.y)
    bx, by = float(line.bottom.x), float(line.bottom.y)
    if by == ty:
        raise ValueError("cannot clip a horizontal line")

    bx = tx + (bx - tx) * (max_y - ty) / (by - ty)
    by = float(max_y)

    if ty < 0:
        tx = tx - (tx - bx) * ty / (ty - by)
        ty = 0.0

    if bx != tx:
        if bx > max_x:
            by = ty - (tx - max_x) * (ty - by) / (tx - bx)
            bx = float(max_x)
        elif bx < 0:
            by = ty - (ty - by) * tx / (tx - bx)
            bx = 0.0

        # vanishing point beside the frame
        if tx > max_x or tx < 0:
            side = float(max_x) if tx > max_x else 0.0
            ty = ty + (side - tx) * (by - ty) / (bx - tx)
            tx = side

    top = Point(int(round(clamp(tx, 0, max_x))), int(round(clamp(ty, 0, max_y))))
    bottom = Point(int(round(clamp(bx, 0, max_x))), int(round(clamp(by, 0, max_y))))
    return Lane(top, bottom)
