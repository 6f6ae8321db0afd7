from __future__ import annotations

import logging
from typing import Tuple

import numpy as np

from .config import PipelineConfig
from .detectors.base import BaseLineSegmentDetector, BaseRegionSegmenter
from .errors import NoBoundaryFoundError
from .geometry import clip_lane
from .lines import lean_angle
from .types import Lane, OrientedLine, Point
from .utils import foreground_mask, lower_endpoint, segment_length_sq

logger = logging.getLogger(__name__)


def marker_point(lane: Lane, width: int) -> Point:
    if lane.bottom.x == 0 or lane.bottom.x == width - 1:
        return lane.bottom
    return Point((lane.top.x + lane.bottom.x) // 2, (lane.top.y + lane.bottom.y) // 2)


def align_marker_points(left: Point, right: Point, roi: np.ndarray) -> Tuple[Point, Point]:
    """
    Move the lower marker onto the row of the other one.

    The moved marker lands on the first road pixel of that row, scanning from
    its own side of the image.
    """
    if left.y == right.y:
        return left, right

    road = foreground_mask(roi)
    width = road.shape[1]
    if left.y > right.y:
        hits = np.flatnonzero(road[right.y, : width - 1])
        x = int(hits[0]) if hits.size else width - 1
        return Point(x, right.y), right

    hits = np.flatnonzero(road[left.y, 1:])
    x = int(hits[-1]) + 1 if hits.size else 0
    return left, Point(x, left.y)


def marker_lengths(
    left_point: Point,
    right_point: Point,
    left_lane: Lane,
    right_lane: Lane,
    width: int,
    config: PipelineConfig,
) -> Tuple[int, int]:
    """
    Split the gap between the markers into two seed runs.

    A lane whose bottom is far from the image centre gets the shorter run.
    Both runs are clamped to ``[gap // 5, gap // 3]`` with the default divisors.
    """
    gap = right_point.x - left_point.x + 1
    if gap <= 0:
        raise NoBoundaryFoundError("lane markers overlap")

    half = gap // 2
    center = width // 2
    left_offset = abs(left_lane.bottom.x - center)
    right_offset = abs(right_lane.bottom.x - center)
    total = left_offset + right_offset
    if total == 0:
        left_len = right_len = half // 2
    else:
        left_len = half * right_offset // total
        right_len = half * left_offset // total

    low = gap // config.marker_min_len_divisor
    high = gap // config.marker_max_len_divisor
    left_len = min(max(left_len, low), high)
    right_len = min(max(right_len, low), high)
    return left_len, right_len


def _paint(markers: np.ndarray, road: np.ndarray, rows: np.ndarray, cols: np.ndarray, label: int) -> None:
    if rows.size == 0 or cols.size == 0:
        return
    region = np.ix_(rows, cols)
    block = markers[region]
    block[road[region]] = label
    markers[region] = block


def build_marker_grid(
    roi: np.ndarray,
    left_lane: Lane,
    right_lane: Lane,
    config: PipelineConfig,
) -> np.ndarray:
    """Seed grid for the segmenter: label 1 near the left lane, 2 near the right."""
    height, width = roi.shape[:2]
    left_point = marker_point(left_lane, width)
    right_point = marker_point(right_lane, width)
    left_point, right_point = align_marker_points(left_point, right_point, roi)
    left_len, right_len = marker_lengths(left_point, right_point, left_lane, right_lane, width, config)

    road = foreground_mask(roi)
    markers = np.zeros((height, width), dtype=np.int32)
    band = np.arange(config.marker_band_height_px)

    rows = np.clip(left_point.y + band, 0, height - 1)
    cols = np.clip(left_point.x + np.arange(left_len), 0, width - 1)
    _paint(markers, road, rows, cols, 1)

    rows = np.clip(right_point.y + band, 0, height - 1)
    cols = np.clip(right_point.x - np.arange(right_len), 0, width - 1)
    _paint(markers, road, rows, cols, 2)

    logger.debug(
        "markers at %s (len %d) and %s (len %d)",
        left_point,
        left_len,
        right_point,
        right_len,
    )
    return markers


def boundary_mask(labels: np.ndarray, roi: np.ndarray, config: PipelineConfig) -> np.ndarray:
    """
    Keep segmentation boundaries that lie well inside the road.

    Pixels near the image border, or whose neighbours ``boundary_side_offset_px``
    columns away are off the road, are dropped.
    """
    height, width = labels.shape[:2]
    margin = config.boundary_edge_margin_px
    offset = config.boundary_side_offset_px
    mask = np.zeros((height, width), dtype=np.uint8)
    if height <= 2 * margin or width <= 2 * margin:
        return mask

    road = foreground_mask(roi)
    padded = np.pad(road, ((0, 0), (offset, offset)), constant_values=False)
    rows = slice(margin, height - margin)
    keep = (
        (labels[rows, margin : width - margin] == BaseRegionSegmenter.BOUNDARY_LABEL)
        & road[rows, margin : width - margin]
        & padded[rows, margin : width - margin]
        & padded[rows, margin + 2 * offset : width - margin + 2 * offset]
    )
    mask[rows, margin : width - margin] = np.where(keep, 255, 0).astype(np.uint8)
    return mask


def middle_lane_top(left: Lane, right: Lane) -> Point:
    if left.top == right.top:
        return left.top
    return Point((left.top.x + right.top.x) // 2, 0)


def extract_middle_lane(
    roi: np.ndarray,
    markers: np.ndarray,
    left: Lane,
    right: Lane,
    segmenter: BaseRegionSegmenter,
    detector: BaseLineSegmentDetector,
    config: PipelineConfig,
) -> Lane:
    height, width = roi.shape[:2]
    labels = segmenter.segment(roi, markers)
    mask = boundary_mask(labels, roi, config)
    segments = detector.detect(
        mask,
        config.boundary_hough_threshold,
        config.boundary_min_line_length,
        config.boundary_max_line_gap,
    )
    if not segments:
        raise NoBoundaryFoundError("segmentation produced no boundary line")

    longest = max(segments, key=segment_length_sq)
    bottom = lower_endpoint(longest)
    top = middle_lane_top(left, right)
    if bottom.y == top.y:
        raise NoBoundaryFoundError("middle boundary is level with the lane tops")
    return clip_lane(OrientedLine(top, bottom, lean_angle(top, bottom)), (width, height))
