from __future__ import annotations

import logging
import math
from typing import Iterable, List, Tuple

import numpy as np

from .config import PipelineConfig
from .detectors.base import BaseLineSegmentDetector, BaseVanishingPointClusterer
from .errors import DegenerateVanishingPointError, InsufficientSegmentsError
from .types import LineSegment, OrientedLine, Point
from .utils import lower_endpoint

logger = logging.getLogger(__name__)


def filter_segments(segments: Iterable[LineSegment], config: PipelineConfig) -> List[LineSegment]:
    """Drop near-horizontal and near-vertical segments."""
    kept: List[LineSegment] = []
    for x1, y1, x2, y2 in segments:
        # horizontal segments cannot be forward lanes
        if abs(y1 - y2) < config.segment_min_vertical_extent_px:
            continue
        # vertical ones are left to the middle lane search
        if abs(x1 - x2) < config.segment_min_horizontal_extent_px:
            continue
        kept.append((x1, y1, x2, y2))
    return kept


def detect_raw_segments(
    binary: np.ndarray,
    detector: BaseLineSegmentDetector,
    config: PipelineConfig,
) -> List[LineSegment]:
    threshold = config.hough_threshold
    segments = detector.detect(binary, threshold, config.hough_min_line_length, config.hough_max_line_gap)
    retries = 0
    while len(segments) > config.hough_max_segments:
        if retries >= config.hough_max_retries:
            logger.warning(
                "still %d segments at threshold %d after %d retries",
                len(segments),
                threshold,
                retries,
            )
            break
        retries += 1
        threshold += config.hough_threshold_step
        segments = detector.detect(binary, threshold, config.hough_min_line_length, config.hough_max_line_gap)
    logger.debug("line detector returned %d segments at threshold %d", len(segments), threshold)
    return segments


def detect_line_candidates(
    binary: np.ndarray,
    detector: BaseLineSegmentDetector,
    config: PipelineConfig,
) -> List[LineSegment]:
    segments = filter_segments(detect_raw_segments(binary, detector, config), config)
    if len(segments) < config.min_line_segments:
        raise InsufficientSegmentsError(len(segments), config.min_line_segments)
    return segments


def lean_angle(top: Point, bottom: Point) -> float:
    """``atan2(dy, dx)`` folded into ``(-pi/2, pi/2]``."""
    angle = math.atan2(top.y - bottom.y, top.x - bottom.x)
    if angle > math.pi / 2:
        angle -= math.pi
    elif angle <= -math.pi / 2:
        angle += math.pi
    return angle


def build_oriented_lines(
    segments: List[LineSegment],
    image_size: Tuple[int, int],
    clusterer: BaseVanishingPointClusterer,
    config: PipelineConfig,
) -> Tuple[Point, List[OrientedLine]]:
    clusters = clusterer.cluster(segments, image_size, config.vp_num_points)
    if not clusters:
        raise DegenerateVanishingPointError("no vanishing point cluster found")
    dominant = clusters[0]
    if not dominant.is_finite:
        raise DegenerateVanishingPointError("vanishing point lies at infinity")
    if not dominant.segments:
        raise DegenerateVanishingPointError("vanishing point cluster is empty")

    vanishing_point = dominant.to_point()
    lines: List[OrientedLine] = []
    for segment in dominant.segments:
        bottom = lower_endpoint(segment)
        if bottom.y == vanishing_point.y:
            continue
        lines.append(OrientedLine(vanishing_point, bottom, lean_angle(vanishing_point, bottom)))
    if not lines:
        raise DegenerateVanishingPointError("every clustered segment is level with the vanishing point")
    logger.debug("vanishing point %s with %d lane candidates", vanishing_point, len(lines))
    return vanishing_point, lines
