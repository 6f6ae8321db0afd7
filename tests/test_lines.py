import math

import numpy as np
import pytest

from conftest import FixedClusterer, FixedSegmentDetector
from road_roi.config import PipelineConfig
from road_roi.errors import DegenerateVanishingPointError, InsufficientSegmentsError
from road_roi.lines import (
    build_oriented_lines,
    detect_line_candidates,
    detect_raw_segments,
    filter_segments,
    lean_angle,
)
from road_roi.types import Point, VanishingPointCluster

BINARY = np.zeros((480, 640), dtype=np.uint8)


def test_filter_drops_horizontal_and_vertical_segments(config):
    segments = [
        (10, 100, 200, 105),  # near-horizontal
        (300, 100, 303, 300),  # near-vertical
        (100, 400, 200, 300),
        (0, 0, 5, 10),
    ]
    assert filter_segments(segments, config) == [(100, 400, 200, 300), (0, 0, 5, 10)]


def test_threshold_escalates_until_within_cap(config):
    noisy = [(0, 0, 10, 20)] * 250
    quiet = [(0, 0, 10, 20)] * 120
    detector = FixedSegmentDetector(config, [noisy, noisy, quiet])
    segments = detect_raw_segments(BINARY, detector, config)
    assert len(segments) == 120
    assert detector.thresholds == [70, 80, 90]


def test_threshold_escalation_is_bounded():
    config = PipelineConfig(hough_max_retries=4)
    detector = FixedSegmentDetector(config, [[(0, 0, 10, 20)] * 500])
    segments = detect_raw_segments(BINARY, detector, config)
    assert len(segments) == 500
    assert detector.thresholds == [70, 80, 90, 100, 110]


def test_insufficient_segments(config):
    detector = FixedSegmentDetector(config, [[(100, 400, 200, 300), (10, 100, 200, 105), (50, 50, 52, 200)]])
    with pytest.raises(InsufficientSegmentsError) as excinfo:
        detect_line_candidates(BINARY, detector, config)
    assert excinfo.value.count == 1
    assert excinfo.value.required == 3


def test_candidates_pass_through(config, lane_segments):
    detector = FixedSegmentDetector(config, [lane_segments])
    assert detect_line_candidates(BINARY, detector, config) == lane_segments


def test_lean_angle_sign_convention():
    vp = Point(320, 200)
    left = lean_angle(vp, Point(100, 479))
    right = lean_angle(vp, Point(540, 479))
    assert left == pytest.approx(math.atan(-279 / 220))
    assert left < 0 < right
    assert lean_angle(vp, Point(320, 479)) == pytest.approx(math.pi / 2)


def test_oriented_lines_are_anchored_at_vanishing_point(config, lane_segments):
    clusterer = FixedClusterer(config, [VanishingPointCluster((320.7, 200.2, 1.0), lane_segments)])
    vp, lines = build_oriented_lines(lane_segments, (640, 480), clusterer, config)
    assert vp == Point(320, 200)
    assert clusterer.calls == [(1, (640, 480))]
    assert [line.top for line in lines] == [vp] * 4
    assert lines[0].bottom == Point(100, 479)
    assert lines[1].bottom == Point(166, 395)
    assert lines[0].angle < 0 and lines[2].angle > 0


def test_homogeneous_weight_is_applied(config, lane_segments):
    clusterer = FixedClusterer(config, [VanishingPointCluster((640.0, 400.0, 2.0), lane_segments)])
    vp, _ = build_oriented_lines(lane_segments, (640, 480), clusterer, config)
    assert vp == Point(320, 200)


@pytest.mark.parametrize(
    "clusters",
    [
        [],
        [VanishingPointCluster((1.0, 0.5, 0.0), [(0, 0, 10, 20)])],
        [VanishingPointCluster((320.0, 200.0, 1.0), [])],
    ],
)
def test_degenerate_vanishing_point(config, lane_segments, clusters):
    with pytest.raises(DegenerateVanishingPointError):
        build_oriented_lines(lane_segments, (640, 480), FixedClusterer(config, clusters), config)


def test_segments_level_with_vanishing_point_are_dropped(config, lane_segments):
    cluster = VanishingPointCluster((320.0, 200.0, 1.0), [(100, 200, 200, 100)] + lane_segments)
    vp, lines = build_oriented_lines(lane_segments, (640, 480), FixedClusterer(config, [cluster]), config)
    assert len(lines) == 4
    assert all(line.bottom.y != vp.y for line in lines)


def test_only_level_segments_is_degenerate(config, lane_segments):
    cluster = VanishingPointCluster((300.0, 300.0, 1.0), [(100, 300, 200, 200)])
    with pytest.raises(DegenerateVanishingPointError):
        build_oriented_lines(lane_segments, (640, 480), FixedClusterer(config, [cluster]), config)
