import numpy as np
import pytest

from road_roi.geometry import clip_lane, select_lane_pair
from road_roi.lines import lean_angle
from road_roi.types import Lane, OrientedLine, Point


def _line(angle, name=0):
    return OrientedLine(Point(320, 200), Point(name, 479), angle)


def _through(top, bottom):
    return OrientedLine(top, bottom, lean_angle(top, bottom))


def test_sign_crossing_pair_scenario():
    vp = Point(320, 200)
    left = _through(vp, Point(100, 479))
    right = _through(vp, Point(540, 479))
    # steeper lines sit further from zero and are not chosen
    extra_left = _through(vp, Point(250, 479))
    extra_right = _through(vp, Point(400, 479))
    chosen = select_lane_pair([right, extra_left, left, extra_right])
    assert chosen == (left, right)
    assert chosen[0].angle < 0 < chosen[1].angle


def test_all_positive_angles_use_extremes():
    lines = [_line(0.3, 1), _line(0.1, 2), _line(0.5, 3)]
    left, right = select_lane_pair(lines)
    assert left.angle == 0.5
    assert right.angle == 0.1


def test_all_negative_angles_use_extremes():
    lines = [_line(-0.3), _line(-0.9), _line(-0.6)]
    left, right = select_lane_pair(lines)
    assert left.angle == -0.3
    assert right.angle == -0.9


def test_single_line_is_both_lanes():
    line = _line(0.4)
    assert select_lane_pair([line]) == (line, line)


def test_zero_angles_between_signs_are_skipped():
    lines = [_line(-0.5), _line(0.0, 1), _line(0.7), _line(-0.2)]
    left, right = select_lane_pair(lines)
    assert left.angle == -0.2
    assert right.angle == 0.7


def test_pair_brackets_zero_for_random_sets():
    rng = np.random.default_rng(3)
    for _ in range(200):
        angles = rng.uniform(-1.5, 1.5, size=rng.integers(2, 12))
        if angles.min() >= 0 or angles.max() <= 0:
            continue
        lines = [_line(float(a)) for a in angles]
        left, right = select_lane_pair(lines)
        assert left.angle == angles[angles < 0].max()
        assert right.angle == angles[angles > 0].min()


def test_empty_candidates():
    with pytest.raises(ValueError):
        select_lane_pair([])


def test_clip_extends_to_bottom_row():
    lane = clip_lane(_through(Point(300, 179), Point(250, 279)), (640, 480))
    assert lane == Lane(Point(300, 179), Point(150, 479))


def test_clip_slides_top_into_frame():
    lane = clip_lane(_through(Point(320, -100), Point(300, 0)), (640, 480))
    assert lane == Lane(Point(300, 0), Point(204, 479))


def test_clip_top_then_side_border():
    lane = clip_lane(_through(Point(320, -100), Point(420, 0)), (640, 480))
    assert lane == Lane(Point(420, 0), Point(639, 219))
    lane = clip_lane(_through(Point(320, -100), Point(220, 0)), (640, 480))
    assert lane == Lane(Point(220, 0), Point(0, 220))


def test_clip_pulls_bottom_onto_side_border():
    lane = clip_lane(_through(Point(320, 200), Point(420, 250)), (640, 480))
    assert lane.bottom.x == 639
    assert abs(lane.bottom.y - 360) <= 1
    lane = clip_lane(_through(Point(320, 200), Point(220, 250)), (640, 480))
    assert lane.bottom == Point(0, 360)


def test_clip_accepts_segments_above_the_vanishing_point():
    lane = clip_lane(_through(Point(320, 300), Point(340, 250)), (640, 480))
    assert lane.bottom.y == 479
    assert lane.bottom.x < 320


def test_clip_rejects_horizontal_lines():
    with pytest.raises(ValueError):
        clip_lane(Lane(Point(0, 100), Point(50, 100)), (640, 480))


def test_clipped_points_stay_inside_frame():
    rng = np.random.default_rng(11)
    for _ in range(2000):
        width, height = (int(v) for v in rng.integers(2, 800, size=2))
        top = Point(*(int(v) for v in rng.integers(-2000, 2000, size=2)))
        bottom = Point(*(int(v) for v in rng.integers(-2000, 2000, size=2)))
        if top.y == bottom.y or top.x == bottom.x:
            continue
        lane = clip_lane(_through(top, bottom), (width, height))
        for point in (lane.top, lane.bottom):
            assert 0 <= point.x <= width - 1
            assert 0 <= point.y <= height - 1


def test_clipping_is_idempotent():
    rng = np.random.default_rng(5)
    checked = 0
    for _ in range(500):
        top = Point(int(rng.integers(0, 640)), int(rng.integers(-300, 240)))
        bottom = Point(int(rng.integers(-400, 1040)), int(rng.integers(260, 479)))
        once = clip_lane(_through(top, bottom), (640, 480))
        if once.top.y == once.bottom.y:
            continue
        twice = clip_lane(once, (640, 480))
        assert twice == once
        checked += 1
    assert checked > 300
