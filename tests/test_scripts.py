import importlib.util
from pathlib import Path

import numpy as np

from road_roi.types import FrameLanes, Lane, Point, RoadRoiResult

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "detect_lanes_video.py"


def _load_script():
    location = importlib.util.spec_from_file_location("detect_lanes_video", SCRIPT)
    module = importlib.util.module_from_spec(location)
    location.loader.exec_module(module)
    return module


def _result(middle=None):
    mask = np.zeros((480, 640), dtype=np.uint8)
    return RoadRoiResult(
        left=Lane(Point(300, 0), Point(0, 300)),
        right=Lane(Point(345, 0), Point(639, 300)),
        vanishing_point=Point(320, -40),
        road_mask=mask,
        roi_image=mask,
        middle=middle,
    )


def test_csv_row_records_middle_lane_endpoints():
    script = _load_script()
    middle = Lane(Point(322, 0), Point(330, 479))
    row = script.frame_row(FrameLanes(7, 0.28, _result(middle)))
    assert set(row) <= set(script.FIELDS)
    assert (row["middle_top_x"], row["middle_top_y"]) == (322, 0)
    assert (row["middle_bottom_x"], row["middle_bottom_y"]) == (330, 479)
    assert row["failure"] == ""


def test_csv_row_for_failed_frame():
    script = _load_script()
    row = script.frame_row(FrameLanes(3, 0.1, failure="no vanishing point cluster found"))
    assert row == {"frame_index": 3, "timestamp": "0.100", "failure": "no vanishing point cluster found"}
    assert "middle_top_x" in script.FIELDS
