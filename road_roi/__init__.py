"""
Lane geometry and drivable-road ROI extraction from a single road image.
"""

from .config import PipelineConfig
from .errors import (
    DegenerateVanishingPointError,
    InsufficientSegmentsError,
    LaneDetectionError,
    NoBoundaryFoundError,
)
from .extractor import RoadRoiExtractor, detect_left_right_lanes, detect_three_lanes, extract_road_roi
from .types import FrameLanes, Lane, OrientedLine, Point, RoadRoiResult
from .video import VideoLaneProcessor
from .visualization import annotate_lanes, draw_lanes, draw_vanishing_point, tint_road_mask

__all__ = [
    "PipelineConfig",
    "LaneDetectionError",
    "InsufficientSegmentsError",
    "DegenerateVanishingPointError",
    "NoBoundaryFoundError",
    "RoadRoiExtractor",
    "detect_left_right_lanes",
    "detect_three_lanes",
    "extract_road_roi",
    "FrameLanes",
    "Lane",
    "OrientedLine",
    "Point",
    "RoadRoiResult",
    "VideoLaneProcessor",
    "annotate_lanes",
    "draw_lanes",
    "draw_vanishing_point",
    "tint_road_mask",
]
