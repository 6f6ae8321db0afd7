import math
from dataclasses import dataclass


@dataclass
class PipelineConfig:
    """
    Configuration knobs for the lane extraction pipeline.
    Pixel values are tuned for frames of roughly 640x480.
    """

    lane_marking_width_px: int = 10
    hough_rho: float = 1.0
    hough_theta: float = math.pi / 180.0
    hough_threshold: int = 70
    hough_threshold_step: int = 10
    hough_max_segments: int = 200
    hough_max_retries: int = 30
    hough_min_line_length: int = 20
    hough_max_line_gap: int = 10
    segment_min_vertical_extent_px: int = 10
    segment_min_horizontal_extent_px: int = 5
    min_line_segments: int = 3
    vp_num_points: int = 1
    vp_inlier_threshold_px: float = 6.0
    vp_max_iterations: int = 500
    vp_random_seed: int = 0
    marker_band_height_px: int = 10
    marker_min_len_divisor: int = 5
    marker_max_len_divisor: int = 3
    boundary_edge_margin_px: int = 5
    boundary_side_offset_px: int = 5
    boundary_hough_threshold: int = 70
    boundary_min_line_length: int = 10
    boundary_max_line_gap: int = 10
    road_fill_value: int = 255
