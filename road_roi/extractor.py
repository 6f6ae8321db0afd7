from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

import numpy as np

from .config import PipelineConfig
from .detectors import (
    BaseBinarizer,
    BaseFloodFiller,
    BaseLineSegmentDetector,
    BaseRegionSegmenter,
    BaseVanishingPointClusterer,
    HoughSegmentDetector,
    MsacVanishingPointClusterer,
    OpenCVFloodFiller,
    OtsuBinarizer,
    WatershedSegmenter,
)
from .geometry import clip_lane, select_lane_pair
from .lines import build_oriented_lines, detect_line_candidates
from .middle_lane import build_marker_grid, extract_middle_lane
from .ridge import build_line_candidate_image
from .roi import apply_road_mask, build_road_mask
from .types import Lane, Point, RoadRoiResult
from .utils import check_image

logger = logging.getLogger(__name__)


@dataclass
class RoadRoiExtractor:
    """
    Single-frame lane geometry and road ROI extraction.

    Collaborators default to the OpenCV implementations and can be replaced by
    any object implementing the matching ``Base*`` interface.
    """

    config: PipelineConfig = field(default_factory=PipelineConfig)
    line_detector: Optional[BaseLineSegmentDetector] = None
    binarizer: Optional[BaseBinarizer] = None
    clusterer: Optional[BaseVanishingPointClusterer] = None
    flood_filler: Optional[BaseFloodFiller] = None
    segmenter: Optional[BaseRegionSegmenter] = None

    def __post_init__(self) -> None:
        if self.line_detector is None:
            self.line_detector = HoughSegmentDetector(self.config)
        if self.binarizer is None:
            self.binarizer = OtsuBinarizer()
        if self.clusterer is None:
            self.clusterer = MsacVanishingPointClusterer(self.config)
        if self.flood_filler is None:
            self.flood_filler = OpenCVFloodFiller()
        if self.segmenter is None:
            self.segmenter = WatershedSegmenter()

    def _detect_lanes(self, image: np.ndarray) -> Tuple[Lane, Lane, Point]:
        check_image(image)
        height, width = image.shape[:2]
        binary = build_line_candidate_image(image, self.binarizer, self.config.lane_marking_width_px)
        segments = detect_line_candidates(binary, self.line_detector, self.config)
        vanishing_point, lines = build_oriented_lines(segments, (width, height), self.clusterer, self.config)
        left, right = select_lane_pair(lines)
        logger.debug("lane pair angles %.3f / %.3f", left.angle, right.angle)
        return clip_lane(left, (width, height)), clip_lane(right, (width, height)), vanishing_point

    def detect_left_right_lanes(self, image: np.ndarray) -> Tuple[Lane, Lane]:
        left, right, _ = self._detect_lanes(image)
        return left, right

    def extract_road_roi(self, image: np.ndarray) -> np.ndarray:
        return self.analyze(image).roi_image

    def detect_three_lanes(self, image: np.ndarray) -> Tuple[Lane, Lane, Lane]:
        """Return the ``(left, middle, right)`` lanes."""
        result = self.analyze(image, with_middle=True)
        return result.left, result.middle, result.right

    def analyze(self, image: np.ndarray, with_middle: bool = False) -> RoadRoiResult:
        left, right, vanishing_point = self._detect_lanes(image)
        road_mask = build_road_mask(
            image.shape,
            left,
            right,
            self.flood_filler,
            self.config.road_fill_value,
        )
        roi_image = apply_road_mask(image, road_mask)
        result = RoadRoiResult(
            left=left,
            right=right,
            vanishing_point=vanishing_point,
            road_mask=road_mask,
            roi_image=roi_image,
        )
        if not with_middle:
            return result

        markers = build_marker_grid(roi_image, left, right, self.config)
        result.markers = markers
        result.middle = extract_middle_lane(
            roi_image,
            markers,
            left,
            right,
            self.segmenter,
            self.line_detector,
            self.config,
        )
        return result


def detect_left_right_lanes(image: np.ndarray, config: Optional[PipelineConfig] = None) -> Tuple[Lane, Lane]:
    return RoadRoiExtractor(config or PipelineConfig()).detect_left_right_lanes(image)


def extract_road_roi(image: np.ndarray, config: Optional[PipelineConfig] = None) -> np.ndarray:
    return RoadRoiExtractor(config or PipelineConfig()).extract_road_roi(image)


def detect_three_lanes(image: np.ndarray, config: Optional[PipelineConfig] = None) -> Tuple[Lane, Lane, Lane]:
    return RoadRoiExtractor(config or PipelineConfig()).detect_three_lanes(image)
