from __future__ import annotations

from typing import List, Sequence, Tuple

import cv2
import numpy as np
import pytest

from road_roi.config import PipelineConfig
from road_roi.detectors.base import (
    BaseBinarizer,
    BaseLineSegmentDetector,
    BaseRegionSegmenter,
    BaseVanishingPointClusterer,
)
from road_roi.types import LineSegment, VanishingPointCluster


class FixedSegmentDetector(BaseLineSegmentDetector):
    """Returns canned segments and records the thresholds it was called with."""

    def __init__(self, config: PipelineConfig, results: Sequence[List[LineSegment]]) -> None:
        super().__init__(config)
        self.results = list(results)
        self.thresholds: List[int] = []

    def detect(self, binary, threshold, min_line_length, max_line_gap):
        self.thresholds.append(threshold)
        index = min(len(self.thresholds) - 1, len(self.results) - 1)
        return list(self.results[index])


class PassThroughBinarizer(BaseBinarizer):
    def binarize(self, gray):
        return gray


class FixedClusterer(BaseVanishingPointClusterer):
    def __init__(self, config: PipelineConfig, clusters: List[VanishingPointCluster]) -> None:
        super().__init__(config)
        self.clusters = clusters
        self.calls: List[Tuple[int, Tuple[int, int]]] = []

    def cluster(self, segments, image_size, num_points=1):
        self.calls.append((num_points, image_size))
        return self.clusters


class FixedSegmenter(BaseRegionSegmenter):
    def __init__(self, labels: np.ndarray) -> None:
        self.labels = labels

    def segment(self, image, markers):
        return self.labels.copy()


@pytest.fixture
def config() -> PipelineConfig:
    return PipelineConfig()


@pytest.fixture
def lane_segments() -> List[LineSegment]:
    # two lanes converging on (320, 200) in a 640x480 frame
    return [
        (195, 358, 100, 479),
        (260, 276, 166, 395),
        (445, 358, 540, 479),
        (380, 276, 474, 395),
    ]


@pytest.fixture
def synthetic_road() -> np.ndarray:
    image = np.full((480, 640, 3), 60, dtype=np.uint8)
    cv2.line(image, (320, 200), (100, 479), (255, 255, 255), 10)
    cv2.line(image, (320, 200), (540, 479), (255, 255, 255), 10)
    return image
