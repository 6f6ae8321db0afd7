from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from ..config import PipelineConfig
from ..types import LineSegment, VanishingPointCluster


@dataclass
class BaseLineSegmentDetector:
    config: PipelineConfig

    def detect(
        self,
        binary: np.ndarray,
        threshold: int,
        min_line_length: int,
        max_line_gap: int,
    ) -> List[LineSegment]:
        raise NotImplementedError


class BaseBinarizer:
    def binarize(self, gray: np.ndarray) -> np.ndarray:
        raise NotImplementedError


@dataclass
class BaseVanishingPointClusterer:
    """
    Groups line segments by the vanishing point they converge on.

    Clusters are returned strongest first. ``point`` is homogeneous; a zero
    weight marks a point at infinity.
    """

    config: PipelineConfig

    def cluster(
        self,
        segments: Sequence[LineSegment],
        image_size: Tuple[int, int],
        num_points: int = 1,
    ) -> List[VanishingPointCluster]:
        raise NotImplementedError


class BaseFloodFiller:
    def fill(self, mask: np.ndarray, seed: Tuple[int, int], value: int) -> np.ndarray:
        raise NotImplementedError


class BaseRegionSegmenter:
    BOUNDARY_LABEL = -1

    def segment(self, image: np.ndarray, markers: np.ndarray) -> np.ndarray:
        raise NotImplementedError
