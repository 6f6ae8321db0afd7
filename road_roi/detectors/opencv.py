from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import cv2
import numpy as np

from ..types import LineSegment
from .base import BaseBinarizer, BaseFloodFiller, BaseLineSegmentDetector, BaseRegionSegmenter


@dataclass
class HoughSegmentDetector(BaseLineSegmentDetector):
    """Probabilistic Hough transform on a binary image."""

    def detect(
        self,
        binary: np.ndarray,
        threshold: int,
        min_line_length: int,
        max_line_gap: int,
    ) -> List[LineSegment]:
        lines = cv2.HoughLinesP(
            binary,
            rho=self.config.hough_rho,
            theta=self.config.hough_theta,
            threshold=int(threshold),
            minLineLength=int(min_line_length),
            maxLineGap=int(max_line_gap),
        )
        if lines is None:
            return []
        return [tuple(int(v) for v in line) for line in lines.reshape(-1, 4)]


class OtsuBinarizer(BaseBinarizer):
    def binarize(self, gray: np.ndarray) -> np.ndarray:
        _, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY | cv2.THRESH_OTSU)
        return binary


class OpenCVFloodFiller(BaseFloodFiller):
    def fill(self, mask: np.ndarray, seed: Tuple[int, int], value: int) -> np.ndarray:
        filled = mask.copy()
        cv2.floodFill(filled, None, (int(seed[0]), int(seed[1])), int(value))
        return filled


class WatershedSegmenter(BaseRegionSegmenter):
    """Marker-based watershed; boundaries (and the image border) get label -1."""

    def segment(self, image: np.ndarray, markers: np.ndarray) -> np.ndarray:
        if image.ndim == 2:
            image = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        labels = markers.astype(np.int32, copy=True)
        cv2.watershed(np.ascontiguousarray(image, dtype=np.uint8), labels)
        return labels
