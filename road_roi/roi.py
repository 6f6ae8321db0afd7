from __future__ import annotations

import cv2
import numpy as np

from .detectors.base import BaseFloodFiller
from .types import Lane


def build_road_mask(
    image_shape: tuple,
    left: Lane,
    right: Lane,
    flood_filler: BaseFloodFiller,
    fill_value: int = 255,
) -> np.ndarray:
    """
    Fill the polygon enclosed by both lanes and the image border.

    The fill is seeded at the image centre, which must lie on the road between
    the two lanes; otherwise the result is empty or covers the whole frame.
    """
    height, width = image_shape[:2]
    mask = np.zeros((height, width), dtype=np.uint8)
    cv2.line(mask, tuple(left.top), tuple(left.bottom), int(fill_value), 1)
    cv2.line(mask, tuple(right.top), tuple(right.bottom), int(fill_value), 1)
    return flood_filler.fill(mask, (width // 2, height // 2), fill_value)


def apply_road_mask(image: np.ndarray, mask: np.ndarray) -> np.ndarray:
    roi = np.zeros_like(image)
    roi[mask > 0] = image[mask > 0]
    return roi
