from __future__ import annotations

import os
from pathlib import Path

import cv2
import numpy as np

from .types import LineSegment, Point


def ensure_directory(path: str | os.PathLike) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))


def read_gray(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return image
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


def foreground_mask(image: np.ndarray) -> np.ndarray:
    """Boolean mask of pixels that are not pure black in any channel."""
    if image.ndim == 2:
        return image != 0
    return np.any(image != 0, axis=2)


def check_image(image: np.ndarray) -> None:
    if image is None or image.size == 0:
        raise ValueError("Empty image provided")


def segment_length_sq(segment: LineSegment) -> int:
    x1, y1, x2, y2 = segment
    return (x1 - x2) * (x1 - x2) + (y1 - y2) * (y1 - y2)


def lower_endpoint(segment: LineSegment) -> Point:
    """Endpoint with the larger row; the second one wins a tie."""
    x1, y1, x2, y2 = segment
    if y1 > y2:
        return Point(int(x1), int(y1))
    return Point(int(x2), int(y2))
