from __future__ import annotations

import numpy as np

from .detectors.base import BaseBinarizer
from .utils import read_gray


def enhance_ridges(gray: np.ndarray, marking_width: int = 10) -> np.ndarray:
    """
    Emphasise thin bright markings that are about ``marking_width`` pixels wide.

    For every pixel the response is ``2*s(c) - s(c-w) - s(c+w) - |s(c-w) - s(c+w)|``
    clamped to ``[0, 255]``. The last term suppresses one-sided edges such as
    shadows. Black source pixels and the ``w`` columns at either border stay 0.
    """
    w = int(marking_width)
    if w < 1:
        raise ValueError("marking_width must be a positive integer")

    src = read_gray(gray).astype(np.int32)
    out = np.zeros(src.shape, dtype=np.uint8)
    width = src.shape[1]
    if width <= 2 * w:
        return out

    center = src[:, w : width - w]
    left = src[:, : width - 2 * w]
    right = src[:, 2 * w :]
    response = 2 * center - left - right - np.abs(left - right)
    response = np.clip(response, 0, 255)
    response[center == 0] = 0
    out[:, w : width - w] = response.astype(np.uint8)
    return out


def build_line_candidate_image(
    image: np.ndarray,
    binarizer: BaseBinarizer,
    marking_width: int = 10,
) -> np.ndarray:
    return binarizer.binarize(enhance_ridges(image, marking_width))
