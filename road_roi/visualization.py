from __future__ import annotations

from typing import Sequence, Tuple

import cv2
import numpy as np

from .types import Lane, Point, RoadRoiResult

LANE_COLORS = ((255, 0, 0), (0, 255, 255), (0, 0, 255))


def _to_bgr(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    return image.copy()


def draw_lanes(
    image: np.ndarray,
    lanes: Sequence[Lane],
    colors: Sequence[Tuple[int, int, int]] = LANE_COLORS,
    thickness: int = 2,
) -> np.ndarray:
    annotated = _to_bgr(image)
    # left and right keep their colours when the middle lane is missing
    palette = [colors[0], colors[-1]] if len(lanes) == 2 else list(colors)
    for i, lane in enumerate(lanes):
        color = palette[i % len(palette)]
        cv2.line(annotated, tuple(lane.top), tuple(lane.bottom), color, thickness, cv2.LINE_AA)
    return annotated


def draw_vanishing_point(
    image: np.ndarray,
    point: Point,
    color: Tuple[int, int, int] = (0, 0, 255),
    radius: int = 6,
    thickness: int = 2,
) -> np.ndarray:
    annotated = _to_bgr(image)
    center = (int(point.x), int(point.y))
    cv2.drawMarker(
        annotated,
        center,
        color,
        markerType=cv2.MARKER_CROSS,
        markerSize=radius * 2,
        thickness=thickness,
    )
    cv2.circle(annotated, center, radius, color, 1, cv2.LINE_AA)
    return annotated


def tint_road_mask(
    image: np.ndarray,
    mask: np.ndarray,
    color: Tuple[int, int, int] = (0, 255, 0),
    alpha: float = 0.35,
) -> np.ndarray:
    overlay = _to_bgr(image)
    road = mask > 0
    tint = np.zeros_like(overlay)
    tint[:, :] = color
    overlay[road] = (overlay[road] * (1.0 - alpha) + tint[road] * alpha).astype(np.uint8)
    return overlay


def annotate_lanes(frame: np.ndarray, result: RoadRoiResult) -> np.ndarray:
    annotated = tint_road_mask(frame, result.road_mask)
    annotated = draw_lanes(annotated, result.lanes)
    vp = result.vanishing_point
    if 0 <= vp.x < frame.shape[1] and 0 <= vp.y < frame.shape[0]:
        annotated = draw_vanishing_point(annotated, vp)

    text = f"vp=({vp.x},{vp.y}) lanes={len(result.lanes)}"
    cv2.putText(
        annotated,
        text,
        (10, 20),
        cv2.FONT_HERSHEY_SIMPLEX,
        0.5,
        (255, 255, 255),
        1,
        cv2.LINE_AA,
    )
    return annotated
