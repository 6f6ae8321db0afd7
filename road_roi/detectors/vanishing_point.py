from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..types import LineSegment, VanishingPointCluster
from .base import BaseVanishingPointClusterer

logger = logging.getLogger(__name__)

EPS_NORM = 1e-12
EPS_INFINITY = 1e-6


def _homogeneous(points: np.ndarray) -> np.ndarray:
    return np.column_stack([points, np.ones(len(points))])


def _normalize_point(v: np.ndarray) -> Optional[np.ndarray]:
    scale = float(np.hypot(v[0], v[1]))
    if scale < EPS_NORM and abs(v[2]) < EPS_NORM:
        return None
    if abs(v[2]) <= EPS_INFINITY * scale:
        return np.array([v[0] / scale, v[1] / scale, 0.0])
    return v / v[2]


@dataclass
class MsacVanishingPointClusterer(BaseVanishingPointClusterer):
    """
    Sequential MSAC estimation of vanishing points.

    Each segment votes with the distance between one of its endpoints and the
    line joining its midpoint with the hypothesis. The best hypothesis is
    refined by least squares over its inliers, its inliers are removed and the
    search repeats for the next point.
    """

    def cluster(
        self,
        segments: Sequence[LineSegment],
        image_size: Tuple[int, int],
        num_points: int = 1,
    ) -> List[VanishingPointCluster]:
        raw = np.asarray(segments, dtype=np.float64).reshape(-1, 4)
        if len(raw) < 2:
            return []

        p1 = _homogeneous(raw[:, 0:2])
        p2 = _homogeneous(raw[:, 2:4])
        lines = np.cross(p1, p2)
        norms = np.hypot(lines[:, 0], lines[:, 1])
        valid = norms > EPS_NORM
        lines[valid] /= norms[valid, None]
        midpoints = _homogeneous((raw[:, 0:2] + raw[:, 2:4]) * 0.5)

        rng = np.random.default_rng(self.config.vp_random_seed)
        remaining = np.flatnonzero(valid)
        clusters: List[VanishingPointCluster] = []

        for _ in range(max(int(num_points), 0)):
            if len(remaining) < 2:
                break
            best = self._best_hypothesis(lines, midpoints, p1, remaining, rng)
            if best is None:
                break
            point, inliers = best
            if len(inliers) < 2:
                break
            if point[2] != 0:
                point = self._refine(lines[inliers], point)
            clusters.append(
                VanishingPointCluster(
                    point=(float(point[0]), float(point[1]), float(point[2])),
                    segments=[tuple(int(v) for v in raw[i]) for i in inliers],
                )
            )
            remaining = np.setdiff1d(remaining, inliers)

        clusters.sort(key=lambda c: len(c.segments), reverse=True)
        if clusters:
            logger.debug(
                "vanishing point %s supported by %d of %d segments",
                clusters[0].point,
                len(clusters[0].segments),
                len(raw),
            )
        return clusters

    def _pairs(self, count: int, rng: np.random.Generator) -> Iterable[Tuple[int, int]]:
        budget = max(int(self.config.vp_max_iterations), 1)
        if count * (count - 1) // 2 <= budget:
            return itertools.combinations(range(count), 2)
        return (tuple(rng.choice(count, size=2, replace=False)) for _ in range(budget))

    def _residuals(
        self,
        point: np.ndarray,
        midpoints: np.ndarray,
        endpoints: np.ndarray,
    ) -> np.ndarray:
        joins = np.cross(midpoints, point)
        norms = np.maximum(np.hypot(joins[:, 0], joins[:, 1]), EPS_NORM)
        return np.abs(np.sum(joins * endpoints, axis=1)) / norms

    def _best_hypothesis(
        self,
        lines: np.ndarray,
        midpoints: np.ndarray,
        endpoints: np.ndarray,
        candidates: np.ndarray,
        rng: np.random.Generator,
    ) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        threshold = float(self.config.vp_inlier_threshold_px)
        sub_mid = midpoints[candidates]
        sub_end = endpoints[candidates]
        best_cost = np.inf
        best: Optional[Tuple[np.ndarray, np.ndarray]] = None

        for i, j in self._pairs(len(candidates), rng):
            point = _normalize_point(np.cross(lines[candidates[i]], lines[candidates[j]]))
            if point is None:
                continue
            errors = self._residuals(point, sub_mid, sub_end)
            cost = float(np.sum(np.minimum(errors * errors, threshold * threshold)))
            if cost < best_cost:
                best_cost = cost
                best = (point, candidates[errors <= threshold])
        return best

    def _refine(self, lines: np.ndarray, point: np.ndarray) -> np.ndarray:
        solution, _, rank, _ = np.linalg.lstsq(lines[:, :2], -lines[:, 2], rcond=None)
        if rank < 2 or not np.all(np.isfinite(solution)):
            return point
        return np.array([solution[0], solution[1], 1.0])
