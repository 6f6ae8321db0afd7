from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

import cv2
import numpy as np

from .errors import LaneDetectionError
from .extractor import RoadRoiExtractor
from .types import FrameLanes

logger = logging.getLogger(__name__)


@dataclass
class VideoLaneProcessor:
    """
    Run the single-frame extractor over a video.

    Frames are independent: a failed frame is recorded with its error message
    and never reuses geometry from earlier frames.
    """

    extractor: RoadRoiExtractor
    frame_stride: int = 1
    with_middle: bool = False
    max_frames: int = 0

    def process_video(
        self,
        video_path: str,
        progress_hook: Optional[Callable[[FrameLanes], None]] = None,
    ) -> List[FrameLanes]:
        cap = cv2.VideoCapture(video_path)
        if not cap.isOpened():
            raise FileNotFoundError(f"Unable to open video: {video_path}")

        fps = float(cap.get(cv2.CAP_PROP_FPS))
        if not np.isfinite(fps) or fps <= 1e-3:
            fps = 30.0

        results: List[FrameLanes] = []
        frame_index = -1
        try:
            while True:
                ret, frame = cap.read()
                if not ret:
                    break
                frame_index += 1
                if self.frame_stride > 1 and frame_index % self.frame_stride != 0:
                    continue
                record = self.process_frame(frame, frame_index, frame_index / fps)
                if progress_hook is not None:
                    progress_hook(record)
                results.append(record)
                if self.max_frames > 0 and len(results) >= self.max_frames:
                    break
        finally:
            cap.release()
        return results

    def process_frame(self, frame: np.ndarray, frame_index: int, timestamp: float) -> FrameLanes:
        try:
            result = self.extractor.analyze(frame, with_middle=self.with_middle)
        except LaneDetectionError as exc:
            logger.debug("frame %d: %s", frame_index, exc)
            return FrameLanes(frame_index=frame_index, timestamp=timestamp, failure=str(exc))
        return FrameLanes(frame_index=frame_index, timestamp=timestamp, result=result)
