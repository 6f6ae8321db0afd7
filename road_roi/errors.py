from __future__ import annotations


class LaneDetectionError(RuntimeError):
    """No lane geometry is available for the frame."""


class InsufficientSegmentsError(LaneDetectionError):
    def __init__(self, count: int, required: int) -> None:
        super().__init__(f"only {count} usable line segments, need at least {required}")
        self.count = count
        self.required = required


class DegenerateVanishingPointError(LaneDetectionError):
    pass


class NoBoundaryFoundError(LaneDetectionError):
    pass
