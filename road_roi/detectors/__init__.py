from .base import (
    BaseBinarizer,
    BaseFloodFiller,
    BaseLineSegmentDetector,
    BaseRegionSegmenter,
    BaseVanishingPointClusterer,
)
from .opencv import HoughSegmentDetector, OpenCVFloodFiller, OtsuBinarizer, WatershedSegmenter
from .vanishing_point import MsacVanishingPointClusterer

__all__ = [
    "BaseBinarizer",
    "BaseFloodFiller",
    "BaseLineSegmentDetector",
    "BaseRegionSegmenter",
    "BaseVanishingPointClusterer",
    "HoughSegmentDetector",
    "OpenCVFloodFiller",
    "OtsuBinarizer",
    "WatershedSegmenter",
    "MsacVanishingPointClusterer",
]
