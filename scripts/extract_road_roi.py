from __future__ import annotations

import argparse
from pathlib import Path

import cv2

from road_roi.config import PipelineConfig
from road_roi.errors import LaneDetectionError
from road_roi.extractor import RoadRoiExtractor
from road_roi.utils import ensure_directory
from road_roi.visualization import annotate_lanes


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Extract lanes and the road ROI from a road image.")
    parser.add_argument("--image", required=True, help="Path to a forward-facing road image.")
    parser.add_argument("--output", default="outputs/road_roi.png", help="Where to write the ROI image.")
    parser.add_argument("--overlay", help="Optional path for a lane overlay image.")
    parser.add_argument("--three-lanes", action="store_true", help="Also recover the middle lane.")
    parser.add_argument("--marking-width", type=int, default=10, help="Lane marking width in pixels.")
    parser.add_argument("--show", action="store_true", help="Display the ROI in a window.")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    config = PipelineConfig(lane_marking_width_px=args.marking_width)
    extractor = RoadRoiExtractor(config)

    image = cv2.imread(args.image)
    if image is None:
        raise FileNotFoundError(f"Failed to read image: {args.image}")

    try:
        result = extractor.analyze(image, with_middle=args.three_lanes)
    except LaneDetectionError as exc:
        print(f"[warn] no lane geometry for {args.image}: {exc}")
        return 1

    print(f"[info] vanishing point: ({result.vanishing_point.x}, {result.vanishing_point.y})")
    for name, lane in zip(("left", "middle", "right") if result.middle else ("left", "right"), result.lanes):
        print(f"  {name:>6} lane: top={tuple(lane.top)} bottom={tuple(lane.bottom)}")

    output = Path(args.output)
    ensure_directory(output.parent)
    cv2.imwrite(str(output), result.roi_image)
    print(f"[info] wrote ROI to {output}")

    if args.overlay:
        overlay_path = Path(args.overlay)
        ensure_directory(overlay_path.parent)
        cv2.imwrite(str(overlay_path), annotate_lanes(image, result))
        print(f"[info] wrote overlay to {overlay_path}")

    if args.show:
        cv2.namedWindow("road", cv2.WINDOW_NORMAL)
        cv2.imshow("road", result.roi_image)
        cv2.waitKey(0)
        cv2.destroyWindow("road")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
