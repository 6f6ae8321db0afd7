from __future__ import annotations

import argparse
import csv
from pathlib import Path

from road_roi.config import PipelineConfig
from road_roi.extractor import RoadRoiExtractor
from road_roi.types import FrameLanes
from road_roi.utils import ensure_directory
from road_roi.video import VideoLaneProcessor

FIELDS = [
    "frame_index",
    "timestamp",
    "vp_x",
    "vp_y",
    "left_top_x",
    "left_top_y",
    "left_bottom_x",
    "left_bottom_y",
    "right_top_x",
    "right_top_y",
    "right_bottom_x",
    "right_bottom_y",
    "middle_top_x",
    "middle_top_y",
    "middle_bottom_x",
    "middle_bottom_y",
    "failure",
]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export per-frame lane geometry for a video.")
    parser.add_argument("--video", required=True, help="Path to the input video.")
    parser.add_argument("--output", default="lane_series/lanes.csv", help="CSV file to write.")
    parser.add_argument("--frame-stride", type=int, default=1, help="Process every Nth frame.")
    parser.add_argument("--max-frames", type=int, default=0, help="Cap on processed frames (0 = no limit).")
    parser.add_argument("--three-lanes", action="store_true", help="Also recover the middle lane.")
    parser.add_argument("--marking-width", type=int, default=10, help="Lane marking width in pixels.")
    return parser.parse_args()


def frame_row(entry: FrameLanes) -> dict:
    row = {"frame_index": entry.frame_index, "timestamp": f"{entry.timestamp:.3f}", "failure": entry.failure or ""}
    result = entry.result
    if result is None:
        return row
    row["vp_x"], row["vp_y"] = result.vanishing_point
    row["left_top_x"], row["left_top_y"] = result.left.top
    row["left_bottom_x"], row["left_bottom_y"] = result.left.bottom
    row["right_top_x"], row["right_top_y"] = result.right.top
    row["right_bottom_x"], row["right_bottom_y"] = result.right.bottom
    if result.middle is not None:
        row["middle_top_x"], row["middle_top_y"] = result.middle.top
        row["middle_bottom_x"], row["middle_bottom_y"] = result.middle.bottom
    return row


def main() -> None:
    args = parse_args()
    config = PipelineConfig(lane_marking_width_px=args.marking_width)
    processor = VideoLaneProcessor(
        extractor=RoadRoiExtractor(config),
        frame_stride=args.frame_stride,
        with_middle=args.three_lanes,
        max_frames=args.max_frames,
    )

    def _print_progress(entry: FrameLanes) -> None:
        status = entry.failure if entry.result is None else f"vp={tuple(entry.result.vanishing_point)}"
        print(f"[frame {entry.frame_index:05d}] t={entry.timestamp:7.2f}s {status}", flush=True)

    results = processor.process_video(args.video, progress_hook=_print_progress)

    output = Path(args.output)
    ensure_directory(output.parent)
    with output.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=FIELDS)
        writer.writeheader()
        for entry in results:
            writer.writerow(frame_row(entry))

    failed = sum(1 for entry in results if entry.result is None)
    print(f"[info] processed {len(results)} frames, {failed} without lane geometry.")
    print(f"[info] wrote {output}")


if __name__ == "__main__":
    main()
