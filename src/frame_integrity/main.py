"""
Frame Integrity Command Line
============================

Batch entry point: analyse one or more videos and print a summary.

Usage:
    frame-integrity capture.mp4
    frame-integrity a.mp4 b.mp4 --signal-family motion --json-out report.json
    frame-integrity capture.mp4 --frames --log-level DEBUG

Exit codes:
    0 - every video was analysed
    1 - at least one video could not be opened
    2 - invalid arguments (including a --config file that does not exist)
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from frame_integrity import __version__
from frame_integrity.config import Settings, find_config_file, load_config, setup_logging
from frame_integrity.models.reason_codes import FrameStatus
from frame_integrity.models.report import AnalysisResult
from frame_integrity.pipeline import analyze_video


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="frame-integrity",
        description="Detect dropped and merged frames in recorded video.",
    )
    parser.add_argument("videos", nargs="+", help="Video files to analyse")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument(
        "--signal-family",
        choices=["statistics", "motion"],
        default=None,
        help="Override classifier.signal_family",
    )
    parser.add_argument("--json-out", default=None, help="Write full results as JSON")
    parser.add_argument("--frames", action="store_true", help="List every non-normal frame")
    parser.add_argument("--log-level", default=None, help="Override logging.level")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Command-line flags take precedence over file and environment."""
    if args.signal_family:
        classifier = settings.classifier.model_copy(update={"signal_family": args.signal_family})
        settings = settings.model_copy(update={"classifier": classifier})
    if args.log_level:
        log_cfg = settings.logging.model_copy(update={"level": args.log_level})
        settings = settings.model_copy(update={"logging": log_cfg})
    return settings


def format_result(result: AnalysisResult, list_frames: bool = False) -> str:
    """Human-readable summary of one analysis."""
    lines = [f"{result.video_path}: {result.outcome.value}"]
    if not result.succeeded:
        lines.append(f"  error: {result.error}")
        return "\n".join(lines)

    summary = result.summary
    lines.append(
        f"  frames={result.frames_read} classified={summary.total} "
        f"normal={summary.normal} drops={summary.drops} merges={summary.merges}"
    )
    if result.calibration is not None:
        lines.append(
            f"  noise floor: mu={result.calibration.mu:.4f} "
            f"sigma={result.calibration.sigma:.4f} "
            f"(pairs={result.calibration.samples_used})"
        )
    if result.truncated:
        lines.append("  warning: stream truncated, results are partial")

    if list_frames:
        for report in result.reports:
            if report.status == FrameStatus.NORMAL:
                continue
            lines.append(
                f"  #{report.index:<6d} {report.timestamp_ms:10.2f} ms  "
                f"{report.status.value:<11s} {report.reason.value:<18s} "
                f"sharpness={report.sharpness:.1f} motion={report.motion:.2f}"
            )
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config_file = find_config_file(args.config)
        settings = _apply_cli_overrides(load_config(config_file), args)
    except FileNotFoundError as e:
        parser.error(str(e))
    setup_logging(settings)
    logger.info(f"Using config: {config_file or 'defaults and environment'}")

    results: List[AnalysisResult] = []
    for video in args.videos:
        result = analyze_video(video, settings=settings)
        results.append(result)
        print(format_result(result, list_frames=args.frames))

    if args.json_out:
        out_path = Path(args.json_out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with out_path.open("w", encoding="utf-8") as f:
            json.dump([r.to_dict() for r in results], f, indent=2)
        logger.info(f"Wrote {len(results)} result(s) to {out_path}")

    return 0 if all(r.succeeded for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
