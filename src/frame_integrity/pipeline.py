"""
Analysis Pipeline
=================

Public entry points for analysing a video.

    analyze_video(path)  -> AnalysisResult       whole result, via the graph
    iter_reports(path)   -> Iterator[FrameReport] reports as they are made

Both run the same stages: a calibration pass over the stream prefix,
then one classification pass over the whole stream.
"""

import logging
from typing import Iterator, Optional

from frame_integrity.config import Settings, settings as default_settings
from frame_integrity.classifier.graph import AnalysisGraph
from frame_integrity.classifier.session import ClassificationSession
from frame_integrity.models.report import AnalysisResult, FrameReport
from frame_integrity.signals.calibration import NoiseFloorCalibrator
from frame_integrity.stream.source import FrameSource, StreamOpenError, VideoCaptureSource


logger = logging.getLogger(__name__)


def analyze_video(
    video_path: str,
    settings: Optional[Settings] = None,
    source: Optional[FrameSource] = None,
) -> AnalysisResult:
    """
    Classify every interior frame of a video.

    Args:
        video_path: Path handed to the frame source
        settings: Analyzer settings (module settings if None)
        source: Frame source (OpenCV decoding if None)

    Returns:
        AnalysisResult; an input that cannot be opened yields
        outcome OPEN_FAILED and an empty report list
    """
    return AnalysisGraph(settings=settings, source=source).run(video_path)


def iter_reports(
    video_path: str,
    settings: Optional[Settings] = None,
    source: Optional[FrameSource] = None,
) -> Iterator[FrameReport]:
    """
    Streaming variant of analyze_video.

    Yields reports in stream order as soon as each frame's successor has
    been read. An input that cannot be opened yields nothing.
    """
    settings = settings or default_settings
    source = source or VideoCaptureSource()
    kernel = settings.preprocess.blur_kernel_size

    calibrator = NoiseFloorCalibrator.from_config(settings.calibration)
    try:
        baseline = calibrator.calibrate_source(source, video_path, kernel_size=kernel)
        stream = source.open_stream(video_path)
    except StreamOpenError as e:
        logger.error(f"Could not open {video_path}: {e}")
        return

    try:
        session = ClassificationSession(baseline, stream.nominal_frame_rate(), settings)
        yield from session.run(stream)
        session.finish()
    finally:
        stream.close()
