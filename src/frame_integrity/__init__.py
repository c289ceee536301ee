"""
Frame Integrity Analyzer
========================

Offline detection of capture-pipeline defects in recorded video.

Every interior frame of a decoded stream is classified as NORMAL,
FRAME_DROP (a source frame repeated or skipped) or FRAME_MERGE (two
source frames blended into one), from inter-frame pixel statistics,
edge sharpness and timestamps. A calibration pass over the first frames
estimates the camera's noise floor before classification starts.

Components:
    - stream: Frame sources and the prev/current/next ring
    - metrics: Pairwise difference statistics and sharpness
    - signals: Preprocessing, noise calibration, motion window
    - classifier: Rule chains, per-video session, LangGraph run graph
    - report: Ordered report aggregation and summaries

Example:
    from frame_integrity import analyze_video

    result = analyze_video("capture_240fps.mp4")
    print(result.summary)
"""

__version__ = "0.1.0"

from frame_integrity.models import (
    AnalysisOutcome,
    AnalysisResult,
    AnalysisSummary,
    FrameReport,
    FrameStatus,
    ReasonCode,
)
from frame_integrity.pipeline import analyze_video, iter_reports

__all__ = [
    "__version__",
    "analyze_video",
    "iter_reports",
    "AnalysisOutcome",
    "AnalysisResult",
    "AnalysisSummary",
    "FrameReport",
    "FrameStatus",
    "ReasonCode",
]
