"""
Data Models
===========

Result and signal models for the frame integrity analyzer.

Models:
    Codes:
        - FrameStatus: NORMAL, FRAME_DROP, FRAME_MERGE
        - ReasonCode: Rule that produced a status

    Signals:
        - FrameStats: Pairwise difference statistics
        - NoiseBaseline: Calibrated noise floor

    Output:
        - FrameReport: Per-frame classification
        - AnalysisSummary: Aggregate counts
        - AnalysisOutcome / AnalysisResult: Result of one run
"""

from frame_integrity.models.reason_codes import FrameStatus, ReasonCode
from frame_integrity.models.stats import FrameStats, NoiseBaseline
from frame_integrity.models.report import (
    AnalysisOutcome,
    AnalysisResult,
    AnalysisSummary,
    CalibrationInfo,
    FrameReport,
)

__all__ = [
    # Codes
    "FrameStatus",
    "ReasonCode",
    # Signals
    "FrameStats",
    "NoiseBaseline",
    # Output
    "FrameReport",
    "AnalysisSummary",
    "AnalysisOutcome",
    "AnalysisResult",
    "CalibrationInfo",
]
