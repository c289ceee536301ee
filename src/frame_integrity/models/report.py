"""
Analysis Output Models
======================

This module defines the complete output contract of a frame integrity run.

Output Contract:
    {
        "video_path": "/videos/capture_240fps.mp4",
        "outcome": "COMPLETED",
        "signal_family": "statistics",
        "nominal_frame_rate": 240.0,
        "frames_read": 1202,
        "truncated": false,
        "calibration": {"mu": 0.31, "sigma": 0.27, "samples_used": 14},
        "summary": {"total": 1200, "normal": 1187, "drops": 11, "merges": 2},
        "reports": [
            {
                "index": 1,
                "timestamp_ms": 4.17,
                "status": "NORMAL",
                "reason": "NONE",
                "sharpness": 812.4,
                "motion": 3.92
            },
            ...
        ]
    }

Design Rules:
    - One report per interior frame, first and last frame never reported
    - Reports are ordered by frame index and never reordered
    - The summary is derived from the reports, never stored independently
    - All outputs are deterministic for a given input sequence
"""

from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from frame_integrity.models.reason_codes import FrameStatus, ReasonCode
from frame_integrity.models.stats import NoiseBaseline


class FrameReport(BaseModel):
    """
    Classification of one interior frame.

    Attributes:
        index: Sequence index of the frame in the stream
        timestamp_ms: Presentation timestamp of the frame
        status: NORMAL, FRAME_DROP or FRAME_MERGE
        reason: Rule that produced the status
        sharpness: Laplacian variance of the frame
        motion: Difference mean to the previous frame (statistics family)
            or moving-pixel count (motion family)
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., ge=0, description="Frame index in the stream")
    timestamp_ms: float = Field(..., description="Frame timestamp in milliseconds")
    status: FrameStatus = Field(..., description="Classification outcome")
    reason: ReasonCode = Field(default=ReasonCode.NONE, description="Rule that fired")
    sharpness: float = Field(..., ge=0.0, description="Laplacian variance")
    motion: float = Field(..., ge=0.0, description="Motion signal against previous frame")


class AnalysisSummary(BaseModel):
    """
    Aggregate counts over a report sequence.

    Attributes:
        total: Number of classified frames
        normal: Frames classified NORMAL
        drops: Frames classified FRAME_DROP
        merges: Frames classified FRAME_MERGE
    """

    model_config = ConfigDict(frozen=True)

    total: int = Field(default=0, ge=0)
    normal: int = Field(default=0, ge=0)
    drops: int = Field(default=0, ge=0)
    merges: int = Field(default=0, ge=0)

    @classmethod
    def from_reports(cls, reports: Sequence[FrameReport]) -> "AnalysisSummary":
        """Count statuses over a report sequence."""
        return cls(
            total=len(reports),
            normal=sum(1 for r in reports if r.status == FrameStatus.NORMAL),
            drops=sum(1 for r in reports if r.status == FrameStatus.FRAME_DROP),
            merges=sum(1 for r in reports if r.status == FrameStatus.FRAME_MERGE),
        )

    @property
    def drop_ratio(self) -> float:
        """Fraction of classified frames that are drops."""
        return self.drops / self.total if self.total else 0.0

    @property
    def merge_ratio(self) -> float:
        """Fraction of classified frames that are merges."""
        return self.merges / self.total if self.total else 0.0


class AnalysisOutcome(str, Enum):
    """
    Terminal state of an analysis run.

    Attributes:
        COMPLETED: Stream was opened and read to its end (possibly truncated)
        OPEN_FAILED: Stream could not be opened; no reports
    """

    COMPLETED = "COMPLETED"
    OPEN_FAILED = "OPEN_FAILED"


class CalibrationInfo(BaseModel):
    """Noise baseline used by the run."""

    model_config = ConfigDict(frozen=True)

    mu: float
    sigma: float
    samples_used: int = Field(default=0, ge=0)

    @classmethod
    def from_baseline(cls, baseline: NoiseBaseline) -> "CalibrationInfo":
        return cls(mu=baseline.mu, sigma=baseline.sigma, samples_used=baseline.samples_used)


class AnalysisResult(BaseModel):
    """
    Complete result of analysing one video.

    An OPEN_FAILED result always carries an empty report list; a
    truncated run keeps every report computed before the read failure.
    """

    video_path: str = Field(..., description="Input the run was started with")
    outcome: AnalysisOutcome = Field(..., description="Terminal state of the run")
    signal_family: str = Field(default="statistics", description="Rule family used")
    nominal_frame_rate: Optional[float] = Field(default=None, description="Frame rate hint")
    frames_read: int = Field(default=0, ge=0, description="Frames delivered by the source")
    truncated: bool = Field(default=False, description="Stream ended on a read failure")
    error: Optional[str] = Field(default=None, description="Open failure message")
    calibration: Optional[CalibrationInfo] = Field(default=None)
    reports: List[FrameReport] = Field(default_factory=list)

    @property
    def summary(self) -> AnalysisSummary:
        """Summary counts, recomputed from the reports."""
        return AnalysisSummary.from_reports(self.reports)

    @property
    def succeeded(self) -> bool:
        return self.outcome == AnalysisOutcome.COMPLETED

    def to_dict(self) -> dict:
        """Export with the derived summary included."""
        data = self.model_dump(mode="json")
        data["summary"] = self.summary.model_dump()
        return data
