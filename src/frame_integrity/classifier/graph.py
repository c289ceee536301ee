"""
Analysis Graph Definition
=========================

LangGraph workflow for one analysis run.

LangGraph is used for CONTROL FLOW only: each node is a deterministic
pipeline stage and the edges encode the run lifecycle.

Graph Structure:
    START → calibrate ─┬─ (opened) ──→ classify → finalize → END
                       └─ (open failed) ─────────→ finalize → END

    calibrate: noise floor over the stream prefix (own stream)
    classify:  full pass through a ClassificationSession
    finalize:  builds the AnalysisResult (COMPLETED or OPEN_FAILED)

Design Philosophy:
    - Open failure is a result, not an exception
    - Partial results from a truncated stream are kept
    - One graph run per video, nothing shared between runs
"""

import logging
from typing import Any, Dict, List, Optional, TypedDict

from langgraph.graph import END, StateGraph

from frame_integrity.config import Settings, settings as default_settings
from frame_integrity.classifier.session import ClassificationSession
from frame_integrity.models.report import (
    AnalysisOutcome,
    AnalysisResult,
    CalibrationInfo,
    FrameReport,
)
from frame_integrity.models.stats import NoiseBaseline
from frame_integrity.signals.calibration import NoiseFloorCalibrator
from frame_integrity.stream.source import FrameSource, StreamOpenError, VideoCaptureSource


logger = logging.getLogger(__name__)


class AnalysisGraphState(TypedDict):
    """
    State passed through the analysis graph.

    Attributes:
        video_path: Input being analysed
        baseline: Calibrated noise floor (None until calibrated)
        reports: Frame reports in stream order
        frames_read: Frames fed to the classifier
        truncated: Stream ended on a read failure
        nominal_frame_rate: Effective frame rate used for timing
        error: Open failure message, if any
        result: Final AnalysisResult
    """
    video_path: str
    baseline: Optional[NoiseBaseline]
    reports: List[FrameReport]
    frames_read: int
    truncated: bool
    nominal_frame_rate: Optional[float]
    error: Optional[str]
    result: Optional[AnalysisResult]


def create_initial_state(video_path: str) -> AnalysisGraphState:
    """Create initial graph state."""
    return {
        "video_path": str(video_path),
        "baseline": None,
        "reports": [],
        "frames_read": 0,
        "truncated": False,
        "nominal_frame_rate": None,
        "error": None,
        "result": None,
    }


class AnalysisGraph:
    """
    LangGraph-based runner for frame integrity analysis.

    Example:
        graph = AnalysisGraph(source=VideoCaptureSource())
        result = graph.run("capture.mp4")
        print(result.summary)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        source: Optional[FrameSource] = None,
    ) -> None:
        """
        Initialize the analysis graph.

        Args:
            settings: Analyzer settings (module settings if None)
            source: Frame source (OpenCV decoding if None)
        """
        self.settings = settings or default_settings
        self.source = source or VideoCaptureSource()
        self.calibrator = NoiseFloorCalibrator.from_config(self.settings.calibration)

        self._graph = self._build_graph()

        logger.info(
            f"AnalysisGraph initialized: "
            f"family={self.settings.classifier.signal_family}, "
            f"calibration_frames={self.calibrator.sample_frames}"
        )

    def _build_graph(self):
        """Build the LangGraph workflow."""
        workflow = StateGraph(AnalysisGraphState)

        workflow.add_node("calibrate", self._calibrate_node)
        workflow.add_node("classify", self._classify_node)
        workflow.add_node("finalize", self._finalize_node)

        workflow.set_entry_point("calibrate")
        workflow.add_conditional_edges(
            "calibrate",
            self._route_after_calibration,
            {"classify": "classify", "finalize": "finalize"},
        )
        workflow.add_edge("classify", "finalize")
        workflow.add_edge("finalize", END)

        return workflow.compile()

    def _calibrate_node(self, state: AnalysisGraphState) -> Dict[str, Any]:
        """Estimate the noise floor over the stream prefix."""
        path = state["video_path"]
        try:
            baseline = self.calibrator.calibrate_source(
                self.source,
                path,
                kernel_size=self.settings.preprocess.blur_kernel_size,
            )
        except StreamOpenError as e:
            logger.error(f"Calibration could not open {path}: {e}")
            return {"error": str(e)}

        return {"baseline": baseline}

    def _route_after_calibration(self, state: AnalysisGraphState) -> str:
        return "finalize" if state.get("error") else "classify"

    def _classify_node(self, state: AnalysisGraphState) -> Dict[str, Any]:
        """Classify every interior frame of the stream."""
        path = state["video_path"]
        try:
            stream = self.source.open_stream(path)
        except StreamOpenError as e:
            logger.error(f"Classification could not open {path}: {e}")
            return {"error": str(e)}

        try:
            session = ClassificationSession(
                baseline=state["baseline"],
                nominal_frame_rate=stream.nominal_frame_rate(),
                settings=self.settings,
            )
            for _ in session.run(stream):
                pass
            reports = session.finish()
        finally:
            stream.close()

        if session.truncated:
            logger.warning(
                f"{path}: stream truncated after {session.frames_fed} frames, "
                f"keeping {len(reports)} reports"
            )

        return {
            "reports": reports,
            "frames_read": session.frames_fed,
            "truncated": session.truncated,
            "nominal_frame_rate": session.frame_rate,
        }

    def _finalize_node(self, state: AnalysisGraphState) -> Dict[str, Any]:
        """Package the run into an AnalysisResult."""
        baseline = state.get("baseline")
        error = state.get("error")

        result = AnalysisResult(
            video_path=state["video_path"],
            outcome=AnalysisOutcome.OPEN_FAILED if error else AnalysisOutcome.COMPLETED,
            signal_family=self.settings.classifier.signal_family,
            nominal_frame_rate=state.get("nominal_frame_rate"),
            frames_read=state.get("frames_read", 0),
            truncated=state.get("truncated", False),
            error=error,
            calibration=CalibrationInfo.from_baseline(baseline) if baseline else None,
            reports=[] if error else state.get("reports", []),
        )

        summary = result.summary
        logger.info(
            f"Analysis {result.outcome.value} for {result.video_path}: "
            f"total={summary.total}, drops={summary.drops}, merges={summary.merges}"
        )
        return {"result": result}

    def run(self, video_path: str) -> AnalysisResult:
        """
        Analyse one video.

        Args:
            video_path: Path handed to the frame source

        Returns:
            AnalysisResult; OPEN_FAILED with no reports if the input
            could not be opened
        """
        final_state = self._graph.invoke(create_initial_state(video_path))
        return final_state["result"]


def create_analysis_graph(
    settings: Optional[Settings] = None,
    source: Optional[FrameSource] = None,
) -> AnalysisGraph:
    """Factory mirroring the module-level settings defaults."""
    return AnalysisGraph(settings=settings, source=source)
