"""
Classification Session
======================

Per-video classifier with an explicit lifecycle.

This session:
    - Preprocesses each incoming frame (grayscale, blur, sharpness)
    - Rotates the prev/current/next neighborhood ring
    - Classifies the middle frame once three frames are present
    - Appends reports to an ordered aggregator

Lifecycle:
    session = ClassificationSession(baseline, fps, settings)
    for frame in stream:
        session.feed(frame)
    reports = session.finish()

Key Design Decisions:
    - One session per video; sessions share no state
    - The first and last frames are never reported
    - At most three prepared frames are alive at any time
"""

import logging
from typing import Iterator, List, Optional

from frame_integrity.config import Settings
from frame_integrity.classifier.rules import ClassificationPolicy, create_policy
from frame_integrity.models.report import AnalysisSummary, FrameReport
from frame_integrity.models.stats import NoiseBaseline
from frame_integrity.report.aggregator import ReportAggregator
from frame_integrity.signals.preprocess import preprocess_frame
from frame_integrity.stream.frame import Frame, PreparedFrame
from frame_integrity.stream.ring import FrameRing
from frame_integrity.stream.source import FrameStream, iter_frames


logger = logging.getLogger(__name__)


class ClassificationSession:
    """
    Stateful frame classifier for a single video.

    Attributes:
        baseline: Noise floor calibrated for this video
        frame_rate: Effective nominal frame rate
        interval_ms: Nominal frame interval derived from frame_rate
    """

    def __init__(
        self,
        baseline: NoiseBaseline,
        nominal_frame_rate: float,
        settings: Optional[Settings] = None,
        policy: Optional[ClassificationPolicy] = None,
    ) -> None:
        """
        Initialize classification session.

        Args:
            baseline: Calibrated noise floor
            nominal_frame_rate: Frame rate hint from the source (<= 0 = unknown)
            settings: Analyzer settings (defaults when None)
            policy: Rule policy override (selected from settings when None)
        """
        self.settings = settings or Settings()
        self.baseline = baseline

        classifier = self.settings.classifier
        if nominal_frame_rate <= 0:
            logger.warning(
                f"Unknown frame rate {nominal_frame_rate}, "
                f"assuming {classifier.default_frame_rate} fps"
            )
            nominal_frame_rate = classifier.default_frame_rate

        self.frame_rate = float(nominal_frame_rate)
        self.interval_ms = 1000.0 / self.frame_rate
        self.log_every_n_frames = classifier.log_every_n_frames

        self._policy = policy or create_policy(self.settings, baseline)
        self._ring: FrameRing[PreparedFrame] = FrameRing()
        self._aggregator = ReportAggregator()
        self._frames_fed: int = 0
        self._truncated: bool = False
        self._finished: bool = False

        logger.info(
            f"ClassificationSession initialized: "
            f"family={self._policy.signal_family}, fps={self.frame_rate:.3f}, "
            f"interval={self.interval_ms:.3f}ms"
        )

    @property
    def signal_family(self) -> str:
        return self._policy.signal_family

    @property
    def frames_fed(self) -> int:
        """Frames received so far."""
        return self._frames_fed

    @property
    def truncated(self) -> bool:
        """True when run() stopped on a read or contract failure."""
        return self._truncated

    @property
    def reports(self) -> List[FrameReport]:
        """Reports produced so far, in stream order."""
        return list(self._aggregator.reports)

    def summary(self) -> AnalysisSummary:
        return self._aggregator.summary()

    def feed(self, frame: Frame) -> Optional[FrameReport]:
        """
        Add the next frame of the stream.

        Args:
            frame: Decoded frame, next in stream order

        Returns:
            Report for the frame before ``frame``, or None while the
            neighborhood is still filling

        Raises:
            RuntimeError: If the session was already finished
            ValueError: If the frame does not match the stream's layout
        """
        if self._finished:
            raise RuntimeError("Cannot feed a finished ClassificationSession")

        prepared = preprocess_frame(frame, self.settings.preprocess.blur_kernel_size)
        last = self._ring.next
        if last is not None and last.gray.shape != prepared.gray.shape:
            raise ValueError(
                f"Frame {frame.index} is {prepared.gray.shape}, "
                f"stream started at {last.gray.shape}"
            )
        self._ring.push(prepared)
        self._frames_fed += 1

        if not self._ring.is_full:
            return None

        report = self._classify(self._ring.prev, self._ring.current, self._ring.next)
        self._aggregator.add(report)

        if len(self._aggregator) % self.log_every_n_frames == 0:
            summary = self._aggregator.summary()
            logger.info(
                f"Classified {summary.total} frames: "
                f"drops={summary.drops}, merges={summary.merges}"
            )

        return report

    def _classify(
        self,
        prev: PreparedFrame,
        curr: PreparedFrame,
        nxt: PreparedFrame,
    ) -> FrameReport:
        decision = self._policy.evaluate(prev, curr, nxt, self.interval_ms)

        logger.debug(
            f"Frame {curr.index} @ {curr.timestamp_ms:.3f}ms: "
            f"{decision.status.value}/{decision.reason.value} "
            f"sharpness={curr.sharpness:.2f} motion={decision.motion:.3f}"
        )

        return FrameReport(
            index=curr.index,
            timestamp_ms=curr.timestamp_ms,
            status=decision.status,
            reason=decision.reason,
            sharpness=curr.sharpness,
            motion=decision.motion,
        )

    def run(self, stream: FrameStream) -> Iterator[FrameReport]:
        """
        Feed every frame of ``stream`` and yield reports as they are made.

        A frame that breaks the stream contract (size or format change)
        ends the run like a read failure; reports made so far stand.
        """
        for frame in iter_frames(stream):
            try:
                report = self.feed(frame)
            except ValueError as e:
                logger.error(f"Stopping at frame {frame.index}: {e}")
                self._truncated = True
                break
            if report is not None:
                yield report

        if stream.truncated:
            self._truncated = True

    def finish(self) -> List[FrameReport]:
        """
        Close the session and release the neighborhood.

        Returns:
            All reports in stream order
        """
        if not self._finished:
            self._finished = True
            self._ring.clear()
            summary = self._aggregator.summary()
            logger.info(
                f"Session finished: frames={self._frames_fed}, "
                f"reports={summary.total}, normal={summary.normal}, "
                f"drops={summary.drops}, merges={summary.merges}"
            )
        return self.reports

    def get_metrics(self) -> dict:
        """Get session metrics for observability."""
        return {
            "frames_fed": self._frames_fed,
            "signal_family": self.signal_family,
            "frame_rate": self.frame_rate,
            "truncated": self._truncated,
            "finished": self._finished,
            **self._aggregator.get_metrics(),
        }
