"""
Frame Classification Rules
==========================

Deterministic, fixed-precedence rule chains over a 3-frame neighborhood.

The first matching rule wins; the order is part of the contract.

Statistics family (canonical):
    1. DELTA_TIME          current.ts - prev.ts > gap_factor x interval     -> FRAME_DROP
    2. HIGH_PSNR           similarity(prev, current) > cutoff_db            -> FRAME_DROP
    3. LOW_MEAN_THRESHOLD  mean < mu + k x std_dev  OR  mean < low floor    -> FRAME_DROP
    4. SHARPNESS_DIP       mean > merge floor AND current sharpness below
                           ratio x prev AND ratio x next                    -> FRAME_MERGE
    5. NONE                                                                 -> NORMAL

Motion family:
    1. DELTA_TIME          as above                                         -> FRAME_DROP
    2. FRAME_FREEZE        enough samples AND motion < valley x median
                           AND motion < previous sample                     -> FRAME_MERGE
    3. HIGH_SPIKE          motion > spike x median                          -> FRAME_DROP
    4. NONE                                                                 -> NORMAL

The timing rule overrides every content signal: a timestamp gap alone
is conclusive.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from frame_integrity.config import MotionRuleConfig, Settings, StatisticsRuleConfig
from frame_integrity.metrics.pairwise import compute_frame_stats, compute_motion_magnitude
from frame_integrity.models.reason_codes import FrameStatus, ReasonCode
from frame_integrity.models.stats import FrameStats, NoiseBaseline
from frame_integrity.signals.motion_window import MotionWindow
from frame_integrity.stream.frame import PreparedFrame


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RuleDecision:
    """Result of a rule chain evaluation."""

    status: FrameStatus
    reason: ReasonCode
    motion: float

    def __repr__(self) -> str:
        return (
            f"RuleDecision({self.status.value}, "
            f"{self.reason.value}, motion={self.motion:.3f})"
        )


def is_timing_gap(delta_ms: float, interval_ms: float, gap_factor: float) -> bool:
    """True when the gap to the previous frame exceeds ``gap_factor`` intervals."""
    return delta_ms > interval_ms * gap_factor


def classify_by_statistics(
    delta_ms: float,
    interval_ms: float,
    stats: FrameStats,
    baseline: NoiseBaseline,
    prev_sharpness: float,
    curr_sharpness: float,
    next_sharpness: float,
    rules: StatisticsRuleConfig,
    timing_gap_factor: float = 1.5,
) -> RuleDecision:
    """
    Apply the pixel-statistics rule chain.

    Args:
        delta_ms: current.timestamp - prev.timestamp
        interval_ms: Nominal frame interval
        stats: Difference statistics of (prev, current)
        baseline: Calibrated noise floor
        prev_sharpness: Sharpness of the previous frame
        curr_sharpness: Sharpness of the frame being classified
        next_sharpness: Sharpness of the next frame
        rules: Thresholds
        timing_gap_factor: Gap in intervals that marks a drop

    Returns:
        RuleDecision whose motion is the difference mean
    """
    if is_timing_gap(delta_ms, interval_ms, timing_gap_factor):
        return RuleDecision(FrameStatus.FRAME_DROP, ReasonCode.DELTA_TIME, stats.mean)

    if stats.similarity > rules.similarity_cutoff_db:
        return RuleDecision(FrameStatus.FRAME_DROP, ReasonCode.HIGH_PSNR, stats.mean)

    dynamic_threshold = baseline.mu + rules.noise_k * stats.std_dev
    if stats.mean < dynamic_threshold or stats.mean < rules.low_mean_floor:
        return RuleDecision(FrameStatus.FRAME_DROP, ReasonCode.LOW_MEAN_THRESHOLD, stats.mean)

    ratio = rules.merge_sharpness_ratio
    if (stats.mean > rules.merge_motion_floor and
            curr_sharpness < prev_sharpness * ratio and
            curr_sharpness < next_sharpness * ratio):
        return RuleDecision(FrameStatus.FRAME_MERGE, ReasonCode.SHARPNESS_DIP, stats.mean)

    return RuleDecision(FrameStatus.NORMAL, ReasonCode.NONE, stats.mean)


def classify_by_motion(
    delta_ms: float,
    interval_ms: float,
    motion: float,
    window: MotionWindow,
    rules: MotionRuleConfig,
    timing_gap_factor: float = 1.5,
) -> RuleDecision:
    """
    Apply the motion-magnitude rule chain.

    The window is read, not modified: the local median and the previous
    sample describe the history BEFORE the current frame.
    """
    if is_timing_gap(delta_ms, interval_ms, timing_gap_factor):
        return RuleDecision(FrameStatus.FRAME_DROP, ReasonCode.DELTA_TIME, motion)

    median = window.local_median(fallback=motion)
    previous = window.latest

    if (window.size >= rules.min_window_samples and
            previous is not None and
            motion < rules.valley_factor * median and
            motion < previous):
        return RuleDecision(FrameStatus.FRAME_MERGE, ReasonCode.FRAME_FREEZE, motion)

    # A zero median carries no scale to compare against
    if median > 0 and motion > rules.spike_factor * median:
        return RuleDecision(FrameStatus.FRAME_DROP, ReasonCode.HIGH_SPIKE, motion)

    return RuleDecision(FrameStatus.NORMAL, ReasonCode.NONE, motion)


# =============================================================================
# Policies
# =============================================================================

class ClassificationPolicy(Protocol):
    """
    Strategy that classifies the middle frame of a neighborhood.

    Implementations may keep running state (e.g. a motion window) and
    must therefore be created per video.
    """

    signal_family: str

    def evaluate(
        self,
        prev: PreparedFrame,
        curr: PreparedFrame,
        nxt: PreparedFrame,
        interval_ms: float,
    ) -> RuleDecision:
        ...


class StatisticsRulePolicy:
    """Pixel-statistics policy, driven by the calibrated noise baseline."""

    signal_family = "statistics"

    def __init__(
        self,
        baseline: NoiseBaseline,
        rules: StatisticsRuleConfig,
        timing_gap_factor: float = 1.5,
    ) -> None:
        self.baseline = baseline
        self.rules = rules
        self.timing_gap_factor = timing_gap_factor
        logger.info(
            f"StatisticsRulePolicy initialized: "
            f"psnr_cutoff={rules.similarity_cutoff_db}dB, k={rules.noise_k}, "
            f"mu={baseline.mu:.4f}"
        )

    def evaluate(
        self,
        prev: PreparedFrame,
        curr: PreparedFrame,
        nxt: PreparedFrame,
        interval_ms: float,
    ) -> RuleDecision:
        stats = compute_frame_stats(prev.gray, curr.gray)
        return classify_by_statistics(
            delta_ms=curr.timestamp_ms - prev.timestamp_ms,
            interval_ms=interval_ms,
            stats=stats,
            baseline=self.baseline,
            prev_sharpness=prev.sharpness,
            curr_sharpness=curr.sharpness,
            next_sharpness=nxt.sharpness,
            rules=self.rules,
            timing_gap_factor=self.timing_gap_factor,
        )


class MotionRulePolicy:
    """Motion-magnitude policy, driven by a sliding local median."""

    signal_family = "motion"

    def __init__(
        self,
        rules: MotionRuleConfig,
        timing_gap_factor: float = 1.5,
        blur_kernel: int = 3,
    ) -> None:
        self.rules = rules
        self.timing_gap_factor = timing_gap_factor
        self.blur_kernel = blur_kernel
        self.window = MotionWindow(rules.window_capacity)
        logger.info(
            f"MotionRulePolicy initialized: window={rules.window_capacity}, "
            f"spike={rules.spike_factor}, valley={rules.valley_factor}"
        )

    def evaluate(
        self,
        prev: PreparedFrame,
        curr: PreparedFrame,
        nxt: PreparedFrame,
        interval_ms: float,
    ) -> RuleDecision:
        motion = compute_motion_magnitude(
            prev.gray,
            curr.gray,
            threshold=self.rules.binarize_threshold,
            blur_kernel=self.blur_kernel,
        )
        decision = classify_by_motion(
            delta_ms=curr.timestamp_ms - prev.timestamp_ms,
            interval_ms=interval_ms,
            motion=motion,
            window=self.window,
            rules=self.rules,
            timing_gap_factor=self.timing_gap_factor,
        )
        self.window.push(motion)
        return decision


def create_policy(settings: Settings, baseline: NoiseBaseline) -> ClassificationPolicy:
    """
    Create the policy selected by ``classifier.signal_family``.

    Args:
        settings: Analyzer settings
        baseline: Calibrated noise floor (unused by the motion family)

    Returns:
        A fresh policy instance
    """
    classifier = settings.classifier
    if classifier.signal_family == "motion":
        return MotionRulePolicy(
            classifier.motion,
            timing_gap_factor=classifier.timing_gap_factor,
            blur_kernel=settings.preprocess.blur_kernel_size,
        )
    return StatisticsRulePolicy(
        baseline,
        classifier.statistics,
        timing_gap_factor=classifier.timing_gap_factor,
    )
