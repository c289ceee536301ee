"""
Frame Status and Reason Codes
=============================

Fixed set of machine-readable outcomes for frame classification.

Each classified frame carries exactly ONE status and ONE reason code
naming the rule that produced it.

Rules:
    - No free-text explanations
    - One clear cause per code
    - NONE is only paired with NORMAL
"""

from enum import Enum


class FrameStatus(str, Enum):
    """
    Classification outcome for a single frame.

    Attributes:
        NORMAL: No capture defect detected
        FRAME_DROP: Source frame repeated or skipped
        FRAME_MERGE: Two source frames blended into one
    """

    NORMAL = "NORMAL"
    FRAME_DROP = "FRAME_DROP"
    FRAME_MERGE = "FRAME_MERGE"


class ReasonCode(str, Enum):
    """
    Machine-readable explanation of a frame status.

    Attributes:
        NONE: No rule fired
        DELTA_TIME: Timestamp gap larger than the nominal interval allows
        HIGH_PSNR: Frame is a near-duplicate of its predecessor
        LOW_MEAN_THRESHOLD: Difference indistinguishable from sensor noise
        SHARPNESS_DIP: Frame is blurrier than both neighbours (cross-blend)
        HIGH_SPIKE: Motion jumped well above the local median
        FRAME_FREEZE: Motion collapsed well below the local median
    """

    NONE = "NONE"

    # Drop reasons
    DELTA_TIME = "DELTA_TIME"
    HIGH_PSNR = "HIGH_PSNR"
    LOW_MEAN_THRESHOLD = "LOW_MEAN_THRESHOLD"
    HIGH_SPIKE = "HIGH_SPIKE"

    # Merge reasons
    SHARPNESS_DIP = "SHARPNESS_DIP"
    FRAME_FREEZE = "FRAME_FREEZE"
