"""
Signal Models
=============

Immutable records derived from frame pairs and from calibration.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FrameStats:
    """
    Pixel-difference statistics for a pair of frames.

    Attributes:
        mean: Mean absolute pixel difference
        std_dev: Standard deviation of the absolute difference map
        similarity: PSNR in dB; math.inf when the frames are effectively identical
    """

    mean: float
    std_dev: float
    similarity: float

    @property
    def is_identical(self) -> bool:
        """True when the pair fell under the MSE floor."""
        return math.isinf(self.similarity)

    def __repr__(self) -> str:
        return (
            f"FrameStats(mean={self.mean:.4f}, "
            f"std={self.std_dev:.4f}, "
            f"psnr={self.similarity:.2f})"
        )


@dataclass(frozen=True, slots=True)
class NoiseBaseline:
    """
    Camera noise floor estimated from the stream prefix.

    Attributes:
        mu: Average difference mean over accepted calibration pairs
        sigma: Average difference std-dev over accepted calibration pairs
        samples_used: Number of pairs that contributed (0 = defaults)
    """

    mu: float
    sigma: float
    samples_used: int = 0

    @property
    def is_default(self) -> bool:
        """True when no calibration pair qualified."""
        return self.samples_used == 0
