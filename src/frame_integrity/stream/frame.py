"""
Frame Data Model
=================

Internal frame representations for the analysis pipeline.

Design Rules:
    - Frame is what a FrameSource delivers: decoded pixels, any channel depth
    - PreparedFrame is the ONLY format the statistics and classifier stages see
    - Both are immutable; pixel buffers are never written after creation
"""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, slots=True)
class Frame:
    """
    Decoded frame as delivered by a frame source.

    Attributes:
        index: Zero-based position of the frame in the stream
        timestamp_ms: Presentation timestamp in milliseconds
        image: Decoded pixels, (H, W) or (H, W, 3|4), uint8
    """

    index: int
    timestamp_ms: float
    image: np.ndarray

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the pixels."""
        return (
            f"Frame(index={self.index}, "
            f"timestamp_ms={self.timestamp_ms:.3f}, "
            f"shape={self.image.shape})"
        )


@dataclass(frozen=True, slots=True)
class PreparedFrame:
    """
    Analysis-ready frame: grayscale, blurred, with its sharpness.

    Attributes:
        index: Zero-based position of the frame in the stream
        timestamp_ms: Presentation timestamp in milliseconds
        gray: Blurred grayscale buffer (H, W), uint8
        sharpness: Laplacian variance of ``gray``
    """

    index: int
    timestamp_ms: float
    gray: np.ndarray
    sharpness: float

    def __repr__(self) -> str:
        return (
            f"PreparedFrame(index={self.index}, "
            f"timestamp_ms={self.timestamp_ms:.3f}, "
            f"sharpness={self.sharpness:.2f})"
        )
