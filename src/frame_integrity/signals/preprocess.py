"""
Frame Preprocessing
===================

Turns decoded frames into analysis-ready grayscale buffers.

Design Rules:
    - This is the ONLY place that converts colour to grayscale
    - Gaussian blur suppresses sensor noise before any differencing
    - Sharpness is measured once, on the blurred buffer
"""

import cv2
import numpy as np

from frame_integrity.metrics.sharpness import compute_sharpness
from frame_integrity.stream.frame import Frame, PreparedFrame


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """
    Convert a decoded image to a single-channel buffer.

    Accepts (H, W), (H, W, 1), BGR (H, W, 3) and BGRA (H, W, 4) uint8 images.

    Raises:
        ValueError: If the image is not uint8 or has an unsupported layout
    """
    if image.dtype != np.uint8:
        raise ValueError(f"Expected uint8 image, got {image.dtype}")

    if image.ndim == 2:
        return image
    if image.ndim != 3:
        raise ValueError(f"Unsupported image shape: {image.shape}")

    channels = image.shape[2]
    if channels == 1:
        return image[:, :, 0]
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    raise ValueError(f"Unsupported channel count: {channels}")


def prepare_gray(image: np.ndarray, kernel_size: int = 3) -> np.ndarray:
    """Grayscale + Gaussian blur. Always returns a new buffer."""
    gray = to_grayscale(image)
    return cv2.GaussianBlur(gray, (kernel_size, kernel_size), 0)


def preprocess_frame(frame: Frame, kernel_size: int = 3) -> PreparedFrame:
    """
    Build the analysis-ready form of a decoded frame.

    Args:
        frame: Frame from a FrameSource
        kernel_size: Gaussian kernel size (odd)

    Returns:
        PreparedFrame carrying the blurred grayscale buffer and its sharpness
    """
    gray = prepare_gray(frame.image, kernel_size)
    return PreparedFrame(
        index=frame.index,
        timestamp_ms=frame.timestamp_ms,
        gray=gray,
        sharpness=compute_sharpness(gray),
    )
