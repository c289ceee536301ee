"""
Pairwise Frame Metrics
======================

Difference signals computed between two preprocessed frames.

Two signal families are provided:
    - Pixel statistics: mean / std-dev of the absolute difference map
      plus a PSNR similarity score
    - Motion magnitude: number of pixels whose difference exceeds a
      fixed intensity threshold

Formulas:
    mse        = sum(|a - b|^2) / pixel_count
    similarity = 10 * log10(255^2 / mse)     if mse > 1e-9
               = +inf                        otherwise

Design Note:
    similarity is monotonically decreasing in the difference. A HIGH
    score means the frames are nearly identical, which is the duplicate
    (drop) signal.
"""

import logging
import math

import cv2
import numpy as np

from frame_integrity.models.stats import FrameStats


logger = logging.getLogger(__name__)

MSE_EPSILON = 1e-9
MAX_PIXEL_VALUE = 255.0


def _validate_pair(prev: np.ndarray, curr: np.ndarray) -> None:
    """Fail fast on mismatched or non-grayscale buffers."""
    if prev.ndim != 2 or curr.ndim != 2:
        raise ValueError(
            f"Frames must be 2D grayscale. Got shapes: "
            f"{prev.shape}, {curr.shape}"
        )

    if prev.shape != curr.shape:
        raise ValueError(
            f"Frame shapes must match. Got: "
            f"{prev.shape} vs {curr.shape}"
        )

    if prev.dtype != np.uint8 or curr.dtype != np.uint8:
        raise ValueError(
            f"Frames must be uint8. Got: "
            f"{prev.dtype}, {curr.dtype}"
        )


def psnr_from_mse(mse: float) -> float:
    """
    Convert a mean-squared difference to a PSNR similarity in dB.

    Returns exactly ``math.inf`` when ``mse`` is at or below the
    numerical floor.
    """
    if mse <= MSE_EPSILON:
        return math.inf
    return 10.0 * math.log10((MAX_PIXEL_VALUE * MAX_PIXEL_VALUE) / mse)


def compute_frame_stats(prev: np.ndarray, curr: np.ndarray) -> FrameStats:
    """
    Compute difference statistics between two grayscale frames.

    Args:
        prev: Previous frame (H, W), uint8
        curr: Current frame (H, W), uint8

    Returns:
        FrameStats with mean, std_dev and similarity

    Raises:
        ValueError: If frames have invalid shape or dtype
    """
    _validate_pair(prev, curr)

    diff_map = cv2.absdiff(prev, curr)
    mean, std_dev = cv2.meanStdDev(diff_map)

    diff = diff_map.astype(np.float64)
    sse = float(np.sum(diff * diff))
    mse = sse / diff_map.size

    return FrameStats(
        mean=float(mean[0, 0]),
        std_dev=float(std_dev[0, 0]),
        similarity=psnr_from_mse(mse),
    )


def compute_motion_magnitude(
    prev: np.ndarray,
    curr: np.ndarray,
    threshold: int = 10,
    blur_kernel: int = 3,
) -> float:
    """
    Count pixels that changed by more than ``threshold`` intensity levels.

    Args:
        prev: Previous frame (H, W), uint8
        curr: Current frame (H, W), uint8
        threshold: Binarization threshold on the absolute difference
        blur_kernel: Gaussian kernel applied to both frames first (odd)

    Returns:
        Number of moving pixels, as a float
    """
    _validate_pair(prev, curr)

    kernel = (blur_kernel, blur_kernel)
    prev_blur = cv2.GaussianBlur(prev, kernel, 0)
    curr_blur = cv2.GaussianBlur(curr, kernel, 0)

    diff = cv2.absdiff(prev_blur, curr_blur)
    _, mask = cv2.threshold(diff, threshold, 255, cv2.THRESH_BINARY)

    return float(cv2.countNonZero(mask))
