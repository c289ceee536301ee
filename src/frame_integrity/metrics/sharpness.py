"""
Sharpness Estimation
====================

Edge-energy measure used to spot blended frames.

A frame produced by cross-blending two source frames has softer edges
than either of its neighbours, so its Laplacian response has a lower
variance.
"""

import cv2
import numpy as np


def compute_sharpness(gray: np.ndarray) -> float:
    """
    Variance of the Laplacian of a grayscale frame.

    Args:
        gray: Grayscale frame (H, W), uint8

    Returns:
        Laplacian variance (0.0 for a flat frame)
    """
    if gray.ndim != 2:
        raise ValueError(f"Expected 2D grayscale frame, got shape {gray.shape}")
    return float(cv2.Laplacian(gray, cv2.CV_64F).var())
