"""
Metrics Module
==============

Per-pair and per-frame numeric signals.

This module provides:
    - Pixel-difference statistics and PSNR similarity
    - Binarized motion magnitude
    - Laplacian-variance sharpness

No decisions are made here, only measurements.
"""

from frame_integrity.metrics.pairwise import (
    MSE_EPSILON,
    compute_frame_stats,
    compute_motion_magnitude,
    psnr_from_mse,
)
from frame_integrity.metrics.sharpness import compute_sharpness

__all__ = [
    "MSE_EPSILON",
    "compute_frame_stats",
    "compute_motion_magnitude",
    "psnr_from_mse",
    "compute_sharpness",
]
