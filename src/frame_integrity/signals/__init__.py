"""
Signal Processing Module
========================

Stateful and preparatory signal stages of the analyzer:
    - Preprocessing: grayscale + blur + sharpness
    - NoiseFloorCalibrator: per-video noise baseline
    - MotionWindow: bounded motion history with local median
"""

from frame_integrity.signals.preprocess import prepare_gray, preprocess_frame, to_grayscale
from frame_integrity.signals.calibration import NoiseFloorCalibrator
from frame_integrity.signals.motion_window import MotionWindow

__all__ = [
    "prepare_gray",
    "preprocess_frame",
    "to_grayscale",
    "NoiseFloorCalibrator",
    "MotionWindow",
]
