"""
Signal Tests
============

Preprocessing, noise floor calibration and the sliding motion window.
"""

import numpy as np
import pytest


def _noisy(base: np.ndarray, pixels: int) -> np.ndarray:
    """Copy of ``base`` with the first ``pixels`` pixels raised by one level."""
    frame = base.copy()
    frame.reshape(-1)[:pixels] += 1
    return frame


class TestPreprocess:
    """Tests for grayscale conversion and frame preparation."""

    def test_grayscale_passthrough(self, checker_a):
        from frame_integrity.signals.preprocess import to_grayscale

        assert to_grayscale(checker_a) is checker_a

    def test_bgr_to_gray(self):
        """A neutral BGR image keeps its intensity."""
        from frame_integrity.signals.preprocess import to_grayscale

        bgr = np.full((8, 8, 3), 90, dtype=np.uint8)
        gray = to_grayscale(bgr)

        assert gray.shape == (8, 8)
        assert int(gray[0, 0]) == 90

    def test_bgra_and_single_channel(self):
        from frame_integrity.signals.preprocess import to_grayscale

        assert to_grayscale(np.zeros((8, 8, 4), dtype=np.uint8)).shape == (8, 8)
        assert to_grayscale(np.zeros((8, 8, 1), dtype=np.uint8)).shape == (8, 8)

    def test_unsupported_layouts_rejected(self):
        from frame_integrity.signals.preprocess import to_grayscale

        with pytest.raises(ValueError):
            to_grayscale(np.zeros((8, 8, 2), dtype=np.uint8))
        with pytest.raises(ValueError):
            to_grayscale(np.zeros((8, 8), dtype=np.float64))

    def test_preprocess_frame(self, checker_a):
        """Prepared frame keeps index and timestamp and carries sharpness."""
        from frame_integrity.signals.preprocess import preprocess_frame
        from frame_integrity.stream.frame import Frame

        prepared = preprocess_frame(Frame(index=4, timestamp_ms=133.3, image=checker_a))

        assert prepared.index == 4
        assert prepared.timestamp_ms == 133.3
        assert prepared.gray.shape == checker_a.shape
        assert prepared.gray is not checker_a
        assert prepared.sharpness > 0


class TestNoiseFloorCalibrator:
    """Tests for the noise baseline estimate."""

    def test_empty_input_uses_defaults(self):
        from frame_integrity.signals.calibration import NoiseFloorCalibrator

        baseline = NoiseFloorCalibrator().calibrate([])

        assert baseline.mu == 0.05
        assert baseline.sigma == 0.02
        assert baseline.is_default

    def test_single_frame_uses_defaults(self, flat_gray):
        """One frame forms no pair."""
        from frame_integrity.signals.calibration import NoiseFloorCalibrator

        baseline = NoiseFloorCalibrator().calibrate([flat_gray])

        assert baseline.is_default

    def test_all_pairs_over_bound_use_defaults(self, checker_a, checker_b):
        """Pairs with real motion never contribute to the noise floor."""
        from frame_integrity.signals.calibration import NoiseFloorCalibrator

        baseline = NoiseFloorCalibrator().calibrate([checker_a, checker_b] * 4)

        assert (baseline.mu, baseline.sigma, baseline.samples_used) == (0.05, 0.02, 0)

    def test_averages_accepted_pairs(self):
        """10 of 100 pixels differ by one level: mean 0.1, std 0.3."""
        from frame_integrity.signals.calibration import NoiseFloorCalibrator

        base = np.zeros((10, 10), dtype=np.uint8)
        frames = [base, _noisy(base, 10), base]

        baseline = NoiseFloorCalibrator().calibrate(frames)

        assert baseline.samples_used == 2
        assert baseline.mu == pytest.approx(0.1)
        assert baseline.sigma == pytest.approx(0.3)

    def test_rejected_pairs_are_skipped(self):
        """Only the still pair is averaged."""
        from frame_integrity.signals.calibration import NoiseFloorCalibrator

        dark = np.zeros((10, 10), dtype=np.uint8)
        bright = np.full((10, 10), 100, dtype=np.uint8)

        baseline = NoiseFloorCalibrator().calibrate([dark, bright, bright])

        assert baseline.samples_used == 1
        assert baseline.mu == 0.0
        assert baseline.sigma == 0.0

    def test_reads_only_the_prefix(self, flat_gray):
        """The calibrator consumes exactly sample_frames items."""
        from frame_integrity.signals.calibration import NoiseFloorCalibrator

        frames = iter([flat_gray] * 6)
        baseline = NoiseFloorCalibrator(sample_frames=3).calibrate(frames)

        assert baseline.samples_used == 2
        assert len(list(frames)) == 3

    def test_parameter_validation(self):
        """All invalid parameters are reported together."""
        from frame_integrity.signals.calibration import NoiseFloorCalibrator

        with pytest.raises(ValueError) as exc_info:
            NoiseFloorCalibrator(sample_frames=1, sanity_bound=0.0)

        message = str(exc_info.value)
        assert "sample_frames" in message
        assert "sanity_bound" in message

    def test_from_config(self):
        from frame_integrity.config import CalibrationConfig
        from frame_integrity.signals.calibration import NoiseFloorCalibrator

        calibrator = NoiseFloorCalibrator.from_config(
            CalibrationConfig(sample_frames=5, default_mu=0.2)
        )

        assert calibrator.sample_frames == 5
        assert calibrator.default_baseline.mu == 0.2

    def test_calibrate_source_opens_its_own_stream(self, make_source, alternating_images):
        from frame_integrity.signals.calibration import NoiseFloorCalibrator

        source = make_source(alternating_images)
        baseline = NoiseFloorCalibrator().calibrate_source(source, "synthetic")

        assert source.open_count == 1
        assert baseline.is_default


class TestMotionWindow:
    """Tests for the bounded motion history."""

    def test_bound_and_fifo_eviction(self):
        """Oldest samples leave first once capacity is reached."""
        from frame_integrity.signals.motion_window import MotionWindow

        window = MotionWindow(capacity=3)
        for value in [1.0, 2.0, 3.0, 4.0, 5.0]:
            window.push(value)

        assert window.size == 3
        assert window.values() == [3.0, 4.0, 5.0]
        assert window.latest == 5.0

    def test_median_of_held_samples(self):
        from frame_integrity.signals.motion_window import MotionWindow

        window = MotionWindow(capacity=7)
        for value in [10.0, 1000.0, 12.0, 11.0]:
            window.push(value)

        assert window.local_median() == pytest.approx(11.5)

    def test_empty_window_fallback(self):
        from frame_integrity.signals.motion_window import MotionWindow

        window = MotionWindow()

        assert window.latest is None
        assert window.local_median(fallback=42.0) == 42.0
        with pytest.raises(ValueError):
            window.local_median()

    def test_invalid_capacity(self):
        from frame_integrity.signals.motion_window import MotionWindow

        with pytest.raises(ValueError):
            MotionWindow(capacity=0)

    def test_clear(self):
        from frame_integrity.signals.motion_window import MotionWindow

        window = MotionWindow(capacity=2)
        window.push(1.0)
        window.clear()

        assert len(window) == 0
