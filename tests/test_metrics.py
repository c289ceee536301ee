"""
Metric Tests
============

Pairwise difference statistics, motion magnitude and sharpness.
"""

import math

import numpy as np
import pytest


class TestPsnr:
    """Tests for the MSE to PSNR conversion."""

    def test_zero_mse_is_infinite(self):
        """Identical frames have infinite similarity, not an error."""
        from frame_integrity.metrics.pairwise import psnr_from_mse

        assert psnr_from_mse(0.0) == math.inf

    def test_epsilon_boundary_is_infinite(self):
        """MSE exactly at the floor still counts as identical."""
        from frame_integrity.metrics.pairwise import MSE_EPSILON, psnr_from_mse

        assert psnr_from_mse(MSE_EPSILON) == math.inf
        assert math.isfinite(psnr_from_mse(MSE_EPSILON * 10))

    def test_unit_mse(self):
        """MSE of 1 is 10*log10(255^2)."""
        from frame_integrity.metrics.pairwise import psnr_from_mse

        assert psnr_from_mse(1.0) == pytest.approx(48.1308, abs=1e-3)

    def test_monotonically_decreasing(self):
        """Larger differences give lower similarity."""
        from frame_integrity.metrics.pairwise import psnr_from_mse

        assert psnr_from_mse(1.0) > psnr_from_mse(10.0) > psnr_from_mse(1000.0)


class TestFrameStats:
    """Tests for compute_frame_stats."""

    def test_identical_frames(self, checker_a):
        """A duplicated frame gives mean 0, std 0 and infinite similarity."""
        from frame_integrity.metrics.pairwise import compute_frame_stats

        stats = compute_frame_stats(checker_a, checker_a.copy())

        assert stats.mean == 0.0
        assert stats.std_dev == 0.0
        assert stats.similarity == math.inf
        assert stats.is_identical

    def test_uniform_offset(self):
        """A constant offset of 10 gives mean 10, std 0, MSE 100."""
        from frame_integrity.metrics.pairwise import compute_frame_stats

        prev = np.zeros((32, 32), dtype=np.uint8)
        curr = np.full((32, 32), 10, dtype=np.uint8)

        stats = compute_frame_stats(prev, curr)

        assert stats.mean == pytest.approx(10.0)
        assert stats.std_dev == pytest.approx(0.0)
        assert stats.similarity == pytest.approx(10 * math.log10(255.0 ** 2 / 100.0))

    def test_absolute_difference_is_symmetric(self, checker_a, flat_gray):
        """Order of the pair does not matter."""
        from frame_integrity.metrics.pairwise import compute_frame_stats

        forward = compute_frame_stats(checker_a, flat_gray)
        backward = compute_frame_stats(flat_gray, checker_a)

        assert forward.mean == pytest.approx(backward.mean)
        assert forward.std_dev == pytest.approx(backward.std_dev)
        assert forward.similarity == pytest.approx(backward.similarity)

    def test_shape_mismatch_rejected(self):
        """Frames of different size are a contract violation."""
        from frame_integrity.metrics.pairwise import compute_frame_stats

        with pytest.raises(ValueError, match="shapes must match"):
            compute_frame_stats(
                np.zeros((16, 16), dtype=np.uint8),
                np.zeros((16, 32), dtype=np.uint8),
            )

    def test_colour_frames_rejected(self):
        """Only preprocessed grayscale buffers are accepted."""
        from frame_integrity.metrics.pairwise import compute_frame_stats

        colour = np.zeros((16, 16, 3), dtype=np.uint8)
        with pytest.raises(ValueError, match="2D grayscale"):
            compute_frame_stats(colour, colour)

    def test_float_frames_rejected(self):
        from frame_integrity.metrics.pairwise import compute_frame_stats

        frame = np.zeros((16, 16), dtype=np.float32)
        with pytest.raises(ValueError, match="uint8"):
            compute_frame_stats(frame, frame)


class TestMotionMagnitude:
    """Tests for the binarized moving-pixel count."""

    def test_identical_frames_have_no_motion(self, checker_a):
        from frame_integrity.metrics.pairwise import compute_motion_magnitude

        assert compute_motion_magnitude(checker_a, checker_a) == 0.0

    def test_small_change_below_threshold(self):
        """Differences at or under the threshold are not motion."""
        from frame_integrity.metrics.pairwise import compute_motion_magnitude

        prev = np.full((32, 32), 100, dtype=np.uint8)
        curr = np.full((32, 32), 105, dtype=np.uint8)

        assert compute_motion_magnitude(prev, curr, threshold=10) == 0.0

    def test_full_frame_change(self):
        """Every pixel moved: count equals the pixel count."""
        from frame_integrity.metrics.pairwise import compute_motion_magnitude

        prev = np.zeros((32, 32), dtype=np.uint8)
        curr = np.full((32, 32), 200, dtype=np.uint8)

        motion = compute_motion_magnitude(prev, curr)

        assert isinstance(motion, float)
        assert motion == 32 * 32

    def test_inverted_checkerboards_move(self, checker_a, checker_b):
        from frame_integrity.metrics.pairwise import compute_motion_magnitude

        assert compute_motion_magnitude(checker_a, checker_b) > 0.5 * checker_a.size


class TestSharpness:
    """Tests for Laplacian-variance sharpness."""

    def test_flat_frame_has_zero_sharpness(self, flat_gray):
        from frame_integrity.metrics.sharpness import compute_sharpness

        assert compute_sharpness(flat_gray) == 0.0

    def test_edges_increase_sharpness(self, checker_a, flat_gray):
        from frame_integrity.metrics.sharpness import compute_sharpness

        assert compute_sharpness(checker_a) > compute_sharpness(flat_gray)

    def test_blur_reduces_sharpness(self, checker_a):
        """A blended or blurred frame is softer than its source."""
        import cv2

        from frame_integrity.metrics.sharpness import compute_sharpness

        blurred = cv2.GaussianBlur(checker_a, (9, 9), 0)

        assert compute_sharpness(blurred) < compute_sharpness(checker_a)

    def test_requires_grayscale(self):
        from frame_integrity.metrics.sharpness import compute_sharpness

        with pytest.raises(ValueError):
            compute_sharpness(np.zeros((8, 8, 3), dtype=np.uint8))
