"""
Test Configuration
==================

Pytest fixtures and synthetic frame builders for the frame integrity analyzer.
"""

import numpy as np
import pytest


FRAME_SIZE = 64
SQUARE_SIZE = 16


def make_checkerboard(inverted: bool = False, size: int = FRAME_SIZE, square: int = SQUARE_SIZE) -> np.ndarray:
    """Grayscale checkerboard with values 0 / 255."""
    ys, xs = np.indices((size, size))
    board = ((ys // square + xs // square) % 2).astype(np.uint8) * 255
    if inverted:
        board = 255 - board
    return board


def make_flat(value: int = 128, size: int = FRAME_SIZE) -> np.ndarray:
    """Uniform grayscale frame, no edges at all."""
    return np.full((size, size), value, dtype=np.uint8)


@pytest.fixture
def checker_a():
    return make_checkerboard()


@pytest.fixture
def checker_b():
    return make_checkerboard(inverted=True)


@pytest.fixture
def flat_gray():
    return make_flat()


@pytest.fixture
def default_settings():
    """Settings with defaults only, independent of cwd and environment."""
    from frame_integrity.config import Settings

    return Settings()


@pytest.fixture
def motion_settings():
    """Default settings with the motion family selected."""
    from frame_integrity.config import ClassifierConfig, Settings

    return Settings(classifier=ClassifierConfig(signal_family="motion"))


@pytest.fixture
def alternating_images(checker_a, checker_b):
    """Five frames that alternate between two sharp checkerboards."""
    return [checker_a, checker_b, checker_a, checker_b, checker_a]


@pytest.fixture
def merge_images(checker_a, checker_b):
    """
    Frame 2 is an even blend of its two neighbours.

    The neighbours are complementary, so the blend is a uniform mid-gray
    whose difference to either neighbour has a high mean and a narrow spread.
    """
    import cv2

    blend = cv2.addWeighted(checker_b, 0.5, checker_a, 0.5, 0)
    return [checker_a, checker_b, blend, checker_a, checker_b]


@pytest.fixture
def shifted_blend_images(checker_a):
    """
    Frame 2 blends a checkerboard with a copy shifted by half a square.

    Half the pixels agree between the two sources, so the difference of the
    blend to its neighbour is zero on half the frame and its spread is as
    large as its mean.
    """
    import cv2

    shifted = np.roll(checker_a, SQUARE_SIZE // 2, axis=1)
    blend = cv2.GaussianBlur(cv2.addWeighted(shifted, 0.5, checker_a, 0.5, 0), (7, 7), 0)
    return [checker_a, shifted, blend, checker_a, shifted]


@pytest.fixture
def duplicate_images(checker_a, checker_b):
    """Frame 2 repeats frame 1 exactly."""
    return [checker_a, checker_b, checker_b, checker_a, checker_b]


@pytest.fixture
def make_source():
    """Factory for in-memory frame sources at 30 fps."""
    from frame_integrity.stream.source import InMemoryFrameSource

    def _make(images, **kwargs):
        return InMemoryFrameSource.from_images(images, **kwargs)

    return _make


@pytest.fixture
def written_video(tmp_path, checker_a, checker_b):
    """
    Short MJPG AVI at 30 fps written with OpenCV.

    Frame 5 repeats frame 4. Returns (path, images, fps).
    """
    import cv2

    fps = 30.0
    grays = [checker_a, checker_b, checker_a, checker_b, checker_a,
             checker_a, checker_b, checker_a, checker_b, checker_a]
    images = [cv2.cvtColor(g, cv2.COLOR_GRAY2BGR) for g in grays]

    path = tmp_path / "clip.avi"
    writer = cv2.VideoWriter(str(path), cv2.VideoWriter_fourcc(*"MJPG"), fps, (FRAME_SIZE, FRAME_SIZE))
    if not writer.isOpened():
        pytest.skip("OpenCV build cannot write MJPG AVI")
    try:
        for image in images:
            writer.write(image)
    finally:
        writer.release()

    return str(path), images, fps
