"""
Frame Sources
=============

Collaborator interface for anything that can deliver decoded frames.

This module provides the FrameSource protocol plus two implementations:
    - VideoCaptureSource: decodes a video container with OpenCV
    - InMemoryFrameSource: serves frames that were decoded elsewhere

Design Rules:
    - open_stream() is the ONLY call that may raise (StreamOpenError)
    - End of stream and mid-stream read failures both end the stream
      with None; a read failure additionally sets ``truncated``
    - A stream is one-pass; opening twice yields two independent streams
"""

import logging
import math
from typing import Iterator, List, Optional, Protocol, Sequence

import cv2
import numpy as np

from frame_integrity.stream.frame import Frame


logger = logging.getLogger(__name__)


class StreamOpenError(Exception):
    """Raised when a frame stream cannot be opened."""
    pass


class FrameStream(Protocol):
    """
    One-pass, ordered sequence of decoded frames.

    Timestamps are monotonically non-decreasing and all frames share the
    same width and height.
    """

    @property
    def truncated(self) -> bool:
        """True when the stream ended on a read failure."""
        ...

    def read_next_frame(self) -> Optional[Frame]:
        """Return the next frame, or None at end of stream."""
        ...

    def nominal_frame_rate(self) -> float:
        """Declared frame rate of the stream (<= 0 when unknown)."""
        ...

    def close(self) -> None:
        """Release decoder resources."""
        ...


class FrameSource(Protocol):
    """Factory for frame streams."""

    def open_stream(self, path: str) -> FrameStream:
        """
        Open a stream for ``path``.

        Raises:
            StreamOpenError: If the input cannot be opened or decoded
        """
        ...


def iter_frames(stream: FrameStream) -> Iterator[Frame]:
    """Pull frames from ``stream`` until it reports end of stream."""
    while True:
        frame = stream.read_next_frame()
        if frame is None:
            return
        yield frame


class _StreamBase:
    """Iteration and context-manager support shared by the streams."""

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __iter__(self) -> Iterator[Frame]:
        return iter_frames(self)


# =============================================================================
# OpenCV Video Capture
# =============================================================================

class VideoCaptureStream(_StreamBase):
    """
    Frame stream backed by ``cv2.VideoCapture``.

    Timestamps come from CAP_PROP_POS_MSEC after each read and are clamped
    so they never go backwards.
    """

    def __init__(self, capture: "cv2.VideoCapture", path: str, count_tolerance: int = 2) -> None:
        self._capture = capture
        self._path = path
        self._count_tolerance = count_tolerance
        self._frames_read: int = 0
        self._last_timestamp: float = 0.0
        self._exhausted: bool = False
        self._truncated: bool = False
        self._closed: bool = False

        frame_count = capture.get(cv2.CAP_PROP_FRAME_COUNT)
        self._advertised_count = int(frame_count) if frame_count and frame_count > 0 else 0

    @property
    def truncated(self) -> bool:
        return self._truncated

    @property
    def frames_read(self) -> int:
        return self._frames_read

    def nominal_frame_rate(self) -> float:
        fps = float(self._capture.get(cv2.CAP_PROP_FPS) or 0.0)
        if not math.isfinite(fps) or fps <= 0:
            return 0.0
        return fps

    def read_next_frame(self) -> Optional[Frame]:
        if self._closed or self._exhausted:
            return None

        try:
            ok, image = self._capture.read()
        except cv2.error as e:
            logger.warning(
                f"Decode failed after {self._frames_read} frames of {self._path}: {e}"
            )
            self._exhausted = True
            self._truncated = True
            return None

        if not ok or image is None:
            self._exhausted = True
            missing = self._advertised_count - self._frames_read
            if missing > self._count_tolerance:
                self._truncated = True
                logger.warning(
                    f"Stream {self._path} ended after {self._frames_read} frames, "
                    f"{self._advertised_count} advertised"
                )
            return None

        timestamp_ms = float(self._capture.get(cv2.CAP_PROP_POS_MSEC))
        if timestamp_ms < self._last_timestamp:
            logger.debug(
                f"Non-monotonic timestamp {timestamp_ms:.3f} at frame "
                f"{self._frames_read}, clamping to {self._last_timestamp:.3f}"
            )
            timestamp_ms = self._last_timestamp
        self._last_timestamp = timestamp_ms

        frame = Frame(index=self._frames_read, timestamp_ms=timestamp_ms, image=image)
        self._frames_read += 1
        return frame

    def close(self) -> None:
        if not self._closed:
            self._capture.release()
            self._closed = True


class VideoCaptureSource:
    """
    Frame source decoding video containers with OpenCV.

    Truncation against CAP_PROP_FRAME_COUNT is a heuristic: many containers
    only estimate the count and variable-frame-rate files often get it
    wrong, so a clean file can end short of it. ``count_tolerance`` sets how
    many missing frames are accepted before the stream is flagged truncated.
    A decode error (``cv2.error``) always flags truncation.

    Example:
        source = VideoCaptureSource()
        with source.open_stream("capture.mp4") as stream:
            for frame in stream:
                ...
    """

    def __init__(self, count_tolerance: int = 2) -> None:
        if count_tolerance < 0:
            raise ValueError(f"count_tolerance must be >= 0, got {count_tolerance}")
        self.count_tolerance = count_tolerance

    def open_stream(self, path: str) -> VideoCaptureStream:
        capture = cv2.VideoCapture(str(path))
        if not capture.isOpened():
            capture.release()
            raise StreamOpenError(f"Failed to open video {path}")

        logger.debug(f"Opened {path}")
        return VideoCaptureStream(capture, str(path), self.count_tolerance)


# =============================================================================
# In-Memory Source
# =============================================================================

class InMemoryStream(_StreamBase):
    """Stream over a pre-built frame list."""

    def __init__(
        self,
        frames: Sequence[Frame],
        frame_rate: float,
        fail_after: Optional[int] = None,
    ) -> None:
        self._frames = frames
        self._frame_rate = frame_rate
        self._fail_after = fail_after
        self._position: int = 0
        self._truncated: bool = False
        self._closed: bool = False

    @property
    def truncated(self) -> bool:
        return self._truncated

    def nominal_frame_rate(self) -> float:
        return self._frame_rate

    def read_next_frame(self) -> Optional[Frame]:
        if self._closed or self._position >= len(self._frames):
            return None
        if self._fail_after is not None and self._position >= self._fail_after:
            if not self._truncated:
                logger.warning(f"Simulated read failure after {self._position} frames")
            self._truncated = True
            return None

        frame = self._frames[self._position]
        self._position += 1
        return frame

    def close(self) -> None:
        self._closed = True


class InMemoryFrameSource:
    """
    Frame source serving frames decoded elsewhere.

    Every open_stream() call replays the same sequence from the start.

    Attributes:
        frame_rate: Nominal frame rate reported by streams
        open_count: Number of streams opened so far
    """

    def __init__(
        self,
        frames: Sequence[Frame],
        frame_rate: float = 30.0,
        fail_on_open: bool = False,
        fail_after: Optional[int] = None,
    ) -> None:
        timestamps = [f.timestamp_ms for f in frames]
        if any(b < a for a, b in zip(timestamps, timestamps[1:])):
            raise ValueError("frame timestamps must be non-decreasing")

        self._frames: List[Frame] = list(frames)
        self.frame_rate = frame_rate
        self.fail_on_open = fail_on_open
        self.fail_after = fail_after
        self.open_count: int = 0

    @classmethod
    def from_images(
        cls,
        images: Sequence[np.ndarray],
        frame_rate: float = 30.0,
        timestamps_ms: Optional[Sequence[float]] = None,
        **kwargs,
    ) -> "InMemoryFrameSource":
        """
        Build a source from raw images.

        Timestamps default to a perfectly regular ``1000 / frame_rate`` grid.
        """
        if timestamps_ms is None:
            interval = 1000.0 / frame_rate
            timestamps_ms = [i * interval for i in range(len(images))]
        if len(timestamps_ms) != len(images):
            raise ValueError(
                f"Got {len(images)} images but {len(timestamps_ms)} timestamps"
            )

        frames = [
            Frame(index=i, timestamp_ms=float(ts), image=image)
            for i, (image, ts) in enumerate(zip(images, timestamps_ms))
        ]
        return cls(frames, frame_rate=frame_rate, **kwargs)

    def __len__(self) -> int:
        return len(self._frames)

    def open_stream(self, path: str) -> InMemoryStream:
        if self.fail_on_open:
            raise StreamOpenError(f"Failed to open video {path}")
        self.open_count += 1
        return InMemoryStream(self._frames, self.frame_rate, self.fail_after)
