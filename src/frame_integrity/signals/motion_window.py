"""
Sliding Motion Window
=====================

Bounded history of recent motion magnitudes.

The local median over this window is the reference the motion rules
compare against; a median is used so a single spike does not shift
the reference.

Design Rules:
    - Fixed maximum size (drops oldest on overflow)
    - Owned by exactly one classifier; never shared between videos
"""

from collections import deque
from typing import Deque, List, Optional

import numpy as np


class MotionWindow:
    """
    Fixed-capacity FIFO of motion samples.

    Example:
        window = MotionWindow(capacity=7)
        median = window.local_median(fallback=motion)
        window.push(motion)
    """

    def __init__(self, capacity: int = 7) -> None:
        """
        Initialize motion window.

        Args:
            capacity: Maximum samples held. Must be >= 1.
        """
        if capacity < 1:
            raise ValueError("capacity must be >= 1")

        self._capacity = capacity
        self._values: Deque[float] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        """Maximum window size."""
        return self._capacity

    @property
    def size(self) -> int:
        """Current number of samples."""
        return len(self._values)

    @property
    def latest(self) -> Optional[float]:
        """Most recently pushed sample, None when empty."""
        return self._values[-1] if self._values else None

    def __len__(self) -> int:
        return len(self._values)

    def push(self, value: float) -> None:
        """Append a sample, evicting the oldest when full."""
        self._values.append(float(value))

    def local_median(self, fallback: Optional[float] = None) -> float:
        """
        Median of the held samples.

        Args:
            fallback: Returned when the window is empty (normally the
                sample about to be pushed)

        Raises:
            ValueError: If the window is empty and no fallback is given
        """
        if not self._values:
            if fallback is None:
                raise ValueError("local_median of an empty window needs a fallback")
            return float(fallback)
        return float(np.median(np.fromiter(self._values, dtype=np.float64)))

    def values(self) -> List[float]:
        """Samples from oldest to newest."""
        return list(self._values)

    def clear(self) -> None:
        self._values.clear()
