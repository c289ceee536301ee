"""
Neighborhood Ring
=================

Fixed three-slot arena holding the prev/current/next frames.

Slots are addressed by a rotating index instead of copying pixel data
between buffers: pushing a new frame overwrites the oldest slot, which
releases the frame that was "prev".

Design Rules:
    - Never holds more than three frames
    - Rotation is O(1) and never copies pixels
    - Does NOT process or modify frames
"""

import logging
from typing import Generic, List, Optional, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")

RING_SIZE = 3


class FrameRing(Generic[T]):
    """
    Three-slot ring for the classification neighborhood.

    After each push: prev <- current, current <- next, next <- pushed.

    Example:
        ring = FrameRing()
        for frame in frames:
            ring.push(frame)
            if ring.is_full:
                classify(ring.prev, ring.current, ring.next)
    """

    def __init__(self) -> None:
        self._slots: List[Optional[T]] = [None] * RING_SIZE
        self._next_idx: int = RING_SIZE - 1
        self._count: int = 0

    @property
    def size(self) -> int:
        """Number of occupied slots."""
        return self._count

    @property
    def is_full(self) -> bool:
        """True once prev, current and next are all present."""
        return self._count == RING_SIZE

    @property
    def next(self) -> Optional[T]:
        """Most recently pushed frame."""
        return self._slots[self._next_idx]

    @property
    def current(self) -> Optional[T]:
        """Frame pushed before ``next``."""
        return self._slots[(self._next_idx + 2) % RING_SIZE]

    @property
    def prev(self) -> Optional[T]:
        """Oldest frame in the ring."""
        return self._slots[(self._next_idx + 1) % RING_SIZE]

    def push(self, item: T) -> Optional[T]:
        """
        Rotate the ring and store ``item`` as the new ``next``.

        Returns:
            The evicted oldest frame, or None while the ring is filling.
        """
        self._next_idx = (self._next_idx + 1) % RING_SIZE
        evicted = self._slots[self._next_idx]
        self._slots[self._next_idx] = item
        self._count = min(self._count + 1, RING_SIZE)
        return evicted

    def clear(self) -> None:
        """Release all slots."""
        self._slots = [None] * RING_SIZE
        self._next_idx = RING_SIZE - 1
        self._count = 0
