"""
Stream Module
=============

Frame delivery and neighborhood buffering components.

This module provides the ingestion layer for the analyzer:
    - Frame / PreparedFrame: Typed frame data models
    - FrameSource: Collaborator protocol (OpenCV and in-memory implementations)
    - FrameRing: Three-slot prev/current/next arena

Example:
    from frame_integrity.stream import VideoCaptureSource

    source = VideoCaptureSource()
    with source.open_stream("capture.mp4") as stream:
        for frame in stream:
            process(frame)
"""

from frame_integrity.stream.frame import Frame, PreparedFrame
from frame_integrity.stream.ring import FrameRing
from frame_integrity.stream.source import (
    FrameSource,
    FrameStream,
    InMemoryFrameSource,
    StreamOpenError,
    VideoCaptureSource,
    iter_frames,
)


__all__ = [
    "Frame",
    "PreparedFrame",
    "FrameRing",
    "FrameSource",
    "FrameStream",
    "InMemoryFrameSource",
    "StreamOpenError",
    "VideoCaptureSource",
    "iter_frames",
]
