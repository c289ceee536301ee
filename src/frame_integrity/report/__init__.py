"""
Report Module
=============

Ordered per-frame report collection and summary derivation.
"""

from frame_integrity.report.aggregator import ReportAggregator, summarize

__all__ = [
    "ReportAggregator",
    "summarize",
]
