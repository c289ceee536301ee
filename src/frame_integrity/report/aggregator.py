"""
Report Aggregation
==================

Collects per-frame reports in stream order and derives summary counts.

Design Rules:
    - Reports are appended in strictly increasing frame index
    - The summary is recomputed on demand, never cached
"""

import logging
from typing import Dict, List, Sequence, Tuple

from frame_integrity.models.reason_codes import ReasonCode
from frame_integrity.models.report import AnalysisSummary, FrameReport


logger = logging.getLogger(__name__)


class ReportAggregator:
    """
    Ordered collection of frame reports.

    Example:
        aggregator = ReportAggregator()
        aggregator.add(report)
        print(aggregator.summary().drops)
    """

    def __init__(self) -> None:
        self._reports: List[FrameReport] = []

    def __len__(self) -> int:
        return len(self._reports)

    @property
    def reports(self) -> Tuple[FrameReport, ...]:
        """Reports in stream order."""
        return tuple(self._reports)

    def add(self, report: FrameReport) -> None:
        """
        Append a report.

        Raises:
            ValueError: If the report does not follow the last one in index order
        """
        if self._reports and report.index <= self._reports[-1].index:
            raise ValueError(
                f"Report index {report.index} does not follow "
                f"{self._reports[-1].index}"
            )
        self._reports.append(report)

    def summary(self) -> AnalysisSummary:
        """Aggregate counts over the collected reports."""
        return AnalysisSummary.from_reports(self._reports)

    def reason_counts(self) -> Dict[str, int]:
        """Number of reports per reason code (codes that never fired omitted)."""
        counts: Dict[str, int] = {}
        for report in self._reports:
            if report.reason != ReasonCode.NONE:
                counts[report.reason.value] = counts.get(report.reason.value, 0) + 1
        return counts

    def get_metrics(self) -> dict:
        """Get aggregator metrics for observability."""
        summary = self.summary()
        return {
            **summary.model_dump(),
            "reasons": self.reason_counts(),
        }


def summarize(reports: Sequence[FrameReport]) -> AnalysisSummary:
    """Summary counts for any report sequence."""
    return AnalysisSummary.from_reports(reports)
