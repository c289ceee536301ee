"""
Pipeline Tests
==============

Whole-video analysis through the analysis graph and the streaming API.
"""

import pytest


class TestAnalyzeVideo:
    """Tests for analyze_video with in-memory sources."""

    def test_completed_result(self, default_settings, make_source, merge_images):
        from frame_integrity import AnalysisOutcome, analyze_video

        source = make_source(merge_images)
        result = analyze_video("synthetic", settings=default_settings, source=source)

        assert result.outcome == AnalysisOutcome.COMPLETED
        assert result.succeeded
        assert result.frames_read == 5
        assert result.nominal_frame_rate == 30.0
        assert not result.truncated
        assert result.summary.total == 3
        assert result.summary.merges == 1
        assert result.summary.normal == 2

    def test_calibration_and_classification_use_separate_streams(
        self, default_settings, make_source, merge_images
    ):
        from frame_integrity import analyze_video

        source = make_source(merge_images)
        result = analyze_video("synthetic", settings=default_settings, source=source)

        assert source.open_count == 2
        assert result.calibration.samples_used == 0
        assert result.calibration.mu == 0.05

    def test_calibrated_baseline_reported(self, default_settings, make_source, duplicate_images):
        """The duplicated pair is the only still pair in the prefix."""
        from frame_integrity import analyze_video

        result = analyze_video("synthetic", settings=default_settings, source=make_source(duplicate_images))

        assert result.calibration.samples_used == 1
        assert result.calibration.mu == 0.0
        assert result.summary.drops == 1

    def test_open_failure_is_a_result(self, default_settings, make_source, merge_images):
        from frame_integrity import AnalysisOutcome, analyze_video

        source = make_source(merge_images, fail_on_open=True)
        result = analyze_video("synthetic", settings=default_settings, source=source)

        assert result.outcome == AnalysisOutcome.OPEN_FAILED
        assert not result.succeeded
        assert result.reports == []
        assert result.error
        assert result.summary.total == 0

    def test_truncated_stream_keeps_reports(self, default_settings, make_source, alternating_images):
        from frame_integrity import AnalysisOutcome, analyze_video

        source = make_source(alternating_images, fail_after=4)
        result = analyze_video("synthetic", settings=default_settings, source=source)

        assert result.outcome == AnalysisOutcome.COMPLETED
        assert result.truncated
        assert [r.index for r in result.reports] == [1, 2]

    def test_motion_family_recorded(self, motion_settings, make_source, alternating_images):
        from frame_integrity import analyze_video

        result = analyze_video("synthetic", settings=motion_settings, source=make_source(alternating_images))

        assert result.signal_family == "motion"
        assert result.summary.total == 3

    def test_to_dict(self, default_settings, make_source, merge_images):
        from frame_integrity import analyze_video

        data = analyze_video(
            "synthetic", settings=default_settings, source=make_source(merge_images)
        ).to_dict()

        assert data["outcome"] == "COMPLETED"
        assert data["summary"] == {"total": 3, "normal": 2, "drops": 0, "merges": 1}
        assert data["reports"][1]["status"] == "FRAME_MERGE"
        assert data["reports"][1]["reason"] == "SHARPNESS_DIP"


class TestIterReports:
    """Tests for the streaming entry point."""

    def test_matches_analyze_video(self, default_settings, make_source, duplicate_images):
        from frame_integrity import analyze_video, iter_reports

        streamed = list(iter_reports("synthetic", settings=default_settings, source=make_source(duplicate_images)))
        result = analyze_video("synthetic", settings=default_settings, source=make_source(duplicate_images))

        assert streamed == result.reports

    def test_open_failure_yields_nothing(self, default_settings, make_source, merge_images):
        from frame_integrity import iter_reports

        source = make_source(merge_images, fail_on_open=True)

        assert list(iter_reports("synthetic", settings=default_settings, source=source)) == []


class TestVideoFiles:
    """Integration through OpenCV decoding."""

    def test_missing_file(self, default_settings, tmp_path):
        from frame_integrity import AnalysisOutcome, analyze_video

        result = analyze_video(str(tmp_path / "missing.mp4"), settings=default_settings)

        assert result.outcome == AnalysisOutcome.OPEN_FAILED
        assert result.reports == []

    def test_duplicated_frame_in_avi(self, default_settings, written_video):
        """The repeated frame decodes identically and is reported as a drop."""
        from frame_integrity import FrameStatus, analyze_video

        path, images, _ = written_video
        result = analyze_video(path, settings=default_settings)

        assert result.succeeded
        assert result.frames_read == len(images)
        assert len(result.reports) == len(images) - 2

        by_index = {r.index: r for r in result.reports}
        assert by_index[5].status == FrameStatus.FRAME_DROP
        assert sum(1 for r in result.reports if r.status == FrameStatus.FRAME_DROP) == 1


class TestAnalysisGraph:
    """Tests for the graph factory."""

    def test_graph_is_reusable(self, default_settings, make_source, duplicate_images):
        """One graph can analyse several inputs without sharing state."""
        from frame_integrity.classifier import create_analysis_graph

        graph = create_analysis_graph(settings=default_settings, source=make_source(duplicate_images))

        first = graph.run("a")
        second = graph.run("b")

        assert first.reports == second.reports
        assert (first.video_path, second.video_path) == ("a", "b")
