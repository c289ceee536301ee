"""
Classifier Module
=================

Frame classification rules, the per-video session and the run graph:
    - rules.py: Fixed-precedence rule chains and selectable policies
    - session.py: ClassificationSession (feed / finish lifecycle)
    - graph.py: LangGraph workflow calibrate → classify → finalize

Key Design Decisions:
    - LangGraph is used for STRUCTURE, not reasoning
    - All decisions are deterministic and carry a reason code
    - Every threshold comes from configuration
"""

from frame_integrity.classifier.rules import (
    MotionRulePolicy,
    RuleDecision,
    StatisticsRulePolicy,
    classify_by_motion,
    classify_by_statistics,
    create_policy,
)
from frame_integrity.classifier.session import ClassificationSession
from frame_integrity.classifier.graph import AnalysisGraph, create_analysis_graph

__all__ = [
    "RuleDecision",
    "classify_by_statistics",
    "classify_by_motion",
    "StatisticsRulePolicy",
    "MotionRulePolicy",
    "create_policy",
    "ClassificationSession",
    "AnalysisGraph",
    "create_analysis_graph",
]
