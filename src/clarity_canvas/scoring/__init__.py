"""Scoring engine: derived completeness scores at every profile level."""

from __future__ import annotations

from clarity_canvas.scoring.engine import (
    DEFAULT_POLICY,
    Completion,
    ScoreBucket,
    ScoringPolicy,
    WeakField,
    bucket,
    calculate_all_scores,
    field_score,
    overall_score,
    section_completion,
    section_score,
    subsection_completion,
    subsection_score,
    weak_fields,
)

__all__ = [
    "DEFAULT_POLICY",
    "Completion",
    "ScoreBucket",
    "ScoringPolicy",
    "WeakField",
    "bucket",
    "calculate_all_scores",
    "field_score",
    "overall_score",
    "section_completion",
    "section_score",
    "subsection_completion",
    "subsection_score",
    "weak_fields",
]
