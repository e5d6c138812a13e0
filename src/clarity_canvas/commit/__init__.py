"""Commit/apply pipeline."""

from __future__ import annotations

from clarity_canvas.commit.locks import ProfileLocks
from clarity_canvas.commit.pipeline import (
    CommitPipeline,
    CommitResult,
    DroppedRecommendation,
    source_id_for,
)

__all__ = [
    "CommitPipeline",
    "CommitResult",
    "DroppedRecommendation",
    "ProfileLocks",
    "source_id_for",
]
