"""Review workflow: chunk intake, the recommendation state machine, session registry."""

from __future__ import annotations

from clarity_canvas.review.intake import accept_chunks, validate_chunk
from clarity_canvas.review.models import (
    COMMITTABLE_STATUSES,
    BulkApproval,
    IntakeResult,
    LowConfidenceGate,
    Recommendation,
    RecommendationStatus,
    RejectedChunk,
)
from clarity_canvas.review.registry import SessionRegistry
from clarity_canvas.review.session import ReviewSession

__all__ = [
    "COMMITTABLE_STATUSES",
    "BulkApproval",
    "IntakeResult",
    "LowConfidenceGate",
    "Recommendation",
    "RecommendationStatus",
    "RejectedChunk",
    "ReviewSession",
    "SessionRegistry",
    "accept_chunks",
    "validate_chunk",
]
