"""Review-time data models: recommendations, gate signals, intake results."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from clarity_canvas.models import ExtractionChunk, FieldPath, InputType


class RecommendationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    REFINED = "refined"


COMMITTABLE_STATUSES = frozenset({RecommendationStatus.APPROVED, RecommendationStatus.REFINED})


class Recommendation(BaseModel):
    """A reviewable wrapper around one extraction chunk."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    chunk: ExtractionChunk
    status: RecommendationStatus = RecommendationStatus.PENDING
    refined_content: Optional[str] = None
    refined_summary: Optional[str] = None
    input_type: InputType = InputType.TEXT

    @property
    def effective_content(self) -> str:
        return self.refined_content if self.refined_content is not None else self.chunk.content

    @property
    def effective_summary(self) -> str:
        return self.refined_summary if self.refined_summary is not None else self.chunk.summary

    @property
    def confidence(self) -> float:
        return self.chunk.confidence

    @property
    def path(self) -> FieldPath:
        return self.chunk.path

    @property
    def is_committable(self) -> bool:
        return self.status in COMMITTABLE_STATUSES


@dataclass(frozen=True)
class LowConfidenceGate:
    """Signal that a bulk approval was held back by low-confidence items.

    Not an error: re-issue the bulk approval with ``override=True`` or review
    ``recommendation_ids`` first.
    """

    recommendation_ids: tuple[str, ...]
    threshold: float
    section: str | None = None

    @property
    def count(self) -> int:
        return len(self.recommendation_ids)


@dataclass
class BulkApproval:
    """Outcome of ``approve_all`` / ``approve_section``."""

    approved: list[str] = field(default_factory=list)
    gate: LowConfidenceGate | None = None

    @property
    def gated(self) -> bool:
        return self.gate is not None


@dataclass
class RejectedChunk:
    """A raw extractor item that failed boundary validation."""

    reason: str
    raw: Any = None


@dataclass
class IntakeResult:
    accepted: list[ExtractionChunk] = field(default_factory=list)
    rejected: list[RejectedChunk] = field(default_factory=list)
