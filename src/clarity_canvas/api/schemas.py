"""Request / response bodies for the HTTP API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from clarity_canvas.commit import CommitResult
from clarity_canvas.interfaces.extraction import Refinement
from clarity_canvas.models import InputType, Profile, ProfileScores, ScoreDelta
from clarity_canvas.review import BulkApproval, Recommendation, ReviewSession


class CreateProfileRequest(BaseModel):
    name: str = ""


class CreateProfileResponse(BaseModel):
    profile: Profile
    created: bool


class ProfileListResponse(BaseModel):
    profile_ids: list[str] = Field(default_factory=list)


class ExtractRequest(BaseModel):
    """Raw captured text to run through the extractor."""

    text: str = Field(min_length=1)
    scope: str | None = None
    input_type: InputType = InputType.TEXT


class OpenSessionRequest(BaseModel):
    """Chunks produced elsewhere; validated the same way as extractor output."""

    chunks: list[dict[str, Any]]
    input_type: InputType = InputType.TEXT


class RefineRequest(BaseModel):
    """Either explicit replacement content or an instruction for the refiner."""

    content: str | None = None
    summary: str = ""
    instruction: str | None = None


class RecommendationResponse(BaseModel):
    id: str
    status: str
    section: str
    subsection: str
    field: str
    content: str
    summary: str
    confidence: float
    insights: list[str] = Field(default_factory=list)
    refined: bool = False

    @classmethod
    def from_recommendation(cls, rec: Recommendation) -> RecommendationResponse:
        return cls(
            id=rec.id,
            status=rec.status.value,
            section=rec.chunk.target_section,
            subsection=rec.chunk.target_subsection,
            field=rec.chunk.target_field,
            content=rec.effective_content,
            summary=rec.effective_summary,
            confidence=rec.confidence,
            insights=rec.chunk.insights,
            refined=rec.refined_content is not None,
        )


class RejectedChunkResponse(BaseModel):
    reason: str


class SessionResponse(BaseModel):
    id: str
    profile_id: str
    counts: dict[str, int]
    sections: dict[str, list[RecommendationResponse]]
    rejected: list[RejectedChunkResponse] = Field(default_factory=list)
    low_confidence_threshold: float

    @classmethod
    def from_session(cls, session: ReviewSession) -> SessionResponse:
        return cls(
            id=session.id,
            profile_id=session.profile_id,
            counts=session.counts(),
            sections={
                section: [RecommendationResponse.from_recommendation(r) for r in recs]
                for section, recs in session.grouped_by_section().items()
            },
            rejected=[RejectedChunkResponse(reason=r.reason) for r in session.rejected_chunks],
            low_confidence_threshold=session.low_confidence_threshold,
        )


class BulkApprovalResponse(BaseModel):
    approved: list[str] = Field(default_factory=list)
    gated: bool = False
    low_confidence_ids: list[str] = Field(default_factory=list)
    threshold: float | None = None

    @classmethod
    def from_result(cls, result: BulkApproval) -> BulkApprovalResponse:
        if result.gate is None:
            return cls(approved=result.approved)
        return cls(
            gated=True,
            low_confidence_ids=list(result.gate.recommendation_ids),
            threshold=result.gate.threshold,
        )


class DroppedResponse(BaseModel):
    recommendation_id: str
    path: str
    reason: str


class CommitResponse(BaseModel):
    profile: Profile
    scores: ProfileScores
    previous_scores: ProfileScores
    saved_count: int
    dropped: list[DroppedResponse] = Field(default_factory=list)
    delta: ScoreDelta

    @classmethod
    def from_result(cls, result: CommitResult) -> CommitResponse:
        return cls(
            profile=result.profile,
            scores=result.scores,
            previous_scores=result.previous_scores,
            saved_count=result.saved_count,
            dropped=[
                DroppedResponse(recommendation_id=d.recommendation_id, path=d.path, reason=d.reason)
                for d in result.dropped
            ],
            delta=result.delta,
        )


# ── Field edits ─────────────────────────────────────────────────────


class FieldRefineRequest(BaseModel):
    instruction: str = Field(min_length=1, max_length=500)


class FieldRefinementResponse(BaseModel):
    """A proposed rewrite of a synthesized field. Not saved until applied."""

    refined_content: str
    refined_summary: str
    change_summary: str = ""

    @classmethod
    def from_refinement(cls, refinement: Refinement) -> FieldRefinementResponse:
        return cls(
            refined_content=refinement.refined_content,
            refined_summary=refinement.refined_summary,
            change_summary=refinement.change_summary,
        )


class FieldUpdateRequest(BaseModel):
    full_context: str | None = Field(default=None, max_length=400)
    summary: str | None = Field(default=None, max_length=150)
