"""Recommendation review state machine.

Legal transitions::

    pending  --approve--> approved
    pending  --reject-->  rejected
    pending  --refine-->  refined
    approved/refined/rejected --undo--> pending   (clears any refinement)

Anything else raises :class:`InvalidTransition` without touching the
recommendation.  A session lives only in memory; abandoning it has no
persisted side effects.
"""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from typing import TYPE_CHECKING, Iterable

from clarity_canvas.exceptions import InvalidTransition, UnknownRecommendation, UnknownSection
from clarity_canvas.models import ExtractionChunk, InputType
from clarity_canvas.review.models import (
    BulkApproval,
    LowConfidenceGate,
    Recommendation,
    RecommendationStatus,
    RejectedChunk,
)
from clarity_canvas.schema import ProfileSchema, get_schema

if TYPE_CHECKING:
    from clarity_canvas.interfaces.extraction import IRefiner

log = logging.getLogger(__name__)

_S = RecommendationStatus

_TRANSITIONS: dict[str, dict[RecommendationStatus, RecommendationStatus]] = {
    "approve": {_S.PENDING: _S.APPROVED},
    "reject": {_S.PENDING: _S.REJECTED},
    "refine": {_S.PENDING: _S.REFINED},
    "undo": {_S.APPROVED: _S.PENDING, _S.REFINED: _S.PENDING, _S.REJECTED: _S.PENDING},
}


class ReviewSession:
    """In-memory triage of one extraction batch for one profile."""

    def __init__(
        self,
        profile_id: str,
        recommendations: Iterable[Recommendation] = (),
        *,
        session_id: str | None = None,
        low_confidence_threshold: float = 0.7,
        rejected_chunks: Iterable[RejectedChunk] = (),
        schema: ProfileSchema | None = None,
    ) -> None:
        self.id = session_id or uuid.uuid4().hex
        self.profile_id = profile_id
        self.low_confidence_threshold = low_confidence_threshold
        self.rejected_chunks = list(rejected_chunks)
        self._schema = schema or get_schema()
        self._items: dict[str, Recommendation] = {}
        for rec in recommendations:
            if rec.id in self._items:
                raise ValueError(f"Duplicate recommendation id {rec.id}")
            self._items[rec.id] = rec

    @classmethod
    def from_chunks(
        cls,
        profile_id: str,
        chunks: Iterable[ExtractionChunk],
        *,
        input_type: InputType = InputType.TEXT,
        **kwargs: object,
    ) -> ReviewSession:
        """Wrap already-validated chunks as pending recommendations."""
        recs = [Recommendation(chunk=chunk, input_type=input_type) for chunk in chunks]
        return cls(profile_id, recs, **kwargs)  # type: ignore[arg-type]

    # ── Lookup ──────────────────────────────────────────────────────

    @property
    def recommendations(self) -> list[Recommendation]:
        return list(self._items.values())

    def get(self, recommendation_id: str) -> Recommendation:
        try:
            return self._items[recommendation_id]
        except KeyError:
            raise UnknownRecommendation(
                f"Recommendation {recommendation_id} not found in session {self.id}"
            ) from None

    # ── Single transitions ──────────────────────────────────────────

    def approve(self, recommendation_id: str) -> Recommendation:
        return self._transition(recommendation_id, "approve")

    def reject(self, recommendation_id: str) -> Recommendation:
        return self._transition(recommendation_id, "reject")

    def undo(self, recommendation_id: str) -> Recommendation:
        """Back to the original unreviewed state: pending, refinement cleared."""
        rec = self._transition(recommendation_id, "undo")
        rec.refined_content = None
        rec.refined_summary = None
        return rec

    def refine(self, recommendation_id: str, content: str, summary: str) -> Recommendation:
        if not content.strip():
            raise ValueError("Refined content must not be empty")
        rec = self._transition(recommendation_id, "refine")
        rec.refined_content = content
        rec.refined_summary = summary
        return rec

    async def refine_with(
        self,
        recommendation_id: str,
        refiner: IRefiner,
        instruction: str,
    ) -> Recommendation:
        """Ask the refiner collaborator for new content, then apply ``refine``."""
        rec = self._check(recommendation_id, "refine")
        refinement = await refiner.refine(rec.effective_content, rec.effective_summary, instruction)
        return self.refine(recommendation_id, refinement.refined_content, refinement.refined_summary)

    def _check(self, recommendation_id: str, action: str) -> Recommendation:
        rec = self.get(recommendation_id)
        if rec.status not in _TRANSITIONS[action]:
            raise InvalidTransition(recommendation_id, rec.status.value, action)
        return rec

    def _transition(self, recommendation_id: str, action: str) -> Recommendation:
        rec = self._check(recommendation_id, action)
        rec.status = _TRANSITIONS[action][rec.status]
        log.debug("Recommendation %s: %s -> %s", recommendation_id, action, rec.status.value)
        return rec

    # ── Bulk approval ───────────────────────────────────────────────

    def low_confidence(self, section: str | None = None) -> list[Recommendation]:
        """Pending recommendations below the confidence threshold."""
        section = self._section_key(section)
        return [
            r for r in self._pending(section)
            if r.confidence < self.low_confidence_threshold
        ]

    def approve_all(self, *, override: bool = False) -> BulkApproval:
        return self._approve_bulk(None, override)

    def approve_section(self, section_key: str, *, override: bool = False) -> BulkApproval:
        return self._approve_bulk(section_key, override)

    def _approve_bulk(self, section: str | None, override: bool) -> BulkApproval:
        section = self._section_key(section)
        if not override:
            low = self.low_confidence(section)
            if low:
                log.info(
                    "Bulk approval held: %d low-confidence item(s) in session %s%s",
                    len(low), self.id, f" section {section}" if section else "",
                )
                return BulkApproval(
                    gate=LowConfidenceGate(
                        recommendation_ids=tuple(r.id for r in low),
                        threshold=self.low_confidence_threshold,
                        section=section,
                    )
                )

        approved = []
        for rec in self._pending(section):
            rec.status = RecommendationStatus.APPROVED
            approved.append(rec.id)
        return BulkApproval(approved=approved)

    def _section_key(self, section: str | None) -> str | None:
        if section is None:
            return None
        key = self._schema.resolve_section(section)
        if key is None:
            raise UnknownSection(f"Unknown section {section!r}")
        return key

    def _pending(self, section: str | None) -> list[Recommendation]:
        return [
            r for r in self._items.values()
            if r.status == RecommendationStatus.PENDING
            and (section is None or r.chunk.target_section == section)
        ]

    # ── Derived views ───────────────────────────────────────────────

    def grouped_by_section(self) -> dict[str, list[Recommendation]]:
        """Partition by target section, sections in profile order."""
        groups: dict[str, list[Recommendation]] = {}
        for rec in self._items.values():
            groups.setdefault(rec.chunk.target_section, []).append(rec)
        return dict(sorted(groups.items(), key=lambda kv: self._schema.section_order(kv[0])))

    def committable(self) -> list[Recommendation]:
        return [r for r in self._items.values() if r.is_committable]

    def counts(self) -> dict[str, int]:
        tally = Counter(r.status.value for r in self._items.values())
        return {status.value: tally.get(status.value, 0) for status in RecommendationStatus}
