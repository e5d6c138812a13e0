"""Tests for the recommendation review state machine."""

from __future__ import annotations

import pytest

from clarity_canvas.exceptions import InvalidTransition, UnknownRecommendation, UnknownSection, UnknownSession
from clarity_canvas.models import ExtractionChunk
from clarity_canvas.review import (
    Recommendation,
    RecommendationStatus,
    ReviewSession,
    SessionRegistry,
)
from tests.fakes.fake_collaborators import FakeRefiner


def _chunk(section: str = "individual", sub: str = "background", field: str = "career",
           content: str = "Twelve years in payments", confidence: float = 0.9) -> ExtractionChunk:
    return ExtractionChunk(
        target_section=section,
        target_subsection=sub,
        target_field=field,
        content=content,
        summary=content[:20],
        confidence=confidence,
    )


def _session(*chunks: ExtractionChunk, threshold: float = 0.7) -> ReviewSession:
    recs = [Recommendation(id=f"r{i}", chunk=c) for i, c in enumerate(chunks, start=1)]
    return ReviewSession("user-1", recs, low_confidence_threshold=threshold)


class TestSingleTransitions:
    def test_approve(self) -> None:
        session = _session(_chunk())
        assert session.approve("r1").status == RecommendationStatus.APPROVED

    def test_reject(self) -> None:
        session = _session(_chunk())
        assert session.reject("r1").status == RecommendationStatus.REJECTED

    def test_refine_sets_effective_values(self) -> None:
        session = _session(_chunk())
        rec = session.refine("r1", "Twelve years in B2B payments", "B2B payments")
        assert rec.status == RecommendationStatus.REFINED
        assert rec.effective_content == "Twelve years in B2B payments"
        assert rec.effective_summary == "B2B payments"
        assert rec.chunk.content == "Twelve years in payments"

    def test_refine_rejects_empty_content(self) -> None:
        session = _session(_chunk())
        with pytest.raises(ValueError):
            session.refine("r1", "   ", "")
        assert session.get("r1").status == RecommendationStatus.PENDING

    def test_undo_after_approve_restores_pending(self) -> None:
        session = _session(_chunk())
        session.approve("r1")
        rec = session.undo("r1")
        assert rec.status == RecommendationStatus.PENDING
        assert rec.refined_content is None
        assert rec.refined_summary is None

    def test_undo_clears_refinement(self) -> None:
        session = _session(_chunk())
        session.refine("r1", "new", "new")
        rec = session.undo("r1")
        assert rec.status == RecommendationStatus.PENDING
        assert rec.effective_content == "Twelve years in payments"

    def test_undo_after_reject(self) -> None:
        session = _session(_chunk())
        session.reject("r1")
        assert session.undo("r1").status == RecommendationStatus.PENDING

    @pytest.mark.parametrize(
        ("first", "second"),
        [
            ("approve", "approve"),
            ("approve", "reject"),
            ("reject", "approve"),
            ("reject", "reject"),
        ],
    )
    def test_illegal_transition_leaves_state(self, first: str, second: str) -> None:
        session = _session(_chunk())
        getattr(session, first)("r1")
        before = session.get("r1").status
        with pytest.raises(InvalidTransition):
            getattr(session, second)("r1")
        assert session.get("r1").status == before

    def test_undo_pending_is_illegal(self) -> None:
        session = _session(_chunk())
        with pytest.raises(InvalidTransition, match="Cannot undo"):
            session.undo("r1")

    def test_refine_approved_is_illegal(self) -> None:
        session = _session(_chunk())
        session.approve("r1")
        with pytest.raises(InvalidTransition):
            session.refine("r1", "x", "x")
        assert session.get("r1").refined_content is None

    def test_unknown_id(self) -> None:
        session = _session(_chunk())
        with pytest.raises(UnknownRecommendation):
            session.approve("nope")
        with pytest.raises(KeyError):
            session.get("nope")

    def test_duplicate_ids_rejected(self) -> None:
        rec = Recommendation(id="same", chunk=_chunk())
        with pytest.raises(ValueError):
            ReviewSession("user-1", [rec, rec.model_copy()])


class TestRefineWith:
    @pytest.mark.asyncio
    async def test_uses_refiner(self) -> None:
        session = _session(_chunk())
        refiner = FakeRefiner()
        rec = await session.refine_with("r1", refiner, "make it shorter")
        assert rec.status == RecommendationStatus.REFINED
        assert rec.effective_content == "Twelve years in payments (refined)"
        assert refiner.instructions == ["make it shorter"]

    @pytest.mark.asyncio
    async def test_checks_state_before_calling(self) -> None:
        session = _session(_chunk())
        session.reject("r1")
        refiner = FakeRefiner()
        with pytest.raises(InvalidTransition):
            await session.refine_with("r1", refiner, "anything")
        assert refiner.instructions == []


class TestBulkApproval:
    def test_gate_blocks_and_changes_nothing(self) -> None:
        session = _session(_chunk(confidence=0.9), _chunk(field="industry", confidence=0.5))
        result = session.approve_all()
        assert result.gated
        assert result.gate is not None
        assert result.gate.recommendation_ids == ("r2",)
        assert result.gate.threshold == 0.7
        assert result.approved == []
        assert session.counts()["pending"] == 2

    def test_override_approves_everything_pending(self) -> None:
        session = _session(_chunk(confidence=0.9), _chunk(field="industry", confidence=0.5), _chunk(field="expertise"))
        session.reject("r3")
        result = session.approve_all(override=True)
        assert not result.gated
        assert sorted(result.approved) == ["r1", "r2"]
        assert session.get("r3").status == RecommendationStatus.REJECTED

    def test_no_low_confidence_approves_directly(self) -> None:
        session = _session(_chunk(), _chunk(field="industry"))
        result = session.approve_all()
        assert not result.gated
        assert len(result.approved) == 2

    def test_threshold_is_strict(self) -> None:
        session = _session(_chunk(confidence=0.7))
        assert not session.approve_all().gated

    def test_gate_ignores_already_reviewed(self) -> None:
        session = _session(_chunk(confidence=0.9), _chunk(field="industry", confidence=0.3))
        session.reject("r2")
        result = session.approve_all()
        assert not result.gated
        assert result.approved == ["r1"]

    def test_section_scope(self) -> None:
        session = _session(
            _chunk(confidence=0.9),
            _chunk(section="role", sub="responsibilities", field="title", confidence=0.4),
        )
        result = session.approve_section("individual")
        assert result.approved == ["r1"]
        assert session.get("r2").status == RecommendationStatus.PENDING

        gated = session.approve_section("role")
        assert gated.gated
        assert gated.gate is not None and gated.gate.section == "role"

    def test_section_name_canonicalized(self) -> None:
        session = _session(
            _chunk(confidence=0.9),
            _chunk(section="role", sub="responsibilities", field="title", confidence=0.4),
        )
        gated = session.approve_section("Role")
        assert gated.gate is not None and gated.gate.section == "role"
        assert gated.gate.recommendation_ids == ("r2",)

        result = session.approve_section("Individual")
        assert result.approved == ["r1"]
        assert [r.id for r in session.low_confidence(" ROLE ")] == ["r2"]

    def test_unknown_section(self) -> None:
        session = _session(_chunk())
        with pytest.raises(UnknownSection):
            session.approve_section("hobbies")
        with pytest.raises(UnknownSection):
            session.low_confidence("hobbies")
        assert session.get("r1").status == RecommendationStatus.PENDING


class TestDerivedViews:
    def test_grouped_by_section_in_schema_order(self) -> None:
        session = _session(
            _chunk(section="projects", sub="active", field="current_projects"),
            _chunk(),
            _chunk(section="role", sub="responsibilities", field="title"),
        )
        groups = session.grouped_by_section()
        assert list(groups) == ["individual", "role", "projects"]
        assert [r.id for r in groups["individual"]] == ["r2"]

    def test_committable_and_counts(self) -> None:
        session = _session(_chunk(), _chunk(field="industry"), _chunk(field="expertise"), _chunk(field="education"))
        session.approve("r1")
        session.refine("r2", "new", "new")
        session.reject("r3")
        assert [r.id for r in session.committable()] == ["r1", "r2"]
        assert session.counts() == {"pending": 1, "approved": 1, "rejected": 1, "refined": 1}

    def test_from_chunks_generates_ids(self) -> None:
        session = ReviewSession.from_chunks("user-1", [_chunk(), _chunk(field="industry")])
        ids = [r.id for r in session.recommendations]
        assert len(set(ids)) == 2
        assert all(len(i) == 32 for i in ids)


class TestSessionRegistry:
    def test_open_get_discard(self) -> None:
        registry = SessionRegistry()
        session = registry.open(_session(_chunk()))
        assert registry.get(session.id) is session
        registry.discard(session.id)
        with pytest.raises(UnknownSession):
            registry.get(session.id)

    def test_discard_missing_is_noop(self) -> None:
        SessionRegistry().discard("missing")

    def test_for_profile(self) -> None:
        registry = SessionRegistry()
        registry.open(_session(_chunk()))
        registry.open(ReviewSession("other", []))
        assert len(registry.for_profile("user-1")) == 1
        assert len(registry) == 2
