"""Commit pipeline: approved recommendations → synthesized, persisted fields.

One commit is all-or-nothing.  The pipeline works on a deep copy of the
profile, synthesizes each touched field once, then hands the whole profile
to the repository in a single ``save_profile`` call.  Any failure before or
during the save leaves both the stored profile and the caller's snapshot as
they were.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from typing import Iterable

from clarity_canvas.commit.locks import ProfileLocks
from clarity_canvas.exceptions import PersistenceFailure, UnknownField
from clarity_canvas.interfaces.repository import IProfileRepository
from clarity_canvas.models import FieldPath, Profile, ProfileField, ProfileScores, ScoreDelta
from clarity_canvas.review.models import Recommendation
from clarity_canvas.schema import ProfileSchema, get_schema
from clarity_canvas.scoring import DEFAULT_POLICY, ScoringPolicy, calculate_all_scores
from clarity_canvas.synthesis import SourceDraft, SynthesisEngine

log = logging.getLogger(__name__)


def source_id_for(recommendation: Recommendation) -> str:
    """Deterministic source id so a recommendation is never applied twice."""
    digest = hashlib.sha256(
        f"{recommendation.id}\n{recommendation.effective_content}".encode("utf-8")
    ).hexdigest()
    return f"src_{digest[:32]}"


@dataclass
class DroppedRecommendation:
    """An approved recommendation whose target does not exist on the profile."""

    recommendation_id: str
    path: str
    reason: str


@dataclass
class CommitResult:
    profile: Profile
    scores: ProfileScores
    previous_scores: ProfileScores
    saved_count: int
    dropped: list[DroppedRecommendation] = field(default_factory=list)

    @property
    def delta(self) -> ScoreDelta:
        return self.scores.delta(self.previous_scores)


class CommitPipeline:
    """Applies a batch of reviewed recommendations to one profile."""

    def __init__(
        self,
        repository: IProfileRepository,
        engine: SynthesisEngine,
        *,
        locks: ProfileLocks | None = None,
        policy: ScoringPolicy = DEFAULT_POLICY,
        schema: ProfileSchema | None = None,
    ) -> None:
        self._repository = repository
        self._engine = engine
        self._locks = locks or ProfileLocks()
        self._policy = policy
        self._schema = schema or get_schema()

    @property
    def locks(self) -> ProfileLocks:
        return self._locks

    async def commit(
        self,
        recommendations: Iterable[Recommendation],
        profile: Profile,
    ) -> CommitResult:
        """Commit against a profile snapshot the caller already holds."""
        async with self._locks.hold(profile.id):
            return await self._apply(list(recommendations), profile)

    async def commit_profile(
        self,
        profile_id: str,
        recommendations: Iterable[Recommendation],
    ) -> CommitResult:
        """Load the current profile from the repository, then commit."""
        async with self._locks.hold(profile_id):
            profile = self._repository.load_profile(profile_id)
            return await self._apply(list(recommendations), profile)

    async def _apply(self, recommendations: list[Recommendation], profile: Profile) -> CommitResult:
        previous_scores = calculate_all_scores(profile, self._policy)
        working = profile.model_copy(deep=True)

        groups, dropped = self._group(recommendations, working)

        saved_count = 0
        for path in sorted(groups, key=self._sort_key):
            current = working.get_field(path)
            if current is None:
                raise UnknownField(f"Profile {profile.id} has no field {path}")
            drafts = _new_drafts(current, groups[path])
            if not drafts:
                log.debug("Field %s has nothing new to apply", path)
                continue
            updated = await self._engine.synthesize(current, drafts)
            working.replace_field(path, updated)
            saved_count += 1

        if saved_count:
            try:
                self._repository.save_profile(working)
            except PersistenceFailure:
                raise
            except Exception as e:
                raise PersistenceFailure(f"Failed to save profile {profile.id}: {e}") from e

        scores = calculate_all_scores(working, self._policy)
        log.info(
            "Committed %d field(s) to profile %s (overall %d -> %d, %d dropped)",
            saved_count, profile.id, previous_scores.overall, scores.overall, len(dropped),
        )
        return CommitResult(
            profile=working,
            scores=scores,
            previous_scores=previous_scores,
            saved_count=saved_count,
            dropped=dropped,
        )

    def _group(
        self,
        recommendations: list[Recommendation],
        profile: Profile,
    ) -> tuple[dict[FieldPath, list[Recommendation]], list[DroppedRecommendation]]:
        groups: dict[FieldPath, list[Recommendation]] = {}
        dropped: list[DroppedRecommendation] = []

        for rec in recommendations:
            if not rec.is_committable:
                continue
            path = rec.path
            if profile.get_field(path) is None:
                log.warning("Dropping recommendation %s: no field %s on profile %s", rec.id, path, profile.id)
                dropped.append(
                    DroppedRecommendation(
                        recommendation_id=rec.id,
                        path=str(path),
                        reason=f"Profile {profile.id} has no field {path}",
                    )
                )
                continue
            groups.setdefault(path, []).append(rec)

        return groups, dropped

    def _sort_key(self, path: FieldPath) -> tuple[int, int, str]:
        if self._schema.has_path(path):
            return self._schema.sort_key(path)
        return (self._schema.section_order(path.section), 0, path.field)


def _new_drafts(current: ProfileField, recommendations: list[Recommendation]) -> list[SourceDraft]:
    taken = {s.id for s in current.sources}
    drafts: list[SourceDraft] = []
    for rec in recommendations:
        source_id = source_id_for(rec)
        if source_id in taken:
            log.debug("Skipping recommendation %s, already applied as %s", rec.id, source_id)
            continue
        taken.add(source_id)
        drafts.append(
            SourceDraft(
                content=rec.effective_content,
                input_type=rec.input_type,
                snippet=rec.effective_summary or None,
                confidence=rec.confidence,
                source_id=source_id,
            )
        )
    return drafts
