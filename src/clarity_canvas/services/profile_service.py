"""Profile lifecycle: create, list, view with derived scores, edit fields, delete."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable

from pydantic import BaseModel, Field

from clarity_canvas.commit import ProfileLocks
from clarity_canvas.exceptions import CollaboratorNotConfigured, ProfileNotFound, UnknownField
from clarity_canvas.interfaces.extraction import IRefiner, Refinement
from clarity_canvas.interfaces.repository import IProfileRepository
from clarity_canvas.models import (
    FieldPath,
    InputType,
    Profile,
    ProfileField,
    ProfileScores,
    Source,
    utcnow,
)
from clarity_canvas.schema import ProfileSchema, build_profile, get_schema
from clarity_canvas.scoring import (
    DEFAULT_POLICY,
    ScoringPolicy,
    bucket,
    calculate_all_scores,
    field_score,
    section_completion,
    weak_fields,
)
from clarity_canvas.synthesis import SynthesisEngine, format_relative_time, was_synthesized_recently
from clarity_canvas.synthesis.freshness import DEFAULT_FRESHNESS_WINDOW

log = logging.getLogger(__name__)


class SourceView(BaseModel):
    id: str
    snippet: str | None = None
    content: str
    input_type: InputType
    captured_at: datetime
    confidence: float | None = None

    @classmethod
    def from_source(cls, source: Source) -> SourceView:
        return cls(
            id=source.id,
            snippet=source.source_snippet,
            content=source.raw_content,
            input_type=source.input_type,
            captured_at=source.captured_at,
            confidence=source.confidence,
        )


class FieldView(BaseModel):
    path: str
    name: str
    summary: str | None = None
    full_context: str | None = None
    score: int
    bucket: str
    source_count: int = 0
    synthesis_version: int = 0
    last_synthesized: str = "Never"
    recently_synthesized: bool = False
    sources: list[SourceView] = Field(default_factory=list)


class SectionView(BaseModel):
    key: str
    name: str
    score: int
    bucket: str
    completed_fields: int
    total_fields: int
    completion_percentage: int
    fields: list[FieldView] = Field(default_factory=list)


class WeakFieldView(BaseModel):
    path: str
    name: str
    score: int


class ProfileView(BaseModel):
    """Read model: the stored profile plus every derived score."""

    profile_id: str
    name: str
    overall: int
    overall_bucket: str
    scores: ProfileScores
    sections: list[SectionView] = Field(default_factory=list)
    weak_fields: list[WeakFieldView] = Field(default_factory=list)


class ProfileService:
    def __init__(
        self,
        repository: IProfileRepository,
        engine: SynthesisEngine,
        *,
        locks: ProfileLocks | None = None,
        policy: ScoringPolicy = DEFAULT_POLICY,
        schema: ProfileSchema | None = None,
        freshness_window: timedelta = DEFAULT_FRESHNESS_WINDOW,
        refiner: IRefiner | None = None,
        summary_max_chars: int = 150,
        context_max_chars: int = 400,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._repository = repository
        self._engine = engine
        self._locks = locks or ProfileLocks()
        self._policy = policy
        self._schema = schema or get_schema()
        self._freshness_window = freshness_window
        self._refiner = refiner
        self._summary_max_chars = summary_max_chars
        self._context_max_chars = context_max_chars
        self._clock = clock

    # ── Lifecycle ───────────────────────────────────────────────────

    def init_profile(self, profile_id: str, name: str = "") -> tuple[Profile, bool]:
        """Create an empty profile unless one exists. Returns ``(profile, created)``."""
        if self._repository.exists(profile_id):
            return self._repository.load_profile(profile_id), False
        profile = build_profile(profile_id, name=name, schema=self._schema)
        self._repository.save_profile(profile)
        log.info("Created profile %s", profile_id)
        return profile, True

    def get_profile(self, profile_id: str) -> Profile:
        return self._repository.load_profile(profile_id)

    def list_profiles(self) -> list[str]:
        return self._repository.list_profiles()

    async def delete_profile(self, profile_id: str) -> None:
        async with self._locks.hold(profile_id):
            if not self._repository.exists(profile_id):
                raise ProfileNotFound(f"Profile {profile_id} not found")
            self._repository.delete_profile(profile_id)
        log.info("Deleted profile %s", profile_id)

    # ── Read models ─────────────────────────────────────────────────

    def view(self, profile_id: str, *, now: datetime | None = None) -> ProfileView:
        return self.build_view(self._repository.load_profile(profile_id), now=now)

    def build_view(self, profile: Profile, *, now: datetime | None = None) -> ProfileView:
        now = now or utcnow()
        scores = calculate_all_scores(profile, self._policy)

        sections: list[SectionView] = []
        for section in profile.sections:
            completion = section_completion(section, self._policy)
            fields = [
                self._field_view(FieldPath(section.key, sub.key, f.key), f, now)
                for sub in section.subsections
                for f in sub.fields
            ]
            section_total = scores.sections.get(section.key, 0)
            sections.append(
                SectionView(
                    key=section.key,
                    name=section.name,
                    score=section_total,
                    bucket=bucket(section_total).value,
                    completed_fields=completion.completed,
                    total_fields=completion.total,
                    completion_percentage=completion.percentage,
                    fields=fields,
                )
            )

        return ProfileView(
            profile_id=profile.id,
            name=profile.name,
            overall=scores.overall,
            overall_bucket=bucket(scores.overall).value,
            scores=scores,
            sections=sections,
            weak_fields=[
                WeakFieldView(
                    path=f"{w.section_key}.{w.subsection_key}.{w.field_key}",
                    name=w.field_name,
                    score=w.score,
                )
                for w in weak_fields(profile, policy=self._policy)
            ],
        )

    def list_sources(self, profile_id: str, path: FieldPath) -> list[SourceView]:
        """Sources behind one field, most recently captured first."""
        field = self._field(self._repository.load_profile(profile_id), path)
        return [SourceView.from_source(s) for s in reversed(field.sources)]

    def _field_view(self, path: FieldPath, field: ProfileField, now: datetime) -> FieldView:
        score = field_score(field, self._policy)
        return FieldView(
            path=str(path),
            name=field.name,
            summary=field.summary,
            full_context=field.full_context,
            score=score,
            bucket=bucket(score).value,
            source_count=len(field.sources),
            synthesis_version=field.synthesis_version,
            last_synthesized=format_relative_time(field.last_synthesized_at, now=now),
            recently_synthesized=was_synthesized_recently(
                field.last_synthesized_at, now=now, window=self._freshness_window
            ),
            sources=[SourceView.from_source(s) for s in reversed(field.sources)],
        )

    # ── Field edits ─────────────────────────────────────────────────
    # Every write holds the commit lock, so an edit and a commit on the same
    # profile never overlap.

    async def remove_source(self, profile_id: str, path: FieldPath, source_id: str) -> Profile:
        """Delete one source from a field and re-synthesize what remains."""
        async with self._locks.hold(profile_id):
            profile = self._repository.load_profile(profile_id)
            updated = await self._engine.remove_source(self._field(profile, path), source_id)
            working = self._save_field(profile, path, updated)
        log.info("Removed source %s from %s on profile %s", source_id, path, profile_id)
        return working

    async def refresh_field(self, profile_id: str, path: FieldPath) -> Profile:
        """Re-synthesize a field from its current sources."""
        async with self._locks.hold(profile_id):
            profile = self._repository.load_profile(profile_id)
            updated = await self._engine.resynthesize(self._field(profile, path))
            working = self._save_field(profile, path, updated)
        log.info(
            "Refreshed %s on profile %s (version %d)", path, profile_id, updated.synthesis_version
        )
        return working

    async def preview_refinement(self, profile_id: str, path: FieldPath, instruction: str) -> Refinement:
        """Ask the refiner to rewrite a synthesized field. Nothing is saved."""
        if self._refiner is None:
            raise CollaboratorNotConfigured("No refiner configured")
        if not instruction.strip():
            raise ValueError("Refinement instruction must not be empty")

        field = self._field(self._repository.load_profile(profile_id), path)
        if field.is_empty:
            raise ValueError(f"Field {path} has no synthesized content to refine")

        refinement = await self._refiner.refine(
            field.full_context or "", field.summary or "", instruction
        )
        return Refinement(
            refined_content=refinement.refined_content[: self._context_max_chars],
            refined_summary=refinement.refined_summary[: self._summary_max_chars],
            change_summary=refinement.change_summary,
        )

    async def apply_refinement(
        self,
        profile_id: str,
        path: FieldPath,
        *,
        full_context: str | None = None,
        summary: str | None = None,
    ) -> Profile:
        """Commit an accepted refinement; counts as a new synthesis of the field."""
        if full_context is None and summary is None:
            raise ValueError("Provide full_context, summary or both")
        if full_context is not None and not full_context.strip():
            raise ValueError("full_context must not be empty")

        async with self._locks.hold(profile_id):
            profile = self._repository.load_profile(profile_id)
            current = self._field(profile, path)
            update: dict[str, object] = {
                "synthesis_version": current.synthesis_version + 1,
                "last_synthesized_at": self._clock(),
            }
            if full_context is not None:
                update["full_context"] = full_context.strip()[: self._context_max_chars]
            if summary is not None:
                update["summary"] = summary.strip()[: self._summary_max_chars]
            working = self._save_field(profile, path, current.model_copy(update=update))
        log.info("Applied refinement to %s on profile %s", path, profile_id)
        return working

    def _field(self, profile: Profile, path: FieldPath) -> ProfileField:
        field = profile.get_field(path)
        if field is None:
            raise UnknownField(f"Profile {profile.id} has no field {path}")
        return field

    def _save_field(self, profile: Profile, path: FieldPath, field: ProfileField) -> Profile:
        working = profile.model_copy(deep=True)
        working.replace_field(path, field)
        self._repository.save_profile(working)
        return working
