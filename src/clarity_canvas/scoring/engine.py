"""Completeness scoring for profiles.

Scores are pure functions of a profile snapshot and are never persisted.

- Field: 0 when there is no synthesized context. Otherwise a substance base
  from the word count of ``full_context`` (``100 * words / target_words``,
  capped at 100), plus a bonus when several sources contributed, scaled by
  ``0.5 + 0.5 * mean_confidence`` when sources carry a confidence, then
  clamped to ``[floor, 100]``.
- Subsection: rounded mean of its field scores.
- Section: rounded mean of its subsection scores.
- Overall: rounded mean of section scores (sections weigh equally).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from clarity_canvas.models import Profile, ProfileField, ProfileScores, Section, Subsection

if TYPE_CHECKING:
    from clarity_canvas.core.config import ScoringConfig


@dataclass(frozen=True)
class ScoringPolicy:
    """Tunable field-scoring parameters."""

    floor: int = 20
    target_words: int = 50
    multi_source_bonus: int = 10
    weak_threshold: int = 50

    @classmethod
    def from_config(cls, config: ScoringConfig) -> ScoringPolicy:
        return cls(
            floor=config.floor,
            target_words=config.target_words,
            multi_source_bonus=config.multi_source_bonus,
            weak_threshold=config.weak_threshold,
        )


DEFAULT_POLICY = ScoringPolicy()


class ScoreBucket(str, Enum):
    """Severity classification shared by the UI and the tests."""

    STRONG = "strong"
    DEVELOPING = "developing"
    WEAK = "weak"
    EMPTY = "empty"


def bucket(score: int) -> ScoreBucket:
    if score >= 70:
        return ScoreBucket.STRONG
    if score >= 40:
        return ScoreBucket.DEVELOPING
    if score > 0:
        return ScoreBucket.WEAK
    return ScoreBucket.EMPTY


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _mean(values: list[int]) -> int:
    if not values:
        return 0
    return _round_half_up(sum(values) / len(values))


# ── Per-level scores ─────────────────────────────────────────────────


def field_score(field: ProfileField, policy: ScoringPolicy = DEFAULT_POLICY) -> int:
    if field.is_empty or not field.sources:
        return 0

    words = len((field.full_context or "").split())
    base = min(100.0, 100.0 * words / policy.target_words)

    if len(field.sources) > 1:
        base += policy.multi_source_bonus

    confidences = [s.confidence for s in field.sources if s.confidence is not None]
    if confidences:
        mean_confidence = sum(confidences) / len(confidences)
        base *= 0.5 + 0.5 * mean_confidence

    return max(policy.floor, min(100, _round_half_up(base)))


def subsection_score(subsection: Subsection, policy: ScoringPolicy = DEFAULT_POLICY) -> int:
    return _mean([field_score(f, policy) for f in subsection.fields])


def section_score(section: Section, policy: ScoringPolicy = DEFAULT_POLICY) -> int:
    return _mean([subsection_score(s, policy) for s in section.subsections])


def overall_score(profile: Profile, policy: ScoringPolicy = DEFAULT_POLICY) -> int:
    return _mean([section_score(s, policy) for s in profile.sections])


def calculate_all_scores(profile: Profile, policy: ScoringPolicy = DEFAULT_POLICY) -> ProfileScores:
    """Score every section and the profile as a whole."""
    sections = {s.key: section_score(s, policy) for s in profile.sections}
    return ProfileScores(overall=_mean(list(sections.values())), sections=sections)


# ── Completion helpers ───────────────────────────────────────────────


@dataclass(frozen=True)
class WeakField:
    section_key: str
    section_name: str
    subsection_key: str
    subsection_name: str
    field_key: str
    field_name: str
    score: int


@dataclass(frozen=True)
class Completion:
    completed: int
    total: int

    @property
    def percentage(self) -> int:
        return _round_half_up(100 * self.completed / self.total) if self.total else 0


def weak_fields(
    profile: Profile,
    threshold: int | None = None,
    policy: ScoringPolicy = DEFAULT_POLICY,
) -> list[WeakField]:
    """Fields scoring below *threshold*, weakest first."""
    limit = policy.weak_threshold if threshold is None else threshold
    found: list[WeakField] = []
    for section in profile.sections:
        for subsection in section.subsections:
            for field in subsection.fields:
                score = field_score(field, policy)
                if score < limit:
                    found.append(
                        WeakField(
                            section_key=section.key,
                            section_name=section.name,
                            subsection_key=subsection.key,
                            subsection_name=subsection.name,
                            field_key=field.key,
                            field_name=field.name,
                            score=score,
                        )
                    )
    return sorted(found, key=lambda w: w.score)


def subsection_completion(subsection: Subsection, policy: ScoringPolicy = DEFAULT_POLICY) -> Completion:
    completed = sum(1 for f in subsection.fields if field_score(f, policy) >= policy.weak_threshold)
    return Completion(completed=completed, total=len(subsection.fields))


def section_completion(section: Section, policy: ScoringPolicy = DEFAULT_POLICY) -> Completion:
    parts = [subsection_completion(s, policy) for s in section.subsections]
    return Completion(
        completed=sum(p.completed for p in parts),
        total=sum(p.total for p in parts),
    )
