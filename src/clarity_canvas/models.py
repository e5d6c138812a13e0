"""Pydantic data models for clarity-canvas.

The profile hierarchy (``Profile`` → ``Section`` → ``Subsection`` →
``ProfileField`` → ``Source``) is the durable view.  Scores are never stored
on these models; they are always recomputed by :mod:`clarity_canvas.scoring`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Iterator, NamedTuple, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InputType(str, Enum):
    """How a source was captured."""

    VOICE = "voice"
    TEXT = "text"
    FILE = "file"


class FieldPath(NamedTuple):
    """Canonical ``(section, subsection, field)`` address of a profile field."""

    section: str
    subsection: str
    field: str

    def __str__(self) -> str:
        return f"{self.section}.{self.subsection}.{self.field}"


# ── Profile hierarchy ────────────────────────────────────────────────


class Source(BaseModel):
    """One raw contribution to a field."""

    id: str
    raw_content: str
    captured_at: datetime = Field(default_factory=utcnow)
    input_type: InputType = InputType.TEXT
    source_snippet: Optional[str] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class ProfileField(BaseModel):
    """The atomic unit of profile knowledge."""

    key: str
    name: str = ""
    full_context: Optional[str] = None
    summary: Optional[str] = None
    synthesis_version: int = Field(default=0, ge=0)
    last_synthesized_at: Optional[datetime] = None
    sources: list[Source] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.full_context and self.full_context.strip())

    def find_source(self, source_id: str) -> Source | None:
        for source in self.sources:
            if source.id == source_id:
                return source
        return None


class Subsection(BaseModel):
    key: str
    name: str = ""
    order: int = 0
    fields: list[ProfileField] = Field(default_factory=list)


class Section(BaseModel):
    key: str
    name: str = ""
    order: int = 0
    subsections: list[Subsection] = Field(default_factory=list)


class Profile(BaseModel):
    """Root aggregate for one subject (a prospect or a self-profile)."""

    id: str
    name: str = ""
    sections: list[Section] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)

    def get_section(self, key: str) -> Section | None:
        for section in self.sections:
            if section.key == key:
                return section
        return None

    def get_field(self, path: FieldPath) -> ProfileField | None:
        """Return the field at *path*, or None if this profile has no such field."""
        section = self.get_section(path.section)
        if section is None:
            return None
        for subsection in section.subsections:
            if subsection.key != path.subsection:
                continue
            for field in subsection.fields:
                if field.key == path.field:
                    return field
        return None

    def replace_field(self, path: FieldPath, field: ProfileField) -> None:
        """Swap the field at *path* in place. Raises KeyError if absent."""
        section = self.get_section(path.section)
        if section is not None:
            for subsection in section.subsections:
                if subsection.key != path.subsection:
                    continue
                for i, existing in enumerate(subsection.fields):
                    if existing.key == path.field:
                        subsection.fields[i] = field
                        return
        raise KeyError(f"Profile {self.id} has no field {path}")

    def iter_fields(self) -> Iterator[tuple[FieldPath, ProfileField]]:
        """Yield every field with its path, in section/subsection order."""
        for section in self.sections:
            for subsection in section.subsections:
                for field in subsection.fields:
                    yield FieldPath(section.key, subsection.key, field.key), field


# ── Extraction ───────────────────────────────────────────────────────


class ExtractionChunk(BaseModel):
    """An unreviewed candidate fact produced by the extraction collaborator.

    Accepts the camelCase keys the extractor emits (``targetSection``) as
    well as the snake_case attribute names.
    """

    model_config = ConfigDict(populate_by_name=True)

    target_section: str = Field(validation_alias=AliasChoices("target_section", "targetSection"))
    target_subsection: str = Field(
        validation_alias=AliasChoices("target_subsection", "targetSubsection")
    )
    target_field: str = Field(validation_alias=AliasChoices("target_field", "targetField"))
    content: str = Field(min_length=1)
    summary: str = ""
    confidence: float = Field(ge=0.0, le=1.0)
    insights: list[str] = Field(default_factory=list)

    @property
    def path(self) -> FieldPath:
        return FieldPath(self.target_section, self.target_subsection, self.target_field)


# ── Scores ───────────────────────────────────────────────────────────


class ScoreDelta(BaseModel):
    overall: int = 0
    sections: dict[str, int] = Field(default_factory=dict)


class ProfileScores(BaseModel):
    """Derived completeness scores; never persisted."""

    overall: int = Field(default=0, ge=0, le=100)
    sections: dict[str, int] = Field(default_factory=dict)

    def delta(self, previous: ProfileScores) -> ScoreDelta:
        """Change from *previous* to these scores, per section and overall."""
        keys = list(self.sections) + [k for k in previous.sections if k not in self.sections]
        return ScoreDelta(
            overall=self.overall - previous.overall,
            sections={
                key: self.sections.get(key, 0) - previous.sections.get(key, 0)
                for key in keys
            },
        )
