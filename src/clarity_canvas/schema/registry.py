"""Typed profile schema built from :data:`PROFILE_STRUCTURE`.

Usage::

    from clarity_canvas.schema import get_schema, build_profile

    schema = get_schema()
    path = schema.resolve("individual", "Background", "career")
    profile = build_profile("user-42", name="Ada")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from clarity_canvas.models import FieldPath, Profile, ProfileField, Section, Subsection
from clarity_canvas.schema.matching import fuzzy_match_key
from clarity_canvas.schema.structure import FIELD_DISPLAY_NAMES, PROFILE_STRUCTURE

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubsectionSpec:
    key: str
    name: str
    order: int
    fields: tuple[str, ...]


@dataclass(frozen=True)
class SectionSpec:
    key: str
    name: str
    order: int
    subsections: tuple[SubsectionSpec, ...] = field(default_factory=tuple)

    def get_subsection(self, key: str) -> SubsectionSpec | None:
        for sub in self.subsections:
            if sub.key == key:
                return sub
        return None


class ProfileSchema:
    """The closed set of section / subsection / field identifiers.

    Every key that enters the core from an untrusted producer is resolved
    here first; the scoring and commit code only ever sees ``FieldPath``
    values this schema produced.
    """

    def __init__(self, sections: list[SectionSpec]) -> None:
        self._sections = {s.key: s for s in sorted(sections, key=lambda s: s.order)}

    @property
    def sections(self) -> list[SectionSpec]:
        return list(self._sections.values())

    def get_section(self, key: str) -> SectionSpec | None:
        return self._sections.get(key)

    def resolve_section(self, section: str) -> str | None:
        """Canonical section key for *section*, or None if it is unknown."""
        return fuzzy_match_key(section, self._sections.keys())

    def has_path(self, path: FieldPath) -> bool:
        section = self._sections.get(path.section)
        if section is None:
            return False
        sub = section.get_subsection(path.subsection)
        return sub is not None and path.field in sub.fields

    def resolve(self, section: str, subsection: str, field_key: str) -> FieldPath | None:
        """Canonicalize a possibly-misspelled target, or None if it is unknown."""
        section_key = fuzzy_match_key(section, self._sections.keys())
        if section_key is None:
            return None
        section_spec = self._sections[section_key]

        subsection_key = fuzzy_match_key(subsection, [s.key for s in section_spec.subsections])
        if subsection_key is None:
            return None
        sub_spec = section_spec.get_subsection(subsection_key)
        if sub_spec is None:
            return None

        matched_field = fuzzy_match_key(field_key, sub_spec.fields)
        if matched_field is None:
            return None
        return FieldPath(section_key, subsection_key, matched_field)

    def sort_key(self, path: FieldPath) -> tuple[int, int, str]:
        """Deterministic ordering key: (section order, subsection order, field key)."""
        section = self._sections[path.section]
        sub = section.get_subsection(path.subsection)
        return (section.order, sub.order if sub else 0, path.field)

    def section_order(self, key: str) -> int:
        section = self._sections.get(key)
        return section.order if section else len(self._sections) + 1

    def field_count(self) -> int:
        return sum(len(sub.fields) for s in self._sections.values() for sub in s.subsections)


def _schema_from_structure() -> ProfileSchema:
    sections: list[SectionSpec] = []
    for section_order, (section_key, (section_name, subsections)) in enumerate(
        PROFILE_STRUCTURE.items(), start=1
    ):
        subs = tuple(
            SubsectionSpec(key=sub_key, name=sub_name, order=sub_order, fields=fields)
            for sub_order, (sub_key, (sub_name, fields)) in enumerate(subsections.items(), start=1)
        )
        sections.append(
            SectionSpec(key=section_key.value, name=section_name, order=section_order, subsections=subs)
        )
    return ProfileSchema(sections)


# ── Module-level singleton ──────────────────────────────────────────

_global_schema: ProfileSchema | None = None


def get_schema() -> ProfileSchema:
    """Return the global profile schema, building it on first call."""
    global _global_schema
    if _global_schema is None:
        _global_schema = _schema_from_structure()
        log.debug("Built profile schema with %d fields", _global_schema.field_count())
    return _global_schema


def build_profile(profile_id: str, name: str = "", schema: ProfileSchema | None = None) -> Profile:
    """Create an empty profile whose shape mirrors the schema."""
    schema = schema or get_schema()
    return Profile(
        id=profile_id,
        name=name,
        sections=[
            Section(
                key=section.key,
                name=section.name,
                order=section.order,
                subsections=[
                    Subsection(
                        key=sub.key,
                        name=sub.name,
                        order=sub.order,
                        fields=[
                            ProfileField(key=key, name=FIELD_DISPLAY_NAMES.get(key, key))
                            for key in sub.fields
                        ],
                    )
                    for sub in section.subsections
                ],
            )
            for section in schema.sections
        ],
    )
