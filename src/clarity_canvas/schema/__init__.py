"""Profile schema: the closed set of section / subsection / field keys."""

from __future__ import annotations

from clarity_canvas.schema.matching import fuzzy_match_key, normalize_key
from clarity_canvas.schema.registry import (
    ProfileSchema,
    SectionSpec,
    SubsectionSpec,
    build_profile,
    get_schema,
)
from clarity_canvas.schema.structure import FIELD_DISPLAY_NAMES, PROFILE_STRUCTURE, SectionKey

__all__ = [
    "FIELD_DISPLAY_NAMES",
    "PROFILE_STRUCTURE",
    "ProfileSchema",
    "SectionKey",
    "SectionSpec",
    "SubsectionSpec",
    "build_profile",
    "fuzzy_match_key",
    "get_schema",
    "normalize_key",
]
