"""Tests for the profile schema, key matching and profile construction."""

from __future__ import annotations

from clarity_canvas.models import FieldPath
from clarity_canvas.schema import (
    PROFILE_STRUCTURE,
    SectionKey,
    build_profile,
    fuzzy_match_key,
    get_schema,
    normalize_key,
)


class TestKeyMatching:
    def test_exact(self) -> None:
        assert fuzzy_match_key("background", ["background", "thinking"]) == "background"

    def test_case_and_hyphen_normalized(self) -> None:
        assert fuzzy_match_key("Decision-Making", ["decision_making", "risk_tolerance"]) == "decision_making"

    def test_containment(self) -> None:
        assert fuzzy_match_key("background_identity", ["background", "thinking"]) == "background"

    def test_no_match(self) -> None:
        assert fuzzy_match_key("hobbies", ["background", "thinking"]) is None

    def test_empty_target(self) -> None:
        assert fuzzy_match_key("   ", ["background"]) is None

    def test_normalize(self) -> None:
        assert normalize_key(" Core Values ") == "core_values"


class TestProfileSchema:
    def test_six_sections_in_order(self) -> None:
        schema = get_schema()
        assert [s.key for s in schema.sections] == [k.value for k in SectionKey]
        assert [s.order for s in schema.sections] == [1, 2, 3, 4, 5, 6]

    def test_field_count_matches_structure(self) -> None:
        expected = sum(
            len(fields) for _, subs in PROFILE_STRUCTURE.values() for _, fields in subs.values()
        )
        assert get_schema().field_count() == expected

    def test_resolve_canonicalizes(self) -> None:
        path = get_schema().resolve("Individual", "Background-Identity", "Career")
        assert path == FieldPath("individual", "background", "career")

    def test_resolve_unknown_field(self) -> None:
        assert get_schema().resolve("individual", "background", "favourite_colour") is None

    def test_resolve_unknown_section(self) -> None:
        assert get_schema().resolve("hobbies", "background", "career") is None

    def test_resolve_unknown_subsection(self) -> None:
        assert get_schema().resolve("individual", "hobbies", "career") is None

    def test_resolve_section(self) -> None:
        schema = get_schema()
        assert schema.resolve_section("Individual") == "individual"
        assert schema.resolve_section(" ROLE ") == "role"
        assert schema.resolve_section("hobbies") is None

    def test_has_path(self) -> None:
        schema = get_schema()
        assert schema.has_path(FieldPath("role", "responsibilities", "title"))
        assert not schema.has_path(FieldPath("role", "responsibilities", "career"))

    def test_sort_key_follows_schema_order(self) -> None:
        schema = get_schema()
        paths = [
            FieldPath("projects", "active", "current_projects"),
            FieldPath("individual", "thinking", "risk_tolerance"),
            FieldPath("individual", "background", "industry"),
            FieldPath("individual", "background", "career"),
        ]
        ordered = sorted(paths, key=schema.sort_key)
        assert ordered == [
            FieldPath("individual", "background", "career"),
            FieldPath("individual", "background", "industry"),
            FieldPath("individual", "thinking", "risk_tolerance"),
            FieldPath("projects", "active", "current_projects"),
        ]


class TestBuildProfile:
    def test_mirrors_schema(self) -> None:
        profile = build_profile("p1", name="Ada")
        assert profile.id == "p1"
        assert profile.name == "Ada"
        assert len(list(profile.iter_fields())) == get_schema().field_count()

    def test_fields_start_empty(self) -> None:
        profile = build_profile("p1")
        for _, field in profile.iter_fields():
            assert field.is_empty
            assert field.synthesis_version == 0
            assert field.sources == []

    def test_get_field(self) -> None:
        profile = build_profile("p1")
        field = profile.get_field(FieldPath("individual", "background", "career"))
        assert field is not None
        assert field.key == "career"
        assert profile.get_field(FieldPath("individual", "background", "nope")) is None
