"""Tests for extraction chunk intake validation."""

from __future__ import annotations

import pytest

from clarity_canvas.exceptions import ChunkValidationError
from clarity_canvas.models import ExtractionChunk, FieldPath
from clarity_canvas.review import accept_chunks, validate_chunk


def _raw(**overrides: object) -> dict[str, object]:
    chunk: dict[str, object] = {
        "targetSection": "individual",
        "targetSubsection": "background",
        "targetField": "career",
        "content": "Twelve years in payments",
        "summary": "Payments veteran",
        "confidence": 0.9,
    }
    chunk.update(overrides)
    return chunk


class TestValidateChunk:
    def test_camel_case_payload(self) -> None:
        chunk = validate_chunk(_raw())
        assert chunk.path == FieldPath("individual", "background", "career")
        assert chunk.confidence == 0.9

    def test_snake_case_payload(self) -> None:
        chunk = validate_chunk(
            {
                "target_section": "role",
                "target_subsection": "responsibilities",
                "target_field": "title",
                "content": "VP Product",
                "confidence": 1.0,
            }
        )
        assert chunk.path == FieldPath("role", "responsibilities", "title")
        assert chunk.summary == ""

    def test_keys_canonicalized(self) -> None:
        chunk = validate_chunk(_raw(targetSection="Individual", targetSubsection="Background-Identity"))
        assert chunk.target_section == "individual"
        assert chunk.target_subsection == "background"

    def test_accepts_model_instance(self) -> None:
        model = ExtractionChunk.model_validate(_raw(targetField="Career"))
        assert validate_chunk(model).target_field == "career"

    @pytest.mark.parametrize("confidence", [-0.1, 1.5])
    def test_confidence_out_of_range(self, confidence: float) -> None:
        with pytest.raises(ChunkValidationError, match="confidence"):
            validate_chunk(_raw(confidence=confidence))

    def test_missing_content(self) -> None:
        raw = _raw()
        del raw["content"]
        with pytest.raises(ChunkValidationError) as exc_info:
            validate_chunk(raw)
        assert exc_info.value.raw_chunk is raw

    def test_empty_content(self) -> None:
        with pytest.raises(ChunkValidationError):
            validate_chunk(_raw(content=""))

    def test_unknown_target(self) -> None:
        with pytest.raises(ChunkValidationError, match="Unknown target"):
            validate_chunk(_raw(targetField="favourite_colour"))

    def test_not_a_mapping(self) -> None:
        with pytest.raises(ChunkValidationError):
            validate_chunk("just a string")


class TestAcceptChunks:
    def test_bad_chunk_does_not_fail_batch(self) -> None:
        result = accept_chunks([_raw(), _raw(confidence=3), _raw(targetSection="hobbies")])
        assert len(result.accepted) == 1
        assert len(result.rejected) == 2
        assert all(r.reason for r in result.rejected)

    def test_empty_batch(self) -> None:
        result = accept_chunks([])
        assert result.accepted == []
        assert result.rejected == []
