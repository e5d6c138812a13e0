"""Boundary validation for chunks produced by the extraction collaborator."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import ValidationError as PydanticValidationError

from clarity_canvas.exceptions import ChunkValidationError
from clarity_canvas.models import ExtractionChunk
from clarity_canvas.review.models import IntakeResult, RejectedChunk
from clarity_canvas.schema import ProfileSchema, get_schema

log = logging.getLogger(__name__)


def validate_chunk(raw: Any, schema: ProfileSchema | None = None) -> ExtractionChunk:
    """Parse one raw item and canonicalize its target keys.

    Raises:
        ChunkValidationError: malformed payload, confidence outside [0, 1],
            or a target that does not exist in the profile schema.
    """
    schema = schema or get_schema()

    if isinstance(raw, ExtractionChunk):
        chunk = ExtractionChunk.model_validate(raw.model_dump())
    else:
        try:
            chunk = ExtractionChunk.model_validate(raw)
        except PydanticValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'chunk'}: {err['msg']}"
                for err in e.errors()
            )
            raise ChunkValidationError(f"Malformed chunk: {problems}", raw_chunk=raw) from e

    path = schema.resolve(chunk.target_section, chunk.target_subsection, chunk.target_field)
    if path is None:
        raise ChunkValidationError(
            f"Unknown target {chunk.target_section}.{chunk.target_subsection}.{chunk.target_field}",
            raw_chunk=raw,
        )

    return chunk.model_copy(
        update={
            "target_section": path.section,
            "target_subsection": path.subsection,
            "target_field": path.field,
        }
    )


def accept_chunks(raw_chunks: Iterable[Any], schema: ProfileSchema | None = None) -> IntakeResult:
    """Validate every item independently; one bad chunk never fails the batch."""
    schema = schema or get_schema()
    result = IntakeResult()

    for raw in raw_chunks:
        try:
            result.accepted.append(validate_chunk(raw, schema))
        except ChunkValidationError as e:
            result.rejected.append(RejectedChunk(reason=str(e), raw=raw))

    if result.rejected:
        log.warning(
            "Rejected %d of %d extracted chunks",
            len(result.rejected), len(result.accepted) + len(result.rejected),
        )
        for rejected in result.rejected:
            log.debug("Rejected chunk: %s", rejected.reason)

    return result
