from .templates import (
    EXTRACTION_PROMPT,
    EXTRACTION_SYSTEM_PROMPT,
    REFINEMENT_PROMPT,
    REFINEMENT_SYSTEM_PROMPT,
    SYNTHESIS_CONFLICT_BLOCK,
    SYNTHESIS_PROMPT,
    SYNTHESIS_SYSTEM_PROMPT,
    render_field_catalog,
)

__all__ = [
    "EXTRACTION_PROMPT",
    "EXTRACTION_SYSTEM_PROMPT",
    "REFINEMENT_PROMPT",
    "REFINEMENT_SYSTEM_PROMPT",
    "SYNTHESIS_CONFLICT_BLOCK",
    "SYNTHESIS_PROMPT",
    "SYNTHESIS_SYSTEM_PROMPT",
    "render_field_catalog",
]
