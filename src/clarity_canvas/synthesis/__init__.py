"""Synthesis engine: merges a field's sources into one versioned value."""

from __future__ import annotations

from clarity_canvas.synthesis.engine import SynthesisEngine
from clarity_canvas.synthesis.extractive import ExtractiveSynthesizer
from clarity_canvas.synthesis.freshness import format_relative_time, was_synthesized_recently
from clarity_canvas.synthesis.models import (
    CONTEXT_DELIMITER,
    SourceDraft,
    SynthesisOutput,
    SynthesisRequest,
)

__all__ = [
    "CONTEXT_DELIMITER",
    "ExtractiveSynthesizer",
    "SourceDraft",
    "SynthesisEngine",
    "SynthesisOutput",
    "SynthesisRequest",
    "format_relative_time",
    "was_synthesized_recently",
]
