"""Data models for the synthesis engine."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from clarity_canvas.models import InputType, Source

# Separator between merged contributions in extractive output
CONTEXT_DELIMITER = "\n\n---\n\n"


@dataclass(frozen=True)
class SourceDraft:
    """A new raw contribution waiting to be attached to a field."""

    content: str
    input_type: InputType = InputType.TEXT
    captured_at: datetime | None = None
    snippet: str | None = None
    confidence: float | None = None
    source_id: str | None = None

    def to_source(self, now: datetime) -> Source:
        captured = self.captured_at or now
        if captured.tzinfo is None:
            captured = captured.replace(tzinfo=timezone.utc)
        return Source(
            id=self.source_id or f"src_{uuid.uuid4().hex}",
            raw_content=self.content,
            captured_at=captured,
            input_type=self.input_type,
            source_snippet=self.snippet,
            confidence=self.confidence,
        )


@dataclass
class SynthesisRequest:
    """Everything a generator needs to merge one field's sources.

    ``sources`` are oldest first.  ``candidates`` are the distinct values,
    newest first, so ``candidates[0]`` is the preferred claim.  When
    ``conflict`` is set the generator must mention the older claims too.
    """

    field_key: str
    field_name: str
    sources: list[Source]
    candidates: list[str] = field(default_factory=list)
    conflict: bool = False
    summary_max_chars: int = 150
    context_max_chars: int = 400

    @property
    def preferred(self) -> str:
        return self.candidates[0] if self.candidates else ""

    @property
    def superseded(self) -> list[str]:
        return self.candidates[1:]


@dataclass
class SynthesisOutput:
    full_context: str
    summary: str = ""
