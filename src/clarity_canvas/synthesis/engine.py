"""Source merge / synthesis engine.

Decides when a field is re-synthesized, how it is versioned and which
candidate values the generator must consider.  The text itself comes from an
:class:`~clarity_canvas.interfaces.ISynthesisGenerator`.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Sequence

from clarity_canvas.exceptions import ClarityError, SynthesisError, UnknownSource
from clarity_canvas.interfaces.synthesis import ISynthesisGenerator
from clarity_canvas.models import InputType, ProfileField, Source, utcnow
from clarity_canvas.synthesis.models import SourceDraft, SynthesisRequest

log = logging.getLogger(__name__)


class SynthesisEngine:
    """Appends/removes sources and recomputes a field from its full source set.

    The engine never mutates the field it is given; every operation returns a
    new ``ProfileField``.  ``synthesis_version`` goes up by exactly one per
    successful synthesis and a failure leaves the caller's field untouched.
    """

    def __init__(
        self,
        generator: ISynthesisGenerator,
        *,
        summary_max_chars: int = 150,
        context_max_chars: int = 400,
        conflict_confidence_threshold: float = 0.7,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._generator = generator
        self._summary_max_chars = summary_max_chars
        self._context_max_chars = context_max_chars
        self._conflict_threshold = conflict_confidence_threshold
        self._clock = clock

    async def synthesize(self, field: ProfileField, drafts: Sequence[SourceDraft]) -> ProfileField:
        """Attach *drafts* to *field* and re-synthesize once over all sources."""
        if not drafts:
            raise ValueError("synthesize() requires at least one new source")

        now = self._clock()
        new_sources = [d.to_source(now) for d in drafts]
        taken = {s.id for s in field.sources}
        for source in new_sources:
            if source.id in taken:
                raise ValueError(f"Field {field.key} already has source {source.id}")
            taken.add(source.id)

        sources = _ordered([*field.sources, *new_sources])
        return await self._synthesize_sources(field, sources, now)

    async def add_source(
        self,
        field: ProfileField,
        content: str,
        *,
        input_type: InputType = InputType.TEXT,
        captured_at: datetime | None = None,
        snippet: str | None = None,
        confidence: float | None = None,
        source_id: str | None = None,
    ) -> ProfileField:
        """Single-contribution form of :meth:`synthesize`."""
        draft = SourceDraft(
            content=content,
            input_type=input_type,
            captured_at=captured_at,
            snippet=snippet,
            confidence=confidence,
            source_id=source_id,
        )
        return await self.synthesize(field, [draft])

    async def resynthesize(self, field: ProfileField) -> ProfileField:
        """Recompute from the current source set (empties the field if there is none)."""
        if not field.sources:
            return _emptied(field)
        return await self._synthesize_sources(field, _ordered(field.sources), self._clock())

    async def remove_source(self, field: ProfileField, source_id: str) -> ProfileField:
        """Drop one source and recompute from the survivors."""
        if field.find_source(source_id) is None:
            raise UnknownSource(f"Field {field.key} has no source {source_id}")

        remaining = [s for s in field.sources if s.id != source_id]
        log.info(
            "Removed source %s from field %s, re-synthesizing %d remaining",
            source_id, field.key, len(remaining),
        )
        return await self.resynthesize(field.model_copy(update={"sources": remaining}))

    def build_request(self, field: ProfileField, sources: list[Source]) -> SynthesisRequest:
        """Collect candidate values newest first and flag low-confidence conflicts."""
        candidates: list[str] = []
        seen: set[str] = set()
        for source in reversed(sources):
            marker = " ".join(source.raw_content.lower().split())
            if marker in seen:
                continue
            seen.add(marker)
            candidates.append(source.raw_content.strip())

        newest = sources[-1]
        newest_confidence = 1.0 if newest.confidence is None else newest.confidence
        conflict = len(candidates) > 1 and newest_confidence < self._conflict_threshold

        return SynthesisRequest(
            field_key=field.key,
            field_name=field.name or field.key,
            sources=sources,
            candidates=candidates,
            conflict=conflict,
            summary_max_chars=self._summary_max_chars,
            context_max_chars=self._context_max_chars,
        )

    async def _synthesize_sources(
        self,
        field: ProfileField,
        sources: list[Source],
        now: datetime,
    ) -> ProfileField:
        if len(sources) == 1:
            only = sources[0]
            full_context = only.raw_content.strip()
            summary = only.source_snippet or self._truncate(full_context)
        else:
            request = self.build_request(field, sources)
            try:
                output = await self._generator.generate(request)
            except ClarityError:
                raise
            except Exception as e:
                raise SynthesisError(f"Synthesis failed for field {field.key}: {e}") from e

            full_context = (output.full_context or "").strip()
            if not full_context:
                raise SynthesisError(f"Generator returned empty context for field {field.key}")
            summary = (output.summary or "").strip() or self._truncate(full_context)

        if not full_context:
            raise SynthesisError(f"Field {field.key} has no usable source content")

        log.debug(
            "Synthesized field %s from %d source(s), version %d -> %d",
            field.key, len(sources), field.synthesis_version, field.synthesis_version + 1,
        )
        return field.model_copy(
            update={
                "sources": sources,
                "full_context": full_context,
                "summary": summary,
                "synthesis_version": field.synthesis_version + 1,
                "last_synthesized_at": now,
            }
        )

    def _truncate(self, text: str) -> str:
        return text[: self._summary_max_chars]


def _ordered(sources: list[Source]) -> list[Source]:
    return sorted(sources, key=lambda s: s.captured_at)


def _emptied(field: ProfileField) -> ProfileField:
    return field.model_copy(
        update={
            "sources": [],
            "full_context": None,
            "summary": None,
            "synthesis_version": 0,
            "last_synthesized_at": None,
        }
    )
