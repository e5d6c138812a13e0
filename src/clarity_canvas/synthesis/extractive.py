"""Deterministic synthesis generator: merges candidate values without an LLM."""

from __future__ import annotations

from clarity_canvas.synthesis.models import CONTEXT_DELIMITER, SynthesisOutput, SynthesisRequest


class ExtractiveSynthesizer:
    """Builds ``full_context`` by stitching the distinct source values together.

    The preferred (newest) value always leads.  Without a conflict the older
    values follow it, newest first; with a conflict they are listed as
    earlier claims.  The result is capped at ``context_max_chars``.
    """

    async def generate(self, request: SynthesisRequest) -> SynthesisOutput:
        if request.conflict:
            earlier = "; ".join(request.superseded)
            full_context = f"{request.preferred}{CONTEXT_DELIMITER}Earlier sources said: {earlier}"
        else:
            full_context = CONTEXT_DELIMITER.join(request.candidates)

        newest = request.sources[-1]
        summary = newest.source_snippet or request.preferred
        return SynthesisOutput(
            full_context=full_context[: request.context_max_chars].rstrip(),
            summary=summary[: request.summary_max_chars],
        )
