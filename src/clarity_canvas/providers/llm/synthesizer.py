"""LLM-backed synthesis generator."""

from __future__ import annotations

import logging

from clarity_canvas.exceptions import SynthesisError
from clarity_canvas.prompts import SYNTHESIS_CONFLICT_BLOCK, SYNTHESIS_PROMPT, SYNTHESIS_SYSTEM_PROMPT
from clarity_canvas.providers.llm.client import LLMClient
from clarity_canvas.synthesis.models import SynthesisOutput, SynthesisRequest

log = logging.getLogger(__name__)


class LLMSynthesizer:
    """Implements :class:`~clarity_canvas.interfaces.ISynthesisGenerator` over :class:`LLMClient`."""

    def __init__(self, client: LLMClient) -> None:
        self._client = client

    async def generate(self, request: SynthesisRequest) -> SynthesisOutput:
        sources = "\n\n".join(
            f"Note {i} ({s.input_type.value}, {s.captured_at.date().isoformat()}):\n{s.raw_content}"
            for i, s in enumerate(request.sources, start=1)
        )
        conflict_block = ""
        if request.conflict:
            conflict_block = SYNTHESIS_CONFLICT_BLOCK.format(
                superseded="\n".join(f"- {c}" for c in request.superseded)
            )

        prompt = SYNTHESIS_PROMPT.format(
            field_name=request.field_name,
            sources=sources,
            preferred=request.preferred,
            conflict_block=conflict_block,
            context_max_chars=request.context_max_chars,
            summary_max_chars=request.summary_max_chars,
        )
        parsed = await self._client.complete_json(prompt, system_prompt=SYNTHESIS_SYSTEM_PROMPT)
        if not isinstance(parsed, dict):
            raise SynthesisError(f"Synthesis response for {request.field_key} is not an object")

        full_context = str(parsed.get("fullContext", "")).strip()
        summary = str(parsed.get("summary", "")).strip()[: request.summary_max_chars]
        log.debug("LLM synthesized field %s from %d source(s)", request.field_key, len(request.sources))
        return SynthesisOutput(full_context=full_context, summary=summary)
