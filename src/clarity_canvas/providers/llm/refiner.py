"""LLM-backed refinement collaborator."""

from __future__ import annotations

import logging

from clarity_canvas.exceptions import JSONParseError
from clarity_canvas.interfaces.extraction import Refinement
from clarity_canvas.prompts import REFINEMENT_PROMPT, REFINEMENT_SYSTEM_PROMPT
from clarity_canvas.providers.llm.client import LLMClient

log = logging.getLogger(__name__)


class LLMRefiner:
    """Implements :class:`~clarity_canvas.interfaces.IRefiner` over :class:`LLMClient`."""

    def __init__(self, client: LLMClient, *, summary_max_chars: int = 150) -> None:
        self._client = client
        self._summary_max_chars = summary_max_chars

    async def refine(self, content: str, summary: str, instruction: str) -> Refinement:
        prompt = REFINEMENT_PROMPT.format(
            content=content,
            summary=summary or "(empty)",
            instruction=instruction,
            summary_max_chars=self._summary_max_chars,
        )
        parsed = await self._client.complete_json(prompt, system_prompt=REFINEMENT_SYSTEM_PROMPT)

        refined = str(parsed.get("refinedContent", "")).strip() if isinstance(parsed, dict) else ""
        if not refined:
            raise JSONParseError("Refinement response has no refinedContent", raw_response=str(parsed))

        return Refinement(
            refined_content=refined,
            refined_summary=str(parsed.get("refinedSummary", ""))[: self._summary_max_chars],
            change_summary=str(parsed.get("changeSummary", "")),
        )
