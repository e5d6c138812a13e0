"""LLM-backed extraction collaborator."""

from __future__ import annotations

import logging
from typing import Any

from clarity_canvas.prompts import EXTRACTION_PROMPT, EXTRACTION_SYSTEM_PROMPT, render_field_catalog
from clarity_canvas.providers.llm.client import LLMClient
from clarity_canvas.schema import ProfileSchema, get_schema

log = logging.getLogger(__name__)


class LLMExtractor:
    """Implements :class:`~clarity_canvas.interfaces.IExtractor` over :class:`LLMClient`.

    Returns the raw chunk dicts unvalidated; callers pass them through
    :func:`clarity_canvas.review.accept_chunks`.
    """

    def __init__(
        self,
        client: LLMClient,
        *,
        schema: ProfileSchema | None = None,
        summary_max_chars: int = 150,
    ) -> None:
        self._client = client
        self._schema = schema or get_schema()
        self._summary_max_chars = summary_max_chars

    async def extract(self, raw_text: str, scope: str | None = None) -> list[dict[str, Any]]:
        if not raw_text.strip():
            return []

        scope_line = f"\nOnly extract facts for the '{scope}' section.\n" if scope else ""
        prompt = EXTRACTION_PROMPT.format(
            field_catalog=render_field_catalog(self._schema),
            scope_line=scope_line,
            summary_max_chars=self._summary_max_chars,
            raw_text=raw_text,
        )
        parsed = await self._client.complete_json(prompt, system_prompt=EXTRACTION_SYSTEM_PROMPT)

        if isinstance(parsed, dict):
            chunks = parsed.get("chunks", [])
        else:
            chunks = parsed
        if not isinstance(chunks, list):
            log.warning("Extractor returned %s instead of a chunk list", type(chunks).__name__)
            return []

        log.info("Extracted %d candidate chunk(s) from %d chars", len(chunks), len(raw_text))
        return [c for c in chunks if isinstance(c, dict)]
