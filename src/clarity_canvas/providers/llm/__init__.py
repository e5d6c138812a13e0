"""LiteLLM-backed collaborators: extraction, refinement and synthesis."""

from __future__ import annotations

from clarity_canvas.providers.llm.client import LLMClient
from clarity_canvas.providers.llm.extractor import LLMExtractor
from clarity_canvas.providers.llm.refiner import LLMRefiner
from clarity_canvas.providers.llm.synthesizer import LLMSynthesizer

__all__ = ["LLMClient", "LLMExtractor", "LLMRefiner", "LLMSynthesizer"]
