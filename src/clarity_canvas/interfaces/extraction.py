"""Extraction and refinement collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass
class Refinement:
    """Rewritten content returned by a refiner."""

    refined_content: str
    refined_summary: str
    change_summary: str = ""


@runtime_checkable
class IExtractor(Protocol):
    """Turns raw captured text into candidate chunks.

    Output is untrusted: every item goes through
    :func:`clarity_canvas.review.intake.accept_chunks` before use.
    """

    async def extract(self, raw_text: str, scope: str | None = None) -> list[dict[str, Any]]:
        ...


@runtime_checkable
class IRefiner(Protocol):
    """Rewrites a recommendation's content on explicit user request."""

    async def refine(self, content: str, summary: str, instruction: str) -> Refinement:
        ...
