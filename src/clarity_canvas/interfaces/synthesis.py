"""Synthesis generator collaborator."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from clarity_canvas.synthesis.models import SynthesisOutput, SynthesisRequest


@runtime_checkable
class ISynthesisGenerator(Protocol):
    """Turns a field's sources into one coherent ``full_context`` / ``summary``.

    The generator only writes text.  Which sources are merged, the candidate
    ordering and the conflict flag are decided by the synthesis engine.
    """

    async def generate(self, request: SynthesisRequest) -> SynthesisOutput:
        ...
