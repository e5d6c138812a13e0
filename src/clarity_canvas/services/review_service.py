"""Review orchestration: extraction → intake → session → commit."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from clarity_canvas.commit import CommitPipeline, CommitResult
from clarity_canvas.exceptions import CollaboratorNotConfigured, ProfileNotFound
from clarity_canvas.interfaces.extraction import IExtractor
from clarity_canvas.interfaces.repository import IProfileRepository
from clarity_canvas.models import InputType
from clarity_canvas.review import ReviewSession, SessionRegistry, accept_chunks
from clarity_canvas.schema import ProfileSchema, get_schema

log = logging.getLogger(__name__)


class ReviewService:
    """Opens review sessions for a profile and commits them."""

    def __init__(
        self,
        repository: IProfileRepository,
        pipeline: CommitPipeline,
        sessions: SessionRegistry,
        *,
        extractor: IExtractor | None = None,
        low_confidence_threshold: float = 0.7,
        schema: ProfileSchema | None = None,
    ) -> None:
        self._repository = repository
        self._pipeline = pipeline
        self._sessions = sessions
        self._extractor = extractor
        self._threshold = low_confidence_threshold
        self._schema = schema or get_schema()

    @property
    def sessions(self) -> SessionRegistry:
        return self._sessions

    def open_session(
        self,
        profile_id: str,
        raw_chunks: Iterable[Any],
        *,
        input_type: InputType = InputType.TEXT,
    ) -> ReviewSession:
        """Validate caller-supplied chunks and open a session on the valid ones."""
        if not self._repository.exists(profile_id):
            raise ProfileNotFound(f"Profile {profile_id} not found")

        intake = accept_chunks(raw_chunks, self._schema)
        session = ReviewSession.from_chunks(
            profile_id,
            intake.accepted,
            input_type=input_type,
            low_confidence_threshold=self._threshold,
            rejected_chunks=intake.rejected,
            schema=self._schema,
        )
        return self._sessions.open(session)

    async def extract_session(
        self,
        profile_id: str,
        raw_text: str,
        *,
        scope: str | None = None,
        input_type: InputType = InputType.TEXT,
    ) -> ReviewSession:
        """Run the extractor over *raw_text* and open a session on its output."""
        if self._extractor is None:
            raise CollaboratorNotConfigured("No extractor configured")
        if not self._repository.exists(profile_id):
            raise ProfileNotFound(f"Profile {profile_id} not found")

        raw_chunks = await self._extractor.extract(raw_text, scope)
        return self.open_session(profile_id, raw_chunks, input_type=input_type)

    async def commit_session(self, session_id: str) -> CommitResult:
        """Commit the session's approved and refined items, then close it.

        On failure the session stays open so the caller can retry.
        """
        session = self._sessions.get(session_id)
        result = await self._pipeline.commit_profile(session.profile_id, session.committable())
        self._sessions.discard(session_id)
        return result
