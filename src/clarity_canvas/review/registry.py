"""In-memory registry of open review sessions."""

from __future__ import annotations

import logging

from clarity_canvas.exceptions import UnknownSession
from clarity_canvas.review.session import ReviewSession

log = logging.getLogger(__name__)


class SessionRegistry:
    """Holds review sessions between requests. Nothing here is persisted."""

    def __init__(self) -> None:
        self._sessions: dict[str, ReviewSession] = {}

    def open(self, session: ReviewSession) -> ReviewSession:
        self._sessions[session.id] = session
        log.info(
            "Opened review session %s for profile %s with %d recommendation(s)",
            session.id, session.profile_id, len(session.recommendations),
        )
        return session

    def get(self, session_id: str) -> ReviewSession:
        if session_id not in self._sessions:
            raise UnknownSession(f"Review session {session_id} not found")
        return self._sessions[session_id]

    def discard(self, session_id: str) -> None:
        """Abandon or close a session (no-op if already gone)."""
        if self._sessions.pop(session_id, None) is not None:
            log.info("Discarded review session %s", session_id)

    def for_profile(self, profile_id: str) -> list[ReviewSession]:
        return [s for s in self._sessions.values() if s.profile_id == profile_id]

    def __len__(self) -> int:
        return len(self._sessions)
