"""Per-profile commit exclusion."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from clarity_canvas.exceptions import ConcurrentModification

log = logging.getLogger(__name__)


class ProfileLocks:
    """Tracks which profiles have a commit in flight.

    A second commit for a busy profile is rejected with
    :class:`ConcurrentModification` instead of waiting.  Different profiles
    never contend.  Check-and-mark happens without an ``await`` in between,
    so it is atomic on a single event loop.
    """

    def __init__(self) -> None:
        self._in_flight: set[str] = set()

    def is_held(self, profile_id: str) -> bool:
        return profile_id in self._in_flight

    @asynccontextmanager
    async def hold(self, profile_id: str) -> AsyncIterator[None]:
        if profile_id in self._in_flight:
            log.warning("Rejected concurrent commit for profile %s", profile_id)
            raise ConcurrentModification(profile_id)
        self._in_flight.add(profile_id)
        try:
            yield
        finally:
            self._in_flight.discard(profile_id)
