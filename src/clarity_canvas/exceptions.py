"""Exception hierarchy for clarity-canvas."""

from __future__ import annotations


class ClarityError(Exception):
    """Base exception for all clarity-canvas errors."""


# ── Review / intake ──────────────────────────────────────────────────


class ChunkValidationError(ClarityError):
    """An extraction chunk is malformed or targets an unknown field."""

    def __init__(self, message: str, raw_chunk: object = None) -> None:
        super().__init__(message)
        self.raw_chunk = raw_chunk


class InvalidTransition(ClarityError):
    """A recommendation state change that the review workflow does not allow."""

    def __init__(self, recommendation_id: str, status: str, action: str) -> None:
        super().__init__(
            f"Cannot {action} recommendation {recommendation_id} in status {status!r}"
        )
        self.recommendation_id = recommendation_id
        self.status = status
        self.action = action


# ── Lookups (KeyError so callers can treat them as not-found) ───────


class UnknownRecommendation(ClarityError, KeyError):
    """No recommendation with this id exists in the review session."""


class UnknownSession(ClarityError, KeyError):
    """No open review session with this id."""


class UnknownSource(ClarityError, KeyError):
    """The field has no source with this id."""


class UnknownSection(ClarityError, KeyError):
    """No section with this key exists in the profile schema."""


class UnknownField(ClarityError, KeyError):
    """The path does not name a field on this profile."""


class ProfileNotFound(ClarityError, KeyError):
    """The persistence layer has no profile with this id."""


# ── Commit / synthesis / persistence ────────────────────────────────


class ConcurrentModification(ClarityError):
    """A commit is already in flight for this profile."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(f"A commit is already in progress for profile {profile_id}")
        self.profile_id = profile_id


class SynthesisError(ClarityError):
    """The synthesis generator failed or returned unusable output."""


class PersistenceFailure(ClarityError):
    """Saving or loading through the persistence backend failed."""


# ── LLM collaborator ────────────────────────────────────────────────


class LLMClientError(ClarityError):
    """Raised when LLM API calls fail after exhausting retries."""


class RetryableError(LLMClientError):
    """Rate limits, timeouts, 5xx; should be retried."""


class NonRetryableError(LLMClientError):
    """Auth errors, bad requests, 4xx (non-429); fail immediately."""


class CollaboratorNotConfigured(ClarityError):
    """An operation needs an extractor or refiner that was not configured."""


class JSONParseError(ClarityError):
    """LLM response could not be parsed as JSON."""

    def __init__(self, message: str, raw_response: str = "") -> None:
        super().__init__(message)
        self.raw_response = raw_response
