"""Profile repository over any :class:`IPersistenceBackend`."""

from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError

from clarity_canvas.exceptions import PersistenceFailure, ProfileNotFound
from clarity_canvas.models import Profile
from clarity_canvas.persistence.protocols import IPersistenceBackend

log = logging.getLogger(__name__)


class ProfileStore:
    """Serializes whole profiles to JSON documents keyed by profile id.

    Backend errors surface as :class:`PersistenceFailure`; a missing profile
    raises :class:`ProfileNotFound`.
    """

    def __init__(self, backend: IPersistenceBackend) -> None:
        self._backend = backend

    @property
    def backend(self) -> IPersistenceBackend:
        return self._backend

    def load_profile(self, profile_id: str) -> Profile:
        try:
            data = self._backend.load(profile_id)
        except KeyError:
            raise ProfileNotFound(f"Profile {profile_id} not found") from None
        except Exception as e:
            raise PersistenceFailure(f"Failed to load profile {profile_id}: {e}") from e

        try:
            return Profile.model_validate_json(data)
        except PydanticValidationError as e:
            raise PersistenceFailure(f"Stored profile {profile_id} is corrupt: {e}") from e

    def save_profile(self, profile: Profile) -> None:
        try:
            self._backend.save(profile.id, profile.model_dump_json())
        except Exception as e:
            log.error("Failed to save profile %s: %s", profile.id, e)
            raise PersistenceFailure(f"Failed to save profile {profile.id}: {e}") from e
        log.debug("Saved profile %s", profile.id)

    def exists(self, profile_id: str) -> bool:
        return self._backend.exists(profile_id)

    def delete_profile(self, profile_id: str) -> None:
        self._backend.delete(profile_id)

    def list_profiles(self) -> list[str]:
        return self._backend.list_keys()
