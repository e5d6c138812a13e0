"""Profile repository contract used by the commit pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from clarity_canvas.models import Profile


@runtime_checkable
class IProfileRepository(Protocol):
    """Whole-profile load/save. ``save_profile`` must be all-or-nothing."""

    def load_profile(self, profile_id: str) -> Profile:
        """Raises ``ProfileNotFound`` when absent."""
        ...

    def save_profile(self, profile: Profile) -> None:
        ...

    def exists(self, profile_id: str) -> bool:
        ...

    def delete_profile(self, profile_id: str) -> None:
        ...

    def list_profiles(self) -> list[str]:
        ...
