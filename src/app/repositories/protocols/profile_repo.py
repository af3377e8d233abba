"""Profile repository protocol."""

from typing import Protocol, Optional

from app.domain.models import Profile


class ProfileRepository(Protocol):
    """Interface for investment profile lookups."""

    def create(self, profile: Profile) -> Profile:
        """Persist a new profile with its target weights."""
        ...

    def get_by_id(self, profile_id: int) -> Optional[Profile]:
        """Retrieve profile (with target weights) by ID."""
        ...

    def get_by_name(self, name: str) -> Optional[Profile]:
        """Retrieve profile by name."""
        ...
