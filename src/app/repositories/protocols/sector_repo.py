"""Sector repository protocol."""

from typing import Protocol, Optional

from app.domain.models import Sector


class SectorRepository(Protocol):
    """Interface for sector lookups."""

    def create(self, sector: Sector) -> Sector:
        """Persist a new sector."""
        ...

    def get_by_id(self, sector_id: int) -> Optional[Sector]:
        """Retrieve sector by ID."""
        ...

    def get_by_name(self, name: str) -> Optional[Sector]:
        """Retrieve sector by name."""
        ...

    def list_all(self) -> list[Sector]:
        """List all sectors, ordered by ID."""
        ...
