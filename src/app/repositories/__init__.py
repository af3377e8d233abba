"""Repository layer - data access abstractions and implementations."""

from app.repositories.protocols import (
    AccountRepository,
    PositionRepository,
    StockRepository,
    SectorRepository,
    ProfileRepository,
    FirmHoldingRepository,
    UnitOfWork,
)

__all__ = [
    "AccountRepository",
    "PositionRepository",
    "StockRepository",
    "SectorRepository",
    "ProfileRepository",
    "FirmHoldingRepository",
    "UnitOfWork",
]
