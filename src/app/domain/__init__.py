"""Domain layer - pure business models with no external dependencies."""

from app.domain.models import (
    TradeSide,
    Account,
    Position,
    CASH_SECTOR,
    Sector,
    Stock,
    Profile,
    FirmFractionalHolding,
)

__all__ = [
    "TradeSide",
    "Account",
    "Position",
    "CASH_SECTOR",
    "Sector",
    "Stock",
    "Profile",
    "FirmFractionalHolding",
]
