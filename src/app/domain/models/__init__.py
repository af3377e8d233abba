"""Domain models package."""

from app.domain.models.enums import TradeSide
from app.domain.models.account import Account
from app.domain.models.position import Position
from app.domain.models.market import (
    CASH_SECTOR,
    DEFAULT_SHARE_PRICE,
    Sector,
    Stock,
    Profile,
)
from app.domain.models.firm_holding import FirmFractionalHolding

__all__ = [
    "TradeSide",
    "Account",
    "Position",
    "CASH_SECTOR",
    "DEFAULT_SHARE_PRICE",
    "Sector",
    "Stock",
    "Profile",
    "FirmFractionalHolding",
]
