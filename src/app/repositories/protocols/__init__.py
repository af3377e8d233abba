"""Repository protocol definitions (interfaces)."""

from app.repositories.protocols.account_repo import AccountRepository
from app.repositories.protocols.position_repo import PositionRepository
from app.repositories.protocols.stock_repo import StockRepository
from app.repositories.protocols.sector_repo import SectorRepository
from app.repositories.protocols.profile_repo import ProfileRepository
from app.repositories.protocols.firm_holding_repo import FirmHoldingRepository
from app.repositories.protocols.unit_of_work import UnitOfWork

__all__ = [
    "AccountRepository",
    "PositionRepository",
    "StockRepository",
    "SectorRepository",
    "ProfileRepository",
    "FirmHoldingRepository",
    "UnitOfWork",
]
