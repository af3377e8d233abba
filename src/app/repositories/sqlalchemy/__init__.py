"""SQLAlchemy repository implementations."""

from app.repositories.sqlalchemy.database import (
    get_engine,
    get_session_factory,
    get_session,
    init_db,
    init_db_with_path,
    reset_database,
    Base,
)
from app.repositories.sqlalchemy.account_repo import SqlAlchemyAccountRepository
from app.repositories.sqlalchemy.position_repo import SqlAlchemyPositionRepository
from app.repositories.sqlalchemy.stock_repo import (
    SqlAlchemyStockRepository,
    SqlAlchemySectorRepository,
)
from app.repositories.sqlalchemy.profile_repo import SqlAlchemyProfileRepository
from app.repositories.sqlalchemy.firm_holding_repo import SqlAlchemyFirmHoldingRepository
from app.repositories.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork

__all__ = [
    "get_engine",
    "get_session_factory",
    "get_session",
    "init_db",
    "init_db_with_path",
    "reset_database",
    "Base",
    "SqlAlchemyAccountRepository",
    "SqlAlchemyPositionRepository",
    "SqlAlchemyStockRepository",
    "SqlAlchemySectorRepository",
    "SqlAlchemyProfileRepository",
    "SqlAlchemyFirmHoldingRepository",
    "SqlAlchemyUnitOfWork",
]
