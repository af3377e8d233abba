"""Application context for in-process service management.

Wires one database session, its repositories and unit of work, and the
services built on them. The caller owns the context and closes it; there is
no process-wide instance.
"""

import random
from pathlib import Path
from typing import Optional

from sqlalchemy.orm import Session

from app.config.logging_config import setup_logging
from app.config.settings import Settings, set_settings, get_settings
from app.core.locks import KeyedLockRegistry
from app.repositories.sqlalchemy.database import (
    init_db,
    reset_database,
    get_session,
)
from app.repositories.sqlalchemy import (
    SqlAlchemyAccountRepository,
    SqlAlchemyFirmHoldingRepository,
    SqlAlchemyPositionRepository,
    SqlAlchemyProfileRepository,
    SqlAlchemySectorRepository,
    SqlAlchemyStockRepository,
    SqlAlchemyUnitOfWork,
)
from app.services import (
    DriftDetector,
    LedgerService,
    PeerClusterer,
    RecommendationEngine,
    ReportingService,
    SectorAllocator,
)


class AppContext:
    """
    Application context providing in-process access to all services.

    A session is not thread-safe: give each worker thread its own context
    and pass every context the same ``locks`` registry so writes to one
    account or stock stay serialized across them.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        locks: Optional[KeyedLockRegistry] = None,
    ):
        """
        Initialize application context.

        Args:
            data_dir: Optional data directory. If not provided, uses default.
            locks: Lock registry shared with other contexts on the same store.
        """
        self._data_dir = data_dir
        self._locks = locks
        self._session: Optional[Session] = None
        self._initialized = False
        self._reset_services()

    def initialize(self, data_dir: Optional[Path] = None) -> None:
        """
        Initialize or reinitialize the application with a data directory.

        Args:
            data_dir: Data directory path. Uses default if not provided.
        """
        if data_dir:
            self._data_dir = data_dir

        settings = get_settings()
        if self._data_dir:
            settings = Settings(data_dir=self._data_dir)
            set_settings(settings)
        setup_logging()

        self.close()
        reset_database()
        init_db()

        if self._locks is None:
            self._locks = KeyedLockRegistry(timeout_seconds=settings.store_timeout_seconds)
        self._reset_services()
        self._initialized = True

    @property
    def is_initialized(self) -> bool:
        """Check if context is initialized."""
        return self._initialized

    @property
    def data_dir(self) -> Path:
        """Get the current data directory."""
        return get_settings().get_data_dir()

    @property
    def locks(self) -> KeyedLockRegistry:
        if self._locks is None:
            self._locks = KeyedLockRegistry(timeout_seconds=get_settings().store_timeout_seconds)
        return self._locks

    def _get_session(self) -> Session:
        """Get or create database session."""
        if self._session is None:
            self._session = get_session()
        return self._session

    def refresh_session(self) -> None:
        """Replace the database session (call after external changes)."""
        self.close()
        self._reset_services()

    def _reset_services(self) -> None:
        self._uow: Optional[SqlAlchemyUnitOfWork] = None
        self._ledger_service: Optional[LedgerService] = None
        self._allocator: Optional[SectorAllocator] = None
        self._drift_detector: Optional[DriftDetector] = None
        self._peer_clusterer: Optional[PeerClusterer] = None
        self._recommendation_engine: Optional[RecommendationEngine] = None
        self._reporting_service: Optional[ReportingService] = None

    # Repository accessors
    @property
    def accounts(self) -> SqlAlchemyAccountRepository:
        return SqlAlchemyAccountRepository(self._get_session())

    @property
    def positions(self) -> SqlAlchemyPositionRepository:
        return SqlAlchemyPositionRepository(self._get_session())

    @property
    def stocks(self) -> SqlAlchemyStockRepository:
        return SqlAlchemyStockRepository(self._get_session())

    @property
    def sectors(self) -> SqlAlchemySectorRepository:
        return SqlAlchemySectorRepository(self._get_session())

    @property
    def profiles(self) -> SqlAlchemyProfileRepository:
        return SqlAlchemyProfileRepository(self._get_session())

    @property
    def firm_holdings(self) -> SqlAlchemyFirmHoldingRepository:
        return SqlAlchemyFirmHoldingRepository(self._get_session())

    @property
    def unit_of_work(self) -> SqlAlchemyUnitOfWork:
        """Transaction boundary shared by every service of this context."""
        if self._uow is None:
            self._uow = SqlAlchemyUnitOfWork(self._get_session())
        return self._uow

    # Service accessors
    @property
    def ledger(self) -> LedgerService:
        """Get the LedgerService instance."""
        if self._ledger_service is None:
            self._ledger_service = LedgerService(
                account_repo=self.accounts,
                position_repo=self.positions,
                stock_repo=self.stocks,
                firm_holding_repo=self.firm_holdings,
                unit_of_work=self.unit_of_work,
                locks=self.locks,
                cash_symbol=get_settings().cash_symbol,
            )
        return self._ledger_service

    @property
    def allocator(self) -> SectorAllocator:
        """Get the SectorAllocator instance."""
        if self._allocator is None:
            self._allocator = SectorAllocator(
                account_repo=self.accounts,
                position_repo=self.positions,
                stock_repo=self.stocks,
                sector_repo=self.sectors,
                unit_of_work=self.unit_of_work,
            )
        return self._allocator

    @property
    def drift(self) -> DriftDetector:
        """Get the DriftDetector instance."""
        if self._drift_detector is None:
            self._drift_detector = DriftDetector(
                allocator=self.allocator,
                account_repo=self.accounts,
                profile_repo=self.profiles,
                unit_of_work=self.unit_of_work,
            )
        return self._drift_detector

    @property
    def clusterer(self) -> PeerClusterer:
        """Get the PeerClusterer instance."""
        if self._peer_clusterer is None:
            settings = get_settings()
            self._peer_clusterer = PeerClusterer(
                drift_detector=self.drift,
                allocator=self.allocator,
                account_repo=self.accounts,
                unit_of_work=self.unit_of_work,
                rng=random.Random(settings.clustering_seed),
                iterations=settings.clustering_iterations,
            )
        return self._peer_clusterer

    @property
    def recommendations(self) -> RecommendationEngine:
        """Get the RecommendationEngine instance."""
        if self._recommendation_engine is None:
            self._recommendation_engine = RecommendationEngine(
                account_repo=self.accounts,
                position_repo=self.positions,
                stock_repo=self.stocks,
                unit_of_work=self.unit_of_work,
            )
        return self._recommendation_engine

    @property
    def reporting(self) -> ReportingService:
        """Get the ReportingService instance."""
        if self._reporting_service is None:
            self._reporting_service = ReportingService(
                account_repo=self.accounts,
                position_repo=self.positions,
                stock_repo=self.stocks,
                unit_of_work=self.unit_of_work,
            )
        return self._reporting_service

    def close(self) -> None:
        """Clean up resources."""
        if self._session:
            self._session.close()
            self._session = None
