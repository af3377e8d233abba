"""
Pytest configuration and fixtures for ledger and analytics tests.

This module provides:
- In-memory SQLite database fixtures
- Repository, unit-of-work and lock fixtures
- Service fixtures wired the way AppContext wires them
- Factory helpers for sectors, stocks, profiles and accounts
- Time helpers for Eastern timezone
"""

import random
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional

import pytest
from sqlalchemy import StaticPool
from sqlalchemy.orm import sessionmaker, Session

from app.repositories.sqlalchemy.database import Base, create_store_engine
# Import ORM models to register them with Base before creating tables
from app.repositories.sqlalchemy import orm_models  # noqa: F401
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
from app.domain.models import Account, Profile, Sector, Stock
from app.core.locks import KeyedLockRegistry
from app.core.timezone import EASTERN_TZ
from app.config.settings import reset_settings


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def eastern_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in US/Eastern timezone."""
    return EASTERN_TZ.localize(datetime(year, month, day, hour, minute, second))


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return eastern_datetime(2024, 6, 15, 14, 30, 0)


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    # Reset settings for clean state
    reset_settings()

    engine = create_store_engine("sqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def test_session(test_engine) -> Session:
    """Create test database session."""
    TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# REPOSITORY FIXTURES
# =============================================================================


@pytest.fixture
def account_repo(test_session) -> SqlAlchemyAccountRepository:
    """Provide test AccountRepository."""
    return SqlAlchemyAccountRepository(test_session)


@pytest.fixture
def position_repo(test_session) -> SqlAlchemyPositionRepository:
    """Provide test PositionRepository."""
    return SqlAlchemyPositionRepository(test_session)


@pytest.fixture
def stock_repo(test_session) -> SqlAlchemyStockRepository:
    """Provide test StockRepository."""
    return SqlAlchemyStockRepository(test_session)


@pytest.fixture
def sector_repo(test_session) -> SqlAlchemySectorRepository:
    """Provide test SectorRepository."""
    return SqlAlchemySectorRepository(test_session)


@pytest.fixture
def profile_repo(test_session) -> SqlAlchemyProfileRepository:
    """Provide test ProfileRepository."""
    return SqlAlchemyProfileRepository(test_session)


@pytest.fixture
def firm_holding_repo(test_session) -> SqlAlchemyFirmHoldingRepository:
    """Provide test FirmHoldingRepository."""
    return SqlAlchemyFirmHoldingRepository(test_session)


@pytest.fixture
def unit_of_work(test_session) -> SqlAlchemyUnitOfWork:
    """Provide test UnitOfWork bound to the test session."""
    return SqlAlchemyUnitOfWork(test_session)


@pytest.fixture
def locks() -> KeyedLockRegistry:
    """Provide a lock registry that never waits long."""
    return KeyedLockRegistry(timeout_seconds=1.0)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def ledger_service(
    account_repo,
    position_repo,
    stock_repo,
    firm_holding_repo,
    unit_of_work,
    locks,
) -> LedgerService:
    """Provide test LedgerService."""
    return LedgerService(
        account_repo=account_repo,
        position_repo=position_repo,
        stock_repo=stock_repo,
        firm_holding_repo=firm_holding_repo,
        unit_of_work=unit_of_work,
        locks=locks,
    )


@pytest.fixture
def sector_allocator(
    account_repo,
    position_repo,
    stock_repo,
    sector_repo,
    unit_of_work,
) -> SectorAllocator:
    """Provide test SectorAllocator."""
    return SectorAllocator(
        account_repo=account_repo,
        position_repo=position_repo,
        stock_repo=stock_repo,
        sector_repo=sector_repo,
        unit_of_work=unit_of_work,
    )


@pytest.fixture
def drift_detector(sector_allocator, account_repo, profile_repo, unit_of_work) -> DriftDetector:
    """Provide test DriftDetector."""
    return DriftDetector(
        allocator=sector_allocator,
        account_repo=account_repo,
        profile_repo=profile_repo,
        unit_of_work=unit_of_work,
    )


@pytest.fixture
def peer_clusterer(drift_detector, sector_allocator, account_repo, unit_of_work) -> PeerClusterer:
    """Provide test PeerClusterer with a fixed seed."""
    return PeerClusterer(
        drift_detector=drift_detector,
        allocator=sector_allocator,
        account_repo=account_repo,
        unit_of_work=unit_of_work,
        rng=random.Random(42),
    )


@pytest.fixture
def recommendation_engine(
    account_repo,
    position_repo,
    stock_repo,
    unit_of_work,
) -> RecommendationEngine:
    """Provide test RecommendationEngine."""
    return RecommendationEngine(
        account_repo=account_repo,
        position_repo=position_repo,
        stock_repo=stock_repo,
        unit_of_work=unit_of_work,
    )


@pytest.fixture
def reporting_service(account_repo, position_repo, stock_repo, unit_of_work) -> ReportingService:
    """Provide test ReportingService."""
    return ReportingService(
        account_repo=account_repo,
        position_repo=position_repo,
        stock_repo=stock_repo,
        unit_of_work=unit_of_work,
    )


# =============================================================================
# FACTORY FIXTURES
# =============================================================================
# Seed data is committed through the unit of work; a later snapshot() rolls
# back anything left uncommitted in the session.


@pytest.fixture
def sector_factory(sector_repo, unit_of_work) -> Callable[..., Sector]:
    """Factory for creating (or reusing) sectors by name."""

    def _create_sector(name: str) -> Sector:
        with unit_of_work.atomic():
            existing = sector_repo.get_by_name(name)
            if existing:
                return existing
            return sector_repo.create(Sector(sector_id=0, name=name))

    return _create_sector


@pytest.fixture
def stock_factory(stock_repo, sector_factory, unit_of_work) -> Callable[..., Stock]:
    """Factory for creating test stocks."""

    def _create_stock(
        symbol: str,
        sector: str = "Technology",
        price: Optional[Decimal] = None,
        company_name: Optional[str] = None,
    ) -> Stock:
        sector_row = sector_factory(sector)
        with unit_of_work.atomic():
            return stock_repo.create(
                Stock(
                    stock_id=0,
                    symbol=symbol,
                    sector_id=sector_row.sector_id,
                    company_name=company_name or f"{symbol} Inc.",
                    price_per_share=price,
                )
            )

    return _create_stock


@pytest.fixture
def profile_factory(profile_repo, unit_of_work) -> Callable[..., Profile]:
    """Factory for creating test profiles."""

    def _create_profile(
        target_weights: Optional[dict[str, int]] = None,
        name: Optional[str] = None,
    ) -> Profile:
        if target_weights is None:
            target_weights = {"cash": 100}
        if name is None:
            name = f"Profile {uuid.uuid4().hex[:8]}"
        with unit_of_work.atomic():
            return profile_repo.create(
                Profile(profile_id=0, name=name, target_weights=target_weights)
            )

    return _create_profile


@pytest.fixture
def account_factory(account_repo, profile_factory, unit_of_work) -> Callable[..., Account]:
    """Factory for creating test accounts."""

    def _create_account(
        cash: Decimal = Decimal("0"),
        profile_id: Optional[int] = None,
        reinvest: bool = False,
        client_id: Optional[int] = None,
        advisor_id: Optional[int] = None,
        name: Optional[str] = None,
    ) -> Account:
        if profile_id is None:
            profile_id = profile_factory().profile_id
        if name is None:
            name = f"Test Account {uuid.uuid4().hex[:8]}"
        with unit_of_work.atomic():
            return account_repo.create(
                Account(
                    account_id=0,
                    name=name,
                    profile_id=profile_id,
                    cash_balance=Decimal(cash),
                    reinvest=reinvest,
                    client_id=client_id,
                    advisor_id=advisor_id,
                )
            )

    return _create_account


HOLDER_SEED_CASH = Decimal("1000000")


@pytest.fixture
def holding_factory(
    account_factory,
    ledger_service,
) -> Callable[..., Account]:
    """Factory for accounts that already hold shares, bought through the ledger."""

    def _create_holder(
        holdings: dict[str, Decimal],
        cash: Decimal = Decimal("0"),
        **account_kwargs,
    ) -> Account:
        account = account_factory(cash=HOLDER_SEED_CASH + Decimal(cash), **account_kwargs)
        for symbol, quantity in holdings.items():
            ledger_service.trade(account.account_id, symbol, quantity)
        excess = ledger_service.get_account(account.account_id).cash_balance - Decimal(cash)
        if excess:
            ledger_service.trade(account.account_id, "cash", -excess)
        return ledger_service.get_account(account.account_id)

    return _create_holder


# =============================================================================
# PRESET DATA FIXTURES
# =============================================================================


@pytest.fixture
def stock_x(stock_factory) -> Stock:
    """Stock X priced at $50 in Technology."""
    return stock_factory("XXX", sector="Technology", price=Decimal("50"))


@pytest.fixture
def funded_account(account_factory) -> Account:
    """Account starting with $1000 cash and no positions."""
    return account_factory(cash=Decimal("1000"))


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.0001"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(actual - expected)
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"
