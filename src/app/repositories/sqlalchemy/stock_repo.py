"""SQLAlchemy implementations of StockRepository and SectorRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.domain.models import Sector, Stock
from app.repositories.sqlalchemy.orm_models import SectorORM, StockORM


class SqlAlchemyStockRepository:
    """SQLAlchemy-backed stock repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, stock: Stock) -> Stock:
        """Persist a new stock."""
        orm_stock = StockORM(
            stock_id=stock.stock_id or None,
            symbol=stock.symbol.upper(),
            company_name=stock.company_name,
            sector_id=stock.sector_id,
            price_per_share=stock.price_per_share,
        )
        self._db.add(orm_stock)
        self._db.flush()
        return self._to_domain(orm_stock)

    def get_by_id(self, stock_id: int) -> Optional[Stock]:
        """Retrieve stock by ID."""
        orm_stock = self._db.query(StockORM).filter(
            StockORM.stock_id == stock_id
        ).first()
        return self._to_domain(orm_stock) if orm_stock else None

    def get_by_symbol(self, symbol: str) -> Optional[Stock]:
        """Retrieve stock by symbol."""
        orm_stock = self._db.query(StockORM).filter(
            StockORM.symbol == symbol.upper()
        ).first()
        return self._to_domain(orm_stock) if orm_stock else None

    def list_all(self) -> list[Stock]:
        """List all stocks."""
        orm_stocks = self._db.query(StockORM).order_by(StockORM.stock_id).all()
        return [self._to_domain(s) for s in orm_stocks]

    def set_price(self, stock_id: int, price_per_share: Decimal) -> Stock:
        """Set the current per-share price."""
        orm_stock = self._db.query(StockORM).filter(
            StockORM.stock_id == stock_id
        ).first()
        if not orm_stock:
            raise NotFoundError("Stock", stock_id)
        orm_stock.price_per_share = price_per_share
        self._db.flush()
        return self._to_domain(orm_stock)

    @staticmethod
    def _to_domain(orm: StockORM) -> Stock:
        """Convert ORM model to domain model."""
        return Stock(
            stock_id=orm.stock_id,
            symbol=orm.symbol,
            sector_id=orm.sector_id,
            company_name=orm.company_name,
            price_per_share=(
                Decimal(str(orm.price_per_share)) if orm.price_per_share is not None else None
            ),
        )


class SqlAlchemySectorRepository:
    """SQLAlchemy-backed sector repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, sector: Sector) -> Sector:
        """Persist a new sector."""
        orm_sector = SectorORM(sector_id=sector.sector_id or None, name=sector.name)
        self._db.add(orm_sector)
        self._db.flush()
        return self._to_domain(orm_sector)

    def get_by_id(self, sector_id: int) -> Optional[Sector]:
        """Retrieve sector by ID."""
        orm_sector = self._db.query(SectorORM).filter(
            SectorORM.sector_id == sector_id
        ).first()
        return self._to_domain(orm_sector) if orm_sector else None

    def get_by_name(self, name: str) -> Optional[Sector]:
        """Retrieve sector by name."""
        orm_sector = self._db.query(SectorORM).filter(SectorORM.name == name).first()
        return self._to_domain(orm_sector) if orm_sector else None

    def list_all(self) -> list[Sector]:
        """List all sectors."""
        orm_sectors = self._db.query(SectorORM).order_by(SectorORM.sector_id).all()
        return [self._to_domain(s) for s in orm_sectors]

    @staticmethod
    def _to_domain(orm: SectorORM) -> Sector:
        return Sector(sector_id=orm.sector_id, name=orm.name)
