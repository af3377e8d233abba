"""SQLAlchemy implementation of PositionRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.core.timezone import to_eastern
from app.domain.models import Position
from app.repositories.sqlalchemy.orm_models import PositionORM


class SqlAlchemyPositionRepository:
    """SQLAlchemy-backed position repository."""

    def __init__(self, db: Session):
        self._db = db

    def get(self, account_id: int, stock_id: int) -> Optional[Position]:
        """Get the position of one stock in one account."""
        orm_pos = self._find(account_id, stock_id)
        return self._to_domain(orm_pos) if orm_pos else None

    def list_by_account(self, account_id: int) -> list[Position]:
        """List all positions of an account."""
        orm_positions = (
            self._db.query(PositionORM)
            .filter(PositionORM.account_id == account_id)
            .order_by(PositionORM.stock_id)
            .all()
        )
        return [self._to_domain(p) for p in orm_positions]

    def list_by_stock(self, stock_id: int) -> list[Position]:
        """List every account's position in a stock."""
        orm_positions = (
            self._db.query(PositionORM)
            .filter(PositionORM.stock_id == stock_id)
            .order_by(PositionORM.account_id)
            .all()
        )
        return [self._to_domain(p) for p in orm_positions]

    def list_all(self) -> list[Position]:
        """List all positions."""
        orm_positions = (
            self._db.query(PositionORM)
            .order_by(PositionORM.account_id, PositionORM.stock_id)
            .all()
        )
        return [self._to_domain(p) for p in orm_positions]

    def upsert(self, position: Position) -> Position:
        """Insert or update a position."""
        orm_pos = self._find(position.account_id, position.stock_id)

        if orm_pos:
            orm_pos.quantity = position.quantity
            orm_pos.acb = position.acb
            orm_pos.updated_at_est = position.updated_at_est
        else:
            orm_pos = PositionORM(
                account_id=position.account_id,
                stock_id=position.stock_id,
                quantity=position.quantity,
                acb=position.acb,
                updated_at_est=position.updated_at_est,
            )
            self._db.add(orm_pos)

        self._db.flush()
        return self._to_domain(orm_pos)

    def _find(self, account_id: int, stock_id: int) -> Optional[PositionORM]:
        return (
            self._db.query(PositionORM)
            .filter(
                PositionORM.account_id == account_id,
                PositionORM.stock_id == stock_id,
            )
            .first()
        )

    @staticmethod
    def _to_domain(orm: PositionORM) -> Position:
        """Convert ORM position to domain model."""
        return Position(
            account_id=orm.account_id,
            stock_id=orm.stock_id,
            quantity=Decimal(str(orm.quantity)) if orm.quantity else Decimal("0"),
            acb=Decimal(str(orm.acb)) if orm.acb else Decimal("0"),
            updated_at_est=to_eastern(orm.updated_at_est) if orm.updated_at_est else None,
        )
