"""SQLAlchemy implementation of FirmHoldingRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.core.timezone import to_eastern
from app.domain.models import FirmFractionalHolding
from app.repositories.sqlalchemy.orm_models import FirmHoldingORM


class SqlAlchemyFirmHoldingRepository:
    """SQLAlchemy-backed firm fractional-share bucket repository."""

    def __init__(self, db: Session):
        self._db = db

    def get(self, stock_id: int) -> Optional[FirmFractionalHolding]:
        """Get the bucket for a stock."""
        orm_holding = self._db.query(FirmHoldingORM).filter(
            FirmHoldingORM.stock_id == stock_id
        ).first()
        return self._to_domain(orm_holding) if orm_holding else None

    def upsert(self, holding: FirmFractionalHolding) -> FirmFractionalHolding:
        """Insert or update the bucket for a stock."""
        orm_holding = self._db.query(FirmHoldingORM).filter(
            FirmHoldingORM.stock_id == holding.stock_id
        ).first()

        if orm_holding:
            orm_holding.fractional_balance = holding.fractional_balance
            orm_holding.updated_at_est = holding.updated_at_est
        else:
            orm_holding = FirmHoldingORM(
                stock_id=holding.stock_id,
                fractional_balance=holding.fractional_balance,
                updated_at_est=holding.updated_at_est,
            )
            self._db.add(orm_holding)

        self._db.flush()
        return self._to_domain(orm_holding)

    @staticmethod
    def _to_domain(orm: FirmHoldingORM) -> FirmFractionalHolding:
        return FirmFractionalHolding(
            stock_id=orm.stock_id,
            fractional_balance=(
                Decimal(str(orm.fractional_balance)) if orm.fractional_balance else Decimal("0")
            ),
            updated_at_est=to_eastern(orm.updated_at_est) if orm.updated_at_est else None,
        )
