"""SQLAlchemy implementation of AccountRepository."""

from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.domain.models import Account
from app.repositories.sqlalchemy.orm_models import AccountORM


class SqlAlchemyAccountRepository:
    """SQLAlchemy-backed account repository."""

    def __init__(self, db: Session):
        self._db = db

    def create(self, account: Account) -> Account:
        """Persist a new account."""
        orm_account = AccountORM(
            account_id=account.account_id or None,
            name=account.name,
            client_id=account.client_id,
            advisor_id=account.advisor_id,
            profile_id=account.profile_id,
            reinvest=account.reinvest,
            cash_balance=account.cash_balance,
        )
        self._db.add(orm_account)
        self._db.flush()
        return self._to_domain(orm_account)

    def get_by_id(self, account_id: int) -> Optional[Account]:
        """Retrieve account by ID."""
        orm_account = self._db.query(AccountORM).filter(
            AccountORM.account_id == account_id
        ).first()
        return self._to_domain(orm_account) if orm_account else None

    def list_all(self) -> list[Account]:
        """List all accounts."""
        orm_accounts = self._db.query(AccountORM).order_by(AccountORM.account_id).all()
        return [self._to_domain(a) for a in orm_accounts]

    def list_by_advisor(self, advisor_id: int) -> list[Account]:
        """List accounts managed by an advisor."""
        orm_accounts = (
            self._db.query(AccountORM)
            .filter(AccountORM.advisor_id == advisor_id)
            .order_by(AccountORM.account_id)
            .all()
        )
        return [self._to_domain(a) for a in orm_accounts]

    def list_by_client(self, client_id: int) -> list[Account]:
        """List accounts owned by a client."""
        orm_accounts = (
            self._db.query(AccountORM)
            .filter(AccountORM.client_id == client_id)
            .order_by(AccountORM.account_id)
            .all()
        )
        return [self._to_domain(a) for a in orm_accounts]

    def update_cash_balance(self, account_id: int, cash_balance: Decimal) -> Account:
        """Set the cash balance of an existing account."""
        orm_account = self._db.query(AccountORM).filter(
            AccountORM.account_id == account_id
        ).first()
        if not orm_account:
            raise NotFoundError("Account", account_id)
        orm_account.cash_balance = cash_balance
        self._db.flush()
        return self._to_domain(orm_account)

    @staticmethod
    def _to_domain(orm: AccountORM) -> Account:
        """Convert ORM model to domain model."""
        return Account(
            account_id=orm.account_id,
            name=orm.name,
            profile_id=orm.profile_id,
            cash_balance=Decimal(str(orm.cash_balance)) if orm.cash_balance else Decimal("0"),
            reinvest=bool(orm.reinvest),
            client_id=orm.client_id,
            advisor_id=orm.advisor_id,
        )
