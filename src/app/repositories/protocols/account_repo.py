"""Account repository protocol."""

from decimal import Decimal
from typing import Protocol, Optional

from app.domain.models import Account


class AccountRepository(Protocol):
    """Interface for account data access."""

    def create(self, account: Account) -> Account:
        """Persist a new account; a falsy account_id is assigned by the store."""
        ...

    def get_by_id(self, account_id: int) -> Optional[Account]:
        """Retrieve account by ID."""
        ...

    def list_all(self) -> list[Account]:
        """List all accounts, ordered by ID."""
        ...

    def list_by_advisor(self, advisor_id: int) -> list[Account]:
        """List accounts managed by an advisor."""
        ...

    def list_by_client(self, client_id: int) -> list[Account]:
        """List accounts owned by a client."""
        ...

    def update_cash_balance(self, account_id: int, cash_balance: Decimal) -> Account:
        """Set the cash balance of an existing account."""
        ...
