"""Account domain model."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional


@dataclass
class Account:
    """
    Investment account held by a client and managed by an advisor.

    The cash balance is owned by the ledger; every trade and dividend
    mutates it. ``reinvest`` decides whether dividends buy more shares
    or are paid out as cash.
    """

    account_id: int
    name: str
    profile_id: int
    cash_balance: Decimal = field(default_factory=lambda: Decimal("0"))
    reinvest: bool = False
    client_id: Optional[int] = None
    advisor_id: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.cash_balance, Decimal):
            self.cash_balance = Decimal(str(self.cash_balance))
