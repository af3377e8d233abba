"""Reference data read by the ledger and analytics: sectors, stocks, profiles."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

# Name of the implicit sector holding an account's cash balance, and the
# trade symbol meaning "move cash, not shares".
CASH_SECTOR = "cash"

# Price of a stock whose price has never been set.
DEFAULT_SHARE_PRICE = Decimal("1.0")


@dataclass
class Sector:
    """Industry sector stocks are classified under."""

    sector_id: int
    name: str


@dataclass
class Stock:
    """
    Tradable security.

    Prices are "as of last set"; there is no price history.
    """

    stock_id: int
    symbol: str
    sector_id: int
    company_name: Optional[str] = None
    price_per_share: Optional[Decimal] = None

    def __post_init__(self) -> None:
        self.symbol = self.symbol.upper()
        if self.price_per_share is not None and not isinstance(self.price_per_share, Decimal):
            self.price_per_share = Decimal(str(self.price_per_share))

    @property
    def current_price(self) -> Decimal:
        """Last set price, or the default for a stock never priced."""
        if self.price_per_share is None:
            return DEFAULT_SHARE_PRICE
        return self.price_per_share


@dataclass
class Profile:
    """
    Investment profile: target percentage per sector name.

    Percentages, including the ``cash`` sector, sum to 100. Profiles are
    immutable once defined.
    """

    profile_id: int
    name: str
    target_weights: dict[str, int] = field(default_factory=dict)

    @property
    def total_percentage(self) -> int:
        return sum(self.target_weights.values())
