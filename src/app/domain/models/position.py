"""Position domain model and cost-basis arithmetic."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Position:
    """
    Holding of one stock in one account.

    ``acb`` is the per-share average cost basis. A position whose quantity
    has been sold down to zero is kept as a zero row.
    """

    account_id: int
    stock_id: int
    quantity: Decimal = field(default_factory=lambda: Decimal("0"))
    acb: Decimal = field(default_factory=lambda: Decimal("0"))
    updated_at_est: Optional[datetime] = field(default=None)

    @property
    def total_cost(self) -> Decimal:
        """Total cost basis of the shares currently held."""
        return self.acb * self.quantity

    def market_value(self, price: Decimal) -> Decimal:
        return self.quantity * price

    def unrealized_profit(self, price: Decimal) -> Decimal:
        """Profit of the position at ``price``: (price - acb) * quantity."""
        return (price - self.acb) * self.quantity

    def with_purchase(
        self,
        quantity: Decimal,
        price: Decimal,
        at: Optional[datetime] = None,
    ) -> "Position":
        """
        Return the position after buying ``quantity`` shares at ``price``.

        ACB becomes the weighted average (acb*q + price*delta) / (q + delta).
        """
        new_quantity = self.quantity + quantity
        new_acb = (self.acb * self.quantity + price * quantity) / new_quantity
        return replace(self, quantity=new_quantity, acb=new_acb, updated_at_est=at)

    def with_sale(self, quantity: Decimal, at: Optional[datetime] = None) -> "Position":
        """Return the position after selling ``quantity`` shares; ACB is unchanged."""
        return replace(self, quantity=self.quantity - quantity, updated_at_est=at)

    @classmethod
    def opened(
        cls,
        account_id: int,
        stock_id: int,
        quantity: Decimal,
        price: Decimal,
        at: Optional[datetime] = None,
    ) -> "Position":
        """Create the position produced by a first purchase."""
        return cls(
            account_id=account_id,
            stock_id=stock_id,
            quantity=quantity,
            acb=price,
            updated_at_est=at,
        )
