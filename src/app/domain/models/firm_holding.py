"""Firm-level fractional share bucket."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class FirmFractionalHolding:
    """
    Residual fractional shares of one stock owned by the firm.

    Accumulates the fractions left over when client dividends are
    reinvested in whole shares only.
    """

    stock_id: int
    fractional_balance: Decimal = field(default_factory=lambda: Decimal("0"))
    updated_at_est: Optional[datetime] = field(default=None)
