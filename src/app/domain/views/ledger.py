"""View models for ledger operation outcomes."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from app.domain.models import Position, TradeSide


@dataclass
class TradeResult:
    """Outcome of a successful trade."""

    account_id: int
    symbol: str
    side: TradeSide
    shares: Decimal
    price: Decimal
    amount: Decimal
    cash_balance: Decimal
    position: Optional[Position] = None
