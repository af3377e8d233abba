"""Stock repository protocol."""

from decimal import Decimal
from typing import Protocol, Optional

from app.domain.models import Stock


class StockRepository(Protocol):
    """Interface for stock lookups and price updates."""

    def create(self, stock: Stock) -> Stock:
        """Persist a new stock."""
        ...

    def get_by_id(self, stock_id: int) -> Optional[Stock]:
        """Retrieve stock by ID."""
        ...

    def get_by_symbol(self, symbol: str) -> Optional[Stock]:
        """Retrieve stock by symbol (case-insensitive)."""
        ...

    def list_all(self) -> list[Stock]:
        """List all stocks, ordered by ID."""
        ...

    def set_price(self, stock_id: int, price_per_share: Decimal) -> Stock:
        """Set the current per-share price."""
        ...
