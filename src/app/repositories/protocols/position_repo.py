"""Position repository protocol."""

from typing import Protocol, Optional

from app.domain.models import Position


class PositionRepository(Protocol):
    """Interface for per-(account, stock) holdings."""

    def get(self, account_id: int, stock_id: int) -> Optional[Position]:
        """Get the position of one stock in one account."""
        ...

    def list_by_account(self, account_id: int) -> list[Position]:
        """List all positions of an account."""
        ...

    def list_by_stock(self, stock_id: int) -> list[Position]:
        """List every account's position in a stock, ordered by account."""
        ...

    def list_all(self) -> list[Position]:
        """List all positions."""
        ...

    def upsert(self, position: Position) -> Position:
        """Insert or update a position."""
        ...
