"""Firm fractional holding repository protocol."""

from typing import Protocol, Optional

from app.domain.models import FirmFractionalHolding


class FirmHoldingRepository(Protocol):
    """Interface for the firm's fractional-share bucket per stock."""

    def get(self, stock_id: int) -> Optional[FirmFractionalHolding]:
        """Get the bucket for a stock."""
        ...

    def upsert(self, holding: FirmFractionalHolding) -> FirmFractionalHolding:
        """Insert or update the bucket for a stock."""
        ...
