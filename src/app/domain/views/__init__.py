"""View models for service outputs."""

from app.domain.views.ledger import TradeResult

__all__ = [
    "TradeResult",
]
