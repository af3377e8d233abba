"""Enumerations for domain models."""

from enum import Enum


class TradeSide(str, Enum):
    """Direction of a ledger trade."""

    BUY = "BUY"
    SELL = "SELL"
    CASH = "CASH"  # Pure cash movement, no security involved
