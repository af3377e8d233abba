"""Core utilities and shared functionality."""

from app.core.timezone import (
    now_eastern,
    to_eastern,
    EASTERN_TZ,
)
from app.core.exceptions import (
    AppError,
    ValidationError,
    NotFoundError,
    InsufficientSharesError,
    InsufficientCashError,
    StoreUnavailableError,
)
from app.core.locks import KeyedLockRegistry, account_key, stock_key

__all__ = [
    "now_eastern",
    "to_eastern",
    "EASTERN_TZ",
    "AppError",
    "ValidationError",
    "NotFoundError",
    "InsufficientSharesError",
    "InsufficientCashError",
    "StoreUnavailableError",
    "KeyedLockRegistry",
    "account_key",
    "stock_key",
]
