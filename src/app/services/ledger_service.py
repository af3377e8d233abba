"""Ledger service: trades, dividends and the firm's fractional-share bucket."""

import logging
import math
from decimal import Decimal, ROUND_FLOOR
from typing import Optional, Union

from app.core.exceptions import (
    AppError,
    InsufficientCashError,
    InsufficientSharesError,
    NotFoundError,
    ValidationError,
)
from app.core.locks import KeyedLockRegistry, account_key, stock_key
from app.core.timezone import now_eastern
from app.domain.models import (
    CASH_SECTOR,
    Account,
    FirmFractionalHolding,
    Position,
    Stock,
    TradeSide,
)
from app.domain.views import TradeResult
from app.repositories.protocols import (
    AccountRepository,
    FirmHoldingRepository,
    PositionRepository,
    StockRepository,
    UnitOfWork,
)

logger = logging.getLogger(__name__)

Quantity = Union[int, Decimal, str]


def to_decimal(value: Quantity) -> Decimal:
    """Convert user input to Decimal without going through binary floats."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def require_positive_id(name: str, value: int) -> None:
    """Reject ids the store can never hold."""
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ValidationError(f"{name} must be a positive integer, got {value!r}")


class LedgerService:
    """
    Service owning account cash balances and positions.

    Every trade and every dividend disbursement runs as one store
    transaction under the per-account (and, for the firm bucket, per-stock)
    lock, so concurrent calls on the same key are serialized and a rejected
    call leaves no trace.
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        position_repo: PositionRepository,
        stock_repo: StockRepository,
        firm_holding_repo: FirmHoldingRepository,
        unit_of_work: UnitOfWork,
        locks: Optional[KeyedLockRegistry] = None,
        cash_symbol: str = CASH_SECTOR,
    ):
        self._account_repo = account_repo
        self._position_repo = position_repo
        self._stock_repo = stock_repo
        self._firm_holding_repo = firm_holding_repo
        self._uow = unit_of_work
        self._locks = locks or KeyedLockRegistry()
        self._cash_symbol = cash_symbol.lower()

    @property
    def locks(self) -> KeyedLockRegistry:
        """Lock registry serializing this service's writes."""
        return self._locks

    # Lookups

    def get_account(self, account_id: int) -> Account:
        """Get account by ID."""
        with self._uow.snapshot():
            return self._require_account(account_id)

    def get_position(self, account_id: int, symbol: str) -> Optional[Position]:
        """Get the account's position in a stock, or None if never held."""
        with self._uow.snapshot():
            self._require_account(account_id)
            stock = self._require_stock(symbol)
            return self._position_repo.get(account_id, stock.stock_id)

    def list_positions(self, account_id: int) -> list[Position]:
        """List all positions of an account, including zero rows."""
        with self._uow.snapshot():
            self._require_account(account_id)
            return self._position_repo.list_by_account(account_id)

    def get_firm_holding(self, symbol: str) -> Optional[FirmFractionalHolding]:
        """Get the firm's fractional-share bucket for a stock."""
        with self._uow.snapshot():
            stock = self._require_stock(symbol)
            return self._firm_holding_repo.get(stock.stock_id)

    # Trades

    def trade(self, account_id: int, symbol: str, shares_exchanged: Quantity) -> TradeResult:
        """
        Buy (positive) or sell (negative) shares of a stock for an account.

        The cash symbol instead moves ``shares_exchanged`` dollars in or out
        of the account's cash balance.

        Raises:
            NotFoundError: unknown account or stock, or a sell with no position
            InsufficientCashError: buy costs more than the cash balance
            InsufficientSharesError: sell exceeds the shares held
            ValidationError: zero shares or a non-positive account id
        """
        require_positive_id("account_id", account_id)
        shares = to_decimal(shares_exchanged)
        if shares == 0:
            raise ValidationError("shares_exchanged must be non-zero")

        with self._locks.hold(account_key(account_id)), self._uow.atomic():
            account = self._require_account(account_id)
            if symbol.lower() == self._cash_symbol:
                result = self._move_cash(account, shares)
            elif shares > 0:
                result = self._buy(account, self._require_stock(symbol), shares)
            else:
                result = self._sell(account, self._require_stock(symbol), -shares)

        logger.info(
            "Executed %s of %s %s for account %s at %s",
            result.side.value,
            result.shares,
            result.symbol,
            account_id,
            result.price,
        )
        return result

    def _move_cash(self, account: Account, amount: Decimal) -> TradeResult:
        updated = self._account_repo.update_cash_balance(
            account.account_id,
            account.cash_balance + amount,
        )
        return TradeResult(
            account_id=account.account_id,
            symbol=self._cash_symbol,
            side=TradeSide.CASH,
            shares=amount,
            price=Decimal("1"),
            amount=amount,
            cash_balance=updated.cash_balance,
        )

    def _buy(self, account: Account, stock: Stock, quantity: Decimal) -> TradeResult:
        price = stock.current_price
        amount = price * quantity
        if account.cash_balance < amount:
            logger.warning(
                "Rejected buy of %s %s for account %s: cash %s < %s",
                quantity,
                stock.symbol,
                account.account_id,
                account.cash_balance,
                amount,
            )
            raise InsufficientCashError(str(amount), str(account.cash_balance))

        now = now_eastern()
        existing = self._position_repo.get(account.account_id, stock.stock_id)
        if existing is None:
            position = Position.opened(account.account_id, stock.stock_id, quantity, price, now)
        else:
            position = existing.with_purchase(quantity, price, now)

        updated = self._account_repo.update_cash_balance(
            account.account_id,
            account.cash_balance - amount,
        )
        saved = self._position_repo.upsert(position)
        return TradeResult(
            account_id=account.account_id,
            symbol=stock.symbol,
            side=TradeSide.BUY,
            shares=quantity,
            price=price,
            amount=amount,
            cash_balance=updated.cash_balance,
            position=saved,
        )

    def _sell(self, account: Account, stock: Stock, quantity: Decimal) -> TradeResult:
        existing = self._position_repo.get(account.account_id, stock.stock_id)
        if existing is None:
            raise NotFoundError("Position", f"account {account.account_id} / {stock.symbol}")
        if existing.quantity < quantity:
            logger.warning(
                "Rejected sell of %s %s for account %s: holds %s",
                quantity,
                stock.symbol,
                account.account_id,
                existing.quantity,
            )
            raise InsufficientSharesError(stock.symbol, str(quantity), str(existing.quantity))

        price = stock.current_price
        amount = price * quantity
        updated = self._account_repo.update_cash_balance(
            account.account_id,
            account.cash_balance + amount,
        )
        saved = self._position_repo.upsert(existing.with_sale(quantity, now_eastern()))
        return TradeResult(
            account_id=account.account_id,
            symbol=stock.symbol,
            side=TradeSide.SELL,
            shares=quantity,
            price=price,
            amount=amount,
            cash_balance=updated.cash_balance,
            position=saved,
        )

    # Dividends

    def disburse_dividend(self, symbol: str, dividend_per_share: Quantity) -> int:
        """
        Pay a per-share dividend to every account holding the stock.

        Reinvesting accounts receive the whole shares the dividend buys at
        the current price; the leftover fractions of all accounts go to the
        firm's bucket for the stock. Other accounts are paid in cash.
        A holder that cannot be processed is logged and skipped.

        The stock's lock and every holder's account lock are held until the
        disbursement commits.

        Returns:
            Number of whole shares the firm acquires to cover the fractions.
        """
        dividend = to_decimal(dividend_per_share)
        if dividend <= 0:
            raise ValidationError("dividend_per_share must be positive")

        with self._uow.snapshot():
            stock = self._require_stock(symbol)
            holder_ids = self._holder_ids(stock.stock_id)

        while True:
            keys = [stock_key(stock.stock_id)] + [account_key(a) for a in holder_ids]
            with self._locks.hold(*keys), self._uow.atomic():
                stock = self._require_stock(symbol)
                holders = self._position_repo.list_by_stock(stock.stock_id)
                new_holders = {p.account_id for p in holders} - holder_ids
                if not new_holders:
                    accumulated_fraction = self._pay_holders(stock, holders, dividend)
                    whole_shares = self._settle_firm_fraction(stock.stock_id, accumulated_fraction)
                    break
            # A buy opened a position after the holders were listed
            holder_ids |= new_holders

        logger.info(
            "Disbursed %s/share on %s; firm fraction %s, firm bought %s shares",
            dividend,
            stock.symbol,
            accumulated_fraction,
            whole_shares,
        )
        return whole_shares

    def _holder_ids(self, stock_id: int) -> set[int]:
        return {p.account_id for p in self._position_repo.list_by_stock(stock_id)}

    def _pay_holders(self, stock: Stock, holders: list[Position], dividend: Decimal) -> Decimal:
        price = stock.current_price
        accumulated_fraction = Decimal("0")
        for position in holders:
            try:
                accumulated_fraction += self._pay_holder(position, dividend, price)
            except (AppError, ArithmeticError) as e:
                logger.warning(
                    "Skipped dividend on %s for account %s: %s",
                    stock.symbol,
                    position.account_id,
                    e,
                )
        return accumulated_fraction

    def _pay_holder(self, position: Position, dividend: Decimal, price: Decimal) -> Decimal:
        """Pay one holder; returns the fractional share left for the firm."""
        account = self._require_account(position.account_id)
        total_dividend = position.quantity * dividend

        if not account.reinvest:
            self._account_repo.update_cash_balance(
                account.account_id,
                account.cash_balance + total_dividend,
            )
            return Decimal("0")

        shares_to_buy = total_dividend / price
        whole_shares = shares_to_buy.to_integral_value(rounding=ROUND_FLOOR)
        if whole_shares > 0:
            self._position_repo.upsert(
                position.with_purchase(whole_shares, price, now_eastern())
            )
        return shares_to_buy - whole_shares

    def _settle_firm_fraction(self, stock_id: int, accumulated_fraction: Decimal) -> int:
        """
        Move this call's fractional remainder into the firm bucket.

        When the bucket cannot cover the remainder the firm buys
        floor(remainder - owned) + 1 whole shares and keeps the surplus.
        """
        holding = self._firm_holding_repo.get(stock_id)
        if holding is None and accumulated_fraction == 0:
            return 0

        owned = holding.fractional_balance if holding else Decimal("0")
        if owned < accumulated_fraction:
            whole_shares = math.floor(accumulated_fraction - owned) + 1
            balance = owned + whole_shares - accumulated_fraction
        else:
            whole_shares = 0
            balance = owned - accumulated_fraction

        self._firm_holding_repo.upsert(
            FirmFractionalHolding(
                stock_id=stock_id,
                fractional_balance=balance,
                updated_at_est=now_eastern(),
            )
        )
        return whole_shares

    # Helpers

    def _require_account(self, account_id: int) -> Account:
        account = self._account_repo.get_by_id(account_id)
        if not account:
            raise NotFoundError("Account", account_id)
        return account

    def _require_stock(self, symbol: str) -> Stock:
        stock = self._stock_repo.get_by_symbol(symbol)
        if not stock:
            raise NotFoundError("Stock", symbol)
        return stock
