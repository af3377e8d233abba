"""Valuation and profit reports over the ledger."""

from decimal import Decimal

from app.core.exceptions import NotFoundError
from app.domain.models import Account, Stock
from app.repositories.protocols import (
    AccountRepository,
    PositionRepository,
    StockRepository,
    UnitOfWork,
)


class ReportingService:
    """
    Market-value reports for accounts, advisors and clients.

    All values use each stock's current price.
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        position_repo: PositionRepository,
        stock_repo: StockRepository,
        unit_of_work: UnitOfWork,
    ):
        self._account_repo = account_repo
        self._position_repo = position_repo
        self._stock_repo = stock_repo
        self._uow = unit_of_work

    def account_value(self, account_id: int) -> Decimal:
        """
        Total market value of an account.

        Formula: cash + Σ(quantity × price)
        """
        with self._uow.snapshot():
            account = self._account_repo.get_by_id(account_id)
            if not account:
                raise NotFoundError("Account", account_id)
            return self._value_of(account, self._stocks())

    def advisor_portfolio_value(self, advisor_id: int) -> Decimal:
        """Sum of the market values of every account the advisor manages."""
        with self._uow.snapshot():
            stocks = self._stocks()
            return sum(
                (self._value_of(a, stocks) for a in self._account_repo.list_by_advisor(advisor_id)),
                Decimal("0"),
            )

    def investor_profit(self, client_id: int) -> dict[int, Decimal]:
        """
        Unrealized profit per account of a client.

        Formula per account: Σ((price - acb) × quantity)
        """
        with self._uow.snapshot():
            stocks = self._stocks()
            profits: dict[int, Decimal] = {}
            for account in self._account_repo.list_by_client(client_id):
                profits[account.account_id] = sum(
                    (
                        p.unrealized_profit(stocks[p.stock_id].current_price)
                        for p in self._position_repo.list_by_account(account.account_id)
                    ),
                    Decimal("0"),
                )
            return profits

    def _stocks(self) -> dict[int, Stock]:
        return {s.stock_id: s for s in self._stock_repo.list_all()}

    def _value_of(self, account: Account, stocks: dict[int, Stock]) -> Decimal:
        total = account.cash_balance
        for position in self._position_repo.list_by_account(account.account_id):
            total += position.market_value(stocks[position.stock_id].current_price)
        return total
