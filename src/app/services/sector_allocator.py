"""Sector allocation of an account's holdings."""

from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP

from app.core.exceptions import NotFoundError
from app.domain.models import CASH_SECTOR, Account
from app.repositories.protocols import (
    AccountRepository,
    PositionRepository,
    SectorRepository,
    StockRepository,
    UnitOfWork,
)


class SectorAllocator:
    """
    Converts an account's positions and cash into sector percentages.

    Cash counts as the implicit ``cash`` sector. Every known sector appears
    in the result, with 0 for sectors the account does not hold.
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        position_repo: PositionRepository,
        stock_repo: StockRepository,
        sector_repo: SectorRepository,
        unit_of_work: UnitOfWork,
    ):
        self._account_repo = account_repo
        self._position_repo = position_repo
        self._stock_repo = stock_repo
        self._sector_repo = sector_repo
        self._uow = unit_of_work

    def sector_names(self) -> list[str]:
        """All known sector names, with ``cash`` last."""
        with self._uow.snapshot():
            names = [s.name for s in self._sector_repo.list_all() if s.name != CASH_SECTOR]
        return names + [CASH_SECTOR]

    def sector_values(self, account_id: int) -> dict[str, Decimal]:
        """
        Market value per held sector, plus the cash balance under ``cash``.

        Value of a sector = sum(quantity * price) over its stocks.
        """
        with self._uow.snapshot():
            account = self._require_account(account_id)
            return self._values_for(account)

    def weights(self, account_id: int) -> dict[str, int]:
        """
        Integer percentage of the account's total value per sector.

        Percentages are rounded half up, so they sum to 100 give or take
        rounding. An account with zero total value gets 0 everywhere.
        """
        with self._uow.snapshot():
            account = self._require_account(account_id)
            values = self._values_for(account)
            names = self.sector_names()

        total = sum(values.values(), Decimal("0"))
        return {name: self._percentage(values.get(name), total) for name in names}

    def _values_for(self, account: Account) -> dict[str, Decimal]:
        sector_names = {s.sector_id: s.name for s in self._sector_repo.list_all()}
        stocks = {s.stock_id: s for s in self._stock_repo.list_all()}

        values: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
        for position in self._position_repo.list_by_account(account.account_id):
            if position.quantity == 0:
                continue
            stock = stocks[position.stock_id]
            values[sector_names[stock.sector_id]] += position.market_value(stock.current_price)

        values[CASH_SECTOR] = account.cash_balance
        return dict(values)

    @staticmethod
    def _percentage(value, total: Decimal) -> int:
        if not value or total == 0:
            return 0
        return int((value / total * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def _require_account(self, account_id: int) -> Account:
        account = self._account_repo.get_by_id(account_id)
        if not account:
            raise NotFoundError("Account", account_id)
        return account
