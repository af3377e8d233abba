"""
Unit tests for ReportingService.

Tests cover:
- Account market value
- Advisor portfolio value
- Investor profit per account
"""

from decimal import Decimal

import pytest

from app.services import ReportingService
from app.core.exceptions import NotFoundError


def reprice(stock_repo, unit_of_work, symbol: str, price: str) -> None:
    with unit_of_work.atomic():
        stock = stock_repo.get_by_symbol(symbol)
        stock_repo.set_price(stock.stock_id, Decimal(price))


@pytest.fixture
def market(stock_factory):
    stock_factory("TEC", sector="Technology", price=Decimal("50"))
    stock_factory("MED", sector="Health", price=Decimal("20"))


class TestAccountValue:
    """Tests for account_value."""

    def test_cash_plus_positions_at_current_price(
        self, reporting_service: ReportingService, holding_factory, stock_repo, unit_of_work, market
    ):
        """
        GIVEN 4 TEC, 5 MED and $30 cash
        WHEN TEC reprices to $55
        THEN the account is worth 4*55 + 5*20 + 30 = $350
        """
        account = holding_factory({"TEC": 4, "MED": 5}, cash=Decimal("30"))
        reprice(stock_repo, unit_of_work, "TEC", "55")

        assert reporting_service.account_value(account.account_id) == Decimal("350")

    def test_unknown_account_raises(self, reporting_service, market):
        with pytest.raises(NotFoundError):
            reporting_service.account_value(9999)


class TestAdvisorPortfolioValue:
    """Tests for advisor_portfolio_value."""

    def test_sums_the_advisors_accounts(self, reporting_service, holding_factory, market):
        """
        GIVEN two accounts of advisor 7 and one of advisor 8
        WHEN I value advisor 7's portfolio
        THEN only advisor 7's accounts are summed
        """
        holding_factory({"TEC": 1}, cash=Decimal("10"), advisor_id=7)
        holding_factory({"MED": 2}, advisor_id=7)
        holding_factory({"TEC": 10}, advisor_id=8)

        assert reporting_service.advisor_portfolio_value(7) == Decimal("100")

    def test_advisor_without_accounts_is_zero(self, reporting_service, market):
        assert reporting_service.advisor_portfolio_value(42) == Decimal("0")


class TestInvestorProfit:
    """Tests for investor_profit."""

    def test_profit_per_account(
        self, reporting_service, holding_factory, stock_repo, unit_of_work, market
    ):
        """
        GIVEN a client with two accounts bought at $50 and $20
        WHEN TEC rises to $60 and MED falls to $15
        THEN profits are 3*(60-50) = 30 and 4*(15-20) = -20
        """
        first = holding_factory({"TEC": 3}, client_id=5)
        second = holding_factory({"MED": 4}, client_id=5)
        holding_factory({"TEC": 100}, client_id=6)
        reprice(stock_repo, unit_of_work, "TEC", "60")
        reprice(stock_repo, unit_of_work, "MED", "15")

        profits = reporting_service.investor_profit(5)

        assert profits == {first.account_id: Decimal("30"), second.account_id: Decimal("-20")}

    def test_account_without_positions_has_zero_profit(
        self, reporting_service, account_factory, market
    ):
        account = account_factory(cash=Decimal("500"), client_id=3)

        assert reporting_service.investor_profit(3) == {account.account_id: Decimal("0")}
