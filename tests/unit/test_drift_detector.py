"""
Unit tests for DriftDetector.

Tests cover:
- Exact matches never diverging
- Target-driven and current-only comparisons
- Drift vectors
- Missing profiles and invalid tolerances
"""

from decimal import Decimal

import pytest

from app.services import DriftDetector
from app.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def market(stock_factory):
    """TEC at $50 in Technology, MED at $20 in Health."""
    stock_factory("TEC", sector="Technology", price=Decimal("50"))
    stock_factory("MED", sector="Health", price=Decimal("20"))


class TestIsDivergent:
    """Tests for single-account divergence."""

    @pytest.mark.parametrize("tolerance", [0, 1, 5.5, 100])
    def test_exact_match_is_never_divergent(
        self, drift_detector: DriftDetector, profile_factory, holding_factory, market, tolerance
    ):
        """
        GIVEN an account whose weights equal its profile exactly
        WHEN I check divergence at any tolerance >= 0
        THEN it is not divergent
        """
        profile = profile_factory({"Technology": 30, "Health": 20, "cash": 50})
        account = holding_factory(
            {"TEC": 6, "MED": 10}, cash=Decimal("500"), profile_id=profile.profile_id
        )

        assert drift_detector.is_divergent(account.account_id, tolerance) is False

    def test_target_sector_gap_beyond_tolerance(
        self, drift_detector, profile_factory, account_factory, market
    ):
        """
        GIVEN a cash-only account on a 50/50 Technology/cash profile
        WHEN I check divergence
        THEN the 50-point gap is divergent at 49 but not at 50
        """
        profile = profile_factory({"Technology": 50, "cash": 50})
        account = account_factory(cash=Decimal("100"), profile_id=profile.profile_id)

        assert drift_detector.is_divergent(account.account_id, 49) is True
        assert drift_detector.is_divergent(account.account_id, 50) is False

    def test_sector_missing_from_target_is_checked(
        self, drift_detector, profile_factory, holding_factory, market
    ):
        """
        GIVEN a profile naming only cash and Health
        AND an account with 30% in Technology and 70% cash
        WHEN I check divergence against a 70% cash target
        THEN only the current-only Technology weight decides the result
        """
        profile = profile_factory({"Health": 0, "cash": 70})
        account = holding_factory(
            {"TEC": 6}, cash=Decimal("700"), profile_id=profile.profile_id
        )

        assert drift_detector.is_divergent(account.account_id, 29) is True
        assert drift_detector.is_divergent(account.account_id, 30) is False

    def test_missing_profile_raises(self, drift_detector, account_factory, market):
        account = account_factory(cash=Decimal("10"), profile_id=9999)

        with pytest.raises(NotFoundError) as exc_info:
            drift_detector.is_divergent(account.account_id, 5)

        assert exc_info.value.resource == "Profile"

    def test_missing_account_raises(self, drift_detector, market):
        with pytest.raises(NotFoundError):
            drift_detector.is_divergent(31337, 5)

    def test_negative_tolerance_rejected(self, drift_detector, account_factory, market):
        account = account_factory(cash=Decimal("10"))

        with pytest.raises(ValidationError):
            drift_detector.is_divergent(account.account_id, -1)


class TestDivergentAccounts:
    """Tests for the whole-firm scan."""

    def test_returns_only_divergent_ids(
        self, drift_detector, profile_factory, account_factory, holding_factory, market
    ):
        """
        GIVEN one account on target and one far off target
        WHEN I list divergent accounts at tolerance 5
        THEN only the off-target account is returned
        """
        all_cash = profile_factory({"cash": 100})
        on_target = account_factory(cash=Decimal("100"), profile_id=all_cash.profile_id)
        off_target = holding_factory(
            {"TEC": 2}, cash=Decimal("100"), profile_id=all_cash.profile_id
        )

        result = drift_detector.divergent_accounts(5)

        assert result == {off_target.account_id}
        assert on_target.account_id not in result

    def test_empty_firm(self, drift_detector):
        assert drift_detector.divergent_accounts(0) == set()


class TestDrift:
    """Tests for drift vectors."""

    def test_drift_is_current_minus_target(
        self, drift_detector, profile_factory, holding_factory, market
    ):
        """
        GIVEN a 30/20/50 account on a 50/0/50 profile without Health
        WHEN I compute its drift
        THEN each sector shows current minus target, Health against 0
        """
        profile = profile_factory({"Technology": 50, "cash": 50})
        account = holding_factory(
            {"TEC": 6, "MED": 10}, cash=Decimal("500"), profile_id=profile.profile_id
        )

        assert drift_detector.drift(account.account_id) == {
            "Technology": -20,
            "Health": 20,
            "cash": 0,
        }

    def test_target_weights(self, drift_detector, profile_factory, account_factory, market):
        profile = profile_factory({"Technology": 40, "cash": 60})
        account = account_factory(profile_id=profile.profile_id)

        assert drift_detector.target_weights(account.account_id) == {"Technology": 40, "cash": 60}
