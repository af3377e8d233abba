"""Detection of accounts whose allocation has drifted from their profile."""

import logging
from typing import Union

from app.core.exceptions import NotFoundError, ValidationError
from app.domain.models import Account
from app.repositories.protocols import AccountRepository, ProfileRepository, UnitOfWork
from app.services.sector_allocator import SectorAllocator

logger = logging.getLogger(__name__)

Tolerance = Union[int, float]


class DriftDetector:
    """
    Compares each account's sector weights with its profile's targets.

    The comparison is asymmetric: every target sector is checked against the
    current weight (0 when not held), then every held sector the profile
    does not mention is checked against the tolerance alone.
    """

    def __init__(
        self,
        allocator: SectorAllocator,
        account_repo: AccountRepository,
        profile_repo: ProfileRepository,
        unit_of_work: UnitOfWork,
    ):
        self._allocator = allocator
        self._account_repo = account_repo
        self._profile_repo = profile_repo
        self._uow = unit_of_work

    def target_weights(self, account_id: int) -> dict[str, int]:
        """Target percentage per sector from the account's profile."""
        with self._uow.snapshot():
            return self._targets_for(self._require_account(account_id))

    def drift(self, account_id: int) -> dict[str, int]:
        """
        Signed difference between current and target weight per sector.

        Keys are the sectors reported by the allocator; a sector missing
        from the profile counts as a target of 0.
        """
        with self._uow.snapshot():
            account = self._require_account(account_id)
            current = self._allocator.weights(account.account_id)
            target = self._targets_for(account)
        return {sector: value - target.get(sector, 0) for sector, value in current.items()}

    def is_divergent(self, account_id: int, tolerance: Tolerance) -> bool:
        """
        Whether any sector weight differs from its target by more than
        ``tolerance`` percentage points.
        """
        self._check_tolerance(tolerance)
        with self._uow.snapshot():
            account = self._require_account(account_id)
            current = self._allocator.weights(account.account_id)
            target = self._targets_for(account)
        return self._exceeds(current, target, tolerance)

    def divergent_accounts(self, tolerance: Tolerance) -> set[int]:
        """Ids of every account that is divergent at ``tolerance``."""
        self._check_tolerance(tolerance)
        divergent: set[int] = set()
        with self._uow.snapshot():
            for account in self._account_repo.list_all():
                current = self._allocator.weights(account.account_id)
                if self._exceeds(current, self._targets_for(account), tolerance):
                    divergent.add(account.account_id)

        logger.debug("%d divergent accounts at tolerance %s", len(divergent), tolerance)
        return divergent

    @staticmethod
    def _exceeds(current: dict[str, int], target: dict[str, int], tolerance: Tolerance) -> bool:
        for sector, wanted in target.items():
            if abs(current.get(sector, 0) - wanted) > tolerance:
                return True
        for sector, held in current.items():
            if sector not in target and held > tolerance:
                return True
        return False

    @staticmethod
    def _check_tolerance(tolerance: Tolerance) -> None:
        if tolerance < 0:
            raise ValidationError(f"tolerance must be non-negative, got {tolerance}")

    def _targets_for(self, account: Account) -> dict[str, int]:
        profile = self._profile_repo.get_by_id(account.profile_id)
        if not profile:
            raise NotFoundError("Profile", account.profile_id)
        return dict(profile.target_weights)

    def _require_account(self, account_id: int) -> Account:
        account = self._account_repo.get_by_id(account_id)
        if not account:
            raise NotFoundError("Account", account_id)
        return account
