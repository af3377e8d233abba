"""Grouping of accounts by how their allocations drift from target."""

import logging
import random
from typing import Optional, Union

from app.core.exceptions import ValidationError
from app.repositories.protocols import AccountRepository, UnitOfWork
from app.services.drift_detector import DriftDetector
from app.services.sector_allocator import SectorAllocator
from app.services.similarity import cosine_similarity

logger = logging.getLogger(__name__)

Vector = dict[str, int]

CENTROID_MIN = 0
CENTROID_MAX = 100
DEFAULT_ITERATIONS = 4


class PeerClusterer:
    """
    Clusters accounts on their drift vectors against random centroids.

    Assignment picks the centroid with the *lowest* cosine similarity and
    runs a fixed number of passes without moving the centroids.
    """

    def __init__(
        self,
        drift_detector: DriftDetector,
        allocator: SectorAllocator,
        account_repo: AccountRepository,
        unit_of_work: UnitOfWork,
        rng: Optional[random.Random] = None,
        iterations: int = DEFAULT_ITERATIONS,
    ):
        self._drift = drift_detector
        self._allocator = allocator
        self._account_repo = account_repo
        self._uow = unit_of_work
        if iterations < 1:
            raise ValidationError(f"iterations must be at least 1, got {iterations}")
        self._rng = rng or random.Random()
        self._iterations = iterations

    def drift_vectors(self) -> dict[int, Vector]:
        """Drift vector of every account, keyed by account id."""
        with self._uow.snapshot():
            return {
                account.account_id: self._drift.drift(account.account_id)
                for account in self._account_repo.list_all()
            }

    def advisor_groups(self, tolerance: Union[int, float], max_groups: int) -> set[frozenset[int]]:
        """
        Groups of accounts an advisor could manage together.

        For k = 1 up to ``max_groups`` the accounts are assigned to k random
        centroids. Clustering is accepted, and the loop ends, once no
        account is more similar to its centroid than ``tolerance``.
        Otherwise the accounts on the last centroid form one group. The
        loop also ends as soon as every account has a centroid.
        """
        if tolerance < 0:
            raise ValidationError(f"tolerance must be non-negative, got {tolerance}")
        if max_groups < 1:
            raise ValidationError(f"max_groups must be at least 1, got {max_groups}")

        with self._uow.snapshot():
            vectors = self.drift_vectors()
            sectors = self._allocator.sector_names()

        groups: set[frozenset[int]] = set()
        if not vectors:
            return groups

        for k in range(1, max_groups + 1):
            centroids = [self._random_centroid(sectors) for _ in range(k)]
            assignment: dict[int, int] = {}
            for _ in range(self._iterations):
                assignment = self._assign(vectors, centroids)

            spread = max(
                cosine_similarity(vectors[account_id], centroids[index])
                for account_id, index in assignment.items()
            )
            if spread <= tolerance:
                logger.debug("Clustering accepted at k=%d (spread %.4f)", k, spread)
                break

            group = frozenset(
                account_id for account_id, index in assignment.items() if index == k - 1
            )
            if group:
                groups.add(group)

            if len(assignment) == len(vectors):
                break

        logger.info("Formed %d advisor groups from %d accounts", len(groups), len(vectors))
        return groups

    def _random_centroid(self, sectors: list[str]) -> Vector:
        return {sector: self._rng.randint(CENTROID_MIN, CENTROID_MAX) for sector in sectors}

    @staticmethod
    def _assign(vectors: dict[int, Vector], centroids: list[Vector]) -> dict[int, int]:
        assignment: dict[int, int] = {}
        for account_id, vector in vectors.items():
            closest = 0
            lowest = cosine_similarity(vector, centroids[0])
            for index in range(1, len(centroids)):
                score = cosine_similarity(vector, centroids[index])
                if score < lowest:
                    lowest = score
                    closest = index
            assignment[account_id] = closest
        return assignment
