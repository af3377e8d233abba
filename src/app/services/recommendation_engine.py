"""Buy/sell suggestions drawn from the holdings of similar accounts."""

import logging
from decimal import Decimal

from app.core.exceptions import NotFoundError, ValidationError
from app.repositories.protocols import (
    AccountRepository,
    PositionRepository,
    StockRepository,
    UnitOfWork,
)
from app.services.ledger_service import require_positive_id
from app.services.similarity import cosine_similarity

logger = logging.getLogger(__name__)

Holdings = dict[int, Decimal]


class RecommendationEngine:
    """
    Collaborative-filtering recommender over share holdings.

    An account is compared with the ``num_comparators`` accounts whose
    holdings vectors are most similar to its own. A stock is suggested as a
    buy when a strict majority of them hold it and the account does not,
    and as a sell when the account holds it and a strict majority do not.
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

    def recommend(
        self,
        account_id: int,
        max_recommendations: int,
        num_comparators: int,
    ) -> dict[str, bool]:
        """
        Suggest trades for an account.

        Returns:
            Mapping of stock symbol to True (buy) or False (sell), in
            emission order: the candidate set with fewer total votes comes
            first, sells before buys on equal totals, and each set is
            ordered by votes then symbol. Empty when the store has fewer
            other accounts than ``num_comparators``.
        """
        require_positive_id("account_id", account_id)
        if max_recommendations < 1:
            raise ValidationError("max_recommendations must be at least 1")
        if num_comparators < 1:
            raise ValidationError("num_comparators must be at least 1")

        with self._uow.snapshot():
            if not self._account_repo.get_by_id(account_id):
                raise NotFoundError("Account", account_id)
            symbols = {s.stock_id: s.symbol for s in self._stock_repo.list_all()}
            holdings = self._holdings_by_account(list(symbols))

        own = holdings.pop(account_id)
        if num_comparators > len(holdings):
            logger.debug(
                "Account %s has %d peers, %d comparators requested",
                account_id,
                len(holdings),
                num_comparators,
            )
            return {}

        comparators = self._closest_peers(own, holdings, num_comparators)
        majority = num_comparators // 2

        buys: dict[str, int] = {}
        sells: dict[str, int] = {}
        for stock_id, symbol in symbols.items():
            holders = sum(1 for peer in comparators if peer[stock_id] > 0)
            if own[stock_id] == 0:
                if holders > majority:
                    buys[symbol] = holders
            elif num_comparators - holders > majority:
                sells[symbol] = num_comparators - holders

        ranked_sets = sorted(
            [(False, self._by_votes(sells)), (True, self._by_votes(buys))],
            key=lambda side: sum(votes for _, votes in side[1]),
        )

        recommendations: dict[str, bool] = {}
        for is_buy, candidates in ranked_sets:
            for symbol, _ in candidates:
                if len(recommendations) >= max_recommendations:
                    return recommendations
                recommendations[symbol] = is_buy
        return recommendations

    def _holdings_by_account(self, stock_ids: list[int]) -> dict[int, Holdings]:
        """Zero-filled quantity per stock for every account in the store."""
        holdings: dict[int, Holdings] = {
            account.account_id: {stock_id: Decimal("0") for stock_id in stock_ids}
            for account in self._account_repo.list_all()
        }
        for position in self._position_repo.list_all():
            if position.account_id in holdings:
                holdings[position.account_id][position.stock_id] = position.quantity
        return holdings

    @staticmethod
    def _closest_peers(own: Holdings, peers: dict[int, Holdings], count: int) -> list[Holdings]:
        ranked = sorted(
            peers.items(),
            key=lambda item: (-cosine_similarity(own, item[1]), item[0]),
        )
        return [vector for _, vector in ranked[:count]]

    @staticmethod
    def _by_votes(candidates: dict[str, int]) -> list[tuple[str, int]]:
        return sorted(candidates.items(), key=lambda item: (-item[1], item[0]))
