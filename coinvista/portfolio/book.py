"""Portfolio book: the user's list of holdings, persisted on every change."""

from __future__ import annotations

import logging
from typing import List

from coinvista.errors import InvalidHoldingError
from coinvista.storage.storage import PORTFOLIO_KEY, IStorageService

from .models import Holding
from .validation import HoldingInputValidator, ValidationState

logger = logging.getLogger(__name__)


class PortfolioBook:
    """Ordered list of holdings backed by a storage service.

    Holdings are independent lots: the same coin may appear more than once.
    Lots are appended on add, removed by position, and never edited in
    place. The whole list is rewritten to storage after every mutation.
    """

    def __init__(self, storage: IStorageService, key: str = PORTFOLIO_KEY) -> None:
        self._storage = storage
        self._key = key
        self._validator = HoldingInputValidator()
        self._holdings: List[Holding] = self._load()

    def _load(self) -> List[Holding]:
        data = self._storage.load(self._key, [])
        if not isinstance(data, list):
            logger.warning(f"Malformed portfolio under '{self._key}', starting empty")
            return []
        holdings: List[Holding] = []
        for i, entry in enumerate(data):
            try:
                holdings.append(Holding.from_dict(entry))
            except InvalidHoldingError as e:
                logger.warning(f"Skipping portfolio entry {i}: {e}")
        return holdings

    def _save(self) -> None:
        self._storage.save(self._key, [h.to_dict() for h in self._holdings])

    def holdings(self) -> List[Holding]:
        return list(self._holdings)

    def coin_ids(self) -> List[str]:
        """Distinct coin ids in first-seen order."""
        return list(dict.fromkeys(h.coin_id for h in self._holdings))

    def add(self, holding: Holding) -> Holding:
        self._holdings.append(holding)
        self._save()
        logger.info(f"Added {holding.quantity} {holding.coin_id} @ {holding.buy_price}")
        return holding

    def add_from_input(self, coin_id: str, quantity: str, buy_price: str) -> Holding:
        """Validate raw form input and append the resulting holding.

        Raises:
            InvalidHoldingError: If any field is missing or invalid
        """
        state, message = self._validator.validate(coin_id, quantity, buy_price)
        if state is not ValidationState.VALID:
            raise InvalidHoldingError(message or "All fields are required")
        holding = Holding(
            coin_id=coin_id.strip().lower(),
            quantity=quantity,
            buy_price=buy_price,
        )
        return self.add(holding)

    def remove(self, index: int) -> Holding:
        """Remove the holding at ``index``.

        Raises:
            IndexError: If there is no holding at that position
        """
        if index < 0 or index >= len(self._holdings):
            raise IndexError(f"No holding at position {index}")
        removed = self._holdings.pop(index)
        self._save()
        logger.info(f"Removed {removed.coin_id} lot at position {index}")
        return removed

    def __len__(self) -> int:
        return len(self._holdings)
