from __future__ import annotations

import logging
from typing import Optional

from ..core.errors import StorageError
from ..schemas.inventory import InventoryItem
from ..schemas.transaction import Transaction
from .filtering import sort_newest_first
from .inventory import ORDER_INSERTION, aggregate
from .storage import TransactionStore, Unsubscribe

logger = logging.getLogger(__name__)


class InventoryMonitor:
    """Keep a live inventory view of a store's subscription feed.

    Every snapshot replaces ``transactions`` and recomputes ``inventory`` from
    scratch. When the feed reports a failure, ``error`` is set and the last
    good snapshot stays in place until ``reload`` is called; there is no
    automatic reconnect.
    """

    def __init__(self, store: TransactionStore, order: str = ORDER_INSERTION) -> None:
        self.store = store
        self.order = order
        self.transactions: list[Transaction] = []
        self.inventory: list[InventoryItem] = []
        self.error: Optional[StorageError] = None
        self._unsubscribe: Optional[Unsubscribe] = None

    @property
    def connected(self) -> bool:
        return self._unsubscribe is not None and self.error is None

    def start(self) -> "InventoryMonitor":
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self._on_snapshot, self._on_error)
        return self

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def reload(self) -> "InventoryMonitor":
        self.close()
        self.error = None
        return self.start()

    def _on_snapshot(self, transactions: list[Transaction]) -> None:
        self.transactions = sort_newest_first(transactions)
        self.inventory = aggregate(self.transactions, order=self.order)
        self.error = None

    def _on_error(self, exc: StorageError) -> None:
        logger.error("inventory.feed_failed", exc_info=exc)
        self.error = exc
