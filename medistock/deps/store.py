from __future__ import annotations

from functools import lru_cache

from ..db.session import SessionLocal
from ..services.storage import SqlTransactionStore, TransactionStore


@lru_cache(maxsize=1)
def _default_store() -> SqlTransactionStore:
    return SqlTransactionStore(SessionLocal)


def get_store() -> TransactionStore:
    """FastAPI dependency; tests swap it via ``app.dependency_overrides``."""

    return _default_store()
