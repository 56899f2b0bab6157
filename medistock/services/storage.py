"""Storage collaborators for transactions.

The aggregation and filtering code never touches a database. It is handed
lists of ``Transaction`` by a ``TransactionStore``. Two stores ship here:

* ``SqlTransactionStore`` persists through the CRUD helpers and SQLAlchemy;
* ``InMemoryTransactionStore`` keeps everything in a dict for tests and demos.

Both offer a push-style ``subscribe``: listeners get the full snapshot right
away and again after every successful write. Consumers recompute whatever
they derive from the complete list each time; there is no delta feed.
Writes are independent and are not retried. A failure is raised once to
the caller as ``StorageError``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..core.errors import StorageError, TransactionNotFound
from ..crud import transactions as crud
from ..schemas.transaction import Transaction
from .validation import normalize_text

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[list[Transaction]], None]
ErrorListener = Callable[[StorageError], None]
Unsubscribe = Callable[[], None]


class TransactionStore(Protocol):
    def list(self) -> list[Transaction]: ...

    def get(self, transaction_id: str) -> Transaction: ...

    def create(self, tx: Transaction) -> Transaction: ...

    def update(self, tx: Transaction) -> Transaction: ...

    def delete(self, transaction_id: str) -> None: ...

    def subscribe(self, on_data: SnapshotListener, on_error: Optional[ErrorListener] = None) -> Unsubscribe: ...


class _Subscription:
    def __init__(self, on_data: SnapshotListener, on_error: Optional[ErrorListener]) -> None:
        self.on_data = on_data
        self.on_error = on_error


class SubscribableStore(ABC):
    """Snapshot fan-out shared by the concrete stores."""

    def __init__(self) -> None:
        self._subscriptions: list[_Subscription] = []

    @abstractmethod
    def list(self) -> list[Transaction]:
        ...

    def subscribe(self, on_data: SnapshotListener, on_error: Optional[ErrorListener] = None) -> Unsubscribe:
        subscription = _Subscription(on_data, on_error)
        self._subscriptions.append(subscription)
        self._push(subscription)

        def unsubscribe() -> None:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe

    def _push(self, subscription: _Subscription) -> None:
        try:
            snapshot = self.list()
        except StorageError as exc:
            if subscription.on_error is None:
                logger.error("subscription.snapshot_failed", exc_info=exc)
            else:
                subscription.on_error(exc)
            return
        subscription.on_data(snapshot)

    def _written(self, action: str, transaction_id: str) -> None:
        logger.info(f"transaction.{action}", extra={"extra_data": {"transaction_id": transaction_id}})
        for subscription in list(self._subscriptions):
            self._push(subscription)


def _normalized(tx: Transaction) -> Transaction:
    return tx.model_copy(
        update={
            "batch_number": normalize_text(tx.batch_number),
            "origin_or_destination": normalize_text(tx.origin_or_destination),
        }
    )


class InMemoryTransactionStore(SubscribableStore):
    def __init__(self, transactions: Optional[list[Transaction]] = None) -> None:
        super().__init__()
        self._rows: dict[str, Transaction] = {}
        for tx in transactions or []:
            self._rows[tx.id] = _normalized(tx)

    def list(self) -> list[Transaction]:
        # Latest insert first among equal dates, like prepending to a list.
        return sorted(reversed(list(self._rows.values())), key=lambda tx: tx.date, reverse=True)

    def get(self, transaction_id: str) -> Transaction:
        try:
            return self._rows[transaction_id]
        except KeyError:
            raise TransactionNotFound(transaction_id) from None

    def create(self, tx: Transaction) -> Transaction:
        if tx.id in self._rows:
            raise StorageError(f"Ya existe un registro con id {tx.id}.")
        stored = self._rows[tx.id] = _normalized(tx)
        self._written("created", tx.id)
        return stored

    def update(self, tx: Transaction) -> Transaction:
        self.get(tx.id)
        stored = self._rows[tx.id] = _normalized(tx)
        self._written("updated", tx.id)
        return stored

    def delete(self, transaction_id: str) -> None:
        self.get(transaction_id)
        del self._rows[transaction_id]
        self._written("deleted", transaction_id)


class SqlTransactionStore(SubscribableStore):
    def __init__(self, session_factory: sessionmaker) -> None:
        super().__init__()
        self._session_factory = session_factory

    @contextmanager
    def _session(self, failure: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except (SQLAlchemyError, OverflowError) as exc:
            # sqlite3 raises a bare OverflowError for integers beyond 64 bits.
            db.rollback()
            logger.error("storage.operation_failed", exc_info=exc)
            raise StorageError(failure) from exc
        finally:
            db.close()

    def list(self) -> list[Transaction]:
        with self._session("No se pudieron cargar los registros.") as db:
            return [Transaction.model_validate(row) for row in crud.list_transactions(db)]

    def get(self, transaction_id: str) -> Transaction:
        with self._session("No se pudo cargar el registro.") as db:
            record = crud.get_transaction(db, transaction_id)
            if record is None:
                raise TransactionNotFound(transaction_id)
            return Transaction.model_validate(record)

    def create(self, tx: Transaction) -> Transaction:
        with self._session("No se pudo guardar el registro.") as db:
            stored = Transaction.model_validate(crud.create_transaction(db, tx))
        self._written("created", stored.id)
        return stored

    def update(self, tx: Transaction) -> Transaction:
        with self._session("No se pudo actualizar el registro.") as db:
            record = crud.get_transaction(db, tx.id)
            if record is None:
                raise TransactionNotFound(tx.id)
            stored = Transaction.model_validate(crud.update_transaction(db, record, tx))
        self._written("updated", stored.id)
        return stored

    def delete(self, transaction_id: str) -> None:
        with self._session("No se pudo eliminar el registro.") as db:
            record = crud.get_transaction(db, transaction_id)
            if record is None:
                raise TransactionNotFound(transaction_id)
            crud.delete_transaction(db, record)
        self._written("deleted", transaction_id)


__all__ = [
    "InMemoryTransactionStore",
    "SqlTransactionStore",
    "SubscribableStore",
    "TransactionStore",
]
