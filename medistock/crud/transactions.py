"""Transaction CRUD helpers on a SQLAlchemy session."""

from __future__ import annotations

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..models.transaction import TransactionRecord
from ..schemas.transaction import Transaction
from ..services.timecalc import to_iso
from ..services.validation import normalize_text


def _apply(record: TransactionRecord, tx: Transaction) -> TransactionRecord:
    """Copy a validated transaction onto a row, normalizing identifiers again."""

    record.date = to_iso(tx.date)
    record.type = tx.type.value
    record.material_name = tx.material_name
    record.subtype = tx.subtype or None
    record.batch_number = normalize_text(tx.batch_number)
    record.origin_or_destination = normalize_text(tx.origin_or_destination)
    record.quantity = tx.quantity
    record.observations = tx.observations or None
    return record


def list_transactions(db: Session) -> list[TransactionRecord]:
    """Every movement, most recent first."""

    stmt = select(TransactionRecord).order_by(desc(TransactionRecord.date), desc(TransactionRecord.id))
    return db.execute(stmt).scalars().all()


def get_transaction(db: Session, transaction_id: str) -> TransactionRecord | None:
    return db.get(TransactionRecord, transaction_id)


def create_transaction(db: Session, tx: Transaction) -> TransactionRecord:
    record = _apply(TransactionRecord(id=tx.id), tx)
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def update_transaction(db: Session, record: TransactionRecord, tx: Transaction) -> TransactionRecord:
    # The whole record is replaced; ``id`` never changes.
    _apply(record, tx)
    db.commit()
    db.refresh(record)
    return record


def delete_transaction(db: Session, record: TransactionRecord) -> None:
    db.delete(record)
    db.commit()
