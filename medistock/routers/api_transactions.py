from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from ..deps.auth import require_api_key
from ..deps.store import get_store
from ..schemas.transaction import Transaction, TransactionIn
from ..services.csv_export import CSV_MEDIA_TYPE, export_filename, render_csv
from ..services.filtering import filter_transactions, sort_newest_first
from ..services.storage import TransactionStore
from ..services.validation import validate_transaction

router = APIRouter(prefix="/api/v1/transactions", tags=["transactions"], dependencies=[Depends(require_api_key)])

TYPE_PATTERN = "^(ALL|INGRESO|SALIDA)$"


def _history(
    store: TransactionStore,
    q: str,
    type_filter: str,
    start_date: Optional[date],
    end_date: Optional[date],
) -> list[Transaction]:
    return filter_transactions(
        sort_newest_first(store.list()),
        search_term=q,
        type_filter=type_filter,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("", response_model=list[Transaction])
def api_list_transactions(
    q: str = "",
    type_filter: str = Query("ALL", alias="type", pattern=TYPE_PATTERN),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    store: TransactionStore = Depends(get_store),
):
    return _history(store, q, type_filter, start_date, end_date)


@router.get("/export")
def api_export_transactions(
    q: str = "",
    type_filter: str = Query("ALL", alias="type", pattern=TYPE_PATTERN),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    store: TransactionStore = Depends(get_store),
):
    rows = _history(store, q, type_filter, start_date, end_date)
    return Response(
        content=render_csv(rows).encode("utf-8"),
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.post("", response_model=Transaction, status_code=201)
def api_create_transaction(payload: TransactionIn, store: TransactionStore = Depends(get_store)):
    return store.create(validate_transaction(payload))


@router.get("/{transaction_id}", response_model=Transaction)
def api_get_transaction(transaction_id: str, store: TransactionStore = Depends(get_store)):
    return store.get(transaction_id)


@router.put("/{transaction_id}", response_model=Transaction)
def api_update_transaction(
    transaction_id: str,
    payload: TransactionIn,
    store: TransactionStore = Depends(get_store),
):
    existing = store.get(transaction_id)
    return store.update(validate_transaction(payload, existing=existing))


@router.delete("/{transaction_id}")
def api_delete_transaction(transaction_id: str, store: TransactionStore = Depends(get_store)):
    store.delete(transaction_id)
    return {"status": "deleted"}
