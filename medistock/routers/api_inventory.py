from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..core.catalog import MATERIALS
from ..core.config import settings
from ..deps.auth import require_api_key
from ..deps.store import get_store
from ..schemas.inventory import InventoryItem, InventorySummary
from ..schemas.transaction import MaterialOut
from ..services.inventory import aggregate, summarize
from ..services.storage import TransactionStore

router = APIRouter(prefix="/api/v1", tags=["inventory"], dependencies=[Depends(require_api_key)])

ORDER_PATTERN = "^(insertion|name)$"


@router.get("/materials", response_model=list[MaterialOut])
def api_materials():
    return [
        MaterialOut(id=m.id, name=m.name, has_subtypes=m.has_subtypes, subtypes=list(m.subtypes))
        for m in MATERIALS
    ]


@router.get("/inventory", response_model=list[InventoryItem])
def api_inventory(
    order: Optional[str] = Query(None, pattern=ORDER_PATTERN),
    store: TransactionStore = Depends(get_store),
):
    return aggregate(store.list(), order=order or settings.INVENTORY_ORDER)


@router.get("/inventory/summary", response_model=InventorySummary)
def api_inventory_summary(store: TransactionStore = Depends(get_store)):
    items = aggregate(store.list(), order=settings.INVENTORY_ORDER)
    return summarize(items, threshold=settings.LOW_STOCK_THRESHOLD)
