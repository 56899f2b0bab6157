"""Derive stock levels from the movement history.

Inventory is never stored. Every view recomputes it from the complete list of
transactions: each movement lands in a bucket (material name, plus the
subtype in parentheses when one is set), INGRESO adds its quantity, SALIDA
subtracts it, and the bucket remembers the latest movement date it has seen.
"""

from __future__ import annotations

from typing import Iterable

from ..core.catalog import TransactionType
from ..schemas.inventory import ChartPoint, InventoryItem, InventorySummary
from ..schemas.transaction import Transaction

ORDER_INSERTION = "insertion"
ORDER_NAME = "name"

LOW_STOCK_THRESHOLD = 10

_CHART_ABBREVIATIONS = {"Pruebas Rápidas": "P.R."}


def signed_quantity(tx: Transaction) -> int:
    return tx.quantity if tx.type == TransactionType.INGRESO else -tx.quantity


def aggregate(transactions: Iterable[Transaction], order: str = ORDER_INSERTION) -> list[InventoryItem]:
    """Fold transactions into one ``InventoryItem`` per bucket.

    ``order="insertion"`` keeps buckets in the order their first movement was
    seen; ``order="name"`` sorts them alphabetically (case-insensitive).
    Totals may come out negative when outflows exceed recorded inflows.
    """

    if order not in (ORDER_INSERTION, ORDER_NAME):
        raise ValueError(f"unknown inventory order: {order!r}")

    buckets: dict[str, list] = {}
    for tx in transactions:
        bucket = buckets.setdefault(tx.bucket_key, [0, tx.date])
        bucket[0] += signed_quantity(tx)
        if tx.date > bucket[1]:
            bucket[1] = tx.date

    items = [
        InventoryItem(material_name=key, total_quantity=total, last_updated=last_updated)
        for key, (total, last_updated) in buckets.items()
    ]
    if order == ORDER_NAME:
        items.sort(key=lambda item: item.material_name.casefold())
    return items


def chart_label(material_name: str) -> str:
    for full, short in _CHART_ABBREVIATIONS.items():
        material_name = material_name.replace(full, short)
    return material_name


def summarize(items: Iterable[InventoryItem], threshold: int = LOW_STOCK_THRESHOLD) -> InventorySummary:
    """Dashboard figures: unit total, bucket count and low-stock buckets."""

    items = list(items)
    return InventorySummary(
        total_units=sum(item.total_quantity for item in items),
        active_materials=len(items),
        low_stock_threshold=threshold,
        low_stock=[item for item in items if item.total_quantity < threshold],
        chart=[ChartPoint(label=chart_label(item.material_name), quantity=item.total_quantity) for item in items],
    )


__all__ = [
    "LOW_STOCK_THRESHOLD",
    "ORDER_INSERTION",
    "ORDER_NAME",
    "aggregate",
    "chart_label",
    "signed_quantity",
    "summarize",
]
