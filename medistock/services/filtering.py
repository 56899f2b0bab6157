"""History view filtering and ordering."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Union
from zoneinfo import ZoneInfo

from ..core.catalog import TYPE_FILTER_ALL, TransactionType
from ..core.config import settings
from ..schemas.transaction import Transaction
from .timecalc import day_bounds

DayLike = Union[str, date, None]


def matches_search(tx: Transaction, term: str) -> bool:
    needle = term.casefold()
    haystack = (tx.material_name, tx.batch_number, tx.origin_or_destination, tx.subtype or "")
    return any(needle in value.casefold() for value in haystack)


def filter_transactions(
    transactions: Iterable[Transaction],
    search_term: str = "",
    type_filter: Union[str, TransactionType] = TYPE_FILTER_ALL,
    start_date: DayLike = None,
    end_date: DayLike = None,
    tz: Optional[ZoneInfo] = None,
) -> list[Transaction]:
    """Keep transactions matching every given criterion, in input order.

    ``start_date``/``end_date`` are calendar days in ``tz`` (the configured
    local zone by default); both ends are inclusive.
    """

    tz = tz or settings.local_tz
    term = search_term or ""
    wanted_type = None if type_filter in (None, "", TYPE_FILTER_ALL) else TransactionType(type_filter)
    start = day_bounds(start_date, tz)[0] if start_date else None
    end = day_bounds(end_date, tz)[1] if end_date else None

    result = []
    for tx in transactions:
        if term and not matches_search(tx, term):
            continue
        if wanted_type is not None and tx.type != wanted_type:
            continue
        if start is not None and tx.date < start:
            continue
        if end is not None and tx.date > end:
            continue
        result.append(tx)
    return result


def sort_newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    return sorted(transactions, key=lambda tx: tx.date, reverse=True)
