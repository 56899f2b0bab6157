import os
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from medistock.core.catalog import TransactionType
from medistock.schemas.transaction import Transaction
from medistock.services.filtering import filter_transactions, sort_newest_first

LOCAL = ZoneInfo("America/Mexico_City")


def make_tx(tx_id, when, **overrides):
    data = {
        "id": tx_id,
        "date": when,
        "type": TransactionType.INGRESO,
        "material_name": "Laminillas",
        "batch_number": "L1",
        "origin_or_destination": "ALMACEN CENTRAL",
        "quantity": 1,
    }
    data.update(overrides)
    return Transaction(**data)


def local(year, month, day, hour=12, minute=0, second=0):
    return datetime(year, month, day, hour, minute, second, tzinfo=LOCAL)


@pytest.fixture()
def history():
    return [
        make_tx("1", local(2024, 5, 10), batch_number="B2309-X"),
        make_tx("2", local(2024, 5, 11), type=TransactionType.SALIDA, origin_or_destination="URGENCIAS"),
        make_tx("3", local(2024, 5, 12), material_name="Pruebas Rápidas", subtype="Hepatitis C"),
        make_tx("4", local(2024, 5, 13), material_name="Citobrush", type=TransactionType.SALIDA),
    ]


def ids(rows):
    return [tx.id for tx in rows]


def test_no_criteria_returns_everything_in_order(history):
    assert ids(filter_transactions(history, tz=LOCAL)) == ["1", "2", "3", "4"]


@pytest.mark.parametrize("term", ["B2309", "b2309", "2309-x"])
def test_search_matches_batch_case_insensitively(history, term):
    assert ids(filter_transactions(history, search_term=term, tz=LOCAL)) == ["1"]


def test_search_covers_material_origin_and_subtype(history):
    assert ids(filter_transactions(history, search_term="citobrush", tz=LOCAL)) == ["4"]
    assert ids(filter_transactions(history, search_term="urgencias", tz=LOCAL)) == ["2"]
    assert ids(filter_transactions(history, search_term="hepatitis", tz=LOCAL)) == ["3"]
    assert ids(filter_transactions(history, search_term="almacen", tz=LOCAL)) == ["1", "3", "4"]


def test_type_filter(history):
    assert ids(filter_transactions(history, type_filter="SALIDA", tz=LOCAL)) == ["2", "4"]
    assert ids(filter_transactions(history, type_filter=TransactionType.INGRESO, tz=LOCAL)) == ["1", "3"]
    assert ids(filter_transactions(history, type_filter="ALL", tz=LOCAL)) == ["1", "2", "3", "4"]


def test_single_day_range_includes_both_edges():
    rows = [
        make_tx("before", local(2024, 5, 9, 23, 59, 59)),
        make_tx("start", local(2024, 5, 10, 0, 0, 0)),
        make_tx("end", local(2024, 5, 10, 23, 59, 59)),
        make_tx("after", local(2024, 5, 11, 0, 0, 0)),
    ]
    result = filter_transactions(rows, start_date="2024-05-10", end_date=date(2024, 5, 10), tz=LOCAL)
    assert ids(result) == ["start", "end"]


def test_day_ends_at_the_last_millisecond():
    rows = [
        make_tx("last-ms", datetime(2024, 5, 10, 23, 59, 59, 999000, tzinfo=LOCAL)),
        make_tx("past-ms", datetime(2024, 5, 10, 23, 59, 59, 999500, tzinfo=LOCAL)),
    ]
    result = filter_transactions(rows, start_date="2024-05-10", end_date="2024-05-10", tz=LOCAL)
    assert ids(result) == ["last-ms"]


def test_day_bounds_use_local_time_not_utc():
    # 03:00 UTC on the 11th is still the evening of the 10th in Mexico City.
    late_evening = make_tx("late", datetime(2024, 5, 11, 3, 0, tzinfo=timezone.utc))
    assert ids(filter_transactions([late_evening], start_date="2024-05-10", end_date="2024-05-10", tz=LOCAL)) == ["late"]
    assert filter_transactions([late_evening], start_date="2024-05-11", tz=LOCAL) == []


def test_open_ended_ranges(history):
    assert ids(filter_transactions(history, start_date="2024-05-12", tz=LOCAL)) == ["3", "4"]
    assert ids(filter_transactions(history, end_date="2024-05-11", tz=LOCAL)) == ["1", "2"]


def test_criteria_combine(history):
    result = filter_transactions(
        history,
        search_term="almacen",
        type_filter="SALIDA",
        start_date="2024-05-12",
        end_date="2024-05-13",
        tz=LOCAL,
    )
    assert ids(result) == ["4"]


def test_malformed_date_raises(history):
    with pytest.raises(ValueError):
        filter_transactions(history, start_date="10/05/2024", tz=LOCAL)


def test_sort_newest_first_is_explicit():
    base = local(2024, 5, 10)
    rows = [make_tx("a", base), make_tx("b", base + timedelta(days=2)), make_tx("c", base + timedelta(days=1))]
    assert ids(sort_newest_first(rows)) == ["b", "c", "a"]
