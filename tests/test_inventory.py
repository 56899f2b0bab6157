import itertools
import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from medistock.core.catalog import TransactionType
from medistock.schemas.transaction import Transaction
from medistock.services.inventory import aggregate, chart_label, summarize


def make_tx(tx_id, material="Laminillas", quantity=1, kind=TransactionType.INGRESO, day=1, subtype=None):
    return Transaction(
        id=tx_id,
        date=datetime(2024, 3, day, 12, 0, tzinfo=timezone.utc),
        type=kind,
        material_name=material,
        subtype=subtype,
        batch_number="L1",
        origin_or_destination="ALMACEN",
        quantity=quantity,
    )


def test_aggregate_empty_input_is_empty():
    assert aggregate([]) == []


def test_aggregate_single_inflow():
    tx = make_tx("a", quantity=20)
    items = aggregate([tx])
    assert len(items) == 1
    assert items[0].material_name == "Laminillas"
    assert items[0].total_quantity == 20
    assert items[0].last_updated == tx.date


def test_aggregate_subtypes_get_their_own_buckets():
    txs = [
        make_tx("a", material="Pruebas Rápidas", subtype="Hepatitis B", quantity=5),
        make_tx("b", material="Pruebas Rápidas", subtype="Hepatitis C", quantity=3),
        make_tx("c", material="Pruebas Rápidas", quantity=7),
    ]
    totals = {item.material_name: item.total_quantity for item in aggregate(txs)}
    assert totals == {
        "Pruebas Rápidas (Hepatitis B)": 5,
        "Pruebas Rápidas (Hepatitis C)": 3,
        "Pruebas Rápidas": 7,
    }


def test_aggregate_outflows_may_go_negative():
    txs = [
        make_tx("a", quantity=4),
        make_tx("b", quantity=9, kind=TransactionType.SALIDA, day=2),
    ]
    [item] = aggregate(txs)
    assert item.total_quantity == -5


def test_aggregate_last_updated_is_latest_date_not_last_seen():
    newest = make_tx("a", quantity=1, day=20)
    older = make_tx("b", quantity=1, day=5)
    oldest = make_tx("c", quantity=1, day=1)
    [item] = aggregate([older, newest, oldest])
    assert item.last_updated == newest.date


def test_aggregate_totals_do_not_depend_on_order():
    txs = [
        make_tx("a", quantity=10, day=1),
        make_tx("b", quantity=3, kind=TransactionType.SALIDA, day=2),
        make_tx("c", material="Citobrush", quantity=6, day=3),
        make_tx("d", quantity=2, kind=TransactionType.SALIDA, day=4),
        make_tx("e", material="Citobrush", quantity=1, kind=TransactionType.SALIDA, day=5),
    ]
    expected = {"Laminillas": 5, "Citobrush": 5}
    for permutation in itertools.permutations(txs):
        items = aggregate(permutation)
        assert {item.material_name: item.total_quantity for item in items} == expected
        assert {item.material_name: item.last_updated.day for item in items} == {"Laminillas": 4, "Citobrush": 5}


def test_aggregate_insertion_order_and_name_order():
    txs = [
        make_tx("a", material="Vida Suero Oral"),
        make_tx("b", material="Citobrush"),
        make_tx("c", material="Laminillas"),
        make_tx("d", material="Citobrush"),
    ]
    assert [i.material_name for i in aggregate(txs)] == ["Vida Suero Oral", "Citobrush", "Laminillas"]
    assert [i.material_name for i in aggregate(txs, order="name")] == ["Citobrush", "Laminillas", "Vida Suero Oral"]


def test_aggregate_rejects_unknown_order():
    with pytest.raises(ValueError):
        aggregate([], order="random")


def test_summarize_counts_low_stock_including_negatives():
    items = aggregate(
        [
            make_tx("a", material="Laminillas", quantity=50),
            make_tx("b", material="Citobrush", quantity=9),
            make_tx("c", material="Espejos Vaginales", quantity=2, kind=TransactionType.SALIDA),
            make_tx("d", material="Pruebas Rápidas", subtype="VIH/Sífilis", quantity=10),
        ]
    )
    summary = summarize(items, threshold=10)

    assert summary.total_units == 50 + 9 - 2 + 10
    assert summary.active_materials == 4
    assert summary.low_stock_threshold == 10
    assert [i.material_name for i in summary.low_stock] == ["Citobrush", "Espejos Vaginales"]
    assert summary.chart[-1].label == "P.R. (VIH/Sífilis)"


def test_chart_label_leaves_other_materials_alone():
    assert chart_label("Laminillas") == "Laminillas"
    assert chart_label("Pruebas Rápidas (Hepatitis B)") == "P.R. (Hepatitis B)"
