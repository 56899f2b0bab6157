"""CSV export of the movement history.

The layout is fixed: nine columns, comma-joined, one line per movement.
Only ``Observaciones`` is wrapped in double quotes. Embedded quotes and
commas in any field are written as-is, so a value containing a comma shifts
the columns of that row when the file is opened in a spreadsheet.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional
from zoneinfo import ZoneInfo

from ..core.config import settings
from ..schemas.transaction import Transaction
from .timecalc import utcnow

CSV_HEADERS = (
    "ID",
    "Fecha",
    "Tipo",
    "Material",
    "Subtipo",
    "Lote",
    "Origen/Destino",
    "Cantidad",
    "Observaciones",
)
CSV_MEDIA_TYPE = "text/csv; charset=utf-8"

# es-MX short date and 24h time, without the comma browsers put in between.
DATE_FORMAT = "%d/%m/%Y %H:%M:%S"


def format_row(tx: Transaction, tz: ZoneInfo) -> str:
    cells = [
        tx.id,
        tx.date.astimezone(tz).strftime(DATE_FORMAT),
        tx.type.value,
        tx.material_name,
        tx.subtype or "N/A",
        tx.batch_number,
        tx.origin_or_destination,
        str(tx.quantity),
        f'"{tx.observations or ""}"',
    ]
    return ",".join(cells)


def render_csv(transactions: Iterable[Transaction], tz: Optional[ZoneInfo] = None) -> str:
    tz = tz or settings.local_tz
    lines = [",".join(CSV_HEADERS)]
    lines.extend(format_row(tx, tz) for tx in transactions)
    return "\n".join(lines)


def export_filename(today: Optional[date] = None) -> str:
    today = today or utcnow().date()
    return f"inventario_export_{today.isoformat()}.csv"


__all__ = ["CSV_HEADERS", "CSV_MEDIA_TYPE", "export_filename", "render_csv"]
