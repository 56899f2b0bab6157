"""Turn raw form input into a normalized ``Transaction``.

Rules are checked in a fixed order and the first one that fails is raised as
``TransactionValidationError``, so the user always sees a single, stable
message:

1. the material must exist in the catalog;
2. materials with sub-variants need one of the declared subtypes;
3. the batch number must be non-empty and alphanumeric (hyphens allowed);
4. the quantity must be a whole number greater than zero;
5. origin/destination must be non-empty.

Nothing reaches storage unless all five pass.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

from ..core.catalog import TransactionType, find_material
from ..core.errors import TransactionValidationError
from ..schemas.transaction import Transaction, TransactionIn
from .timecalc import utcnow

BATCH_PATTERN = re.compile(r"^[A-Za-z0-9-]+$")
QUANTITY_PATTERN = re.compile(r"^-?[0-9]+$")


def normalize_text(value: Optional[str]) -> str:
    """Trim and uppercase free-text identifiers (batch, origin/destination)."""

    return (value or "").strip().upper()


def parse_quantity(value: Any) -> Optional[int]:
    """Return the quantity as an int, or ``None`` if it is not a whole number."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        cleaned = value.strip()
        if not QUANTITY_PATTERN.match(cleaned):
            return None
        return int(cleaned)
    return None


def validate_transaction(
    raw: TransactionIn,
    existing: Optional[Transaction] = None,
    now: Optional[datetime] = None,
) -> Transaction:
    """Check ``raw`` and build the record to persist.

    When ``existing`` is given the result keeps its ``id`` and ``date`` (an
    edit); otherwise a new id is generated and ``date`` is ``now``.
    """

    material = find_material(raw.material)
    if material is None:
        raise TransactionValidationError("material", "material_required", "Seleccione un material.")

    subtype = (raw.subtype or "").strip() or None
    if material.has_subtypes:
        if not subtype:
            raise TransactionValidationError("subtype", "subtype_required", "Seleccione el tipo de prueba rápida.")
        if subtype not in material.subtypes:
            raise TransactionValidationError("subtype", "subtype_invalid", "El tipo de prueba rápida no es válido.")
    else:
        subtype = None

    batch = (raw.batch_number or "").strip()
    if not batch:
        raise TransactionValidationError("batch_number", "batch_required", "El lote es obligatorio.")
    if not BATCH_PATTERN.match(batch):
        raise TransactionValidationError(
            "batch_number",
            "batch_format",
            "El lote debe ser alfanumérico (solo letras, números y guiones, sin espacios).",
        )

    quantity = parse_quantity(raw.quantity)
    if quantity is None or quantity <= 0:
        raise TransactionValidationError("quantity", "quantity_invalid", "La cantidad debe ser un número positivo.")

    origin = (raw.origin_or_destination or "").strip()
    if not origin:
        message = (
            "La procedencia es obligatoria."
            if raw.type == TransactionType.INGRESO
            else "El destino es obligatorio."
        )
        raise TransactionValidationError("origin_or_destination", "origin_required", message)

    observations = (raw.observations or "").strip() or None

    return Transaction(
        id=existing.id if existing else str(uuid4()),
        date=existing.date if existing else (now or utcnow()),
        type=raw.type,
        material_name=material.name,
        subtype=subtype,
        batch_number=normalize_text(batch),
        origin_or_destination=normalize_text(origin),
        quantity=quantity,
        observations=observations,
    )


__all__ = ["BATCH_PATTERN", "normalize_text", "parse_quantity", "validate_transaction"]
