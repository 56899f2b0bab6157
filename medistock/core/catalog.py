"""Material catalog and movement type constants shared across the app."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional


class TransactionType(str, Enum):
    INGRESO = "INGRESO"
    SALIDA = "SALIDA"


# Sentinel accepted by the history filter meaning "any movement type".
TYPE_FILTER_ALL = "ALL"

RAPID_TEST_TYPES = (
    "Hepatitis B",
    "Hepatitis C",
    "VIH/Sífilis",
    "Antígeno Prostático",
)


class MaterialOption(NamedTuple):
    id: str
    name: str
    subtypes: tuple[str, ...] = ()

    @property
    def has_subtypes(self) -> bool:
        return bool(self.subtypes)


MATERIALS = (
    MaterialOption("vida-suero-oral", "Vida Suero Oral"),
    MaterialOption("espejos-vaginales", "Espejos Vaginales"),
    MaterialOption("laminillas", "Laminillas"),
    MaterialOption("citobrush", "Citobrush"),
    MaterialOption("pruebas-rapidas", "Pruebas Rápidas", RAPID_TEST_TYPES),
)


def find_material(value: Optional[str]) -> Optional[MaterialOption]:
    """Look a material up by catalog id or display name."""

    key = (value or "").strip()
    if not key:
        return None
    for material in MATERIALS:
        if key == material.id or key == material.name:
            return material
    return None


__all__ = [
    "MATERIALS",
    "MaterialOption",
    "RAPID_TEST_TYPES",
    "TYPE_FILTER_ALL",
    "TransactionType",
    "find_material",
]
