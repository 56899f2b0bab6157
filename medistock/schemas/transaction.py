from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from ..core.catalog import TransactionType
from ..services.timecalc import parse_iso


class TransactionIn(BaseModel):
    """Raw form input for a new or edited movement.

    Fields are deliberately loose; ``services.validation`` applies the rules
    in order and reports the first failure.
    """

    type: TransactionType = TransactionType.INGRESO
    material: Optional[str] = None
    subtype: Optional[str] = None
    batch_number: str = ""
    origin_or_destination: str = ""
    quantity: Union[int, float, str, None] = None
    observations: Optional[str] = None


class Transaction(BaseModel):
    id: str
    date: datetime
    type: TransactionType
    material_name: str
    subtype: Optional[str] = None
    batch_number: str
    origin_or_destination: str
    quantity: int = Field(gt=0)
    observations: Optional[str] = None

    class Config:
        from_attributes = True

    @field_validator("date", mode="after")
    @classmethod
    def ensure_aware(cls, value: datetime) -> datetime:
        # Naive timestamps are read as UTC, which is how they are stored.
        return parse_iso(value, "UTC")

    @property
    def bucket_key(self) -> str:
        if self.subtype:
            return f"{self.material_name} ({self.subtype})"
        return self.material_name


class MaterialOut(BaseModel):
    id: str
    name: str
    has_subtypes: bool
    subtypes: list[str] = Field(default_factory=list)
