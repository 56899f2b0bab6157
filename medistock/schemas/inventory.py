from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class InventoryItem(BaseModel):
    material_name: str
    total_quantity: int
    last_updated: datetime


class ChartPoint(BaseModel):
    label: str
    quantity: int


class InventorySummary(BaseModel):
    total_units: int
    active_materials: int
    low_stock_threshold: int
    low_stock: list[InventoryItem] = Field(default_factory=list)
    chart: list[ChartPoint] = Field(default_factory=list)
