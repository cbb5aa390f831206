# app/models/order.py
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class OrderedVegetable(SQLModel):
    """
    Catalog entry referenced by an order line (Supabase `vegetables` row).
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str
    category: str | None = None


class OrderHistoryItem(SQLModel):
    """
    Line item of a past order (Supabase `order_items` row).

    Only `price_per_unit == 0` lines matter for the free item check.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    quantity: int | None = None
    price_per_unit: float
    total_price: float | None = None
    vegetable: OrderedVegetable | None = None


class OrderHistoryEntry(SQLModel):
    """
    A buyer's past order with its nested line items.

    Matches the select used by OrderHistoryRepository:
      orders.*, items:order_items(..., vegetable:vegetables(...))
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    status: str | None = None
    created_at: datetime | None = None
    items: list[OrderHistoryItem] = Field(default_factory=list)
