# app/schemas/free_item.py
from datetime import datetime

from sqlmodel import SQLModel

from app.models.cart import CartLineItem


class CartFreeItemConflict(SQLModel):
    """
    Result of scanning the live cart for a similar free item.
    """

    has_conflict: bool
    conflicting_item: CartLineItem | None = None


class ConflictingOrder(SQLModel):
    """
    Past order line that already delivered a similar free item.
    """

    order_id: str
    item_name: str
    order_date: datetime | None = None
    status: str | None = None


class HistoryFreeItemConflict(SQLModel):
    """
    Result of scanning the buyer's order history for a similar free item.
    """

    has_conflict: bool
    conflicting_order: ConflictingOrder | None = None


class FreeItemCheckRead(SQLModel):
    """
    Combined report returned by the free item check endpoint.
    """

    name: str
    category: str
    cart: CartFreeItemConflict
    history: HistoryFreeItemConflict
    allowed: bool
