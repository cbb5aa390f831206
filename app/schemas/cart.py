# app/schemas/cart.py
from typing import Any

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.models.cart import DEFAULT_UNIT, UNKNOWN_SELLER_NAME, CartState


def _coerce_id(v: Any) -> Any:
    # Catalog ids may arrive as ints or UUIDs; carts key on strings.
    if v is None or isinstance(v, str):
        return v
    return str(v)


class ProductOwner(SQLModel):
    """
    Seller fields supplied with each catalog record.
    """

    id: str
    name: str | None = None
    whatsapp_number: str | None = None
    location: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("id")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("owner id cannot be empty")
        return v


class Product(SQLModel):
    """
    Catalog record consumed by add-to-cart.

    - available_quantity is optional: if omitted, the requested quantity
      is used as the snapshot.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    price: float = Field(ge=0)
    owner: ProductOwner
    available_quantity: int | None = Field(default=None, ge=0)
    unit: str = DEFAULT_UNIT

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("id", "name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("unit", mode="before")
    @classmethod
    def default_unit(cls, v: str | None) -> str:
        if v is None or not str(v).strip():
            return DEFAULT_UNIT
        return str(v).strip()

    @property
    def seller_name(self) -> str:
        return self.owner.name or UNKNOWN_SELLER_NAME


class CartItemCreate(SQLModel):
    """
    Payload for adding a product to the cart.
    """

    model_config = ConfigDict(extra="forbid")

    product: Product
    quantity: int = Field(default=1, gt=0)


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart item.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int = Field(gt=0)


class CartActionResult(SQLModel):
    """
    Outcome of a cart operation.

    Rejections are not HTTP errors: `success` is False, `error` carries the
    message, and `cart` is the unchanged state (with `error` set).
    """

    success: bool
    error: str | None = None
    cart: CartState


class FreeItemCheckRequest(SQLModel):
    """
    Payload for asking whether a free item would be accepted.
    """

    model_config = ConfigDict(extra="forbid")

    name: str

    @field_validator("name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v
