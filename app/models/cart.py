# app/models/cart.py
from sqlmodel import SQLModel, Field

DEFAULT_UNIT = "kg"
UNKNOWN_SELLER_NAME = "Unknown Seller"


class Seller(SQLModel):
    """
    The seller a cart is locked to.

    Copied from the owner of the first product added; cleared when the
    cart becomes empty.
    """

    id: str
    name: str = UNKNOWN_SELLER_NAME
    whatsapp_number: str | None = None
    location: str | None = None


class CartLineItem(SQLModel):
    """
    One product line inside a buyer's cart.

    `available_quantity` is a snapshot of the seller's stock taken when the
    item was (last) added; it is not kept live.
    """

    id: str
    name: str
    price: float = Field(ge=0, description="Unit price; 0 marks a free item")
    quantity: int = Field(ge=1)
    available_quantity: int = Field(ge=0)
    unit: str = DEFAULT_UNIT
    total: float = Field(default=0.0, description="price * quantity")
    owner_id: str

    @property
    def is_free(self) -> bool:
        return self.price == 0


class CartState(SQLModel):
    """
    In-progress order for a single buyer session.

    Invariants:
      - all items share `current_seller.id` as owner
      - every item has quantity <= available_quantity
      - total == sum(item.total)
    """

    items: list[CartLineItem] = Field(default_factory=list)
    total: float = 0.0
    current_seller: Seller | None = None
    error: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.items

    def find_item(self, item_id: str) -> CartLineItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None
