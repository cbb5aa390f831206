# app/services/cart_store.py
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from pydantic import ValidationError

from app.core.exceptions import InvalidProductError
from app.models.cart import CartLineItem, CartState, Seller
from app.schemas.cart import CartActionResult, Product
from app.services.free_item_guard import FreeItemGuard, cart_conflict_message

logger = logging.getLogger(__name__)


# ---- Actions ----


@dataclass(frozen=True)
class AddItem:
    product: Product
    quantity: int = 1


@dataclass(frozen=True)
class UpdateQuantity:
    id: str
    quantity: int


@dataclass(frozen=True)
class RemoveItem:
    id: str


@dataclass(frozen=True)
class ClearCart:
    pass


@dataclass(frozen=True)
class ClearError:
    pass


@dataclass(frozen=True)
class SetError:
    message: str


CartAction = AddItem | UpdateQuantity | RemoveItem | ClearCart | ClearError | SetError


# ---- Messages ----


def cross_seller_message(seller_name: str) -> str:
    return (
        f"Items in cart are from {seller_name}. "
        "Please clear your cart to add items from a different seller."
    )


def max_quantity_message(available_quantity: int, unit: str) -> str:
    return f"Maximum {available_quantity} {unit} available for this item."


# ---- Reducer ----


def _with_items(state: CartState, items: list[CartLineItem]) -> CartState:
    """
    New state with `items` and a recomputed total; clears the error.
    """
    return state.model_copy(
        update={
            "items": items,
            "total": sum(item.total for item in items),
            "error": None,
        }
    )


def _with_error(state: CartState, message: str) -> CartState:
    return state.model_copy(update={"error": message})


def _reduce_add(state: CartState, product: Product, quantity: int) -> CartState:
    available = (
        product.available_quantity
        if product.available_quantity is not None
        else quantity
    )

    if state.current_seller is not None and product.owner.id != state.current_seller.id:
        return _with_error(state, cross_seller_message(state.current_seller.name))

    if product.price == 0:
        conflict = FreeItemGuard.check_cart(state.items, product.name)
        if conflict.has_conflict:
            return _with_error(
                state,
                cart_conflict_message(conflict.conflicting_item.name, product.name),
            )

    existing = state.find_item(product.id)
    if existing is not None:
        if product.available_quantity is None:
            available = existing.available_quantity
        new_quantity = existing.quantity + quantity
        if new_quantity > available:
            return _with_error(state, max_quantity_message(available, existing.unit))

        items = [
            item.model_copy(
                update={
                    "quantity": new_quantity,
                    "total": item.price * new_quantity,
                    "available_quantity": available,
                }
            )
            if item.id == product.id
            else item
            for item in state.items
        ]
        return _with_items(state, items)

    if quantity > available:
        return _with_error(state, max_quantity_message(available, product.unit))

    new_item = CartLineItem(
        id=product.id,
        name=product.name,
        price=product.price,
        quantity=quantity,
        available_quantity=available,
        unit=product.unit,
        total=product.price * quantity,
        owner_id=product.owner.id,
    )

    next_state = _with_items(state, [*state.items, new_item])
    if state.current_seller is None:
        next_state = next_state.model_copy(
            update={
                "current_seller": Seller(
                    id=product.owner.id,
                    name=product.seller_name,
                    whatsapp_number=product.owner.whatsapp_number,
                    location=product.owner.location,
                )
            }
        )
    return next_state


def _reduce_update_quantity(state: CartState, item_id: str, quantity: int) -> CartState:
    target = state.find_item(item_id)
    if target is None:
        return state

    if quantity > target.available_quantity:
        return _with_error(
            state, max_quantity_message(target.available_quantity, target.unit)
        )

    items = [
        item.model_copy(update={"quantity": quantity, "total": item.price * quantity})
        if item.id == item_id
        else item
        for item in state.items
    ]
    return _with_items(state, items)


def _reduce_remove(state: CartState, item_id: str) -> CartState:
    items = [item for item in state.items if item.id != item_id]
    if not items:
        return CartState()
    return _with_items(state, items)


def cart_reducer(state: CartState, action: CartAction) -> CartState:
    """
    Pure reducer: returns the next cart state for `action`.

    `state` is never mutated. Rejected actions return a copy of `state`
    with only `error` changed.
    """
    if isinstance(action, AddItem):
        return _reduce_add(state, action.product, action.quantity)
    if isinstance(action, UpdateQuantity):
        return _reduce_update_quantity(state, action.id, action.quantity)
    if isinstance(action, RemoveItem):
        return _reduce_remove(state, action.id)
    if isinstance(action, ClearCart):
        return CartState()
    if isinstance(action, ClearError):
        return state.model_copy(update={"error": None})
    if isinstance(action, SetError):
        return _with_error(state, action.message)
    return state


# ---- Store ----


def coerce_product(product: Product | Mapping[str, Any]) -> Product:
    """
    Validate a catalog record at the cart boundary.

    Raises:
        InvalidProductError: if required fields are missing or malformed.
    """
    if isinstance(product, Product):
        return product
    try:
        return Product.model_validate(product)
    except ValidationError as e:
        raise InvalidProductError(
            "Invalid product record",
            errors=[
                {"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()
            ],
        ) from e


def _check_quantity(quantity: Any) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidProductError("Quantity must be a positive integer")


class CartStore:
    """
    Cart of a single buyer session.

    Every operation is synchronous, applies one reducer action and reports
    the outcome as a CartActionResult. Business-rule failures never raise;
    only a malformed product record or a quantity that is not an integer
    >= 1 does (InvalidProductError).

    Not thread-safe by itself: callers serialize access per buyer
    (see CartSessionRepository).
    """

    def __init__(self, state: CartState | None = None):
        self._state = state or CartState()

    @property
    def state(self) -> CartState:
        return self._state

    def dispatch(self, action: CartAction) -> CartActionResult:
        """
        Apply `action` and report whether it was accepted.

        An action is rejected when it produces a new state carrying an
        error. No-ops (e.g. updating an unknown id) return the same state
        and count as accepted.
        """
        previous = self._state
        self._state = cart_reducer(previous, action)
        rejected = self._state is not previous and self._state.error is not None
        return CartActionResult(
            success=not rejected,
            error=self._state.error if rejected else None,
            cart=self._state,
        )

    # ---- public operations ----

    def add_item(
        self,
        product: Product | Mapping[str, Any],
        quantity: int = 1,
    ) -> CartActionResult:
        """
        Add `quantity` of `product`, merging with an existing line of the
        same id.

        Raises:
            InvalidProductError: if `product` is malformed or quantity < 1.
        """
        product = coerce_product(product)
        _check_quantity(quantity)

        logger.debug("Adding to cart: %s (price %s)", product.name, product.price)
        return self.dispatch(AddItem(product=product, quantity=quantity))

    def update_quantity(self, item_id: str, quantity: int) -> CartActionResult:
        """
        Raises:
            InvalidProductError: if quantity is not an integer >= 1.
        """
        _check_quantity(quantity)
        return self.dispatch(UpdateQuantity(id=item_id, quantity=quantity))

    def remove_item(self, item_id: str) -> CartActionResult:
        return self.dispatch(RemoveItem(id=item_id))

    def clear_cart(self) -> CartActionResult:
        return self.dispatch(ClearCart())

    def clear_error(self) -> CartActionResult:
        return self.dispatch(ClearError())

    def set_error(self, message: str) -> CartActionResult:
        return self.dispatch(SetError(message=message))
