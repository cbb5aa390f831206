# app/services/cart_service.py
import logging

from fastapi import HTTPException, status

from app.core.exceptions import InvalidProductError
from app.models.cart import CartState
from app.repositories.cart_repo import CartSessionRepository
from app.schemas.cart import CartActionResult, CartItemCreate, CartItemUpdate, Product
from app.schemas.free_item import FreeItemCheckRead, HistoryFreeItemConflict
from app.services.free_item_guard import FreeItemGuard, history_conflict_message
from app.services.name_similarity import product_category

logger = logging.getLogger(__name__)


class CartService:
    """
    Business logic for buyer carts.

    Responsibilities:
      - route each buyer to their own CartStore
      - serialize actions per buyer (session lock)
      - run the optional order history check before adding free items
      - map malformed product records to HTTP 422
    """

    def __init__(
        self,
        sessions: CartSessionRepository,
        guard: FreeItemGuard,
        history_check_enabled: bool = False,
    ):
        self.sessions = sessions
        self.guard = guard
        self.history_check_enabled = history_check_enabled

    # ---- internal helpers ----

    async def _check_history(
        self, buyer_id: str, product: Product
    ) -> HistoryFreeItemConflict:
        if not self.history_check_enabled or product.price != 0:
            return HistoryFreeItemConflict(has_conflict=False)
        return await self.guard.check_order_history(buyer_id, product.name)

    # ---- public operations ----

    def get_cart(self, buyer_id: str) -> CartState:
        """
        Return the buyer's current cart (empty if they have none).
        """
        session = self.sessions.get(buyer_id)
        if session is None:
            return CartState()
        return session.store.state

    async def add_to_cart(
        self,
        buyer_id: str,
        payload: CartItemCreate,
    ) -> CartActionResult:
        """
        Add a product to the buyer's cart.

        Rules:
          - one seller per cart
          - one free item per category (cart, and past orders if enabled)
          - cumulative quantity <= available_quantity
        """
        product = payload.product
        session = self.sessions.get_or_create(buyer_id)

        async with session.lock:
            history = await self._check_history(buyer_id, product)
            if history.has_conflict:
                message = history_conflict_message(
                    history.conflicting_order.item_name, product.name
                )
                logger.info(
                    "Rejected free item %r for buyer %s: already received in order %s",
                    product.name,
                    buyer_id,
                    history.conflicting_order.order_id,
                )
                return session.store.set_error(message)

            try:
                return session.store.add_item(product, payload.quantity)
            except InvalidProductError as e:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail={"message": e.message, "errors": e.errors},
                )

    async def update_quantity(
        self,
        buyer_id: str,
        item_id: str,
        payload: CartItemUpdate,
    ) -> CartActionResult:
        """
        Set the quantity of an item; above available_quantity is rejected.
        Unknown ids leave the cart unchanged.
        """
        session = self.sessions.get_or_create(buyer_id)
        async with session.lock:
            try:
                return session.store.update_quantity(item_id, payload.quantity)
            except InvalidProductError as e:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail={"message": e.message, "errors": e.errors},
                )

    async def remove_item(self, buyer_id: str, item_id: str) -> CartActionResult:
        """
        Remove an item; removing the last one resets the cart.
        """
        session = self.sessions.get_or_create(buyer_id)
        async with session.lock:
            return session.store.remove_item(item_id)

    async def clear_cart(self, buyer_id: str) -> CartActionResult:
        """
        Clear all items and the seller lock.
        """
        session = self.sessions.get_or_create(buyer_id)
        async with session.lock:
            return session.store.clear_cart()

    async def clear_error(self, buyer_id: str) -> CartActionResult:
        session = self.sessions.get_or_create(buyer_id)
        async with session.lock:
            return session.store.clear_error()

    async def check_free_item(self, buyer_id: str, name: str) -> FreeItemCheckRead:
        """
        Report whether a free item called `name` would be accepted,
        without touching the cart.
        """
        cart_conflict = self.guard.check_cart(self.get_cart(buyer_id).items, name)

        if self.history_check_enabled:
            history = await self.guard.check_order_history(buyer_id, name)
        else:
            history = HistoryFreeItemConflict(has_conflict=False)

        return FreeItemCheckRead(
            name=name,
            category=product_category(name),
            cart=cart_conflict,
            history=history,
            allowed=not (cart_conflict.has_conflict or history.has_conflict),
        )
