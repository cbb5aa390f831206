# app/services/free_item_guard.py
import asyncio
import logging
from typing import Iterable

from app.models.cart import CartLineItem
from app.repositories.order_history_repo import OrderHistoryRepository
from app.schemas.free_item import (
    CartFreeItemConflict,
    ConflictingOrder,
    HistoryFreeItemConflict,
)
from app.services.name_similarity import are_product_names_similar, product_category

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_TIMEOUT_SECONDS = 5.0


def cart_conflict_message(conflicting_item_name: str, new_item_name: str) -> str:
    category = product_category(new_item_name)
    return (
        f'You already have "{conflicting_item_name}" in your cart. '
        f"To ensure fair distribution, you can only claim one free {category} item per order."
    )


def history_conflict_message(conflicting_item_name: str, new_item_name: str) -> str:
    category = product_category(new_item_name)
    return (
        f"You've already received a free {category} item in a previous order "
        f"({conflicting_item_name}). To ensure fair distribution, "
        f"you can only claim one free {category} item."
    )


class FreeItemGuard:
    """
    Enforces "at most one free item per product category".

    Two checks:
      - check_cart: live cart, synchronous, always enforced.
      - check_order_history: past orders, async and best-effort. Any
        failure (network, bad rows, timeout) is logged and reported as
        "no conflict" so a flaky history lookup never blocks a purchase.
    """

    def __init__(
        self,
        order_history_repo: OrderHistoryRepository | None = None,
        timeout_seconds: float = DEFAULT_HISTORY_TIMEOUT_SECONDS,
    ):
        self.order_history_repo = order_history_repo
        self.timeout_seconds = timeout_seconds

    @staticmethod
    def check_cart(
        items: Iterable[CartLineItem],
        new_item_name: str,
    ) -> CartFreeItemConflict:
        """
        Find the first free item in the cart whose name is similar to
        `new_item_name`.
        """
        for item in items:
            if item.is_free and are_product_names_similar(item.name, new_item_name):
                return CartFreeItemConflict(has_conflict=True, conflicting_item=item)
        return CartFreeItemConflict(has_conflict=False)

    async def check_order_history(
        self,
        user_id: str | None,
        item_name: str,
    ) -> HistoryFreeItemConflict:
        """
        Look for a previously ordered free item similar to `item_name`.

        Returns the first matching order line (orders are scanned newest
        first). Never raises except for cancellation.
        """
        if not user_id or self.order_history_repo is None:
            return HistoryFreeItemConflict(has_conflict=False)

        try:
            orders = await asyncio.wait_for(
                asyncio.to_thread(self.order_history_repo.list_for_user, user_id),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Order history check timed out after %.1fs for user %s; allowing item",
                self.timeout_seconds,
                user_id,
            )
            return HistoryFreeItemConflict(has_conflict=False)
        except Exception as e:
            logger.warning(
                "Error checking order history for free items (user %s): %s",
                user_id,
                e,
            )
            return HistoryFreeItemConflict(has_conflict=False)

        for order in orders:
            for order_item in order.items:
                if order_item.price_per_unit != 0 or order_item.vegetable is None:
                    continue
                if are_product_names_similar(order_item.vegetable.name, item_name):
                    return HistoryFreeItemConflict(
                        has_conflict=True,
                        conflicting_order=ConflictingOrder(
                            order_id=order.id,
                            item_name=order_item.vegetable.name,
                            order_date=order.created_at,
                            status=order.status,
                        ),
                    )

        return HistoryFreeItemConflict(has_conflict=False)
