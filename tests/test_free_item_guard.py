"""
Tests for FreeItemGuard.

Tests cover:
- Cart-level duplicate free item detection
- Order history lookup
- Fail-open behaviour on errors and timeouts
"""

import time
from datetime import datetime, timezone

import pytest

from app.models.cart import CartLineItem
from app.services.free_item_guard import (
    FreeItemGuard,
    cart_conflict_message,
    history_conflict_message,
)

from factories import history_rows, make_order


def _line(id: str, name: str, price: float) -> CartLineItem:
    return CartLineItem(
        id=id,
        name=name,
        price=price,
        quantity=1,
        available_quantity=1,
        total=price,
        owner_id="s1",
    )


class TestCheckCart:
    def test_no_items(self):
        result = FreeItemGuard.check_cart([], "Marigold Seeds")

        assert result.has_conflict is False
        assert result.conflicting_item is None

    def test_similar_free_item_conflicts(self):
        items = [_line("a", "Tomato", 20), _line("f1", "Marigold Sapling", 0)]

        result = FreeItemGuard.check_cart(items, "Marigold Seeds")

        assert result.has_conflict is True
        assert result.conflicting_item.id == "f1"

    def test_paid_similar_item_ignored(self):
        items = [_line("p1", "Marigold Sapling", 10)]

        assert FreeItemGuard.check_cart(items, "Marigold Seeds").has_conflict is False

    def test_first_match_wins(self):
        items = [_line("f1", "Neem Sapling", 0), _line("f2", "Neem Seeds", 0)]

        result = FreeItemGuard.check_cart(items, "Neem Cake")

        assert result.conflicting_item.id == "f1"


class TestCheckOrderHistory:
    @pytest.mark.asyncio
    async def test_conflict_found(self, guard, order_history_repo):
        order_history_repo.list_for_user.return_value = history_rows(
            make_order("o-2", ("Tomato", 20)),
            make_order("o-1", ("Marigold Sapling", 0), status="delivered"),
        )

        result = await guard.check_order_history("buyer-1", "Marigold Seeds")

        order_history_repo.list_for_user.assert_called_once_with("buyer-1")
        assert result.has_conflict is True
        assert result.conflicting_order.order_id == "o-1"
        assert result.conflicting_order.item_name == "Marigold Sapling"
        assert result.conflicting_order.status == "delivered"
        assert result.conflicting_order.order_date == datetime(
            2026, 3, 1, 10, 0, tzinfo=timezone.utc
        )

    @pytest.mark.asyncio
    async def test_paid_history_items_ignored(self, guard, order_history_repo):
        order_history_repo.list_for_user.return_value = history_rows(
            make_order("o-1", ("Marigold Sapling", 25)),
        )

        result = await guard.check_order_history("buyer-1", "Marigold Seeds")

        assert result.has_conflict is False

    @pytest.mark.asyncio
    async def test_items_without_vegetable_skipped(self, guard, order_history_repo):
        order = make_order("o-1", ("Marigold Sapling", 0))
        order["items"][0]["vegetable"] = None
        order_history_repo.list_for_user.return_value = history_rows(order)

        result = await guard.check_order_history("buyer-1", "Marigold Seeds")

        assert result.has_conflict is False

    @pytest.mark.asyncio
    async def test_no_user_skips_lookup(self, guard, order_history_repo):
        result = await guard.check_order_history(None, "Marigold Seeds")

        assert result.has_conflict is False
        order_history_repo.list_for_user.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_repository_means_no_conflict(self):
        result = await FreeItemGuard().check_order_history("buyer-1", "Marigold Seeds")

        assert result.has_conflict is False

    @pytest.mark.asyncio
    async def test_fails_open_on_error(self, guard, order_history_repo, caplog):
        order_history_repo.list_for_user.side_effect = ConnectionError("supabase down")

        with caplog.at_level("WARNING"):
            result = await guard.check_order_history("buyer-1", "Marigold Seeds")

        assert result.has_conflict is False
        assert result.conflicting_order is None
        assert "supabase down" in caplog.text

    @pytest.mark.asyncio
    async def test_fails_open_on_timeout(self, order_history_repo):
        order_history_repo.list_for_user.side_effect = lambda user_id: time.sleep(0.5)
        guard = FreeItemGuard(order_history_repo, timeout_seconds=0.05)

        result = await guard.check_order_history("buyer-1", "Marigold Seeds")

        assert result.has_conflict is False


class TestMessages:
    def test_cart_message(self):
        assert cart_conflict_message("Marigold Sapling", "Marigold Seeds") == (
            'You already have "Marigold Sapling" in your cart. '
            "To ensure fair distribution, you can only claim one free marigold item per order."
        )

    def test_history_message(self):
        assert history_conflict_message("Marigold Sapling", "Marigold Seeds") == (
            "You've already received a free marigold item in a previous order "
            "(Marigold Sapling). To ensure fair distribution, "
            "you can only claim one free marigold item."
        )
