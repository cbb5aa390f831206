"""
Shared pytest fixtures for the cart backend tests.
"""

from __future__ import annotations

import os
from unittest.mock import MagicMock

import pytest

# TEST-ONLY settings; must be set before app modules read get_settings()
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault(
    "SUPABASE_JWT_SECRET", "test-secret-key-at-least-32-characters-long-for-testing"
)
os.environ.setdefault("FREE_ITEM_HISTORY_CHECK_ENABLED", "false")

from app.repositories.cart_repo import CartSessionRepository  # noqa: E402
from app.services.cart_service import CartService  # noqa: E402
from app.services.cart_store import CartStore  # noqa: E402
from app.services.free_item_guard import FreeItemGuard  # noqa: E402


@pytest.fixture
def store() -> CartStore:
    return CartStore()


@pytest.fixture
def order_history_repo():
    """Fake OrderHistoryRepository returning no orders by default."""
    repo = MagicMock()
    repo.list_for_user = MagicMock(return_value=[])
    return repo


@pytest.fixture
def guard(order_history_repo) -> FreeItemGuard:
    return FreeItemGuard(order_history_repo, timeout_seconds=1.0)


@pytest.fixture
def cart_service(guard) -> CartService:
    return CartService(CartSessionRepository(), guard, history_check_enabled=True)
