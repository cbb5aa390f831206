# app/repositories/order_history_repo.py
from typing import Callable

from supabase import Client

from app.core.supabase_client import supabase_for_order_history
from app.models.order import OrderHistoryEntry

# Nested select: each order with its line items and the ordered vegetable
ORDER_HISTORY_SELECT = """
    id, status, created_at,
    items:order_items(
        id, quantity, price_per_unit, total_price,
        vegetable:vegetables(id, name, category)
    )
"""


class OrderHistoryRepository:
    """
    Read-only access to a buyer's past orders stored in Supabase.

    - Pure data access, no business logic.
    - Blocking (the Supabase client is synchronous); async callers should
      run it in a worker thread.
    """

    def __init__(self, client_factory: Callable[[], Client] = supabase_for_order_history):
        self._client_factory = client_factory

    def list_for_user(self, user_id: str) -> list[OrderHistoryEntry]:
        """
        Return the user's orders, newest first.

        Raises:
            Any exception raised by the Supabase client if the query fails.
        """
        client = self._client_factory()
        response = (
            client.table("orders")
            .select(ORDER_HISTORY_SELECT)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        rows = response.data or []
        return [OrderHistoryEntry.model_validate(row) for row in rows]
