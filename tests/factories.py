"""
Builders for catalog records and Supabase order rows used across tests.
"""

from app.models.order import OrderHistoryEntry


def make_product(
    id: str = "a",
    name: str = "Tomato",
    price: float = 20,
    owner_id: str = "s1",
    owner_name: str = "Green Acres",
    available_quantity: int | None = 5,
    unit: str = "kg",
) -> dict:
    """Catalog record shaped like the marketplace's product payload."""
    return {
        "id": id,
        "name": name,
        "price": price,
        "owner": {
            "id": owner_id,
            "name": owner_name,
            "whatsapp_number": "+910000000000",
            "location": "Pune",
        },
        "available_quantity": available_quantity,
        "unit": unit,
    }


def make_order(order_id: str, *lines: tuple[str, float], status: str = "delivered") -> dict:
    """Supabase order row with nested items; lines are (vegetable name, price)."""
    return {
        "id": order_id,
        "status": status,
        "created_at": "2026-03-01T10:00:00+00:00",
        "items": [
            {
                "id": f"{order_id}-{i}",
                "quantity": 1,
                "price_per_unit": price,
                "total_price": price,
                "vegetable": {"id": f"veg-{i}", "name": name, "category": "plants"},
            }
            for i, (name, price) in enumerate(lines)
        ],
    }


def history_rows(*orders: dict) -> list[OrderHistoryEntry]:
    return [OrderHistoryEntry.model_validate(o) for o in orders]
