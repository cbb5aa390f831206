# app/routers/cart.py
from fastapi import APIRouter, Depends

from app.core.auth import Buyer, require_buyer
from app.core.config import get_settings
from app.models.cart import CartState
from app.repositories.cart_repo import CartSessionRepository
from app.repositories.order_history_repo import OrderHistoryRepository
from app.schemas.cart import (
    CartActionResult,
    CartItemCreate,
    CartItemUpdate,
    FreeItemCheckRequest,
)
from app.schemas.free_item import FreeItemCheckRead
from app.services.cart_service import CartService
from app.services.free_item_guard import FreeItemGuard

settings = get_settings()

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_sessions = CartSessionRepository(ttl_seconds=settings.CART_SESSION_TTL_SECONDS)
order_history_repo = OrderHistoryRepository()
guard = FreeItemGuard(
    order_history_repo,
    timeout_seconds=settings.ORDER_HISTORY_TIMEOUT_SECONDS,
)
service = CartService(
    cart_sessions,
    guard,
    history_check_enabled=settings.FREE_ITEM_HISTORY_CHECK_ENABLED,
)


def get_cart_service() -> CartService:
    """
    Dependency returning the process-wide CartService.

    Carts themselves are per buyer; only the registry is shared.
    """
    return service


@router.get("", response_model=CartState)
def get_my_cart(
    current_buyer: Buyer = Depends(require_buyer),
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Get the current buyer's cart: items, total, seller and last error.
    """
    return cart_service.get_cart(current_buyer.id)


@router.post("", response_model=CartActionResult)
async def add_to_cart(
    payload: CartItemCreate,
    current_buyer: Buyer = Depends(require_buyer),
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Add a product to the current buyer's cart.

    Rejections (other seller, duplicate free item, not enough stock)
    come back with success=false and an error message.
    """
    return await cart_service.add_to_cart(current_buyer.id, payload)


@router.post("/free-item-check", response_model=FreeItemCheckRead)
async def check_free_item(
    payload: FreeItemCheckRequest,
    current_buyer: Buyer = Depends(require_buyer),
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Check whether a free item with this name could still be claimed.
    """
    return await cart_service.check_free_item(current_buyer.id, payload.name)


@router.delete("/error", response_model=CartActionResult)
async def clear_cart_error(
    current_buyer: Buyer = Depends(require_buyer),
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Dismiss the last cart error.
    """
    return await cart_service.clear_error(current_buyer.id)


@router.patch("/{item_id}", response_model=CartActionResult)
async def update_cart_item(
    item_id: str,
    payload: CartItemUpdate,
    current_buyer: Buyer = Depends(require_buyer),
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Update quantity of an item in the cart.
    """
    return await cart_service.update_quantity(current_buyer.id, item_id, payload)


@router.delete("/{item_id}", response_model=CartActionResult)
async def remove_cart_item(
    item_id: str,
    current_buyer: Buyer = Depends(require_buyer),
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Remove an item from the cart.
    """
    return await cart_service.remove_item(current_buyer.id, item_id)


@router.delete("", response_model=CartActionResult)
async def clear_cart(
    current_buyer: Buyer = Depends(require_buyer),
    cart_service: CartService = Depends(get_cart_service),
):
    """
    Clear the entire cart.
    """
    return await cart_service.clear_cart(current_buyer.id)
