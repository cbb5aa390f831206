# app/repositories/cart_repo.py
import asyncio
import time
from typing import Callable

from app.services.cart_store import CartStore


class CartSession:
    """
    A buyer's cart plus the lock that serializes every action on it.
    """

    def __init__(self, store: CartStore, last_used: float):
        self.store = store
        self.lock = asyncio.Lock()
        self.last_used = last_used


class CartSessionRepository:
    """
    In-memory owner of one cart per buyer.

    - Carts are independent: nothing is shared between buyers.
    - Idle carts are dropped after `ttl_seconds` (checked on access).
    - Nothing is persisted; a restart empties every cart.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._sessions: dict[str, CartSession] = {}

    def _evict_expired(self) -> None:
        if not self.ttl_seconds:
            return
        now = self._clock()
        expired = [
            buyer_id
            for buyer_id, session in self._sessions.items()
            if now - session.last_used > self.ttl_seconds and not session.lock.locked()
        ]
        for buyer_id in expired:
            del self._sessions[buyer_id]

    def get_or_create(self, buyer_id: str) -> CartSession:
        self._evict_expired()
        session = self._sessions.get(buyer_id)
        if session is None:
            session = CartSession(CartStore(), self._clock())
            self._sessions[buyer_id] = session
        session.last_used = self._clock()
        return session

    def get(self, buyer_id: str) -> CartSession | None:
        self._evict_expired()
        session = self._sessions.get(buyer_id)
        if session is not None:
            session.last_used = self._clock()
        return session
