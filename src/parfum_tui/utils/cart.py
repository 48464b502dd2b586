from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional, Tuple

from parfum_tui.api.models import Perfume, to_int
from parfum_tui.store import kv
from parfum_tui.utils.logger import get_logger

_logger = get_logger(__name__)

CART_KEY = "cart"

CartListener = Callable[["Cart"], None]


@dataclass(frozen=True)
class CartEntry:
    product: Perfume  # snapshot taken when first added
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {**self.product.to_dict(), "quantity": self.quantity}


class Cart:
    """
    Client-local cart: product id -> (product snapshot, quantity >= 1).

    Mutations change memory synchronously, then persist the whole cart. Nothing
    here talks to the backend; the cart is only submitted at checkout.
    """

    def __init__(self) -> None:
        self._entries: Dict[int, CartEntry] = {}
        self._listeners: List[CartListener] = []
        self._persist_lock = asyncio.Lock()

    # ---------------------------
    # Reads
    # ---------------------------

    @property
    def entries(self) -> List[CartEntry]:
        return list(self._entries.values())

    def get(self, product_id: int) -> Optional[CartEntry]:
        return self._entries.get(product_id)

    def is_empty(self) -> bool:
        return not self._entries

    def total_items(self) -> int:
        return sum(e.quantity for e in self._entries.values())

    def total_price(self) -> Decimal:
        """Sum of snapshot price x quantity. For display only, never charged."""
        return sum((e.line_total for e in self._entries.values()), Decimal("0"))

    def order_items(self) -> List[Tuple[int, int]]:
        return [(pid, e.quantity) for pid, e in self._entries.items()]

    # ---------------------------
    # Mutations
    # ---------------------------

    async def add(self, product: Perfume) -> None:
        existing = self._entries.get(product.id)
        if existing:
            self._entries[product.id] = replace(existing, quantity=existing.quantity + 1)
        else:
            self._entries[product.id] = CartEntry(product=product, quantity=1)
        await self._changed()

    async def remove(self, product_id: int) -> None:
        if self._entries.pop(product_id, None) is None:
            return
        await self._changed()

    async def set_quantity(self, product_id: int, qty: int) -> None:
        """qty < 1 removes the entry. Unknown ids are ignored."""
        if qty < 1:
            await self.remove(product_id)
            return
        existing = self._entries.get(product_id)
        if existing is None or existing.quantity == qty:
            return
        self._entries[product_id] = replace(existing, quantity=qty)
        await self._changed()

    async def clear(self) -> None:
        self._entries.clear()
        await self._changed()

    # ---------------------------
    # Persistence
    # ---------------------------

    async def load(self) -> None:
        """
        Hydrate from the local store, dropping anything that breaks the
        invariants (quantity < 1, missing id). Duplicate ids are merged.
        """
        raw = await kv.get_value(CART_KEY)
        entries: Dict[int, CartEntry] = {}
        for row in raw if isinstance(raw, list) else []:
            if not isinstance(row, dict):
                continue
            pid = to_int(row.get("id"), default=-1)
            qty = to_int(row.get("quantity"))
            if pid < 0 or qty < 1:
                continue
            if pid in entries:
                qty += entries[pid].quantity
            entries[pid] = CartEntry(product=Perfume.from_dict(row), quantity=qty)
        self._entries = entries
        _logger.debug(f"Cart loaded with {len(entries)} entries")
        self._notify()

    async def _changed(self) -> None:
        self._notify()
        async with self._persist_lock:
            # snapshot inside the lock so the last write is the latest state
            await kv.set_value(CART_KEY, [e.to_dict() for e in self._entries.values()])

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
