from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from parfum_tui.api import endpoints
from parfum_tui.api.client import ApiClient, ApiError, UnauthorizedError, error_message
from parfum_tui.api.models import Order
from parfum_tui.utils.cart import Cart
from parfum_tui.utils.logger import get_logger

_logger = get_logger(__name__)

CHECKOUT_FAILED = "Could not place your order. Please try again."


@dataclass(frozen=True)
class CheckoutResult:
    ok: bool
    message: str
    order: Optional[Order] = None
    session_expired: bool = False


async def checkout(api: ApiClient, cart: Cart) -> Optional[CheckoutResult]:
    """
    Turn the cart into a single order request.

    Returns None for an empty cart (nothing is sent). On success the cart is
    cleared and the backend's order, whose total is the one actually charged,
    is returned. On failure the cart is left exactly as it was.
    """
    if cart.is_empty():
        return None

    items = cart.order_items()
    try:
        order = await endpoints.create_order(api, items)
    except UnauthorizedError:
        return CheckoutResult(ok=False, message="", session_expired=True)
    except ApiError as e:
        _logger.warning(f"Checkout of {len(items)} lines failed: {e}")
        return CheckoutResult(ok=False, message=error_message(e, CHECKOUT_FAILED))

    await cart.clear()
    _logger.info(f"Order #{order.id} created for {len(items)} lines")
    return CheckoutResult(
        ok=True,
        message="Order placed! Thank you for shopping with us.",
        order=order,
    )
