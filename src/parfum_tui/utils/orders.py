from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from parfum_tui.api import endpoints
from parfum_tui.api.client import ApiClient, ApiError, UnauthorizedError, error_message
from parfum_tui.api.models import Order
from parfum_tui.utils.logger import get_logger

_logger = get_logger(__name__)

REVIEW_FILTERS = {
    "all": "All",
    "pending": "Pending",
    "paid": "Awaiting Verification",
    "verified": "Verified",
}


@dataclass(frozen=True)
class ReviewOutcome:
    ok: bool
    message: str = ""
    session_expired: bool = False


def can_review(order: Order) -> bool:
    """Only orders with an uploaded proof (paid) can be verified or rejected."""
    return order.payment_status == "paid"


def can_pay(order: Order) -> bool:
    return order.payment_status == "pending"


class OrderReview:
    """
    Admin payment verification. The status shown is always what the backend
    last reported: transitions refetch instead of patching the local list.
    """

    def __init__(self, api: ApiClient, status_filter: str = "all") -> None:
        self.api = api
        self.status_filter = status_filter
        self.orders: List[Order] = []

    def find(self, order_id: int) -> Optional[Order]:
        for order in self.orders:
            if order.id == order_id:
                return order
        return None

    async def refresh(self) -> ReviewOutcome:
        try:
            self.orders = await endpoints.admin_list_orders(self.api, self.status_filter)
        except UnauthorizedError:
            return ReviewOutcome(ok=False, session_expired=True)
        except ApiError as e:
            return ReviewOutcome(ok=False, message=error_message(e, "Could not load orders."))
        return ReviewOutcome(ok=True)

    async def set_filter(self, status_filter: str) -> ReviewOutcome:
        self.status_filter = status_filter if status_filter in REVIEW_FILTERS else "all"
        return await self.refresh()

    async def verify(self, order_id: int) -> ReviewOutcome:
        return await self._transition(
            endpoints.admin_verify_order,
            order_id,
            "Payment verified.",
            "Could not verify the payment.",
        )

    async def reject(self, order_id: int) -> ReviewOutcome:
        return await self._transition(
            endpoints.admin_reject_order,
            order_id,
            "Payment rejected. The customer can upload a new proof.",
            "Could not reject the payment.",
        )

    async def _transition(self, call, order_id: int, done: str, failed: str) -> ReviewOutcome:
        try:
            await call(self.api, order_id)
        except UnauthorizedError:
            return ReviewOutcome(ok=False, session_expired=True)
        except ApiError as e:
            _logger.warning(f"Order #{order_id} transition failed: {e}")
            return ReviewOutcome(ok=False, message=error_message(e, failed))

        _logger.info(f"Order #{order_id}: {done}")
        refreshed = await self.refresh()
        if not refreshed.ok and not refreshed.session_expired:
            # the transition went through; only the reload failed
            return ReviewOutcome(ok=True, message=f"{done} {refreshed.message}")
        return ReviewOutcome(ok=True, message=done, session_expired=refreshed.session_expired)
