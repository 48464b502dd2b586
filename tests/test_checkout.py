import os
import sys
import unittest
from decimal import Decimal

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from fakes import FakeApi  # noqa: E402
from parfum_tui.api.client import ApiError, UnauthorizedError  # noqa: E402
from parfum_tui.api.models import Perfume  # noqa: E402
from parfum_tui.store import database  # noqa: E402
from parfum_tui.utils.cart import Cart  # noqa: E402
from parfum_tui.utils.checkout import CHECKOUT_FAILED, checkout  # noqa: E402

PERFUME_A = Perfume(id=1, name="Amber Night", price=Decimal("10000"), stock=5)
PERFUME_B = Perfume(id=2, name="Blue Rain", price=Decimal("25000"), stock=3)


class CheckoutTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        database.configure(None)

    async def make_cart(self):
        cart = Cart()
        await cart.add(PERFUME_A)
        await cart.add(PERFUME_A)
        await cart.add(PERFUME_B)
        return cart

    async def test_empty_cart_sends_nothing(self):
        api = FakeApi()
        self.assertIsNone(await checkout(api, Cart()))
        self.assertEqual(api.calls, [])

    async def test_success_clears_cart(self):
        # the backend total wins over the local estimate
        api = FakeApi(post=[{"id": 41, "total_amount": "44000.00", "payment_status": "pending"}])
        cart = await self.make_cart()

        result = await checkout(api, cart)

        self.assertTrue(result.ok)
        self.assertEqual(result.order.id, 41)
        self.assertEqual(result.order.total_amount, Decimal("44000.00"))
        self.assertTrue(cart.is_empty())

        method, path, kwargs = api.calls[0]
        self.assertEqual((method, path), ("post", "/api/orders"))
        self.assertEqual(
            sorted((i["perfume_id"], i["quantity"]) for i in kwargs["json"]["items"]),
            [(1, 2), (2, 1)],
        )

    async def test_backend_rejection_keeps_cart(self):
        api = FakeApi(post=[ApiError(422, {"message": "Insufficient stock for Blue Rain"})])
        cart = await self.make_cart()

        result = await checkout(api, cart)

        self.assertFalse(result.ok)
        self.assertFalse(result.session_expired)
        self.assertEqual(result.message, "Insufficient stock for Blue Rain")
        self.assertEqual(cart.total_items(), 3)
        self.assertEqual(cart.total_price(), Decimal("45000"))

    async def test_network_failure_uses_generic_message(self):
        api = FakeApi(post=[ApiError(None, reason="timed out")])
        cart = await self.make_cart()

        result = await checkout(api, cart)
        self.assertFalse(result.ok)
        self.assertEqual(result.message, CHECKOUT_FAILED)
        self.assertEqual(cart.total_items(), 3)

    async def test_expired_session_keeps_cart(self):
        api = FakeApi(post=[UnauthorizedError(401, {"message": "Unauthenticated."})])
        cart = await self.make_cart()

        result = await checkout(api, cart)
        self.assertFalse(result.ok)
        self.assertTrue(result.session_expired)
        self.assertEqual(cart.total_items(), 3)


if __name__ == "__main__":
    unittest.main()
