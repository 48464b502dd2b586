import os
import sys
import tempfile
import unittest
from decimal import Decimal

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from fakes import FakeApi  # noqa: E402
from parfum_tui.api import endpoints  # noqa: E402
from parfum_tui.api.client import ApiError  # noqa: E402
from parfum_tui.api.models import Order, Perfume  # noqa: E402
from parfum_tui.utils.pure import format_currency  # noqa: E402

PERFUME_ROW = {
    "id": 7,
    "name": "Amber Night",
    "brand": "Lumi",
    "description": "Warm and woody",
    "price": "150000.00",
    "stock": 4,
    "created_at": "2025-03-01T10:00:00",
    "images": [
        {"id": 1, "url": "http://shop.test/storage/a.jpg", "is_primary": False},
        {"id": 2, "url": "http://shop.test/storage/b.jpg", "is_primary": True},
    ],
}

ORDER_ROW = {
    "id": 12,
    "total_amount": "300000.00",
    "payment_status": "paid",
    "payment_proof": "payments/12.jpg",
    "user": {"id": 3, "name": "Alice", "email": "alice@example.com", "role": "user"},
    "verified_by_user": {"id": 1, "name": "Root"},
    "items": [
        {
            "id": 1,
            "perfume_id": 7,
            "quantity": 2,
            "price": "150000.00",
            "perfume": {"id": 7, "name": "Amber Night"},
        }
    ],
}


class EndpointsTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.temp_dir.cleanup()

    def make_file(self, name, size=16):
        path = os.path.join(self.temp_dir.name, name)
        with open(path, "wb") as f:
            f.write(b"\0" * size)
        return path

    # ---------- Auth ----------

    async def test_login(self):
        api = FakeApi(
            post=[
                {
                    "token": "tok-9",
                    "user": {"id": 3, "name": "Alice", "email": "a@x.io", "role": "user"},
                }
            ]
        )
        token, user = await endpoints.login(api, "a@x.io", "secret")
        self.assertEqual(token, "tok-9")
        self.assertEqual(user.name, "Alice")
        self.assertEqual(
            api.calls[0],
            ("post", "/api/login", {"json": {"email": "a@x.io", "password": "secret"}}),
        )

    async def test_login_without_token_fails(self):
        api = FakeApi(post=[{"message": "ok"}])
        with self.assertRaises(ApiError):
            await endpoints.login(api, "a@x.io", "secret")

    async def test_register_sends_confirmation(self):
        api = FakeApi(post=[{"message": "Registered"}])
        await endpoints.register(api, "Bob", "b@x.io", "secret1", "secret1")
        _, path, kwargs = api.calls[0]
        self.assertEqual(path, "/api/register")
        self.assertEqual(kwargs["json"]["password_confirmation"], "secret1")

    # ---------- Catalog ----------

    async def test_list_perfumes_accepts_both_shapes(self):
        api = FakeApi(get=[[PERFUME_ROW], {"data": [PERFUME_ROW, "junk"]}, {"weird": 1}])

        bare = await endpoints.list_perfumes(api)
        paged = await endpoints.list_perfumes(api)
        nothing = await endpoints.list_perfumes(api)

        self.assertEqual(len(bare), 1)
        self.assertEqual(len(paged), 1)
        self.assertEqual(nothing, [])

        p = bare[0]
        self.assertEqual(p.price, Decimal("150000.00"))
        self.assertEqual(p.brand, "Lumi")
        self.assertEqual(p.primary_image.id, 2)

    def test_non_finite_amounts_read_as_zero(self):
        perfume = Perfume.from_dict({**PERFUME_ROW, "price": "NaN"})
        order = Order.from_dict({**ORDER_ROW, "total_amount": "Infinity"})

        self.assertEqual(perfume.price, Decimal("0"))
        self.assertEqual(order.total_amount, Decimal("0"))
        self.assertEqual(format_currency(perfume.price), "Rp0")

    async def test_get_perfume_unwraps_data(self):
        api = FakeApi(get=[{"data": PERFUME_ROW}])
        p = await endpoints.get_perfume(api, 7)
        self.assertEqual(p.id, 7)
        self.assertEqual(api.calls[0][1], "/api/perfumes/7")

    # ---------- Orders ----------

    async def test_create_order_body(self):
        api = FakeApi(post=[ORDER_ROW])
        order = await endpoints.create_order(api, [(7, 2), (9, 1)])

        self.assertEqual(
            api.calls[0][2]["json"],
            {
                "items": [
                    {"perfume_id": 7, "quantity": 2},
                    {"perfume_id": 9, "quantity": 1},
                ]
            },
        )
        self.assertEqual(order.id, 12)
        self.assertEqual(order.total_amount, Decimal("300000.00"))
        self.assertEqual(order.items[0].perfume_name, "Amber Night")
        self.assertEqual(order.items[0].line_total, Decimal("300000.00"))
        self.assertEqual(order.verified_by, "Root")
        self.assertEqual(order.user.email, "alice@example.com")

    async def test_customer_order_reads(self):
        api = FakeApi(get=[{"data": [ORDER_ROW]}, {"data": ORDER_ROW}])
        orders = await endpoints.list_orders(api)
        order = await endpoints.get_order(api, 12)

        self.assertEqual([o.id for o in orders], [12])
        self.assertEqual(order.payment_status, "paid")
        self.assertEqual(order.payment_proof, "payments/12.jpg")
        self.assertEqual([p for _, p, _ in api.calls], ["/api/orders", "/api/orders/12"])

    async def test_upload_payment_proof(self):
        path = self.make_file("receipt.png")
        api = FakeApi(post=[{"message": "Payment proof uploaded successfully"}])
        await endpoints.upload_payment_proof(api, 12, path)

        _, url, kwargs = api.calls[0]
        self.assertEqual(url, "/api/orders/12/payment")
        name, data, mime = kwargs["files"]["payment_proof"]
        self.assertEqual(name, "receipt.png")
        self.assertEqual(mime, "image/png")
        self.assertEqual(len(data), 16)

    # ---------- Admin ----------

    async def test_upload_images_routes(self):
        api = FakeApi(post=[{}, {}])
        a = self.make_file("a.jpg")
        b = self.make_file("b.png")

        self.assertIsNone(await endpoints.admin_upload_images(api, 7, []))
        self.assertEqual(api.calls, [])

        await endpoints.admin_upload_images(api, 7, [a])
        await endpoints.admin_upload_images(api, 7, [a, b])

        single, batch = api.calls
        self.assertEqual(single[1], "/api/admin/perfumes/7/images")
        self.assertIn("image", single[2]["files"])
        self.assertEqual(batch[1], "/api/admin/perfumes/7/images/batch")
        self.assertEqual([field for field, _ in batch[2]["files"]], ["images[]", "images[]"])

    async def test_image_management_paths(self):
        api = FakeApi(get=[[{"id": 5, "image_path": "perfumes/5.jpg", "is_primary": 1}]])
        images = await endpoints.admin_list_images(api, 7)
        await endpoints.admin_set_primary_image(api, 7, 5)
        await endpoints.admin_delete_image(api, 7, 5)

        self.assertEqual(images[0].url, "perfumes/5.jpg")
        self.assertTrue(images[0].is_primary)
        self.assertEqual(
            [(m, p) for m, p, _ in api.calls],
            [
                ("get", "/api/admin/perfumes/7/images"),
                ("put", "/api/admin/perfumes/7/images/5/primary"),
                ("delete", "/api/admin/perfumes/7/images/5"),
            ],
        )

    async def test_perfume_crud_paths(self):
        api = FakeApi(post=[PERFUME_ROW], put=[{"data": PERFUME_ROW}])
        fields = {"name": "Amber Night", "price": "150000", "stock": 4}

        created = await endpoints.admin_create_perfume(api, fields)
        updated = await endpoints.admin_update_perfume(api, 7, fields)
        await endpoints.admin_delete_perfume(api, 7)

        self.assertEqual(created.id, 7)
        self.assertEqual(updated.id, 7)
        self.assertEqual(
            [(m, p) for m, p, _ in api.calls],
            [
                ("post", "/api/admin/perfumes"),
                ("put", "/api/admin/perfumes/7"),
                ("delete", "/api/admin/perfumes/7"),
            ],
        )

    async def test_users(self):
        api = FakeApi(get=[{"data": [{"id": 3, "name": "Alice", "email": "a@x.io", "role": "user"}]}])
        users = await endpoints.admin_list_users(api, search="ali")
        await endpoints.admin_update_user(api, 3, "Alice B", "a@x.io", "admin")
        await endpoints.admin_delete_user(api, 3)

        self.assertEqual(users[0].name, "Alice")
        self.assertEqual(api.calls[0][2]["params"], {"search": "ali", "per_page": 50})
        self.assertEqual(
            api.calls[1][2]["json"], {"name": "Alice B", "email": "a@x.io", "role": "admin"}
        )
        self.assertEqual(api.calls[2][1], "/api/admin/users/3")

    async def test_admin_order_filter(self):
        api = FakeApi(get=[[ORDER_ROW], [ORDER_ROW], []])
        await endpoints.admin_list_orders(api)
        await endpoints.admin_list_orders(api, "all")
        await endpoints.admin_list_orders(api, "paid")

        self.assertIsNone(api.calls[0][2]["params"])
        self.assertIsNone(api.calls[1][2]["params"])
        self.assertEqual(api.calls[2][2]["params"], {"status": "paid"})

    async def test_reporting_tolerates_odd_bodies(self):
        api = FakeApi(get=[{"totalUsers": 3}, None])
        self.assertEqual(await endpoints.admin_dashboard(api), {"totalUsers": 3})
        self.assertEqual(await endpoints.admin_reports(api), {})


if __name__ == "__main__":
    unittest.main()
