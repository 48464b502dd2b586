import os
import sys
import unittest

import requests

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from fakes import FakeHttp, FakeResponse  # noqa: E402
from parfum_tui.api.client import (  # noqa: E402
    ApiClient,
    ApiError,
    UnauthorizedError,
    error_message,
)
from parfum_tui.api.models import User  # noqa: E402
from parfum_tui.store import database  # noqa: E402
from parfum_tui.utils.state import SessionStore  # noqa: E402


class ApiClientTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        # memory only, nothing touches disk
        database.configure(None)
        self.session = SessionStore(
            token="tok-1", user=User(1, "Alice", "alice@example.com", "user")
        )
        self.expired_calls = 0

    def make_client(self, *responses, timeout=None):
        self.http = FakeHttp(*responses)

        def on_unauthorized():
            self.expired_calls += 1

        return ApiClient(
            "http://shop.test/",
            self.session,
            on_unauthorized=on_unauthorized,
            timeout=timeout,
            http=self.http,
        )

    async def test_bearer_token_attached(self):
        api = self.make_client(FakeResponse(200, {"ok": True}), timeout=5)
        payload = await api.get("/api/orders", params={"page": 1})

        self.assertEqual(payload, {"ok": True})
        method, url, kwargs = self.http.calls[0]
        self.assertEqual(method, "GET")
        self.assertEqual(url, "http://shop.test/api/orders")
        self.assertEqual(kwargs["headers"]["Authorization"], "Bearer tok-1")
        self.assertEqual(kwargs["headers"]["Accept"], "application/json")
        self.assertEqual(kwargs["params"], {"page": 1})
        self.assertEqual(kwargs["timeout"], 5)

    async def test_no_token_no_header(self):
        self.session.token = None
        api = self.make_client(FakeResponse(200, []))
        await api.get("/api/perfumes")
        _, _, kwargs = self.http.calls[0]
        self.assertNotIn("Authorization", kwargs["headers"])

    async def test_unauthorized_clears_session(self):
        api = self.make_client(FakeResponse(401, {"message": "Unauthenticated."}))

        with self.assertRaises(UnauthorizedError) as ctx:
            await api.get("/api/orders")

        self.assertEqual(ctx.exception.status, 401)
        self.assertFalse(self.session.is_authenticated())
        self.assertIsNone(self.session.get_user())
        self.assertEqual(self.expired_calls, 1)

    async def test_other_errors_pass_through(self):
        api = self.make_client(
            FakeResponse(422, {"message": "The given data was invalid."}),
            FakeResponse(500, text="<html>boom</html>"),
        )

        with self.assertRaises(ApiError) as ctx:
            await api.post("/api/orders", json={"items": []})
        self.assertNotIsInstance(ctx.exception, UnauthorizedError)
        self.assertEqual(ctx.exception.status, 422)
        self.assertEqual(ctx.exception.message, "The given data was invalid.")

        with self.assertRaises(ApiError) as ctx:
            await api.delete("/api/admin/perfumes/1")
        self.assertEqual(ctx.exception.status, 500)
        self.assertIsNone(ctx.exception.message)
        self.assertEqual(ctx.exception.payload, "<html>boom</html>")

        # the session survives anything that is not a 401
        self.assertTrue(self.session.is_authenticated())
        self.assertEqual(self.expired_calls, 0)

    async def test_network_error(self):
        api = self.make_client(requests.ConnectionError("connection refused"))
        with self.assertRaises(ApiError) as ctx:
            await api.get("/api/perfumes")
        self.assertIsNone(ctx.exception.status)
        self.assertIn("connection refused", ctx.exception.reason)
        self.assertTrue(self.session.is_authenticated())

    async def test_empty_body(self):
        api = self.make_client(FakeResponse(204))
        self.assertIsNone(await api.delete("/api/admin/users/3"))

    async def test_put_and_files_forwarded(self):
        api = self.make_client(FakeResponse(200, {}), FakeResponse(201, {"id": 3}))
        await api.put("/api/admin/orders/3/verify", json={})
        files = {"payment_proof": ("r.png", b"\x89PNG", "image/png")}
        await api.post("/api/orders/3/payment", files=files)

        self.assertEqual(self.http.calls[0][0], "PUT")
        self.assertEqual(self.http.calls[0][2]["json"], {})
        self.assertEqual(self.http.calls[1][0], "POST")
        self.assertEqual(self.http.calls[1][2]["files"], files)


class ErrorMessageTestCase(unittest.TestCase):
    def test_message_sources(self):
        self.assertEqual(ApiError(400, {"message": "Bad"}).message, "Bad")
        self.assertEqual(ApiError(400, {"error": "Nope"}).message, "Nope")
        self.assertEqual(
            ApiError(422, {"errors": {"email": ["The email has already been taken."]}}).message,
            "The email has already been taken.",
        )
        self.assertIsNone(ApiError(500, "plain text").message)

    def test_error_message_fallback(self):
        self.assertEqual(error_message(ApiError(400, {"message": "Bad"}), "x"), "Bad")
        self.assertEqual(error_message(ApiError(None, reason="timeout"), "Try again"), "Try again")
        self.assertEqual(error_message(OSError("disk"), "Try again"), "Try again")


if __name__ == "__main__":
    unittest.main()
