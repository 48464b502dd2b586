import os
import sys
import tempfile
import unittest
from datetime import timedelta

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from parfum_tui.api.models import User  # noqa: E402
from parfum_tui.store import database, kv  # noqa: E402
from parfum_tui.utils.state import TOKEN_KEY, USER_KEY, SessionStore  # noqa: E402

ALICE = User(id=1, name="Alice", email="alice@example.com", role="user")
ROOT_ADMIN = User(id=2, name="Root", email="root@example.com", role="admin")


class SessionStoreTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        database.configure(os.path.join(self.temp_dir.name, "test.sqlite"))

    def tearDown(self):
        database.configure(None)
        self.temp_dir.cleanup()

    async def test_fresh_store_is_logged_out(self):
        session = SessionStore()
        await session.load()
        self.assertIsNone(session.get_token())
        self.assertIsNone(session.get_user())
        self.assertFalse(session.is_authenticated())
        self.assertFalse(session.is_admin())

    async def test_login_persists_across_instances(self):
        session = SessionStore()
        await session.set_token("tok-123")
        await session.set_user(ALICE)
        self.assertTrue(session.is_authenticated())
        self.assertFalse(session.is_admin())

        restored = SessionStore()
        await restored.load()
        self.assertEqual(restored.get_token(), "tok-123")
        self.assertEqual(restored.get_user(), ALICE)

    async def test_admin_role(self):
        session = SessionStore()
        await session.set_token("tok")
        await session.set_user(ROOT_ADMIN)
        self.assertTrue(session.is_admin())

    async def test_expired_session_reads_logged_out(self):
        session = SessionStore(ttl=timedelta(seconds=-1))
        await session.set_token("tok")
        await session.set_user(ALICE)

        restored = SessionStore()
        await restored.load()
        self.assertFalse(restored.is_authenticated())
        self.assertIsNone(restored.get_user())

    async def test_clear_wipes_memory_and_storage(self):
        session = SessionStore()
        await session.set_token("tok")
        await session.set_user(ALICE)

        seen = []
        session.subscribe(lambda s: seen.append((s.get_token(), s.get_user())))
        await session.clear()

        # listeners never see a half-cleared session
        self.assertEqual(seen, [(None, None)])
        self.assertIsNone(await kv.get_value(TOKEN_KEY))
        self.assertIsNone(await kv.get_value(USER_KEY))

    async def test_garbage_in_storage_reads_logged_out(self):
        await kv.set_value(TOKEN_KEY, 12345)
        await kv.set_value(USER_KEY, "not a dict")
        session = SessionStore()
        await session.load()
        self.assertIsNone(session.get_token())
        self.assertIsNone(session.get_user())

    async def test_subscribe_and_unsubscribe(self):
        session = SessionStore()
        calls = []
        unsubscribe = session.subscribe(lambda s: calls.append(s.get_token()))

        await session.set_token("a")
        unsubscribe()
        await session.set_token("b")
        unsubscribe()  # second call is harmless

        self.assertEqual(calls, ["a"])

    async def test_memory_only_mode(self):
        database.configure(None)
        session = SessionStore()
        await session.set_token("tok")
        self.assertTrue(session.is_authenticated())
        await session.clear()
        self.assertFalse(session.is_authenticated())


if __name__ == "__main__":
    unittest.main()
