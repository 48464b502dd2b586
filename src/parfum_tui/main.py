from typing import Optional

import requests
from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from parfum_tui.api.client import ApiClient
from parfum_tui.store import database, kv
from parfum_tui.utils.cart import Cart
from parfum_tui.utils.config import Settings
from parfum_tui.utils.logger import close_log_file, get_logger
from parfum_tui.utils.messages import (
    LoginRequestedMessage,
    ModeSwitchedMessage,
    NewOrderMessage,
    QuitRequestedMessage,
    SessionExpiredMessage,
    UserLogoutMessage,
)
from parfum_tui.utils.navigation import can_enter, landing_mode, role_of
from parfum_tui.utils.state import SessionStore
from parfum_tui.views.scr_admin_dashboard import AdminDashboardScreen
from parfum_tui.views.scr_admin_orders import AdminOrdersScreen
from parfum_tui.views.scr_admin_perfumes import AdminPerfumesScreen
from parfum_tui.views.scr_admin_reports import AdminReportsScreen
from parfum_tui.views.scr_admin_users import AdminUsersScreen
from parfum_tui.views.scr_cart import CartScreen
from parfum_tui.views.scr_catalog import CatalogScreen
from parfum_tui.views.scr_login import LoginScreen
from parfum_tui.views.scr_orders import OrdersScreen

_logger = get_logger(__name__)


class ParfumApp(App):
    TITLE = "Parfum Store"

    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        "catalog": CatalogScreen,
        "cart": CartScreen,
        "orders": OrdersScreen,
        "admin_dashboard": AdminDashboardScreen,
        "admin_perfumes": AdminPerfumesScreen,
        "admin_orders": AdminOrdersScreen,
        "admin_users": AdminUsersScreen,
        "admin_reports": AdminReportsScreen,
    }

    CSS_PATH = "app.tcss"

    settings: Settings
    session: SessionStore
    cart: Cart
    api: ApiClient

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http: Optional[requests.Session] = None,
    ):
        super().__init__()
        self.settings = settings or Settings.from_env()
        database.configure(self.settings.data_path)

        self.session = SessionStore(ttl=self.settings.session_ttl)
        self.cart = Cart()
        self.api = ApiClient(
            self.settings.api_url,
            self.session,
            on_unauthorized=lambda: self.post_message(SessionExpiredMessage()),
            timeout=self.settings.request_timeout,
            http=http,
        )
        # one warning per expired session, however many requests hit the 401
        self._expiry_notified = False
        self.session.subscribe(self._rearm_expiry_warning)

    def _rearm_expiry_warning(self, session: SessionStore) -> None:
        if session.is_authenticated():
            self._expiry_notified = False

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.main_flow()

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    async def navigate(self, mode: str) -> None:
        """Switch to a mode if the current role may see it."""
        if not can_enter(mode, self.session):
            if role_of(self.session) == "guest":
                self.post_message(LoginRequestedMessage())
            else:
                self.notify("You do not have access to that page.", severity="warning")
            return

        if mode != self.current_mode:
            self.post_message(ModeSwitchedMessage(self.current_mode, mode))
            await self.switch_mode(mode)

    async def go_home(self) -> None:
        await self.navigate(landing_mode(self.session))

    @on(LoginRequestedMessage)
    @work(exclusive=True, group="login")
    async def handle_login_requested(self):
        if await self.push_screen_wait(LoginScreen()):
            _logger.info(f"Logged in as {self.session.get_user()}")
            await self.go_home()

    @on(UserLogoutMessage)
    @work
    async def handle_user_logout(self):
        await self.session.clear()
        await self.cart.clear()
        self.notify("Logout successful.")
        await self.go_home()

    @on(SessionExpiredMessage)
    async def handle_session_expired(self):
        if isinstance(self.screen, LoginScreen):
            # bad credentials, the login form reports those itself
            return
        if not self._expiry_notified:
            self._expiry_notified = True
            self.notify("Your session has expired. Please log in again.", severity="warning")
        await self.go_home()

    @on(NewOrderMessage)
    async def handle_new_order(self):
        await self.navigate("orders")

    @on(ModeSwitchedMessage)
    def handle_mode_switched(self, message: ModeSwitchedMessage):
        _logger.debug(f"Mode {message.old_mode} -> {message.new_mode}")

    @on(QuitRequestedMessage)
    def handle_quit(self):
        self.exit()

    @work
    async def main_flow(self):
        await self.session.load()
        await self.cart.load()
        purged = await kv.purge_expired()
        if purged:
            _logger.debug(f"Purged {purged} expired entries")
        await self.go_home()


def run() -> None:
    try:
        ParfumApp().run()
    finally:
        close_log_file()


if __name__ == "__main__":
    run()
