from typing import Callable, List

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, ListItem, ListView, Markdown

from parfum_tui.utils.messages import LoginRequestedMessage, UserLogoutMessage
from parfum_tui.utils.navigation import ALL_MODES, menu_for, role_of
from parfum_tui.utils.pure import format_currency, generate_markdown_table
from parfum_tui.views.modal_dialog import ConfirmDialogModal, QuitDialogModal

ROLE_LABELS = {"guest": "Guest", "user": "Customer", "admin": "Administrator"}


class Sidebar(Container):
    """
    User info, login/logout and the menu for the current role. Follows the
    session and cart stores instead of polling them.
    """

    def __init__(self) -> None:
        super().__init__()
        self._unsubscribe: List[Callable[[], None]] = []

    def compose(self) -> ComposeResult:
        yield Label("User Info", id="label-info-1")
        yield Markdown("", id="md-userinfo")
        yield Button("Log in", id="btn-login", variant="primary")
        yield Button("Log out", id="btn-logout", variant="error")
        yield Label("", id="label-cart-badge")
        yield Label("Menu", id="label-info-2")
        yield ListView(id="list-menu")

    def on_mount(self) -> None:
        self._unsubscribe = [
            self.app.session.subscribe(lambda _: self.render_session()),
            self.app.cart.subscribe(lambda _: self.render_cart_badge()),
        ]
        self.render_session()
        self.render_cart_badge()

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []

    @work(exclusive=True, group="sidebar-session")
    async def render_session(self) -> None:
        session = self.app.session
        role = role_of(session)
        user = session.get_user()

        rows = [["Role", ROLE_LABELS[role]]]
        if user:
            rows = [["Name", user.name], ["Email", user.email]] + rows
        await self.query_one("#md-userinfo", Markdown).update(
            generate_markdown_table(None, rows, ["l", "l"])
        )

        self.query_one("#btn-login").display = role == "guest"
        self.query_one("#btn-logout").display = role != "guest"
        self.query_one("#label-cart-badge").display = role == "user"

        list_menu = self.query_one("#list-menu", ListView)
        await list_menu.clear()
        await list_menu.extend(
            [
                ListItem(Label(label), id="list-menu-item-" + mode)
                for mode, label in menu_for(session).items()
            ]
        )
        self.highlight_item(self.app.current_mode)

    def render_cart_badge(self) -> None:
        cart = self.app.cart
        self.query_one("#label-cart-badge", Label).update(
            f"Cart: {cart.total_items()} item(s), {format_currency(cart.total_price())}"
        )

    def highlight_item(self, mode: str) -> None:
        list_menu = self.query_one("#list-menu", ListView)
        for i, item in enumerate(list_menu.children):
            if item.id == "list-menu-item-" + mode:
                list_menu.index = i
                return

    async def on_list_view_selected(self, event: ListView.Selected) -> None:
        selected_mode = event.item.id.removeprefix("list-menu-item-")
        if self.app.current_mode != selected_mode:
            await self.app.navigate(selected_mode)

    @on(Button.Pressed, "#btn-login")
    def handle_login(self) -> None:
        self.post_message(LoginRequestedMessage())

    @on(Button.Pressed, "#btn-logout")
    @work()
    async def handle_logout(self) -> None:
        if not await self.app.push_screen_wait(
            ConfirmDialogModal("Are you sure you want to log out?")
        ):
            return
        self.post_message(UserLogoutMessage())


class BaseScreen(Screen):
    """
    Inherited by all screens, contains common elements like
    headers, footers, sidebar, and keybindings.
    """

    BINDINGS = [
        Binding("ctrl+z", "quit", "Quit App", show=True),
    ]

    # key in utils.navigation mode tables, gives the header subtitle
    MODE = ""

    def __init__(self):
        super().__init__()
        self.configure()

    def configure(
        self,
        header_sub_title: str = "",
        show_sidebar: bool = True,
    ) -> None:
        self.sub_title = header_sub_title or ALL_MODES.get(self.MODE, "")
        self._show_sidebar = show_sidebar

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar()
        yield Header()
        yield Footer(show_command_palette=False)

    def on_screen_resume(self) -> None:
        if self._show_sidebar:
            self.query_one(Sidebar).highlight_item(self.MODE)

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())
