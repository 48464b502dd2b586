from typing import Dict, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.events import ScreenResume
from textual.timer import Timer
from textual.widgets import Button, DataTable, Input

from parfum_tui.api import endpoints
from parfum_tui.api.client import ApiError, UnauthorizedError, error_message
from parfum_tui.api.models import User
from parfum_tui.views.base_screen import BaseScreen
from parfum_tui.views.modal_dialog import ConfirmDialogModal
from parfum_tui.views.modal_user_form import UserFormModal

SEARCH_DELAY = 0.3


class AdminUsersScreen(BaseScreen):
    """
    Account management. Searching is done by the backend; typing is debounced
    so one request goes out per pause.
    """

    MODE = "admin_users"

    BINDINGS = [
        Binding("ctrl+r", "reload", "Reload", show=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._users: Dict[int, User] = {}
        self._search_timer: Optional[Timer] = None

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield Input(id="input-search", placeholder="Search by name or email...")
        yield DataTable(id="table-users")
        with Horizontal(id="hort-table-control"):
            yield Button("Edit", id="btn-edit", variant="primary")
            yield Button("Delete", id="btn-delete", variant="error")
            yield Button("Refresh", id="btn-refresh")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("ID", "Name", "Email", "Role")

    def action_reload(self) -> None:
        self.load_users()

    @on(ScreenResume)
    @on(Button.Pressed, "#btn-refresh")
    def handle_refresh(self) -> None:
        self.load_users()

    @on(Input.Changed, "#input-search")
    def handle_search(self) -> None:
        if self._search_timer:
            self._search_timer.stop()
        self._search_timer = self.set_timer(SEARCH_DELAY, self.load_users)

    @work(exclusive=True, group="admin-users")
    async def load_users(self) -> None:
        search = self.query_one("#input-search", Input).value.strip()
        try:
            users = await endpoints.admin_list_users(self.app.api, search=search)
        except UnauthorizedError:
            return
        except ApiError as e:
            self.notify(error_message(e, "Could not load users."), severity="error")
            return

        self._users = {u.id: u for u in users}
        table = self.query_one(DataTable)
        table.clear()
        for u in users:
            table.add_row(u.id, u.name, u.email, u.role.capitalize(), key=str(u.id))

    def selected_user(self) -> Optional[User]:
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return self._users.get(int(row_key.value))

    @on(Button.Pressed, "#btn-edit")
    @on(DataTable.RowSelected)
    @work()
    async def handle_edit(self) -> None:
        user = self.selected_user()
        if user is None:
            self.notify("Select a user first.", severity="warning")
            return
        if await self.app.push_screen_wait(UserFormModal(user)):
            self.load_users()

    @on(Button.Pressed, "#btn-delete")
    @work()
    async def handle_delete(self) -> None:
        user = self.selected_user()
        if user is None:
            self.notify("Select a user first.", severity="warning")
            return
        me = self.app.session.get_user()
        if me and me.id == user.id:
            self.notify("You cannot delete your own account.", severity="warning")
            return
        if not await self.app.push_screen_wait(
            ConfirmDialogModal(f"Delete user '{user.name}'?", tone="error")
        ):
            return

        try:
            await endpoints.admin_delete_user(self.app.api, user.id)
        except UnauthorizedError:
            return
        except ApiError as e:
            self.notify(error_message(e, "Could not delete the user."), severity="error")
            return
        self.notify(f"User '{user.name}' deleted.")
        self.load_users()
