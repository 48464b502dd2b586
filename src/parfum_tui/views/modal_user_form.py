from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select

from parfum_tui.api import endpoints
from parfum_tui.api.client import ApiError, UnauthorizedError, error_message
from parfum_tui.api.models import User
from parfum_tui.utils.forms import USER_ROLES, validate_user_form


class UserFormModal(ModalScreen[bool]):
    """Edit name, email and role of an account. True when saved."""

    def __init__(self, user: User) -> None:
        super().__init__()
        self._user = user

    def compose(self) -> ComposeResult:
        with Vertical(id="div-user-form"):
            yield Label(f"Edit User #{self._user.id}")
            yield Label("Name")
            yield Input(self._user.name, id="input-name")
            yield Label("Email")
            yield Input(self._user.email, id="input-email")
            yield Label("Role")
            yield Select(
                [(role.capitalize(), role) for role in USER_ROLES],
                value=self._user.role if self._user.role in USER_ROLES else "user",
                allow_blank=False,
                id="select-role",
            )
            with Horizontal():
                yield Button("Go Back", id="btn-quit")
                yield Button("Save", id="btn-save", variant="success")

    def on_mount(self) -> None:
        self.query_one("#input-name").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self) -> None:
        self.dismiss(False)

    @on(Button.Pressed, "#btn-save")
    @work(exclusive=True)
    async def handle_save(self) -> None:
        name = self.query_one("#input-name", Input).value.strip()
        email = self.query_one("#input-email", Input).value.strip()
        role = self.query_one("#select-role", Select).value

        problem = validate_user_form(name, email, role)
        if problem:
            self.notify(problem, severity="error")
            return

        try:
            await endpoints.admin_update_user(self.app.api, self._user.id, name, email, role)
        except UnauthorizedError:
            self.dismiss(False)
            return
        except ApiError as e:
            self.notify(error_message(e, "Could not update the user."), severity="error")
            return

        self.app.notify(f"User '{name}' updated.")
        self.dismiss(True)
