from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.events import Key
from textual.widgets import Button, Input, Label, TabbedContent, TabPane

from parfum_tui.api import endpoints
from parfum_tui.api.client import ApiError, error_message
from parfum_tui.utils.forms import clean_credentials, validate_login, validate_registration
from parfum_tui.views.base_screen import BaseScreen
from parfum_tui.views.modal_dialog import DialogModal


class LoginScreen(BaseScreen):
    """
    Login and sign up tabs. Dismisses with True once a session is stored,
    False if the user backs out.
    """

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Login", show_sidebar=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with TabbedContent(id="super-tab-loginscr"):
            with TabPane("Login", id="tab-login"):
                with Vertical(id="div-login"):
                    yield Label("Email")
                    yield Input(placeholder="user@example.com", id="input-login-email")
                    yield Label("Password")
                    yield Input(
                        placeholder="*********", password=True, id="input-login-pwd"
                    )
                    with Horizontal(id="div-login-btns"):
                        yield Button("Back", id="btn-back")
                        yield Button("Login", id="btn-login", variant="primary")

            with TabPane("Sign up", id="tab-signup"):
                with Vertical(id="div-reg"):
                    yield Label("Name")
                    yield Input(placeholder="Jane Doe", id="input-reg-name")
                    yield Label("Email")
                    yield Input(placeholder="user@example.com", id="input-reg-email")
                    yield Label("Password")
                    yield Input(
                        placeholder="at least 6 characters",
                        password=True,
                        id="input-reg-pwd",
                    )
                    yield Label("Confirm Password")
                    yield Input(
                        placeholder="*********", password=True, id="input-reg-pwd2"
                    )
                    with Container(id="div-reg-btns"):
                        yield Button("Register", id="btn-reg", variant="primary")

    def on_mount(self):
        self.query_one("#input-login-email").focus()

    def on_key(self, event: Key) -> None:
        if event.key == "escape":
            self.dismiss(False)
        if event.key == "enter" and self.focused == self.query_one("#input-login-pwd"):
            self.handle_login_submit()
        if event.key == "enter" and self.focused == self.query_one("#input-reg-pwd2"):
            self.handle_registration_submit()

    @on(Button.Pressed, "#btn-back")
    def handle_back(self) -> None:
        self.dismiss(False)

    @on(Button.Pressed, "#btn-login")
    @work(exclusive=True)
    async def handle_login_submit(self) -> None:
        email, pwd = clean_credentials(
            self.query_one("#input-login-email", Input).value,
            self.query_one("#input-login-pwd", Input).value,
        )

        problem = validate_login(email, pwd)
        if problem:
            self.notify(problem, severity="error")
            return

        try:
            token, user = await endpoints.login(self.app.api, email, pwd)
        except ApiError as e:
            self.notify(error_message(e, "Wrong email or password."), severity="error")
            input_login_pwd = self.query_one("#input-login-pwd", Input)
            input_login_pwd.value = ""
            input_login_pwd.focus()
            input_login_pwd.add_class("-invalid")
            return

        await self.app.session.set_token(token)
        await self.app.session.set_user(user)
        self.notify(f"Hello {user.name}!")
        self.dismiss(True)

    @on(Button.Pressed, "#btn-reg")
    @work(exclusive=True)
    async def handle_registration_submit(self) -> None:
        name = self.query_one("#input-reg-name", Input).value.strip()
        email, pwd = clean_credentials(
            self.query_one("#input-reg-email", Input).value,
            self.query_one("#input-reg-pwd", Input).value,
        )
        pwd2 = self.query_one("#input-reg-pwd2", Input).value

        problem = validate_registration(name, email, pwd, pwd2)
        if problem:
            self.notify(problem, severity="error")
            return

        try:
            await endpoints.register(self.app.api, name, email, pwd, pwd2)
        except ApiError as e:
            self.notify(error_message(e, "Registration failed. Please try again."), severity="error")
            return

        await self.app.push_screen_wait(
            DialogModal("Registration successful. You can log in now.")
        )

        self.get_child_by_type(TabbedContent).active = "tab-login"
        self.query_one("#input-login-email", Input).value = email
        input_login_pwd = self.query_one("#input-login-pwd", Input)
        input_login_pwd.value = pwd
        input_login_pwd.focus()
