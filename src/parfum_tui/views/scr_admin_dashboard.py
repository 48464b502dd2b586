from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.events import ScreenResume
from textual.widgets import Button, MarkdownViewer

from parfum_tui.api import endpoints
from parfum_tui.api.client import ApiError, UnauthorizedError, error_message
from parfum_tui.utils.reports import dashboard_markdown
from parfum_tui.views.base_screen import BaseScreen


class AdminDashboardScreen(BaseScreen):
    """Headline numbers for the store, fetched fresh each time the screen shows."""

    MODE = "admin_dashboard"

    BINDINGS = [
        Binding("ctrl+r", "reload", "Reload", show=True),
    ]

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield MarkdownViewer(id="md-dashboard", show_table_of_contents=False)
        yield Button("Refresh", id="btn-refresh")

    def action_reload(self) -> None:
        self.load_stats()

    @on(ScreenResume)
    @on(Button.Pressed, "#btn-refresh")
    def handle_refresh(self) -> None:
        self.load_stats()

    @work(exclusive=True)
    async def load_stats(self) -> None:
        try:
            stats = await endpoints.admin_dashboard(self.app.api)
        except UnauthorizedError:
            return
        except ApiError as e:
            self.notify(error_message(e, "Could not load dashboard."), severity="error")
            return

        user = self.app.session.get_user()
        await self.query_one("#md-dashboard", MarkdownViewer).document.update(
            dashboard_markdown(stats, user.name if user else "")
        )
