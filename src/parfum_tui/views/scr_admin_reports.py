from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.events import ScreenResume
from textual.widgets import Button, MarkdownViewer

from parfum_tui.api import endpoints
from parfum_tui.api.client import ApiError, UnauthorizedError, error_message
from parfum_tui.utils.reports import reports_markdown
from parfum_tui.views.base_screen import BaseScreen


class AdminReportsScreen(BaseScreen):
    """
    Sales summary, daily and monthly sales, top perfumes and the order list.
    """

    MODE = "admin_reports"

    BINDINGS = [
        Binding("ctrl+r", "reload", "Reload", show=True),
    ]

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield MarkdownViewer(id="md-reports", show_table_of_contents=True)
        yield Button("Refresh", id="btn-refresh")

    def action_reload(self) -> None:
        self.load_reports()

    @on(ScreenResume)
    @on(Button.Pressed, "#btn-refresh")
    def handle_refresh(self) -> None:
        self.load_reports()

    @work(exclusive=True)
    async def load_reports(self) -> None:
        try:
            reports = await endpoints.admin_reports(self.app.api)
            orders = await endpoints.admin_list_orders(self.app.api)
        except UnauthorizedError:
            return
        except ApiError as e:
            self.notify(error_message(e, "Could not load reports."), severity="error")
            return

        await self.query_one("#md-reports", MarkdownViewer).document.update(
            reports_markdown(reports, orders)
        )
