from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Label, MarkdownViewer, Select

from parfum_tui.api.models import Order
from parfum_tui.utils.orders import REVIEW_FILTERS, OrderReview, ReviewOutcome, can_review
from parfum_tui.utils.pure import (
    format_currency,
    format_date,
    generate_markdown_table,
    status_label,
)
from parfum_tui.views.base_screen import BaseScreen
from parfum_tui.views.modal_dialog import ConfirmDialogModal


def review_markdown(order: Optional[Order], api_url: str = "") -> str:
    if not order:
        return "### Select an order to review its payment."

    customer = f"{order.user.name} ({order.user.email})" if order.user else "Unknown"
    md = (
        f"### Order #{order.id}\n"
        f"Customer: {customer}  \n"
        f"Date: {format_date(order.created_at)}  \n"
        f"Status: **{status_label(order.payment_status)}**\n\n"
    )
    md += generate_markdown_table(
        ["Perfume", "Qty", "Unit Price", "Subtotal"],
        [
            [i.perfume_name, i.quantity, format_currency(i.price), format_currency(i.line_total)]
            for i in order.items
        ],
        ["l", "r", "r", "r"],
    )
    md += f"\n\n**Total:** {format_currency(order.total_amount)}\n\n"

    if order.payment_proof:
        proof = order.payment_proof
        if api_url and not proof.startswith(("http://", "https://")):
            proof = f"{api_url.rstrip('/')}/storage/{proof.lstrip('/')}"
        md += f"Payment proof: {proof}  \n"
        md += f"Uploaded: {format_date(order.payment_date)}\n"
    else:
        md += "No payment proof uploaded yet.\n"

    if order.verified_at:
        verifier = order.verified_by or "an admin"
        md += f"\nVerified by {verifier} on {format_date(order.verified_at)}\n"
    return md


class AdminOrdersScreen(BaseScreen):
    """
    Payment verification. Only orders awaiting verification (paid) can be
    verified or rejected; the table always shows what the backend returned
    after the last action.
    """

    MODE = "admin_orders"

    BINDINGS = [
        Binding("ctrl+r", "reload", "Reload", show=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._review: Optional[OrderReview] = None

    @property
    def review(self) -> OrderReview:
        if self._review is None:
            self._review = OrderReview(self.app.api)
        return self._review

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="hort-filters"):
            yield Label("Status:")
            yield Select(
                [(label, key) for key, label in REVIEW_FILTERS.items()],
                value="all",
                allow_blank=False,
                id="select-status",
            )
        with Vertical():
            yield DataTable(id="table-admin-orders")
            yield MarkdownViewer(id="md-review", show_table_of_contents=False)
        with Horizontal(id="hort-table-control"):
            yield Button("Verify", id="btn-verify", variant="success")
            yield Button("Reject", id="btn-reject", variant="error")
            yield Button("Refresh", id="btn-refresh")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order", "Customer", "Date", "Status", "Total")
        self.show_selected()

    def action_reload(self) -> None:
        self.load_orders()

    @on(ScreenResume)
    @on(Button.Pressed, "#btn-refresh")
    def handle_refresh(self) -> None:
        self.load_orders()

    @on(Select.Changed, "#select-status")
    @work(exclusive=True, group="admin-orders")
    async def handle_filter(self, event: Select.Changed) -> None:
        status = event.value if isinstance(event.value, str) else "all"
        self.report(await self.review.set_filter(status))

    @work(exclusive=True, group="admin-orders")
    async def load_orders(self) -> None:
        self.report(await self.review.refresh())

    def report(self, outcome: ReviewOutcome, always: bool = False) -> None:
        if outcome.message and (always or not outcome.ok):
            self.notify(outcome.message, severity="information" if outcome.ok else "error")
        self.render_orders()

    def render_orders(self) -> None:
        table = self.query_one(DataTable)
        cursor_row = table.cursor_row
        table.clear()
        for o in self.review.orders:
            table.add_row(
                f"#{o.id}",
                o.user.name if o.user else "Unknown",
                format_date(o.created_at),
                status_label(o.payment_status),
                format_currency(o.total_amount),
                key=str(o.id),
            )
        if table.row_count:
            table.move_cursor(row=min(cursor_row, table.row_count - 1))
        self.show_selected()

    def selected_order(self) -> Optional[Order]:
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return self.review.find(int(row_key.value))

    @on(DataTable.RowHighlighted)
    def handle_row_highlight(self) -> None:
        self.show_selected()

    def show_selected(self) -> None:
        order = self.selected_order()
        self.query_one("#md-review", MarkdownViewer).document.update(
            review_markdown(order, self.app.settings.api_url)
        )
        reviewable = bool(order and can_review(order))
        self.query_one("#btn-verify", Button).disabled = not reviewable
        self.query_one("#btn-reject", Button).disabled = not reviewable

    @on(Button.Pressed, "#btn-verify")
    @work(exclusive=True, group="admin-orders")
    async def handle_verify(self) -> None:
        order = self.selected_order()
        if order is None or not can_review(order):
            return
        if not await self.app.push_screen_wait(
            ConfirmDialogModal(f"Verify the payment for order #{order.id}?", tone="positive")
        ):
            return
        self.report(await self.review.verify(order.id), always=True)

    @on(Button.Pressed, "#btn-reject")
    @work(exclusive=True, group="admin-orders")
    async def handle_reject(self) -> None:
        order = self.selected_order()
        if order is None or not can_review(order):
            return
        if not await self.app.push_screen_wait(
            ConfirmDialogModal(
                f"Reject the payment proof for order #{order.id}?", tone="error"
            )
        ):
            return
        self.report(await self.review.reject(order.id), always=True)
