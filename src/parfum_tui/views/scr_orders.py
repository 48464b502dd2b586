from typing import Dict, List, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, MarkdownViewer

from parfum_tui.api import endpoints
from parfum_tui.api.client import ApiError, UnauthorizedError, error_message
from parfum_tui.api.models import Order
from parfum_tui.utils.orders import can_pay
from parfum_tui.utils.pure import (
    format_currency,
    format_date,
    generate_markdown_table,
    status_label,
)
from parfum_tui.views.base_screen import BaseScreen
from parfum_tui.views.modal_payment import PaymentProofModal


def order_detail_markdown(order: Optional[Order]) -> str:
    if not order:
        return "### Select an order to view its details."

    header = (
        f"### Order #{order.id}\n"
        f"Date: {format_date(order.created_at)}  \n"
        f"Status: **{status_label(order.payment_status)}**\n\n"
    )
    rows = [
        [i.perfume_name, i.quantity, format_currency(i.price), format_currency(i.line_total)]
        for i in order.items
    ]
    table = generate_markdown_table(
        ["Perfume", "Qty", "Unit Price", "Subtotal"], rows, ["l", "r", "r", "r"]
    )
    footer = f"\n\n**Total:** {format_currency(order.total_amount)}"
    if can_pay(order):
        footer += "\n\nUpload a payment proof to have this order verified."
    elif order.verified_at:
        footer += f"\n\nVerified on {format_date(order.verified_at)}"
    return header + table + footer


class OrdersScreen(BaseScreen):
    """
    Customers browse their orders and upload payment proofs for pending ones.

    Layout:
    - Markdown detail view at the top, showing the highlighted order.
    - Orders table below, newest first.
    """

    MODE = "orders"

    BINDINGS = [
        Binding("ctrl+r", "reload", "Reload", show=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._orders: Dict[int, Order] = {}

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-order-detail", show_table_of_contents=False)
            yield DataTable(id="table-orders")
        with Horizontal(id="hort-table-control"):
            yield Button("Refresh", id="btn-refresh")
            yield Button("Upload Payment Proof", id="btn-pay", variant="primary")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order No", "Date", "Items", "Status", "Total")
        self.query_one("#btn-pay", Button).disabled = True

    def action_reload(self) -> None:
        self.load_orders()

    @on(Button.Pressed, "#btn-refresh")
    @on(ScreenResume)
    def handle_refresh(self) -> None:
        self.load_orders()

    @work(exclusive=True, group="orders")
    async def load_orders(self) -> None:
        try:
            orders: List[Order] = await endpoints.list_orders(self.app.api)
        except UnauthorizedError:
            return
        except ApiError as e:
            self.notify(error_message(e, "Could not load your orders."), severity="error")
            return

        orders.sort(key=lambda o: o.created_at or "", reverse=True)
        self._orders = {o.id: o for o in orders}

        table = self.query_one(DataTable)
        table.clear()
        for o in orders:
            table.add_row(
                o.id,
                format_date(o.created_at),
                sum(i.quantity for i in o.items),
                status_label(o.payment_status),
                format_currency(o.total_amount),
                key=str(o.id),
            )
        if orders:
            table.move_cursor(row=0)
        self.show_selected()

    def selected_order(self) -> Optional[Order]:
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return self._orders.get(int(row_key.value))

    @on(DataTable.RowHighlighted)
    def handle_row_highlight(self) -> None:
        self.show_selected()

    def show_selected(self) -> None:
        order = self.selected_order()
        self.query_one("#md-order-detail", MarkdownViewer).document.update(
            order_detail_markdown(order)
        )
        self.query_one("#btn-pay", Button).disabled = not (order and can_pay(order))

    @on(Button.Pressed, "#btn-pay")
    @work()
    async def handle_pay(self) -> None:
        order = self.selected_order()
        if order is None or not can_pay(order):
            self.notify("This order is already paid or verified.", severity="warning")
            return
        if await self.app.push_screen_wait(PaymentProofModal(order)):
            self.load_orders()
