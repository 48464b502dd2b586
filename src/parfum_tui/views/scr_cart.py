from typing import Callable, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, DataTable, Label, Rule

from parfum_tui.utils.messages import NewOrderMessage
from parfum_tui.utils.pure import format_currency
from parfum_tui.views.base_screen import BaseScreen
from parfum_tui.views.modal_checkout import CheckoutModal
from parfum_tui.views.modal_dialog import ConfirmDialogModal


class CartScreen(BaseScreen):
    """
    Cart contents with quantity controls, totals and checkout.
    Redraws whenever the cart store reports a change.
    """

    MODE = "cart"

    BINDINGS = [
        Binding("plus", "increase", "+1", show=True),
        Binding("minus", "decrease", "-1", show=True),
        Binding("delete", "remove", "Remove", show=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._unsubscribe: Optional[Callable[[], None]] = None

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield DataTable(id="table-cart")
        yield Label("", id="label-cart-total")
        yield Rule(line_style="dashed")
        with Horizontal(id="hort-buttons"):
            yield Button("-", id="btn-dec")
            yield Button("+", id="btn-inc")
            yield Button("Remove", id="btn-remove")
            yield Button("Clear Cart", id="btn-clear-cart")
            yield Button("Checkout", id="btn-checkout", variant="primary")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("ID", "Perfume", "Unit Price", "Qty", "Subtotal")

        self._unsubscribe = self.app.cart.subscribe(lambda _: self.render_cart())
        self.render_cart()
        table.focus()

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()

    def render_cart(self) -> None:
        cart = self.app.cart
        table = self.query_one(DataTable)
        cursor_row = table.cursor_row

        table.clear()
        for entry in cart.entries:
            table.add_row(
                entry.product.id,
                entry.product.name,
                format_currency(entry.product.price),
                entry.quantity,
                format_currency(entry.line_total),
                key=str(entry.product.id),
            )
        if table.row_count:
            table.move_cursor(row=min(cursor_row, table.row_count - 1))

        if cart.is_empty():
            text = "Your cart is empty."
        else:
            text = (
                f"{cart.total_items()} item(s), estimated total "
                f"{format_currency(cart.total_price())} (free shipping)"
            )
        self.query_one("#label-cart-total", Label).update(text)
        self.query_one("#btn-checkout", Button).disabled = cart.is_empty()

    def _selected_id(self) -> Optional[int]:
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return int(row_key.value)

    async def _step_quantity(self, delta: int) -> None:
        pid = self._selected_id()
        entry = self.app.cart.get(pid) if pid is not None else None
        if entry is None:
            return
        await self.app.cart.set_quantity(pid, entry.quantity + delta)

    @on(Button.Pressed, "#btn-inc")
    async def action_increase(self) -> None:
        await self._step_quantity(1)

    @on(Button.Pressed, "#btn-dec")
    async def action_decrease(self) -> None:
        # dropping below one removes the line
        await self._step_quantity(-1)

    @on(Button.Pressed, "#btn-remove")
    @work()
    async def action_remove(self) -> None:
        pid = self._selected_id()
        if pid is None:
            return
        if await self.app.push_screen_wait(
            ConfirmDialogModal("Do you really want to remove this item from cart?")
        ):
            await self.app.cart.remove(pid)
            self.notify("Item removed from cart.")

    @on(Button.Pressed, "#btn-clear-cart")
    @work()
    async def handle_clear_cart(self) -> None:
        if self.app.cart.is_empty():
            self.app.notify("Cart is empty.", severity="warning")
            return

        if await self.app.push_screen_wait(
            ConfirmDialogModal(
                "Do you really want to remove all items from cart?", tone="error"
            )
        ):
            await self.app.cart.clear()

    @on(Button.Pressed, "#btn-checkout")
    @work()
    async def handle_checkout(self) -> None:
        if self.app.cart.is_empty():
            self.app.notify("Cart is empty.", severity="warning")
            return

        if await self.app.push_screen_wait(CheckoutModal()):
            self.app.post_message(NewOrderMessage())
