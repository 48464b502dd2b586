from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, MarkdownViewer

from parfum_tui.utils.checkout import checkout
from parfum_tui.utils.pure import format_currency, generate_markdown_table
from parfum_tui.views.modal_dialog import ConfirmDialogModal


class CheckoutModal(ModalScreen[bool]):
    """
    Order summary plus the Place Order button.
    Return True once the backend accepted the order, False otherwise.
    """

    def compose(self) -> ComposeResult:
        with Vertical():
            yield MarkdownViewer("", show_table_of_contents=False)
            with Horizontal():
                yield Button("Go Back", id="btn-quit")
                yield Button("Place Order", id="btn-submit", variant="primary")

    async def on_mount(self):
        cart = self.app.cart
        rows = [
            [
                e.product.name,
                format_currency(e.product.price),
                e.quantity,
                format_currency(e.line_total),
            ]
            for e in cart.entries
        ]
        md = "### Order Summary\n\n" + generate_markdown_table(
            ["Perfume", "Unit Price", "Quantity", "Subtotal"],
            rows,
            ["l", "r", "c", "r"],
        )
        md += (
            f"\n\n**Estimated total:** {format_currency(cart.total_price())}"
            "\n\nPrices are confirmed by the store when the order is placed."
        )
        await self.query_one(MarkdownViewer).document.update(md)
        self.query_one("#btn-submit").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    @on(Button.Pressed, "#btn-submit")
    @work(exclusive=True)
    async def handle_submit(self):
        if not await self.app.push_screen_wait(
            ConfirmDialogModal("Place order? This cannot be undone.", tone="positive")
        ):
            return

        submit_btn = self.query_one("#btn-submit", Button)
        submit_btn.disabled = True
        submit_btn.label = "Processing..."
        result = await checkout(self.app.api, self.app.cart)
        submit_btn.disabled = False
        submit_btn.label = "Place Order"

        if result is None:
            self.notify("Cart is empty.", severity="warning")
            self.dismiss(False)
        elif result.ok:
            order = result.order
            self.app.notify(
                f"{result.message} Order #{order.id}, "
                f"total {format_currency(order.total_amount)}."
            )
            self.dismiss(True)
        elif result.session_expired:
            self.dismiss(False)
        else:
            # cart untouched, the user may retry by hand
            self.notify(result.message, severity="error")

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(False)
