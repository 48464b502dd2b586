from typing import Literal

from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, MarkdownViewer

from parfum_tui.api.models import Perfume
from parfum_tui.utils.pure import format_currency, generate_markdown_table

DetailOutcome = Literal["added", "login", "closed"]


class PerfumeDetailModal(ModalScreen[str]):
    """
    Product detail with an Add to Cart button.
    Dismisses with "added", "login" (a guest tried to buy) or "closed".
    """

    def __init__(self, perfume: Perfume) -> None:
        super().__init__()
        self._perfume = perfume

    def compose(self) -> ComposeResult:
        with Horizontal(id="hort-prod-detail"):
            yield MarkdownViewer("", show_table_of_contents=False)
            with Vertical():
                yield Label("", id="label-in-cart")
                with Horizontal():
                    yield Button("Go Back", id="btn-quit")
                    yield Button("Add to Cart", id="btn-addcart", variant="primary")

    async def on_mount(self):
        p = self._perfume
        image = p.primary_image
        rows = [
            ["Name", p.name],
            ["Brand", p.brand or "-"],
            ["Price", format_currency(p.price)],
            ["Stock", p.stock],
            ["Images", f"{len(p.images)} ({image.url})" if image else "none"],
        ]
        md = f"### {p.name}\n\n" + generate_markdown_table(
            ["Attribute", "Value"], rows, ["l", "l"]
        )
        if p.description:
            md += f"\n\n{p.description}"
        await self.query_one(MarkdownViewer).document.update(md)

        order_btn = self.query_one("#btn-addcart", Button)
        if p.stock < 1:
            order_btn.label = "Out of Stock"
            order_btn.disabled = True
            order_btn.variant = "warning"

        entry = self.app.cart.get(p.id)
        if entry:
            self.query_one("#label-in-cart", Label).update(
                f"Already in cart: {entry.quantity}"
            )
        order_btn.focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss("closed")

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss("closed")

    @on(Button.Pressed, "#btn-addcart")
    @work(exclusive=True)
    async def handle_addcart(self):
        if not self.app.session.is_authenticated():
            self.notify("Please log in to start shopping.", severity="warning")
            self.dismiss("login")
            return

        await self.app.cart.add(self._perfume)
        self.app.notify(f"{self._perfume.name} added to cart.")
        self.dismiss("added")
