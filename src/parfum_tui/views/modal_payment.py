import os

from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label

from parfum_tui.api import endpoints
from parfum_tui.api.client import ApiError, UnauthorizedError, error_message
from parfum_tui.api.models import Order
from parfum_tui.utils.forms import validate_payment_proof
from parfum_tui.utils.pure import format_currency


class PaymentProofModal(ModalScreen[bool]):
    """
    Upload a transfer receipt for a pending order. True when uploaded.
    """

    def __init__(self, order: Order) -> None:
        super().__init__()
        self._order = order

    def compose(self) -> ComposeResult:
        with Vertical(id="div-payment"):
            yield Label(
                f"Order #{self._order.id}, "
                f"total {format_currency(self._order.total_amount)}"
            )
            yield Label("Payment proof (JPEG/PNG, max 2MB)")
            yield Input(placeholder="~/Pictures/receipt.jpg", id="input-proof-path")
            with Horizontal():
                yield Button("Go Back", id="btn-quit")
                yield Button("Upload", id="btn-upload", variant="primary")

    def on_mount(self) -> None:
        self.query_one("#input-proof-path").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self) -> None:
        self.dismiss(False)

    @on(Input.Submitted, "#input-proof-path")
    @on(Button.Pressed, "#btn-upload")
    @work(exclusive=True)
    async def handle_upload(self) -> None:
        path_input = self.query_one("#input-proof-path", Input)
        path = os.path.expanduser(path_input.value.strip())
        problem = validate_payment_proof(path)
        if problem:
            path_input.add_class("-invalid")
            self.notify(problem, severity="error")
            return

        try:
            await endpoints.upload_payment_proof(self.app.api, self._order.id, path)
        except UnauthorizedError:
            self.dismiss(False)
            return
        except (ApiError, OSError) as e:
            self.notify(error_message(e, "Could not upload the payment proof."), severity="error")
            return

        self.app.notify("Payment proof uploaded! Waiting for admin verification.")
        self.dismiss(True)
