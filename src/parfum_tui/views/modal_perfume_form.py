from typing import Optional

from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.validation import Number
from textual.widgets import Button, Input, Label, TextArea

from parfum_tui.api import endpoints
from parfum_tui.api.client import ApiError, UnauthorizedError, error_message
from parfum_tui.api.models import Perfume
from parfum_tui.utils.forms import parse_perfume_form, split_paths, validate_image_files
from parfum_tui.utils.logger import get_logger

_logger = get_logger(__name__)


class PerfumeFormModal(ModalScreen[bool]):
    """
    Create a perfume, or edit one when given. New perfumes may come with
    images, uploaded right after the perfume is created.
    Return True when something was saved.
    """

    def __init__(self, perfume: Optional[Perfume] = None) -> None:
        super().__init__()
        self._perfume = perfume

    def compose(self) -> ComposeResult:
        p = self._perfume
        with Vertical(id="div-perfume-form"):
            yield Label(f"Edit Perfume #{p.id}" if p else "New Perfume", id="label-form-title")
            yield Label("Name")
            yield Input(p.name if p else "", id="input-name")
            yield Label("Brand")
            yield Input(p.brand or "" if p else "", id="input-brand")
            with Horizontal(id="hort-price-stock"):
                with Vertical():
                    yield Label("Price (Rp)")
                    yield Input(
                        str(p.price) if p else "",
                        id="input-price",
                        type="number",
                        validators=[Number(minimum=0)],
                    )
                with Vertical():
                    yield Label("Stock")
                    yield Input(
                        str(p.stock) if p else "",
                        id="input-stock",
                        type="integer",
                        validators=[Number(minimum=0)],
                    )
            yield Label("Description")
            yield TextArea(p.description if p else "", id="textarea-description")
            if p is None:
                yield Label("Images (optional, comma separated paths)")
                yield Input(placeholder="~/img/front.jpg, ~/img/box.png", id="input-images")
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
        fields, problem = parse_perfume_form(
            self.query_one("#input-name", Input).value,
            self.query_one("#input-brand", Input).value,
            self.query_one("#textarea-description", TextArea).text,
            self.query_one("#input-price", Input).value,
            self.query_one("#input-stock", Input).value,
        )
        if problem:
            self.notify(problem, severity="error")
            return

        image_paths = []
        if self._perfume is None:
            image_paths, errors = validate_image_files(
                split_paths(self.query_one("#input-images", Input).value)
            )
            if errors:
                self.query_one("#input-images").add_class("-invalid")
                self.notify("\n".join(errors), severity="error")
                return

        try:
            if self._perfume is None:
                saved = await endpoints.admin_create_perfume(self.app.api, fields)
            else:
                saved = await endpoints.admin_update_perfume(
                    self.app.api, self._perfume.id, fields
                )
        except UnauthorizedError:
            self.dismiss(False)
            return
        except ApiError as e:
            self.notify(error_message(e, "Could not save the perfume."), severity="error")
            return

        if image_paths:
            try:
                await endpoints.admin_upload_images(self.app.api, saved.id, image_paths)
            except UnauthorizedError:
                self.dismiss(True)
                return
            except (ApiError, OSError) as e:
                # the perfume exists already; images can be added from the image manager
                _logger.warning(f"Image upload for perfume #{saved.id} failed: {e}")
                self.app.notify(
                    error_message(e, "Perfume saved, but the images failed to upload."),
                    severity="warning",
                )
                self.dismiss(True)
                return

        self.app.notify(f"Perfume '{fields['name']}' saved.")
        self.dismiss(True)
