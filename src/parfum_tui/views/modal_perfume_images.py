from typing import Optional

from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, DataTable, Input, Label

from parfum_tui.api import endpoints
from parfum_tui.api.client import ApiError, UnauthorizedError, error_message
from parfum_tui.api.models import Perfume
from parfum_tui.utils.forms import split_paths, validate_image_files
from parfum_tui.views.modal_dialog import ConfirmDialogModal


class PerfumeImagesModal(ModalScreen[None]):
    """
    Image manager for one perfume. Every change is followed by a refetch so
    the table mirrors the backend, primary flag included.
    """

    def __init__(self, perfume: Perfume) -> None:
        super().__init__()
        self._perfume = perfume

    def compose(self) -> ComposeResult:
        with Vertical(id="div-perfume-images"):
            yield Label(f"Images of {self._perfume.name}")
            yield DataTable(id="table-images")
            with Horizontal():
                yield Button("Set Primary", id="btn-primary", variant="primary")
                yield Button("Delete", id="btn-delete", variant="error")
            yield Label("Upload (JPEG/PNG/GIF/WEBP, max 5MB each, comma separated)")
            with Horizontal():
                yield Input(placeholder="~/img/front.jpg", id="input-images")
                yield Button("Upload", id="btn-upload", variant="success")
            yield Button("Close", id="btn-quit")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.add_columns("ID", "Primary", "URL")
        self.load_images()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self) -> None:
        self.dismiss(None)

    @work(exclusive=True, group="images-load")
    async def load_images(self) -> None:
        try:
            images = await endpoints.admin_list_images(self.app.api, self._perfume.id)
        except UnauthorizedError:
            self.dismiss(None)
            return
        except ApiError as e:
            self.notify(error_message(e, "Could not load images."), severity="error")
            return

        table = self.query_one(DataTable)
        table.clear()
        for img in images:
            table.add_row(img.id, "yes" if img.is_primary else "", img.url, key=str(img.id))

    def _selected_id(self) -> Optional[int]:
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return int(row_key.value)

    async def _run(self, call, failed: str, done: str, *args) -> bool:
        try:
            await call(self.app.api, self._perfume.id, *args)
        except UnauthorizedError:
            self.dismiss(None)
            return False
        except (ApiError, OSError) as e:
            self.notify(error_message(e, failed), severity="error")
            return False
        self.notify(done)
        self.load_images()
        return True

    @on(Button.Pressed, "#btn-primary")
    @work(exclusive=True)
    async def handle_set_primary(self) -> None:
        image_id = self._selected_id()
        if image_id is None:
            self.notify("Select an image first.", severity="warning")
            return
        await self._run(
            endpoints.admin_set_primary_image,
            "Could not set the primary image.",
            "Primary image updated.",
            image_id,
        )

    @on(Button.Pressed, "#btn-delete")
    @work(exclusive=True)
    async def handle_delete(self) -> None:
        image_id = self._selected_id()
        if image_id is None:
            self.notify("Select an image first.", severity="warning")
            return
        if not await self.app.push_screen_wait(
            ConfirmDialogModal("Delete this image?", tone="error")
        ):
            return
        await self._run(
            endpoints.admin_delete_image,
            "Could not delete the image.",
            "Image deleted.",
            image_id,
        )

    @on(Input.Submitted, "#input-images")
    @on(Button.Pressed, "#btn-upload")
    @work(exclusive=True)
    async def handle_upload(self) -> None:
        path_input = self.query_one("#input-images", Input)
        paths, errors = validate_image_files(split_paths(path_input.value))
        if errors:
            path_input.add_class("-invalid")
            self.notify("\n".join(errors), severity="error")
            return
        if not paths:
            self.notify("Choose at least one file.", severity="warning")
            return

        path_input.remove_class("-invalid")
        if await self._run(
            endpoints.admin_upload_images,
            "Could not upload the images.",
            f"{len(paths)} image(s) uploaded.",
            paths,
        ):
            path_input.value = ""
