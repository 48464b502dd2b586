from typing import Dict, List, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Input

from parfum_tui.api import endpoints
from parfum_tui.api.client import ApiError, UnauthorizedError, error_message
from parfum_tui.api.models import Perfume
from parfum_tui.utils.pure import CatalogFilter, filter_perfumes, format_currency
from parfum_tui.views.base_screen import BaseScreen
from parfum_tui.views.modal_dialog import ConfirmDialogModal
from parfum_tui.views.modal_perfume_form import PerfumeFormModal
from parfum_tui.views.modal_perfume_images import PerfumeImagesModal


class AdminPerfumesScreen(BaseScreen):
    """
    Admins create, edit and delete perfumes and manage their images.
    The list is refetched after every change.
    """

    MODE = "admin_perfumes"

    BINDINGS = [
        Binding("ctrl+n", "new", "New Perfume", show=True),
        Binding("ctrl+r", "reload", "Reload", show=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._perfumes: List[Perfume] = []
        self._by_id: Dict[int, Perfume] = {}

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield Input(id="input-search", placeholder="Search perfumes...")
        yield DataTable(id="table-admin-perfumes")
        with Horizontal(id="hort-table-control"):
            yield Button("New", id="btn-new", variant="success")
            yield Button("Edit", id="btn-edit", variant="primary")
            yield Button("Images", id="btn-images")
            yield Button("Delete", id="btn-delete", variant="error")
            yield Button("Refresh", id="btn-refresh")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("ID", "Name", "Brand", "Price", "Stock", "Images")

    def action_reload(self) -> None:
        self.load_perfumes()

    @on(ScreenResume)
    @on(Button.Pressed, "#btn-refresh")
    def handle_refresh(self) -> None:
        self.load_perfumes()

    @work(exclusive=True, group="admin-perfumes-load")
    async def load_perfumes(self) -> None:
        try:
            self._perfumes = await endpoints.list_perfumes(self.app.api)
        except UnauthorizedError:
            return
        except ApiError as e:
            self.notify(error_message(e, "Could not load perfumes."), severity="error")
            return
        self._by_id = {p.id: p for p in self._perfumes}
        self.render_table()

    def render_table(self) -> None:
        query = self.query_one("#input-search", Input).value
        results = filter_perfumes(self._perfumes, CatalogFilter(search=query, sort="name-az"))

        table = self.query_one(DataTable)
        table.clear()
        for p in results:
            table.add_row(
                p.id,
                p.name,
                p.brand or "-",
                format_currency(p.price),
                p.stock,
                len(p.images),
                key=str(p.id),
            )

    @on(Input.Changed, "#input-search")
    def handle_search(self) -> None:
        self.render_table()

    def selected_perfume(self) -> Optional[Perfume]:
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return self._by_id.get(int(row_key.value))

    @on(Button.Pressed, "#btn-new")
    @work()
    async def action_new(self) -> None:
        if await self.app.push_screen_wait(PerfumeFormModal()):
            self.load_perfumes()

    @on(Button.Pressed, "#btn-edit")
    @on(DataTable.RowSelected)
    @work()
    async def handle_edit(self) -> None:
        perfume = self.selected_perfume()
        if perfume is None:
            self.notify("Select a perfume first.", severity="warning")
            return
        if await self.app.push_screen_wait(PerfumeFormModal(perfume)):
            self.load_perfumes()

    @on(Button.Pressed, "#btn-images")
    @work()
    async def handle_images(self) -> None:
        perfume = self.selected_perfume()
        if perfume is None:
            self.notify("Select a perfume first.", severity="warning")
            return
        await self.app.push_screen_wait(PerfumeImagesModal(perfume))
        self.load_perfumes()

    @on(Button.Pressed, "#btn-delete")
    @work()
    async def handle_delete(self) -> None:
        perfume = self.selected_perfume()
        if perfume is None:
            self.notify("Select a perfume first.", severity="warning")
            return
        if not await self.app.push_screen_wait(
            ConfirmDialogModal(f"Delete '{perfume.name}'? This cannot be undone.", tone="error")
        ):
            return

        try:
            await endpoints.admin_delete_perfume(self.app.api, perfume.id)
        except UnauthorizedError:
            return
        except ApiError as e:
            self.notify(error_message(e, "Could not delete the perfume."), severity="error")
            return
        self.notify(f"'{perfume.name}' deleted.")
        self.load_perfumes()
