from typing import Dict, List

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Input, Label, Select

from parfum_tui.api import endpoints
from parfum_tui.api.client import ApiError, UnauthorizedError, error_message
from parfum_tui.api.models import Perfume
from parfum_tui.utils.messages import LoginRequestedMessage
from parfum_tui.utils.pure import (
    SORT_OPTIONS,
    CatalogFilter,
    brands_of,
    filter_perfumes,
    format_currency,
)
from parfum_tui.views.base_screen import BaseScreen
from parfum_tui.views.modal_perfume_detail import PerfumeDetailModal


class CatalogScreen(BaseScreen):
    """
    The storefront: every perfume is fetched once, then searched, filtered and
    sorted locally.
    """

    MODE = "catalog"

    # only here to be displayed in footer
    BINDINGS = [
        Binding("enter", "noop", "View Perfume", show=True, key_display="⏎"),
        Binding("ctrl+r", "reload", "Reload", show=True),
    ]

    def __init__(self):
        super().__init__()
        self._perfumes: List[Perfume] = []
        self._by_id: Dict[int, Perfume] = {}

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="hort-filters"):
            yield Input(
                id="input-search", placeholder="Search name, brand or description..."
            )
            yield Select([], prompt="All brands", id="select-brand")
            yield Input(id="input-min-price", placeholder="Min price", type="integer")
            yield Input(id="input-max-price", placeholder="Max price", type="integer")
            yield Select(
                [(label, key) for key, label in SORT_OPTIONS.items()],
                value="newest",
                allow_blank=False,
                id="select-sort",
            )
            yield Button("Reset", id="btn-reset")
        yield DataTable(id="table-perfumes")
        yield Label("", id="label-result-cnt")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("ID", "Name", "Brand", "Price", "Stock")

        self.query_one("#input-search").focus()
        self.load_perfumes()

    def action_noop(self) -> None:
        pass

    def action_reload(self) -> None:
        self.load_perfumes()

    @work(exclusive=True, group="catalog-load")
    async def load_perfumes(self) -> None:
        try:
            self._perfumes = await endpoints.list_perfumes(self.app.api)
        except UnauthorizedError:
            return
        except ApiError as e:
            self.notify(error_message(e, "Could not load perfumes."), severity="error")
            return
        self._by_id = {p.id: p for p in self._perfumes}

        brand_select = self.query_one("#select-brand", Select)
        brand_select.set_options([(b, b) for b in brands_of(self._perfumes)])
        self.apply_filters()

    def current_filter(self) -> CatalogFilter:
        brand = self.query_one("#select-brand", Select).value
        sort = self.query_one("#select-sort", Select).value
        return CatalogFilter(
            search=self.query_one("#input-search", Input).value,
            brand=brand if isinstance(brand, str) else "",
            min_price=self.query_one("#input-min-price", Input).value,
            max_price=self.query_one("#input-max-price", Input).value,
            sort=sort if isinstance(sort, str) else "newest",
        )

    def apply_filters(self) -> None:
        flt = self.current_filter()
        results = filter_perfumes(self._perfumes, flt)

        table = self.query_one(DataTable)
        table.clear()
        for p in results:
            table.add_row(
                p.id,
                p.name,
                p.brand or "-",
                format_currency(p.price),
                p.stock if p.stock > 0 else "sold out",
                key=str(p.id),
            )

        summary = f"{len(results)} of {len(self._perfumes)} perfumes"
        if flt.active_count:
            summary += f" ({flt.active_count} filter(s) active)"
        self.query_one("#label-result-cnt", Label).update(summary)

    @on(Input.Changed)
    @on(Select.Changed)
    def handle_filter_change(self) -> None:
        self.apply_filters()

    @on(Button.Pressed, "#btn-reset")
    def handle_reset(self) -> None:
        for input_id in ("#input-search", "#input-min-price", "#input-max-price"):
            self.query_one(input_id, Input).value = ""
        self.query_one("#select-brand", Select).clear()
        self.query_one("#select-sort", Select).value = "newest"
        self.apply_filters()

    @on(ScreenResume)
    def handle_resume(self) -> None:
        if not self._perfumes:
            self.load_perfumes()

    @on(DataTable.RowSelected)
    @work()
    async def handle_row_selected(self, event: DataTable.RowSelected) -> None:
        perfume = self._by_id.get(int(event.row_key.value))
        if perfume is None:
            return
        outcome = await self.app.push_screen_wait(PerfumeDetailModal(perfume))
        if outcome == "login":
            self.post_message(LoginRequestedMessage())
