from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Literal, Optional

from parfum_tui.api.models import Perfume

SortKey = Literal["newest", "price-low", "price-high", "name-az", "name-za"]

SORT_OPTIONS = {
    "newest": "Newest",
    "price-low": "Price: Low to High",
    "price-high": "Price: High to Low",
    "name-az": "Name: A-Z",
    "name-za": "Name: Z-A",
}

STATUS_LABELS = {
    "pending": "Pending",
    "paid": "Awaiting Verification",
    "verified": "Verified",
    "cancelled": "Cancelled",
}


def generate_markdown_table(
    headers: Optional[List[str]],
    rows: List[List[str]],
    aligns: Optional[List[Literal["l", "c", "r"]]] = None,
) -> str:
    """
    Generate a Markdown table.

    Args:
        headers: List of column headers, or None to use first row as headers.
        rows: List of rows, each a list of cell values.
        aligns: 'l', 'c' or 'r' per column, all centered when omitted.

    Returns:
        str: Markdown formatted table, "" when there are no rows.
    """
    if not rows:
        return ""

    if not headers:
        headers, rows = rows[0], rows[1:]

    headers = [str(h) for h in headers]
    num_cols = len(headers)
    if aligns is None:
        aligns = ["c"] * num_cols
    elif len(aligns) != num_cols:
        raise ValueError("Length of aligns must match number of headers.")

    align_map = {"l": ":---", "c": ":---:", "r": "---:"}

    def line(cells: Iterable) -> str:
        # pipes inside a cell would split it
        return "| " + " | ".join(str(c).replace("|", "\\|") for c in cells) + " |"

    return "\n".join(
        [
            line(headers),
            "| " + " | ".join(align_map[a] for a in aligns) + " |",
            *(line(row) for row in rows),
        ]
    )


def format_currency(amount) -> str:
    """Rupiah without decimals, dot as thousands separator: Rp45.000"""
    try:
        value = Decimal(str(amount or 0))
    except InvalidOperation:
        value = Decimal("0")
    if not value.is_finite():
        value = Decimal("0")
    whole = int(value.quantize(Decimal("1")))
    sign = "-" if whole < 0 else ""
    return f"{sign}Rp{abs(whole):,}".replace(",", ".")


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, STATUS_LABELS["pending"])


def format_date(value: Optional[str]) -> str:
    if not value:
        return "-"
    try:
        return datetime.fromisoformat(value).strftime("%d %b %Y %H:%M")
    except ValueError:
        return value


def _to_price(val: str) -> Optional[Decimal]:
    if val is None or str(val).strip() == "":
        return None
    try:
        price = Decimal(str(val).strip())
    except InvalidOperation:
        return None
    return price if price.is_finite() else None


@dataclass(frozen=True)
class CatalogFilter:
    search: str = ""
    brand: str = ""
    min_price: str = ""
    max_price: str = ""
    sort: SortKey = "newest"

    @property
    def active_count(self) -> int:
        return sum(
            bool(v) for v in (self.search, self.brand, self.min_price, self.max_price)
        )


def brands_of(perfumes: Iterable[Perfume]) -> List[str]:
    return sorted({p.brand for p in perfumes if p.brand})


def filter_perfumes(perfumes: Iterable[Perfume], flt: CatalogFilter) -> List[Perfume]:
    """
    Case-insensitive search over name, brand and description, then brand and
    price range filters, then sorting. Unparseable price bounds are ignored.
    """
    results = list(perfumes)

    term = flt.search.strip().lower()
    if term:
        results = [
            p
            for p in results
            if term in p.name.lower()
            or term in (p.brand or "").lower()
            or term in p.description.lower()
        ]

    if flt.brand:
        results = [p for p in results if p.brand == flt.brand]

    lo, hi = _to_price(flt.min_price), _to_price(flt.max_price)
    if lo is not None:
        results = [p for p in results if p.price >= lo]
    if hi is not None:
        results = [p for p in results if p.price <= hi]

    if flt.sort == "price-low":
        results.sort(key=lambda p: p.price)
    elif flt.sort == "price-high":
        results.sort(key=lambda p: p.price, reverse=True)
    elif flt.sort == "name-az":
        results.sort(key=lambda p: p.name.lower())
    elif flt.sort == "name-za":
        results.sort(key=lambda p: p.name.lower(), reverse=True)
    else:
        # newest first; undated products sink to the bottom
        results.sort(key=lambda p: p.created_at or "", reverse=True)
    return results
