from typing import Any, Dict, List

from parfum_tui.api.models import Order
from parfum_tui.utils.pure import format_currency, format_date, generate_markdown_table

DASHBOARD_CARDS = [
    ("totalPerfumes", "Total Perfumes", False),
    ("totalUsers", "Total Users", False),
    ("totalSales", "Total Sales", True),
    ("lowStockCount", "Low Stock", False),
]


def dashboard_markdown(stats: Dict[str, Any], admin_name: str = "") -> str:
    header = "### Admin Dashboard\n\n"
    if admin_name:
        header += f"Welcome, {admin_name}!\n\n"
    rows = []
    for key, label, money in DASHBOARD_CARDS:
        value = stats.get(key) or 0
        rows.append([label, format_currency(value) if money else value])
    return header + generate_markdown_table(["Metric", "Value"], rows, ["l", "r"])


def _sales_table(title: str, label_key: str, rows: List[Dict[str, Any]]) -> str:
    if not rows:
        return f"#### {title}\n\nNo data yet.\n"
    table = generate_markdown_table(
        [label_key.capitalize(), "Sales", "Orders"],
        [
            [r.get(label_key, "-"), format_currency(r.get("sales")), r.get("orders", 0)]
            for r in rows
        ],
        ["l", "r", "r"],
    )
    return f"#### {title}\n\n{table}\n"


def reports_markdown(reports: Dict[str, Any], orders: List[Order]) -> str:
    summary = reports.get("summary") or {}
    parts = ["### Reports & Analytics\n"]

    if summary:
        parts.append(
            "- Total Revenue: "
            f"{format_currency(summary.get('totalRevenue'))}\n"
            f"- Total Orders: {summary.get('totalOrders') or 0}\n"
            f"- Average Order Value: {format_currency(summary.get('avgOrderValue'))}\n"
            f"- Revenue This Month: {format_currency(summary.get('thisMonthRevenue'))}\n"
        )

    parts.append(_sales_table("Daily Sales", "day", reports.get("dailySales") or []))
    parts.append(
        _sales_table("Monthly Sales", "month", reports.get("monthlySales") or [])
    )

    top = reports.get("topPerfumes") or []
    if top:
        parts.append(
            "#### Top Perfumes\n\n"
            + generate_markdown_table(
                ["ID", "Name", "Stock"],
                [[p.get("id"), p.get("name"), p.get("stock")] for p in top],
                ["r", "l", "r"],
            )
            + "\n"
        )
    else:
        parts.append("#### Top Perfumes\n\nNo sales yet.\n")

    if orders:
        parts.append(
            "#### Orders\n\n"
            + generate_markdown_table(
                ["Order", "Customer", "Items", "Total", "Date"],
                [
                    [
                        f"#{o.id}",
                        o.user.name if o.user else "Unknown",
                        len(o.items),
                        format_currency(o.total_amount),
                        format_date(o.created_at),
                    ]
                    for o in orders
                ],
                ["l", "l", "r", "r", "l"],
            )
        )
    return "\n".join(parts)
