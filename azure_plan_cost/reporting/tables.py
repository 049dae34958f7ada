from __future__ import annotations

from typing import Any, List

from rich.table import Table

from ..estimate import CostEstimate, PricedResource

COLUMNS = ["Type", "Name", "Region", "SKU / Detail", "Unit", "Usage", "Unit Cost", "Monthly Cost"]


def _md_escape(v: Any) -> str:
    s = "" if v is None else str(v)
    # Escape pipes so Markdown tables don't break
    return s.replace("|", "\\|").replace("\n", " ").strip()


def _row(item: PricedResource) -> List[str]:
    return [
        item.resource.type,
        item.resource.name,
        item.region,
        item.sku,
        item.unit_of_measure,
        item.usage_description,
        f"{item.unit_cost:.6f}",
        f"{item.monthly_cost:.2f}",
    ]


def total_line(estimate: CostEstimate) -> str:
    return f"Total Estimated Monthly Cost: ${estimate.total:,.2f}"


def build_rich_table(estimate: CostEstimate) -> Table:
    table = Table(show_lines=False)
    for col in COLUMNS:
        justify = "right" if col in ("Unit Cost", "Monthly Cost") else "left"
        table.add_column(col, justify=justify)
    for item in estimate.items:
        style = None if item.found else "yellow"
        table.add_row(*_row(item), style=style)
    return table


def render_markdown(estimate: CostEstimate) -> str:
    out: List[str] = []
    out.append("| " + " | ".join(COLUMNS) + " |\n")
    out.append("|---|---|---|---|---|---|---:|---:|\n")
    for item in estimate.items:
        out.append("| " + " | ".join(_md_escape(v) for v in _row(item)) + " |\n")
    out.append(f"\n**{total_line(estimate)}**\n")
    return "".join(out)
