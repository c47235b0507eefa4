from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from ecosystem.charts import to_vega_spec, valuation_bar_chart
from ecosystem.columns import Row, is_number
from ecosystem.filters import ChartFilters

FILTER_LABELS = {
    "all": "All",
    "finnish": "Founded in Finland",
    "finnish-background": "Finnish background",
}


def _first(row: Row, keys: Sequence[str]) -> object:
    for key in keys:
        value = row.get(key)
        if value is not None and value != "":
            return value
    return None


def _truthy(value: object) -> bool:
    return value is True or (is_number(value) and float(value) == 1)


def normalize_unicorns(rows: Sequence[Row]) -> List[Dict[str, Any]]:
    """Unicorn rows with a firm name and a numeric valuation, largest first."""
    out = []
    for row in rows:
        firm = _first(row, ["Firm", "firm"])
        valuation = _first(row, ["Last valuation", "lastValuation", "valuation"])
        if not firm or valuation is None:
            continue
        try:
            valuation = float(valuation)
        except (TypeError, ValueError):
            continue
        out.append(
            {
                "firm": str(firm).strip(),
                "valuation": valuation,
                "is_finnish": _truthy(_first(row, ["Finnish", "finnish"])),
                "is_finnish_background": _truthy(_first(row, ["Finnish background", "finnishBackground"])),
            }
        )
    return sorted(out, key=lambda r: r["valuation"], reverse=True)


def compute_unicorns(filters: ChartFilters, ctx: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    unicorns = normalize_unicorns(ctx.get("unicorns", []) or [])
    if not unicorns:
        return None
    if filters.unicorn_filter == "finnish":
        unicorns = [u for u in unicorns if u["is_finnish"]]
    elif filters.unicorn_filter == "finnish-background":
        unicorns = [u for u in unicorns if u["is_finnish_background"]]

    title = "Unicorn valuations"
    frame = pd.DataFrame(unicorns, columns=["firm", "valuation", "is_finnish", "is_finnish_background"])
    return {
        "chart_id": "unicorns-valuation",
        "filters": asdict(filters),
        "title": title,
        "label": "Valuation",
        "toggle_buttons": [
            {"value": value, "label": label, "active": filters.unicorn_filter == value}
            for value, label in FILTER_LABELS.items()
        ],
        "points": unicorns,
        "chart": to_vega_spec(valuation_bar_chart(frame, title=title)),
    }
