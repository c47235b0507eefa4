from __future__ import annotations

import re
from dataclasses import asdict
from functools import cmp_to_key
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from ecosystem.charts import balance_chart, to_vega_spec
from ecosystem.columns import Row, find_column, is_number
from ecosystem.filters import ChartFilters
from ecosystem.series import period_label

TAB_TERMS: Dict[str, Tuple[str, ...]] = {
    "financial": ("financial", "company financial"),
    "employees": ("employees", "number of employees"),
    "economy": ("economy", "surrounding economy"),
}
TAB_TITLES = {
    "financial": "Financial situation",
    "employees": "Number of employees",
    "economy": "Surrounding economy",
}
SERIES_LABELS = {"past": "Past 3 months", "next": "Next 3 months"}
BALANCE_NOTE = "Balance = % very positive + (0.5*positive) - (0.5*%negative) - % very negative"

_QUARTER = re.compile(r"Q(\d)/(\d{4})")


def parse_quarter(label: str) -> Optional[Tuple[int, int]]:
    """Year and quarter of a "Q2/2022" style label."""
    match = _QUARTER.search(str(label))
    if not match:
        return None
    return int(match.group(2)), int(match.group(1))


def _compare_periods(a: Dict[str, Any], b: Dict[str, Any]) -> int:
    qa, qb = parse_quarter(a["period"]), parse_quarter(b["period"])
    if qa and qb:
        return (qa > qb) - (qa < qb)
    return (a["period"] > b["period"]) - (a["period"] < b["period"])


def _balance(value: object) -> Optional[float]:
    if is_number(value):
        return float(value)
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return None


def tab_columns(rows: Sequence[Row], tab: str) -> Tuple[Optional[str], Optional[str]]:
    terms = TAB_TERMS.get(tab, TAB_TERMS["financial"])
    past = find_column(rows, terms, ["past"])
    nxt = find_column(rows, terms, ["next"]) or find_column(rows, terms, ["expectation"])
    return past, nxt


def compute_barometer(filters: ChartFilters, ctx: Dict[str, Any], tab: Optional[str] = None) -> Optional[Dict[str, Any]]:
    rows: List[Row] = ctx.get("barometer", []) or []
    tab = tab or filters.barometer_tab
    time_col = find_column(rows, ["time", "date", "period"])
    if not time_col:
        return None
    past, nxt = tab_columns(rows, tab)
    if not past and not nxt:
        return None

    records = []
    for row in rows:
        if row.get(time_col) is None:
            continue
        point: Dict[str, Any] = {"period": period_label(row.get(time_col))}
        if past:
            point["past"] = _balance(row.get(past))
        if nxt:
            point["next"] = _balance(row.get(nxt))
        if point.get("past") is None and point.get("next") is None:
            continue
        records.append(point)
    if not records:
        return None
    records.sort(key=cmp_to_key(_compare_periods))

    title = TAB_TITLES.get(tab, TAB_TITLES["financial"])
    chart = balance_chart(pd.DataFrame(records), title=title, series_labels=SERIES_LABELS)
    return {
        "chart_id": f"barometer-{tab}",
        "filters": asdict(filters),
        "title": title,
        "title_note": BALANCE_NOTE,
        "label": "Sentiment",
        "columns": {"past": past, "next": nxt},
        "series": [{"key": k, "label": SERIES_LABELS[k]} for k, col in (("past", past), ("next", nxt)) if col],
        "points": records,
        "chart": to_vega_spec(chart),
    }
