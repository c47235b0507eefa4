from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional, Sequence

from ecosystem.columns import Concept, Row, is_number, resolve
from ecosystem.data import coerce_cell
from ecosystem.metrics_unicorns import normalize_unicorns
from ecosystem.series import period_label, period_order

logger = logging.getLogger(__name__)


def round_half_up(value: float, ndigits: int = 0) -> float:
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def _trim(value: float, decimals: int) -> str:
    """Fixed decimals without trailing zeros: 12.50 -> "12.5", 3.00 -> "3"."""
    return f"{round_half_up(value, decimals):.{decimals}f}".rstrip("0").rstrip(".")


def format_value(
    value: float,
    is_revenue: bool = False,
    show_absolute: bool = False,
    round_to_hundreds: bool = False,
    round_to_millions: bool = False,
) -> str:
    if round_to_millions:
        return f"€{int(round_half_up(value / 1_000_000))}M"
    if round_to_hundreds:
        return f"{int(round_half_up(value / 100) * 100):,}"
    if show_absolute:
        return f"{int(round_half_up(value)):,}"
    if is_revenue:
        if value >= 1_000_000_000:
            return f"€{value / 1_000_000_000:.2f}B"
        if value >= 1_000_000:
            return f"€{_trim(value / 1_000_000, 2)}M"
        if value >= 1000:
            return f"€{_trim(value / 1000, 2)}K"
        # small figures are already in billions
        return f"€{value:.2f}B"
    if value >= 1_000_000:
        return f"{_trim(value / 1_000_000, 1)}M"
    if value >= 1000:
        return f"{int(round_half_up(value / 1000))}K"
    return f"{int(round_half_up(value)):,}"


def calculate_growth(current: float, previous: float) -> float:
    if not previous:
        return 0.0
    return (current - previous) / previous * 100


def latest_metric(rows: Sequence[Row], column: Optional[str], year_col: Optional[str], **fmt: bool) -> Optional[Dict[str, Any]]:
    """Latest positive value of `column` with growth against the previous year."""
    if not column or not year_col:
        return None
    valid = []
    for row in rows:
        year = row.get(year_col)
        value = coerce_cell(row.get(column))
        if year is None or year == "" or not is_number(value) or value <= 0:
            continue
        valid.append((period_label(year), float(value)))
    if not valid:
        logger.warning("No valid data found for column %r", column)
        return None
    valid = [valid[i] for i in period_order([year for year, _ in valid])]

    year, value = valid[-1]
    growth = calculate_growth(value, valid[-2][1]) if len(valid) > 1 else 0.0
    return {"value": value, "growth": growth, "year": year, "formatted_value": format_value(value, **fmt)}


def _empty(formatted: str) -> Dict[str, Any]:
    return {"value": 0, "growth": 0, "year": "N/A", "formatted_value": formatted}


def compute_summary(ctx: Dict[str, Any]) -> Optional[Dict[str, Dict[str, Any]]]:
    main: List[Row] = ctx.get("main", []) or []
    if not main:
        return None
    year_col = resolve(main, Concept.YEAR)
    if not year_col:
        logger.error("Year column not found; available columns: %s", sorted({k for r in main for k in r}))
        return None

    firms_col = resolve(main, Concept.FIRMS) or resolve(main, Concept.FIRMS_EARLY_STAGE_COUNT)
    metrics: Dict[str, Optional[Dict[str, Any]]] = {
        "firms": latest_metric(main, firms_col, year_col, show_absolute=True),
        "revenue": latest_metric(main, resolve(main, Concept.REVENUE), year_col, is_revenue=True),
        "employees": latest_metric(main, resolve(main, Concept.EMPLOYEES), year_col, round_to_hundreds=True),
        "employees_in_finland": latest_metric(main, resolve(main, Concept.EMPLOYEES_IN_COUNTRY), year_col),
        "rdi": None,
        "unicorns": None,
    }

    rdi: List[Row] = ctx.get("rdi", []) or []
    if rdi:
        metrics["rdi"] = latest_metric(
            rdi, resolve(rdi, Concept.RD_INVESTMENT), resolve(rdi, Concept.YEAR), round_to_millions=True
        )

    unicorn_count = len(normalize_unicorns(ctx.get("unicorns", []) or []))
    if unicorn_count:
        metrics["unicorns"] = {"value": unicorn_count, "growth": 0, "year": "Total", "formatted_value": str(unicorn_count)}

    if not any(metrics.values()):
        return None
    return {
        key: value or _empty("€0" if key in {"revenue", "rdi"} else "0")
        for key, value in metrics.items()
    }
