from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional, Sequence

from ecosystem.charts import area_chart, to_vega_spec
from ecosystem.columns import Concept, Row, resolve
from ecosystem.filters import ChartFilters, employees_concept, firms_concept, revenue_concept
from ecosystem.series import SeriesPoint, Unit, build_series, series_frame, series_records

BILLIONS_FORMAT = ",.2f"
COUNT_FORMAT = ",.0f"


def year_column(rows: Sequence[Row]) -> str:
    """Year/period column, defaulting to "Year" so rows without one plot as "N/A"."""
    return resolve(rows, Concept.YEAR) or "Year"


def series_payload(
    chart_id: str,
    filters: ChartFilters,
    *,
    title: str,
    label: str,
    column: str,
    points: List[SeriesPoint],
    filter_key: Optional[str] = None,
    filter_options: Optional[List[Dict[str, str]]] = None,
    unit: Unit = Unit.NONE,
) -> Dict[str, Any]:
    y_format = BILLIONS_FORMAT if unit == Unit.BILLIONS else COUNT_FORMAT
    axis_label = f"{label} (€B)" if unit == Unit.BILLIONS else label
    chart = area_chart(series_frame(points), title=title, label=axis_label, y_format=y_format)
    return {
        "chart_id": chart_id,
        "filters": asdict(filters),
        "title": title,
        "label": label,
        "column": column,
        "unit": unit.value,
        "filter_key": filter_key,
        "filter_options": filter_options or [],
        "points": series_records(points),
        "chart": to_vega_spec(chart),
    }


def compute_revenue(filters: ChartFilters, ctx: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    rows: List[Row] = ctx.get("main", []) or []
    total_col = resolve(rows, Concept.REVENUE)
    if not total_col:
        return None
    early_col = resolve(rows, Concept.REVENUE_EARLY_STAGE)
    later_col = resolve(rows, Concept.REVENUE_LATER_STAGE)

    concept = revenue_concept(filters.revenue_filter)
    column = {
        Concept.REVENUE_EARLY_STAGE: early_col,
        Concept.REVENUE_LATER_STAGE: later_col,
    }.get(concept) or total_col
    label = "Total Revenue"
    if column != total_col:
        label = "Early Stage Revenue" if concept == Concept.REVENUE_EARLY_STAGE else "Later-Stage Revenue"

    options = [{"value": "all", "label": "All Revenue"}]
    if early_col:
        options.append({"value": "early-stage", "label": "Early-Stage"})
    if later_col:
        options.append({"value": "later-stage", "label": "Later-Stage"})

    points = build_series(rows, column, year_column(rows), Unit.BILLIONS)
    if not points:
        return None
    return series_payload(
        "economic-impact-revenue",
        filters,
        title="Startup Revenue",
        label=label,
        column=column,
        points=points,
        filter_key="revenue_filter",
        filter_options=options,
        unit=Unit.BILLIONS,
    )


def compute_employees(filters: ChartFilters, ctx: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    rows: List[Row] = ctx.get("main", []) or []
    total_col = resolve(rows, Concept.EMPLOYEES)
    country_col = resolve(rows, Concept.EMPLOYEES_IN_COUNTRY)
    if not total_col and not country_col:
        return None

    in_country = employees_concept(filters.employees_filter) == Concept.EMPLOYEES_IN_COUNTRY and country_col
    column = country_col if in_country else total_col
    points = build_series(rows, column, year_column(rows))
    if not points:
        return None

    options = [{"value": "all", "label": "All Employees"}]
    if country_col:
        options.append({"value": "finland", "label": "Finland Only"})
    return series_payload(
        "economic-impact-employees",
        filters,
        title="Number of Employees",
        label="Employees in Finland" if in_country else "Total Employees",
        column=column,
        points=points,
        filter_key="employees_filter",
        filter_options=options,
    )


FIRMS_LABELS = {
    Concept.FIRMS: "Active firms",
    Concept.FIRMS_IN_COUNTRY: "Firms in Finland",
    Concept.FIRMS_EARLY_STAGE_COUNT: "Number of Startups",
    Concept.FIRMS_LATER_STAGE_COUNT: "Number of Scaleups",
}


def compute_firms(filters: ChartFilters, ctx: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    rows: List[Row] = ctx.get("main", []) or []
    columns = {concept: resolve(rows, concept) for concept in FIRMS_LABELS}
    total_col = columns[Concept.FIRMS] or columns[Concept.FIRMS_EARLY_STAGE_COUNT]
    if not total_col and not columns[Concept.FIRMS_LATER_STAGE_COUNT]:
        return None

    concept = firms_concept(filters.firms_filter)
    column = columns.get(concept) if concept != Concept.FIRMS else None
    if not column:
        concept, column = Concept.FIRMS, total_col
    points = build_series(rows, column, year_column(rows))
    if not points:
        return None

    options = [{"value": "all", "label": "All Firms"}]
    for value, key, text in (
        ("finland", Concept.FIRMS_IN_COUNTRY, "Finland Only"),
        ("early-stage", Concept.FIRMS_EARLY_STAGE_COUNT, "Early-Stage"),
        ("later-stage", Concept.FIRMS_LATER_STAGE_COUNT, "Later-Stage"),
    ):
        if columns[key]:
            options.append({"value": value, "label": text})
    return series_payload(
        "economic-impact-firms",
        filters,
        title="Active firms",
        label=FIRMS_LABELS[concept],
        column=column,
        points=points,
        filter_key="firms_filter",
        filter_options=options,
    )


def _is_currency_column(name: str) -> bool:
    lowered = name.lower()
    return any(word in lowered for word in ("investment", "rdi", "r&d"))


def format_column_name(name: str) -> str:
    """Title-case a header for display, keeping R&D intact (r&d-investments -> R&D Investments)."""
    words = name.replace("_", " ").replace("-", " ").split(" ")
    return " ".join("R&D" if w.lower() == "r&d" else w[:1].upper() + w[1:].lower() for w in words if w)


def compute_rdi(filters: ChartFilters, ctx: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    rows: List[Row] = ctx.get("rdi", []) or []
    column = resolve(rows, Concept.RD_INVESTMENT)
    if not column:
        return None
    unit = Unit.BILLIONS if _is_currency_column(column) else Unit.NONE
    points = build_series(rows, column, year_column(rows), unit)
    if not points:
        return None
    return series_payload(
        "economic-impact-rdi",
        filters,
        title="R&D investments",
        label=format_column_name(column),
        column=column,
        points=points,
        unit=unit,
    )
