from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ecosystem.charts import COLORS, area_chart, grouped_bar_chart, to_vega_spec
from ecosystem.columns import Concept, Row, resolve
from ecosystem.filters import ChartFilters, gender_share_concept, immigration_share_concept
from ecosystem.metrics_economic import year_column
from ecosystem.series import (
    SeriesPoint,
    Unit,
    build_pair_frame,
    build_series,
    build_share_from_counts,
    series_frame,
    series_records,
)

SHARE_FORMAT = ".1f"


def share_points(
    rows: Sequence[Row],
    share_concept: Concept,
    part_concept: Concept,
    other_concept: Concept,
) -> Tuple[Optional[str], List[SeriesPoint]]:
    """Share series from a share column, or computed from the two count columns."""
    year_col = year_column(rows)
    share_col = resolve(rows, share_concept)
    if share_col:
        return share_col, build_series(rows, share_col, year_col, Unit.PERCENT)
    part_col, other_col = resolve(rows, part_concept), resolve(rows, other_concept)
    return None, build_share_from_counts(rows, part_col, other_col, year_col)


def _composition(
    chart_id: str,
    filters: ChartFilters,
    rows: Sequence[Row],
    *,
    view: str,
    share_concept: Optional[Concept],
    labels: Tuple[str, str],
    counts: Tuple[Concept, Concept],
    shares: Tuple[Concept, Concept],
    views: Tuple[str, str],
    visible: Tuple[bool, bool],
    count_title: str,
    share_titles: Tuple[str, str],
) -> Optional[Dict[str, Any]]:
    left_col, right_col = resolve(rows, counts[0]), resolve(rows, counts[1])
    frame = build_pair_frame(rows, left_col, right_col, year_column(rows), labels[0], labels[1])
    if frame.empty:
        return None

    share_data = {
        views[0]: share_points(rows, shares[0], counts[0], counts[1]),
        views[1]: share_points(rows, shares[1], counts[1], counts[0]),
    }
    view_buttons = [
        {"value": v, "label": f"Share of {label}", "active": view == v}
        for v, label in zip(views, labels)
        if share_data[v][1]
    ]
    toggles = [
        {"label": label, "key": f"show_{label.lower()}", "active": view == "none" and shown}
        for label, shown in zip(labels, visible)
    ]
    base = {
        "chart_id": chart_id,
        "filters": asdict(filters),
        "toggle_buttons": toggles,
        "view_buttons": view_buttons,
        "columns": {labels[0]: left_col, labels[1]: right_col},
    }

    if share_concept is not None and share_data[view][1]:
        column, points = share_data[view]
        idx = views.index(view)
        label = f"Share of {labels[idx]}"
        chart = area_chart(
            series_frame(points), title=share_titles[idx], label=f"{label} (%)", y_format=SHARE_FORMAT,
            color=COLORS[labels[idx]],
        )
        base.update(
            {
                "kind": "area",
                "title": share_titles[idx],
                "label": label,
                "column": column,
                "unit": Unit.PERCENT.value,
                "points": series_records(points),
                "chart": to_vega_spec(chart),
            }
        )
        return base

    shown = [label for label, on in zip(labels, visible) if on]
    chart = grouped_bar_chart(frame, title=count_title, series=shown)
    base.update(
        {
            "kind": "bar",
            "title": count_title,
            "label": "Employees",
            "column": None,
            "unit": Unit.NONE.value,
            "points": frame[["period"] + shown + ["Total"]].to_dict(orient="records"),
            "chart": to_vega_spec(chart),
        }
    )
    return base


def compute_gender(filters: ChartFilters, ctx: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    rows: List[Row] = ctx.get("employees_gender", []) or []
    return _composition(
        "workforce-gender",
        filters,
        rows,
        view=filters.gender_share_view,
        share_concept=gender_share_concept(filters.gender_share_view),
        labels=("Male", "Female"),
        counts=(Concept.GENDER_MALE, Concept.GENDER_FEMALE),
        shares=(Concept.GENDER_MALE_SHARE, Concept.GENDER_FEMALE_SHARE),
        views=("male-share", "female-share"),
        visible=(filters.show_male, filters.show_female),
        count_title="Gender distribution of startup workers",
        share_titles=("Share of male employees", "Share of female employees"),
    )


def compute_immigration(filters: ChartFilters, ctx: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    rows: List[Row] = ctx.get("employees_gender", []) or []
    payload = _composition(
        "workforce-immigration",
        filters,
        rows,
        view=filters.immigration_share_view,
        share_concept=immigration_share_concept(filters.immigration_share_view),
        labels=("Finnish", "Foreign"),
        counts=(Concept.BACKGROUND_DOMESTIC, Concept.BACKGROUND_FOREIGN),
        shares=(Concept.BACKGROUND_DOMESTIC_SHARE, Concept.BACKGROUND_FOREIGN_SHARE),
        views=("finnish-share", "foreign-share"),
        visible=(filters.show_finnish, filters.show_foreign),
        count_title="Immigration status",
        share_titles=(
            "Share of Finnish background employees in startups",
            "Share of foreign background employees in startups",
        ),
    )
    if payload is not None:
        payload["context"] = (
            "The immigration status of employees in startup-based firms shows the distribution "
            "between Finnish and foreign background workers over time."
        )
    return payload
