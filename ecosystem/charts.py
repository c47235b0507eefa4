from __future__ import annotations

from typing import Any, Dict, List, Sequence

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

ACCENT = "#A580F2"
COLORS = {
    "Male": "#4A90E2",
    "Female": "#E94B7E",
    "Finnish": "#3498DB",
    "Foreign": "#9B59B6",
    "past": ACCENT,
    "next": "#4A90E2",
}


def to_vega_spec(chart: alt.TopLevelMixin) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def area_chart(frame: pd.DataFrame, *, title: str, label: str, y_format: str = ",.0f", color: str = ACCENT) -> alt.Chart:
    """Line + gradient area over `period`/`value` columns of a series frame."""
    return (
        alt.Chart(frame)
        .mark_area(
            line={"color": color, "strokeWidth": 2},
            color=alt.Gradient(
                gradient="linear",
                stops=[
                    alt.GradientStop(color=color, offset=0),
                    alt.GradientStop(color="rgba(165,128,242,0.05)", offset=1),
                ],
                x1=1, x2=1, y1=1, y2=0,
            ),
            opacity=0.3,
        )
        .encode(
            x=alt.X("period:O", title=None, sort=None, axis=alt.Axis(labelAngle=0, grid=False)),
            y=alt.Y("value:Q", title=label, axis=alt.Axis(format=y_format, gridDash=[4, 4], domain=False, ticks=False)),
            tooltip=[alt.Tooltip("period:N", title="Year"), alt.Tooltip("value:Q", title=label, format=y_format)],
        )
        .properties(title=title, height=280)
    )


def grouped_bar_chart(frame: pd.DataFrame, *, title: str, series: Sequence[str]) -> alt.Chart:
    """Side-by-side bars per period for the visible `series` columns of a pair frame."""
    long = frame.melt(id_vars=["period"], value_vars=list(series), var_name="series", value_name="value")
    return (
        alt.Chart(long)
        .mark_bar(opacity=0.85)
        .encode(
            x=alt.X("period:O", title=None, sort=None, axis=alt.Axis(labelAngle=0)),
            xOffset="series:N",
            y=alt.Y("value:Q", title="Employees", axis=alt.Axis(format=",.0f")),
            color=alt.Color(
                "series:N",
                scale=alt.Scale(domain=list(series), range=[COLORS.get(s, ACCENT) for s in series]),
                legend=alt.Legend(title=None, orient="top"),
            ),
            tooltip=["period", "series", alt.Tooltip("value:Q", format=",.0f")],
        )
        .properties(title=title, height=280)
    )


def balance_chart(frame: pd.DataFrame, *, title: str, series_labels: Dict[str, str]) -> alt.Chart:
    """Barometer balance lines (past / next 3 months) on a fixed -50..50 scale."""
    present: List[str] = [key for key in series_labels if key in frame.columns]
    long = frame.melt(id_vars=["period"], value_vars=present, var_name="key", value_name="balance").dropna(subset=["balance"])
    long["series"] = long["key"].map(series_labels)
    return (
        alt.Chart(long)
        .mark_line(point={"filled": True, "size": 50})
        .encode(
            x=alt.X("period:O", title=None, sort=None),
            y=alt.Y("balance:Q", title="Balance Figure (-100 to +100)", scale=alt.Scale(domain=[-50, 50])),
            color=alt.Color(
                "series:N",
                scale=alt.Scale(domain=[series_labels[k] for k in present], range=[COLORS[k] for k in present]),
                legend=alt.Legend(title=None, orient="top"),
            ),
            tooltip=["period", "series", alt.Tooltip("balance:Q", format=".1f")],
        )
        .properties(title=title, height=280)
    )


def valuation_bar_chart(frame: pd.DataFrame, *, title: str) -> alt.Chart:
    return (
        alt.Chart(frame)
        .mark_bar(color=ACCENT, opacity=0.8)
        .encode(
            x=alt.X("firm:N", title=None, sort=None, axis=alt.Axis(labelAngle=-45, labelLimit=90)),
            y=alt.Y("valuation:Q", title="Last valuation", axis=alt.Axis(format="~s")),
            tooltip=["firm", alt.Tooltip("valuation:Q", format=",.0f"), "is_finnish", "is_finnish_background"],
        )
        .properties(title=title, height=300)
    )
