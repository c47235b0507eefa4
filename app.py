import logging
import os
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import pandas as pd
import streamlit as st

from ecosystem.data import clear_cache, load_dashboard_data
from ecosystem.filters import normalize_filters
from ecosystem.metrics_debug import compute_debug
from ecosystem.metrics_summary import compute_summary
from ecosystem.registry import CHARTS, compute_chart

logging.basicConfig(level=os.environ.get("ECOSYSTEM_LOG_LEVEL", "INFO").upper())


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .card-actions {font-size: 0.85rem;color: #6b7280;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str, actions: Optional[str] = None):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-header">
            <div class="card-title">{title}</div>
            <div class="card-actions">{actions or ""}</div>
          </div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def render_page_header(title: str, breadcrumb: str):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if st.button("Refresh"):
            clear_cache()
            st.rerun()


# ---------- Filter state ----------
FILTER_DEFAULTS: Dict[str, Any] = {
    "revenue_filter": "all",
    "employees_filter": "all",
    "firms_filter": "all",
    "gender_share_view": "none",
    "immigration_share_view": "none",
    "show_male": True,
    "show_female": True,
    "show_finnish": True,
    "show_foreign": True,
    "barometer_tab": "financial",
    "unicorn_filter": "all",
}


def current_filters():
    for key, value in FILTER_DEFAULTS.items():
        st.session_state.setdefault(key, value)
    return normalize_filters({key: st.session_state[key] for key in FILTER_DEFAULTS})


def option_radio(label: str, key: str, options: List[Dict[str, str]]):
    """Segmented control over the options a payload says are available."""
    values = [o["value"] for o in options]
    if len(values) < 2:
        return
    if st.session_state.get(key) not in values:
        st.session_state[key] = values[0]
    labels = {o["value"]: o["label"] for o in options}
    st.radio(label, values, format_func=lambda v: labels[v], key=key, horizontal=True, label_visibility="collapsed")


def export_button(payload: Dict[str, Any]):
    points = pd.DataFrame(payload.get("points", []))
    if points.empty:
        return
    st.download_button(
        "Export CSV",
        data=points.to_csv(index=False).encode("utf-8"),
        file_name=f"{payload['chart_id']}.csv",
        mime="text/csv",
        key=f"export_{payload['chart_id']}",
    )


def render_chart_card(chart_id: str):
    entry = CHARTS[chart_id]
    payload = compute_chart(chart_id, filters, data_ctx)
    with card(entry.title, actions=payload.get("label") if payload else None):
        if payload is None:
            st.info("No data available for this chart.")
            return
        if payload.get("filter_key"):
            option_radio(entry.title, payload["filter_key"], payload.get("filter_options", []))
        if payload.get("title_note"):
            st.caption(payload["title_note"])
        st.vega_lite_chart(payload["chart"], use_container_width=True)
        if payload.get("context"):
            st.caption(payload["context"])
        export_button(payload)


def render_composition_card(chart_id: str, view_key: str):
    entry = CHARTS[chart_id]
    payload = compute_chart(chart_id, filters, data_ctx)
    with card(entry.title):
        if payload is None:
            st.info("No data available for this chart.")
            return
        view_options = [{"value": "none", "label": "Counts"}] + [
            {"value": b["value"], "label": b["label"]} for b in payload["view_buttons"]
        ]
        option_radio(f"{entry.title} view", view_key, view_options)
        if payload["kind"] == "bar":
            toggle_cols = st.columns(len(payload["toggle_buttons"]))
            for col, toggle in zip(toggle_cols, payload["toggle_buttons"]):
                col.checkbox(toggle["label"], key=toggle["key"])
        st.vega_lite_chart(payload["chart"], use_container_width=True)
        if payload.get("context"):
            st.caption(payload["context"])
        export_button(payload)


# ---------- Pages ----------
def render_summary_page():
    render_page_header("Summary", "Home / Summary")
    metrics = compute_summary(data_ctx)
    if metrics is None:
        st.info("No headline figures available for the current data.")
        return
    labels = [
        ("firms", "Active firms"),
        ("revenue", "Revenue"),
        ("employees", "Employees"),
        ("employees_in_finland", "Employees in Finland"),
        ("rdi", "R&D investments"),
        ("unicorns", "Unicorns"),
    ]
    with card("Key figures"):
        cols = st.columns(3)
        for i, (key, label) in enumerate(labels):
            metric = metrics[key]
            delta = f"{metric['growth']:+.1f}%" if metric["growth"] else None
            cols[i % 3].metric(f"{label} ({metric['year']})", metric["formatted_value"], delta=delta)


def render_economic_page():
    render_page_header("Economic Impact", "Home / Economic Impact")
    top = st.columns(2)
    with top[0]:
        render_chart_card("economic-impact-revenue")
    with top[1]:
        render_chart_card("economic-impact-employees")
    bottom = st.columns(2)
    with bottom[0]:
        render_chart_card("economic-impact-firms")
    with bottom[1]:
        render_chart_card("economic-impact-rdi")


def render_workforce_page():
    render_page_header("Workforce", "Home / Workforce")
    cols = st.columns(2)
    with cols[0]:
        render_composition_card("workforce-gender", "gender_share_view")
    with cols[1]:
        render_composition_card("workforce-immigration", "immigration_share_view")


def render_barometer_page():
    render_page_header("Barometer & Unicorns", "Home / Barometer")
    option_radio(
        "Barometer",
        "barometer_tab",
        [{"value": k, "label": CHARTS[f"barometer-{k}"].title} for k in ("financial", "employees", "economy")],
    )
    render_chart_card(f"barometer-{filters.barometer_tab}")

    payload = compute_chart("unicorns-valuation", filters, data_ctx)
    with card("Unicorns"):
        if payload is None:
            st.info("No unicorn data available.")
            return
        option_radio("Unicorns", "unicorn_filter", payload["toggle_buttons"])
        st.vega_lite_chart(payload["chart"], use_container_width=True)
        export_button(payload)


def render_debug_page():
    render_page_header("Data Quality / Debug", "Home / Debug")
    debug = compute_debug(data_ctx)
    with card("Data files"):
        st.write(debug["files"])
    for key, info in debug["datasets"].items():
        with card(f"{key} (rows={info['rows']})"):
            if info["resolved"]:
                st.markdown("**Resolved columns**")
                st.dataframe(
                    pd.DataFrame([{"concept": c, "column": col} for c, col in info["resolved"].items()]),
                    hide_index=True,
                )
            st.markdown("**All columns**")
            st.write(info["columns"])


# ---------- UI setup ----------
st.set_page_config(page_title="Startup Ecosystem Dashboard", layout="wide")
inject_base_styles()
st.title("Startup Ecosystem Dashboard")
st.caption("Revenue, employment, workforce composition and sentiment of the startup ecosystem.")

data_ctx = load_dashboard_data()
if not data_ctx.get("files"):
    st.error("No data files found. Set ECOSYSTEM_DATA_DIR or place main-data.json in ./data.")
    st.stop()

filters = current_filters()

with st.sidebar:
    st.markdown("### Navigate")
    current_page = st.radio(
        "Navigate",
        ["Summary", "Economic Impact", "Workforce", "Barometer & Unicorns", "Data Quality / Debug"],
        index=0,
    )

if current_page == "Summary":
    render_summary_page()
elif current_page == "Economic Impact":
    render_economic_page()
elif current_page == "Workforce":
    render_workforce_page()
elif current_page == "Barometer & Unicorns":
    render_barometer_page()
else:
    render_debug_page()
