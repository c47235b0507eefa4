from __future__ import annotations

import logging
import math
import os

import numpy as np
import pandas as pd
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.responses import Response
from fastapi.encoders import jsonable_encoder

from api.schemas import ChartFiltersModel, MetaChartsResponse
from ecosystem.data import load_dashboard_data
from ecosystem.filters import ChartFilters, normalize_filters
from ecosystem.metrics_debug import compute_debug
from ecosystem.metrics_summary import compute_summary
from ecosystem.registry import CHARTS, compute_chart, list_charts

logging.basicConfig(
    level=os.environ.get("ECOSYSTEM_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Startup Ecosystem Charts API", version="0.1.0")
logger = logging.getLogger(__name__)

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("ECOSYSTEM_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: ChartFiltersModel) -> ChartFilters:
    return normalize_filters(model.model_dump())


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _unknown_chart(chart_id: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "unknown chart", "chart_id": chart_id})


def _unavailable(chart_id: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": "chart unavailable", "chart_id": chart_id})


@app.get("/meta/charts")
def meta_charts():
    return _json(MetaChartsResponse(charts=list_charts()).model_dump())


@app.get("/meta/columns")
def meta_columns():
    try:
        data_ctx = load_dashboard_data()
        return _json(compute_debug(data_ctx))
    except Exception as exc:
        logger.exception("meta_columns failed")
        return _error(exc)


@app.get("/summary")
def summary():
    try:
        data_ctx = load_dashboard_data()
        payload = compute_summary(data_ctx)
        if payload is None:
            return JSONResponse(status_code=404, content={"error": "summary unavailable"})
        return _json(payload)
    except Exception as exc:
        logger.exception("summary failed")
        return _error(exc)


@app.post("/charts/{chart_id}")
def chart(chart_id: str, filters: ChartFiltersModel):
    if chart_id not in CHARTS:
        return _unknown_chart(chart_id)
    try:
        data_ctx = load_dashboard_data()
        payload = compute_chart(chart_id, _filters_from_model(filters), data_ctx)
        if payload is None:
            logger.info("Chart %s unavailable for current data", chart_id)
            return _unavailable(chart_id)
        return _json(payload)
    except Exception as exc:
        logger.exception("chart %s failed", chart_id)
        return _error(exc)


@app.post("/export/{chart_id}")
def export_chart(chart_id: str, filters: ChartFiltersModel):
    if chart_id not in CHARTS:
        return _unknown_chart(chart_id)
    try:
        data_ctx = load_dashboard_data()
        payload = compute_chart(chart_id, _filters_from_model(filters), data_ctx)
        if payload is None:
            return _unavailable(chart_id)

        export_df = pd.DataFrame(payload.get("points", []))
        csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    except Exception as exc:
        logger.exception("export %s failed", chart_id)
        return _error(exc)
    filename = f"{chart_id}.csv"
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
