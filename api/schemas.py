from __future__ import annotations

from typing import List

from pydantic import BaseModel


class ChartFiltersModel(BaseModel):
    revenue_filter: str = "all"
    employees_filter: str = "all"
    firms_filter: str = "all"
    gender_share_view: str = "none"
    immigration_share_view: str = "none"
    show_male: bool = True
    show_female: bool = True
    show_finnish: bool = True
    show_foreign: bool = True
    barometer_tab: str = "financial"
    unicorn_filter: str = "all"


class ChartInfo(BaseModel):
    chart_id: str
    title: str
    kind: str
    dataset: str


class MetaChartsResponse(BaseModel):
    charts: List[ChartInfo]

