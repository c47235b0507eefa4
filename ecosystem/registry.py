from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from ecosystem.filters import ChartFilters
from ecosystem.metrics_barometer import compute_barometer
from ecosystem.metrics_economic import compute_employees, compute_firms, compute_rdi, compute_revenue
from ecosystem.metrics_unicorns import compute_unicorns
from ecosystem.metrics_workforce import compute_gender, compute_immigration

Payload = Optional[Dict[str, Any]]


@dataclass(frozen=True)
class ChartEntry:
    chart_id: str
    title: str
    kind: str
    dataset: str
    compute: Callable[[ChartFilters, Dict[str, Any]], Payload]


CHARTS: Dict[str, ChartEntry] = {
    entry.chart_id: entry
    for entry in [
        ChartEntry("economic-impact-revenue", "Startup Revenue", "graph", "main", compute_revenue),
        ChartEntry("economic-impact-employees", "Number of Employees", "graph", "main", compute_employees),
        ChartEntry("economic-impact-firms", "Active firms", "graph", "main", compute_firms),
        ChartEntry("economic-impact-rdi", "R&D investments", "graph", "rdi", compute_rdi),
        ChartEntry("workforce-gender", "Gender distribution", "bar", "employees_gender", compute_gender),
        ChartEntry("workforce-immigration", "Immigration status", "bar", "employees_gender", compute_immigration),
        ChartEntry("barometer-financial", "Financial situation", "graph", "barometer", partial(compute_barometer, tab="financial")),
        ChartEntry("barometer-employees", "Number of employees", "graph", "barometer", partial(compute_barometer, tab="employees")),
        ChartEntry("barometer-economy", "Surrounding economy", "graph", "barometer", partial(compute_barometer, tab="economy")),
        ChartEntry("unicorns-valuation", "Unicorn valuations", "bar", "unicorns", compute_unicorns),
    ]
}


def list_charts() -> List[Dict[str, str]]:
    return [
        {"chart_id": e.chart_id, "title": e.title, "kind": e.kind, "dataset": e.dataset}
        for e in CHARTS.values()
    ]


def compute_chart(chart_id: str, filters: ChartFilters, ctx: Dict[str, Any]) -> Payload:
    """Payload for one embeddable chart; None when its data is unavailable.

    Raises KeyError for an unknown chart id.
    """
    return CHARTS[chart_id].compute(filters, ctx)
