from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence

import pandas as pd

from ecosystem.columns import Row, is_number

BILLION = 1_000_000_000
RAW_CURRENCY_THRESHOLD = 1000
MISSING_PERIOD = "N/A"

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


class Unit(str, Enum):
    NONE = "none"
    BILLIONS = "billions"
    PERCENT = "percent"


@dataclass(frozen=True)
class SeriesPoint:
    period: str
    value: float
    original_value: float

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def apply_unit(raw: float, unit: Unit = Unit.NONE) -> float:
    """Convert a raw cell value into its display unit.

    Currency amounts above 1000 are taken to be whole euros and scaled to billions;
    smaller figures are assumed to be in billions already. Shares at or below 1 are
    fractions and become percentages.
    """
    if unit == Unit.BILLIONS:
        return raw / BILLION if raw > RAW_CURRENCY_THRESHOLD else raw
    if unit == Unit.PERCENT:
        return raw * 100 if raw <= 1 else raw
    return raw


def parse_period(label: object) -> Optional[int]:
    """Leading integer of a period label ("2021", "2021 Q2"), None when there is none."""
    match = _INT_PREFIX.match(str(label))
    if not match:
        return None
    return int(match.group(1))


def period_label(value: object) -> str:
    if value is None:
        return MISSING_PERIOD
    if isinstance(value, float):
        if math.isnan(value):
            return MISSING_PERIOD
        if value.is_integer():
            return str(int(value))
    return str(value)


def period_order(labels: Sequence[object]) -> List[int]:
    """Index order that sorts `labels` by integer period.

    Labels without an integer value keep their slot; the dated labels are sorted
    stably into the remaining slots.
    """
    keys = [parse_period(label) for label in labels]
    dated = iter(sorted((i for i, k in enumerate(keys) if k is not None), key=lambda i: keys[i]))
    return [i if k is None else next(dated) for i, k in enumerate(keys)]


def sort_points(points: Sequence[SeriesPoint]) -> List[SeriesPoint]:
    return [points[i] for i in period_order([p.period for p in points])]


def build_series(
    rows: Sequence[Row],
    value_column: Optional[str],
    year_column: Optional[str],
    unit: Unit = Unit.NONE,
) -> List[SeriesPoint]:
    if not rows or not value_column:
        return []
    points: List[SeriesPoint] = []
    for row in rows:
        raw = row.get(value_column)
        if not is_number(raw) or raw < 0:
            continue
        raw = float(raw)
        period = period_label(row.get(year_column)) if year_column else MISSING_PERIOD
        points.append(SeriesPoint(period=period, value=apply_unit(raw, unit), original_value=raw))
    return sort_points(points)


def build_share_from_counts(
    rows: Sequence[Row],
    part_column: Optional[str],
    other_column: Optional[str],
    year_column: Optional[str],
) -> List[SeriesPoint]:
    """Percentage share of `part_column` in part + other, for datasets without a share column."""
    if not rows or not part_column or not other_column:
        return []
    points: List[SeriesPoint] = []
    for row in rows:
        part, other = row.get(part_column), row.get(other_column)
        if not (is_number(part) and is_number(other)) or part < 0 or other < 0:
            continue
        total = float(part) + float(other)
        share = float(part) / total * 100 if total > 0 else 0.0
        period = period_label(row.get(year_column)) if year_column else MISSING_PERIOD
        points.append(SeriesPoint(period=period, value=share, original_value=share))
    return sort_points(points)


def build_pair_frame(
    rows: Sequence[Row],
    left_column: Optional[str],
    right_column: Optional[str],
    year_column: Optional[str],
    left_label: str,
    right_label: str,
) -> pd.DataFrame:
    """Paired counts per period (e.g. Male/Female) with a Total column.

    Rows need both counts numeric and non-negative, as in `build_share_from_counts`.
    """
    columns = ["period", left_label, right_label, "Total"]
    if not rows or not left_column or not right_column:
        return pd.DataFrame(columns=columns)
    records = []
    for row in rows:
        left, right = row.get(left_column), row.get(right_column)
        if not (is_number(left) and is_number(right)) or left < 0 or right < 0:
            continue
        records.append(
            {
                "period": period_label(row.get(year_column)) if year_column else MISSING_PERIOD,
                left_label: float(left),
                right_label: float(right),
                "Total": float(left) + float(right),
            }
        )
    if not records:
        return pd.DataFrame(columns=columns)
    order = period_order([r["period"] for r in records])
    return pd.DataFrame([records[i] for i in order], columns=columns)


def series_frame(points: Sequence[SeriesPoint]) -> pd.DataFrame:
    if not points:
        return pd.DataFrame(columns=["period", "value", "original_value"])
    return pd.DataFrame([p.to_dict() for p in points])


def series_records(points: Sequence[SeriesPoint]) -> List[Mapping[str, object]]:
    return [p.to_dict() for p in points]
