from __future__ import annotations

from typing import Any, Dict

from ecosystem.columns import Concept, all_columns, resolve_all
from ecosystem.data import DATASET_FILES

DATASET_CONCEPTS = {
    "main": (
        Concept.YEAR,
        Concept.REVENUE,
        Concept.REVENUE_EARLY_STAGE,
        Concept.REVENUE_LATER_STAGE,
        Concept.EMPLOYEES,
        Concept.EMPLOYEES_IN_COUNTRY,
        Concept.FIRMS,
        Concept.FIRMS_IN_COUNTRY,
        Concept.FIRMS_EARLY_STAGE_COUNT,
        Concept.FIRMS_LATER_STAGE_COUNT,
    ),
    "employees_gender": (
        Concept.YEAR,
        Concept.GENDER_MALE,
        Concept.GENDER_FEMALE,
        Concept.GENDER_MALE_SHARE,
        Concept.GENDER_FEMALE_SHARE,
        Concept.BACKGROUND_DOMESTIC,
        Concept.BACKGROUND_FOREIGN,
        Concept.BACKGROUND_DOMESTIC_SHARE,
        Concept.BACKGROUND_FOREIGN_SHARE,
    ),
    "rdi": (Concept.YEAR, Concept.RD_INVESTMENT),
}


def compute_debug(ctx: Dict[str, Any]) -> Dict[str, Any]:
    """Which column each concept resolved to, per dataset, for checking new sheet headers."""
    payload: Dict[str, Any] = {"files": ctx.get("files", []), "datasets": {}}
    for key in DATASET_FILES:
        rows = ctx.get(key, []) or []
        payload["datasets"][key] = {
            "rows": len(rows),
            "columns": all_columns(rows),
            "resolved": resolve_all(rows, DATASET_CONCEPTS[key]) if key in DATASET_CONCEPTS else {},
        }
    return payload
