from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ecosystem.columns import Concept

REVENUE_FILTERS: Tuple[str, ...] = ("all", "early-stage", "later-stage")
EMPLOYEES_FILTERS: Tuple[str, ...] = ("all", "finland")
FIRMS_FILTERS: Tuple[str, ...] = ("all", "finland", "early-stage", "later-stage")
GENDER_SHARE_VIEWS: Tuple[str, ...] = ("none", "male-share", "female-share")
IMMIGRATION_SHARE_VIEWS: Tuple[str, ...] = ("none", "finnish-share", "foreign-share")
BAROMETER_TABS: Tuple[str, ...] = ("financial", "employees", "economy")
UNICORN_FILTERS: Tuple[str, ...] = ("all", "finnish", "finnish-background")

# Older page variants used these filter values.
_ALIASES: Dict[str, str] = {
    "scaleup": "later-stage",
    "scaleups": "later-stage",
    "startups": "early-stage",
}


@dataclass(frozen=True)
class ChartFilters:
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


def _choice(value: object, allowed: Tuple[str, ...]) -> str:
    if value is None:
        return allowed[0]
    s = str(value).strip().lower()
    s = _ALIASES.get(s, s)
    return s if s in allowed else allowed[0]


def _flag(value: object, default: bool = True) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() not in {"false", "0", "no", "off", ""}
    return bool(value)


def normalize_filters(raw: Optional[dict]) -> ChartFilters:
    raw = raw or {}
    return ChartFilters(
        revenue_filter=_choice(raw.get("revenue_filter"), REVENUE_FILTERS),
        employees_filter=_choice(raw.get("employees_filter"), EMPLOYEES_FILTERS),
        firms_filter=_choice(raw.get("firms_filter"), FIRMS_FILTERS),
        gender_share_view=_choice(raw.get("gender_share_view"), GENDER_SHARE_VIEWS),
        immigration_share_view=_choice(raw.get("immigration_share_view"), IMMIGRATION_SHARE_VIEWS),
        show_male=_flag(raw.get("show_male")),
        show_female=_flag(raw.get("show_female")),
        show_finnish=_flag(raw.get("show_finnish")),
        show_foreign=_flag(raw.get("show_foreign")),
        barometer_tab=_choice(raw.get("barometer_tab"), BAROMETER_TABS),
        unicorn_filter=_choice(raw.get("unicorn_filter"), UNICORN_FILTERS),
    )


# ---------------- Filter value -> concept ----------------
def revenue_concept(value: str) -> Concept:
    return {
        "early-stage": Concept.REVENUE_EARLY_STAGE,
        "later-stage": Concept.REVENUE_LATER_STAGE,
    }.get(_choice(value, REVENUE_FILTERS), Concept.REVENUE)


def employees_concept(value: str) -> Concept:
    if _choice(value, EMPLOYEES_FILTERS) == "finland":
        return Concept.EMPLOYEES_IN_COUNTRY
    return Concept.EMPLOYEES


def firms_concept(value: str) -> Concept:
    return {
        "finland": Concept.FIRMS_IN_COUNTRY,
        "early-stage": Concept.FIRMS_EARLY_STAGE_COUNT,
        "later-stage": Concept.FIRMS_LATER_STAGE_COUNT,
    }.get(_choice(value, FIRMS_FILTERS), Concept.FIRMS)


def gender_share_concept(value: str) -> Optional[Concept]:
    return {
        "male-share": Concept.GENDER_MALE_SHARE,
        "female-share": Concept.GENDER_FEMALE_SHARE,
    }.get(_choice(value, GENDER_SHARE_VIEWS))


def immigration_share_concept(value: str) -> Optional[Concept]:
    return {
        "finnish-share": Concept.BACKGROUND_DOMESTIC_SHARE,
        "foreign-share": Concept.BACKGROUND_FOREIGN_SHARE,
    }.get(_choice(value, IMMIGRATION_SHARE_VIEWS))
