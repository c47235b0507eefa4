from __future__ import annotations

import logging
import math
import numbers
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Pattern, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

Row = Mapping[str, object]
Keyword = Union[str, Pattern[str]]


class Concept(str, Enum):
    REVENUE = "Revenue"
    REVENUE_EARLY_STAGE = "RevenueEarlyStage"
    REVENUE_LATER_STAGE = "RevenueLaterStage"
    EMPLOYEES = "Employees"
    EMPLOYEES_IN_COUNTRY = "EmployeesInCountry"
    FIRMS = "Firms"
    FIRMS_IN_COUNTRY = "FirmsInCountry"
    FIRMS_EARLY_STAGE_COUNT = "FirmsEarlyStageCount"
    FIRMS_LATER_STAGE_COUNT = "FirmsLaterStageCount"
    YEAR = "Year"
    GENDER_MALE = "GenderMale"
    GENDER_FEMALE = "GenderFemale"
    GENDER_MALE_SHARE = "GenderMaleShare"
    GENDER_FEMALE_SHARE = "GenderFemaleShare"
    BACKGROUND_DOMESTIC = "BackgroundDomestic"
    BACKGROUND_FOREIGN = "BackgroundForeign"
    BACKGROUND_DOMESTIC_SHARE = "BackgroundDomesticShare"
    BACKGROUND_FOREIGN_SHARE = "BackgroundForeignShare"
    RD_INVESTMENT = "RDInvestment"


@dataclass(frozen=True)
class ColumnRule:
    """Resolution rule for one concept.

    `required` is a conjunction of keyword groups; a name satisfies a group when it
    contains any keyword of the group. `excluded` keywords disqualify a name, and so
    does satisfying the keyword rule of any concept in `exclude_concepts`.
    """

    exact_names: Tuple[str, ...] = ()
    legacy_names: Tuple[str, ...] = ()
    required: Tuple[Tuple[Keyword, ...], ...] = ()
    excluded: Tuple[Keyword, ...] = ()
    exclude_concepts: Tuple[Concept, ...] = ()
    numeric: bool = True


# ---------------- Keyword groups (English + Finnish) ----------------
REVENUE_WORDS = ("revenue", "turnover", "sales", "liikevaihto")
EARLY_STAGE_WORDS = ("early", "stage")
LATER_STAGE_WORDS = ("scaleup", "scale-up", "later stage", "later-stage")
EMPLOYEE_WORDS = ("employees", "employee", "employment", "jobs", "workers", "workforce", "työlliset", "työntekijät")
COUNTRY_WORDS = ("finland", "suomi", "suomessa")
FIRM_WORDS = ("firms", "firm", "companies", "company", "startups", "startup", "yritykset", "yritys")
COUNT_WORDS = ("number", "count", "lukumäärä", "määrä")
SHARE_WORDS = ("share", "osuus")
# "men" and "man" only as whole words; they also occur inside "employment" and "woman".
MALE_WORDS = ("male", "mies", "miehet", re.compile(r"\bm[ae]n\b"))
FEMALE_WORDS = ("female", "women", "woman", "nainen", "naiset")
DOMESTIC_WORDS = ("finnish", "domestic", "suomalais")
FOREIGN_WORDS = ("foreign", "immigrant", "ulkomaalais", "vieraskiel")
# Negated domestic forms read as foreign before keyword matching.
NEGATED_FORMS = {
    "non-finnish": "foreign",
    "non finnish": "foreign",
    "ei-suomalais": "ulkomaalais",
    "ei suomalais": "ulkomaalais",
}
BACKGROUND_WORDS = ("background", "tausta", "origin")
YEAR_WORDS = ("year", "period", "date", "vuosi")
RD_WORDS = ("r&d", "rdi", "r and d", "investments", "research", "development", "tutkimus", "kehitys")


RULES: Dict[Concept, ColumnRule] = {
    Concept.REVENUE: ColumnRule(
        exact_names=("Revenue",),
        legacy_names=("Total Revenue", "Turnover", "Liikevaihto", "Kokonaisliikevaihto"),
        required=(REVENUE_WORDS,),
        excluded=("early", "stage", "scaleup", "scale-up"),
        exclude_concepts=(Concept.REVENUE_EARLY_STAGE, Concept.REVENUE_LATER_STAGE),
    ),
    Concept.REVENUE_EARLY_STAGE: ColumnRule(
        exact_names=("RevenueEarlyStage",),
        legacy_names=("Early Stage Startup Revenue", "Early-Stage Startup Revenue", "Early Stage Revenue"),
        required=(REVENUE_WORDS, ("early",), ("stage",)),
    ),
    Concept.REVENUE_LATER_STAGE: ColumnRule(
        exact_names=("RevenueLaterStage",),
        legacy_names=("Scaleup Revenue", "Scale-up Revenue", "Later Stage Revenue", "Later-Stage Revenue"),
        required=(REVENUE_WORDS, LATER_STAGE_WORDS),
        excluded=("early",),
    ),
    Concept.EMPLOYEES: ColumnRule(
        exact_names=("Employees",),
        legacy_names=("Total Employees", "Number of Employees", "Työlliset"),
        required=(EMPLOYEE_WORDS,),
        excluded=COUNTRY_WORDS + SHARE_WORDS,
    ),
    Concept.EMPLOYEES_IN_COUNTRY: ColumnRule(
        exact_names=("EmployeesInFinland",),
        legacy_names=("Employees in Finland", "Työlliset Suomessa", "työlliset_suomessa"),
        required=(EMPLOYEE_WORDS, COUNTRY_WORDS),
        excluded=SHARE_WORDS,
    ),
    Concept.FIRMS: ColumnRule(
        exact_names=("Firms",),
        legacy_names=("Active firms", "Yritykset"),
        required=(FIRM_WORDS,),
        excluded=("number",) + COUNTRY_WORDS + ("early", "stage", "scaleup", "scale-up") + REVENUE_WORDS + EMPLOYEE_WORDS,
    ),
    Concept.FIRMS_IN_COUNTRY: ColumnRule(
        exact_names=("FirmsInFinland",),
        legacy_names=("Firms in Finland", "Yritykset Suomessa"),
        required=(FIRM_WORDS, COUNTRY_WORDS),
        excluded=REVENUE_WORDS + EMPLOYEE_WORDS,
    ),
    Concept.FIRMS_EARLY_STAGE_COUNT: ColumnRule(
        exact_names=("NumberStartups",),
        legacy_names=("Number Startups", "Number of Startups"),
        required=(COUNT_WORDS, ("startup",)),
        excluded=("scaleup", "scale-up") + REVENUE_WORDS + EMPLOYEE_WORDS,
    ),
    Concept.FIRMS_LATER_STAGE_COUNT: ColumnRule(
        exact_names=("NumberScaleups",),
        legacy_names=("Number Scaleups", "Number of Scaleups"),
        required=(COUNT_WORDS, ("scaleup", "scale-up")),
        excluded=REVENUE_WORDS + EMPLOYEE_WORDS,
    ),
    Concept.YEAR: ColumnRule(
        exact_names=("Year",),
        legacy_names=("Vuosi", "Period"),
        required=(YEAR_WORDS,),
        numeric=False,
    ),
    Concept.GENDER_MALE: ColumnRule(
        exact_names=("Male",),
        legacy_names=("Males", "Men", "Miehet"),
        required=(MALE_WORDS,),
        excluded=FEMALE_WORDS + SHARE_WORDS,
    ),
    Concept.GENDER_FEMALE: ColumnRule(
        exact_names=("Female",),
        legacy_names=("Females", "Women", "Naiset"),
        required=(FEMALE_WORDS,),
        excluded=SHARE_WORDS,
    ),
    Concept.GENDER_MALE_SHARE: ColumnRule(
        exact_names=("ShareOfMales", "Share of males"),
        legacy_names=("Share of men", "Miesten osuus"),
        required=(SHARE_WORDS, MALE_WORDS),
        excluded=FEMALE_WORDS,
    ),
    Concept.GENDER_FEMALE_SHARE: ColumnRule(
        exact_names=("ShareOfFemales", "Share of females"),
        legacy_names=("Share of women", "Naisten osuus"),
        required=(SHARE_WORDS, FEMALE_WORDS),
    ),
    Concept.BACKGROUND_DOMESTIC: ColumnRule(
        exact_names=("Finnish background",),
        legacy_names=("FinnishBackground", "Suomalainen tausta"),
        required=(DOMESTIC_WORDS, BACKGROUND_WORDS),
        excluded=FOREIGN_WORDS + SHARE_WORDS,
    ),
    Concept.BACKGROUND_FOREIGN: ColumnRule(
        exact_names=("Foreign background",),
        legacy_names=("ForeignBackground", "Ulkomaalainen tausta"),
        required=(FOREIGN_WORDS, BACKGROUND_WORDS),
        excluded=DOMESTIC_WORDS + SHARE_WORDS,
    ),
    Concept.BACKGROUND_DOMESTIC_SHARE: ColumnRule(
        exact_names=("ShareOfFinnish", "Share of Finnish"),
        legacy_names=("Share of Finnish background",),
        required=(SHARE_WORDS, DOMESTIC_WORDS),
        excluded=FOREIGN_WORDS,
    ),
    Concept.BACKGROUND_FOREIGN_SHARE: ColumnRule(
        exact_names=("ShareOfForeign", "Share of Foreign"),
        legacy_names=("Share of foreign background",),
        required=(SHARE_WORDS, FOREIGN_WORDS),
        excluded=DOMESTIC_WORDS,
    ),
    Concept.RD_INVESTMENT: ColumnRule(
        exact_names=("R&D-investments", "RDI"),
        legacy_names=("R&D investments", "Tutkimus ja kehitys"),
        required=(RD_WORDS,),
        excluded=YEAR_WORDS,
    ),
}


def _norm(name: object) -> str:
    return str(name).strip().lower()


def is_number(value: object) -> bool:
    """True for finite real numbers; booleans are labels, not measurements."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError, OverflowError):
        return False


def all_columns(rows: Sequence[Row]) -> List[str]:
    """Union of keys across every row, in first-seen order."""
    seen: Dict[str, None] = {}
    for row in rows:
        for key in row.keys():
            seen.setdefault(key, None)
    return list(seen)


def has_numeric_value(rows: Sequence[Row], key: str) -> bool:
    return any(is_number(row.get(key)) for row in rows)


def _has(name: str, word: Keyword) -> bool:
    if isinstance(word, str):
        return word in name
    return word.search(name) is not None


def _keyword_text(name: object) -> str:
    text = _norm(name)
    for negated, opposite in NEGATED_FORMS.items():
        text = text.replace(negated, opposite)
    return text


def _keywords_match(name: str, rule: ColumnRule) -> bool:
    if not rule.required:
        return False
    if any(_has(name, word) for word in rule.excluded):
        return False
    return all(any(_has(name, word) for word in group) for group in rule.required)


def matches_rule(name: object, concept: Concept, exclude: Iterable[Concept] = ()) -> bool:
    """Keyword-tier test for a single column name, including concept exclusions."""
    rule = RULES[Concept(concept)]
    lowered = _keyword_text(name)
    if not _keywords_match(lowered, rule):
        return False
    for other in tuple(rule.exclude_concepts) + tuple(exclude):
        if _keywords_match(lowered, RULES[other]):
            return False
    return True


def _tiers(rule: ColumnRule):
    exact = {_norm(n) for n in rule.exact_names}
    legacy = {_norm(n) for n in rule.legacy_names}
    return (
        ("exact", lambda name: _norm(name) in exact),
        ("legacy", lambda name: _norm(name) in legacy),
    )


def resolve(rows: Sequence[Row], concept: Concept | str, exclude: Iterable[Concept] = ()) -> Optional[str]:
    """Return the column in `rows` that carries `concept`, or None.

    Tiers are tried in order: exact canonical name, exact legacy name, keyword
    match. Within a tier the first key seen across the rows wins.
    """
    if not rows:
        return None
    try:
        concept = Concept(concept)
    except ValueError:
        logger.warning("Unknown concept %r", concept)
        return None

    rule = RULES[concept]
    exclude = tuple(exclude)
    columns = all_columns(rows)
    if rule.numeric:
        columns = [c for c in columns if has_numeric_value(rows, c)]

    for tier, test in _tiers(rule):
        for col in columns:
            if test(col):
                logger.debug("Resolved %s -> %r (%s name)", concept.value, col, tier)
                return col
    for col in columns:
        if matches_rule(col, concept, exclude):
            logger.debug("Resolved %s -> %r (keyword match)", concept.value, col)
            return col

    logger.debug("No column for %s among %s", concept.value, columns)
    return None


def resolve_all(rows: Sequence[Row], concepts: Iterable[Concept] = tuple(Concept)) -> Dict[str, Optional[str]]:
    return {Concept(c).value: resolve(rows, c) for c in concepts}


def find_column(
    rows: Sequence[Row],
    any_of: Iterable[str],
    all_of: Iterable[str] = (),
    *,
    numeric: bool = False,
) -> Optional[str]:
    """Plain keyword search for columns outside the concept table (barometer tabs, time labels)."""
    any_of = [w.lower() for w in any_of]
    all_of = [w.lower() for w in all_of]
    for col in all_columns(rows):
        name = _norm(col)
        if any_of and not any(w in name for w in any_of):
            continue
        if not all(w in name for w in all_of):
            continue
        if numeric and not has_numeric_value(rows, col):
            continue
        return col
    return None
