from __future__ import annotations

import logging
import math
import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pandas as pd

from ecosystem.columns import Row

logger = logging.getLogger(__name__)

DATA_DIR = Path(os.environ.get("ECOSYSTEM_DATA_DIR", Path(__file__).resolve().parents[1] / "data"))

DATASET_FILES: Dict[str, str] = {
    "main": "main-data.json",
    "employees_gender": "employees-gender-data.json",
    "rdi": "rdi-data.json",
    "barometer": "barometer-data.json",
    "unicorns": "unicorns-data.json",
}
REQUIRED_DATASETS = ("main",)
MAIN_WORKBOOK = "WebsiteDataEng.xlsx"

MISSING_TOKENS = {"", "n/a", "na", "-", "nan", "nat", "none", "null"}
_NUMBER_NOISE = re.compile(r"[,\s€$£¥\u00a0\u2000-\u200b\u202f\u205f\u3000]")


def coerce_cell(value: object) -> Optional[object]:
    """Clean one spreadsheet cell.

    Numbers pass through, numeric-looking strings ("12 201 000", "€1,500") lose
    their separators and currency symbols and become floats, blanks and N/A markers
    become None, and any other text is kept as a stripped label.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return value
    if hasattr(value, "item") and not isinstance(value, str):
        # numpy scalars
        return coerce_cell(value.item())
    s = str(value).strip()
    if s.lower() in MISSING_TOKENS:
        return None
    cleaned = _NUMBER_NOISE.sub("", s)
    try:
        num = float(cleaned)
    except ValueError:
        return s
    return num if math.isfinite(num) else None


def frame_to_rows(df: pd.DataFrame) -> List[Row]:
    rows: List[Row] = []
    for record in df.to_dict(orient="records"):
        row = {}
        for key, value in record.items():
            name = str(key).strip()
            cell = coerce_cell(value)
            if name and cell is not None:
                row[name] = cell
        if row:
            rows.append(row)
    return rows


def read_rows(path: Path) -> List[Row]:
    if path.suffix.lower() in {".xlsx", ".xls"}:
        df = pd.read_excel(path, sheet_name=0)
    elif path.suffix.lower() == ".csv":
        df = pd.read_csv(path, dtype=object)
    else:
        df = pd.read_json(path, orient="records", dtype=False, convert_dates=False)
    return frame_to_rows(df)


def get_source_files(data_dir: Optional[Path] = None) -> List[Path]:
    data_dir = Path(data_dir or DATA_DIR)
    files = [data_dir / name for name in DATASET_FILES.values()]
    files.append(data_dir / MAIN_WORKBOOK)
    return sorted(f for f in files if f.exists())


def file_signature(files: List[Path]) -> Tuple[Tuple[str, float], ...]:
    return tuple((str(f), f.stat().st_mtime) for f in files)


def _load_optional(path: Path, key: str) -> List[Row]:
    if not path.exists():
        if key in REQUIRED_DATASETS:
            logger.warning("Dataset %s not found at %s", key, path)
        else:
            logger.info("No %s data file found (optional)", key)
        return []
    try:
        rows = read_rows(path)
    except (OSError, ValueError) as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return []
    logger.info("Loaded %s: %d rows", path.name, len(rows))
    return rows


# ---------------- Public API ----------------
@lru_cache(maxsize=4)
def _load_dashboard_data_cached(files_sig: Tuple[Tuple[str, float], ...]) -> Dict[str, object]:
    by_name = {Path(name).name: Path(name) for name, _ in files_sig}
    data_dir = Path(files_sig[0][0]).parent
    ctx: Dict[str, object] = {"files": sorted(by_name)}
    for key, filename in DATASET_FILES.items():
        ctx[key] = _load_optional(by_name.get(filename, data_dir / filename), key)

    if not ctx["main"] and MAIN_WORKBOOK in by_name:
        logger.warning("No JSON main data; loading %s as last resort", MAIN_WORKBOOK)
        ctx["main"] = _load_optional(by_name[MAIN_WORKBOOK], "main")
    return ctx


def clear_cache() -> None:
    _load_dashboard_data_cached.cache_clear()


def empty_context() -> Dict[str, object]:
    ctx: Dict[str, object] = {"files": []}
    ctx.update({key: [] for key in DATASET_FILES})
    return ctx


def load_dashboard_data(data_dir: Optional[Path] = None) -> Dict[str, object]:
    files = get_source_files(data_dir)
    if not files:
        logger.warning("No data files in %s", data_dir or DATA_DIR)
        return empty_context()
    return _load_dashboard_data_cached(file_signature(files))
