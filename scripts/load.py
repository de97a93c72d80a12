"""
Load the Census 2021 fact, lookup and reference tables into memory.

Inputs
------
- data/*.parquet  (fact + lookup tables, native types kept)
- data/*.csv      (geo correspondence + PHN mapping, every column read as String)

Notes
-----
- All inputs are checked before anything is read: a missing file aborts the run.
"""
from dataclasses import dataclass
from pathlib import Path

import polars as pl

import settings as s
from utils import log


# -------------------------
# Table registry
# -------------------------
# attribute name -> (file name, label used in progress messages)
PARQUET_TABLES: dict[str, tuple[str, str]] = {
    "geo_lookup": (s.GEO_LOOKUP_FILE, "Geographic lookup"),
    "state_lookup": (s.STATE_LOOKUP_FILE, "State lookup"),
    "age_lookup": (s.AGE_LOOKUP_FILE, "Age lookup"),
    "sex_lookup": (s.SEX_LOOKUP_FILE, "Sex lookup"),
    "geog_type_lookup": (s.GEOG_TYPE_LOOKUP_FILE, "Geography type lookup"),
    "health_condition_lookup": (s.HEALTH_CONDITION_LOOKUP_FILE, "Health condition lookup"),
    "common_health_lookup": (s.COMMON_HEALTH_LOOKUP_FILE, "Common health condition lookup"),
    "population": (s.POPULATION_FILE, "Population data"),
    "health_conditions": (s.HEALTH_CONDITIONS_FILE, "Health conditions data"),
}

CSV_TABLES: dict[str, tuple[str, str, list[str] | None]] = {
    "geo_correspondence": (s.GEO_CORRESPONDENCE_FILE, "Geographic correspondence", None),
    "phn_mapping": (s.PHN_MAPPING_FILE, "PHN to SA2 mapping", s.PHN_COLUMNS),
}


@dataclass(frozen=True)
class CensusTables:
    population: pl.DataFrame
    health_conditions: pl.DataFrame
    geo_lookup: pl.DataFrame
    state_lookup: pl.DataFrame
    age_lookup: pl.DataFrame
    sex_lookup: pl.DataFrame
    geog_type_lookup: pl.DataFrame
    health_condition_lookup: pl.DataFrame
    common_health_lookup: pl.DataFrame
    geo_correspondence: pl.DataFrame
    phn_mapping: pl.DataFrame


# -------------------------
# Core functions
# -------------------------
def input_paths(data_dir: Path) -> list[Path]:
    names = [f for f, _ in PARQUET_TABLES.values()] + [f for f, _, _ in CSV_TABLES.values()]
    return [data_dir / name for name in names]


def ensure_inputs(data_dir: Path) -> None:
    missing = [p for p in input_paths(data_dir) if not p.exists()]
    if missing:
        raise FileNotFoundError(
            f"Input files not found in {data_dir}: {[p.name for p in missing]}"
        )


def read_string_csv(path: Path, columns: list[str] | None = None) -> pl.DataFrame:
    """Read a CSV with every column as String so codes keep leading zeros."""
    return pl.read_csv(path, columns=columns, infer_schema_length=0)


def load_tables(data_dir: Path) -> CensusTables:
    ensure_inputs(data_dir)

    frames: dict[str, pl.DataFrame] = {}

    log("Loading tables...")
    for attr, (file_name, label) in PARQUET_TABLES.items():
        frames[attr] = pl.read_parquet(data_dir / file_name)
        log(f"  - {label}: {frames[attr].height} rows")

    for attr, (file_name, label, columns) in CSV_TABLES.items():
        frames[attr] = read_string_csv(data_dir / file_name, columns=columns)
        log(f"  - {label}: {frames[attr].height} rows")

    return CensusTables(**frames)


def log_structures(tables: CensusTables) -> None:
    log("Examining data structures...")
    for attr in (
        "population",
        "health_conditions",
        "geo_lookup",
        "age_lookup",
        "sex_lookup",
        "health_condition_lookup",
        "geog_type_lookup",
        "state_lookup",
    ):
        log(f"  - {attr} columns: {', '.join(getattr(tables, attr).columns)}")
