"""
Resolve key/label columns of the Census lookup tables and standardise them.

The ABS lookup tables do not share a naming convention for their label
columns, so every lookup goes through `resolve_columns` before it is renamed
to the column names used by the denormalised output:

    sex        -> sex, sex_name
    age        -> age_group, age_group_label  ("Age groups: " prefix stripped)
    state      -> state, state_name
    geog_type  -> geog_type, geog_type_name
    lthc       -> lthc, long_term_health_condition  (+ _T / _N sentinels)
    phn        -> SA2_CODE_2021, PHN_NAME_2023

Every standardised lookup is unique on its key (first occurrence kept), so a
left join against it never changes the row count of the fact table.
"""
import re
from dataclasses import dataclass
from typing import Iterable

import polars as pl

import settings as s
from utils import log


@dataclass(frozen=True)
class ResolvedColumns:
    key: str | None
    label: str | None


@dataclass(frozen=True)
class StandardLookups:
    sex: pl.DataFrame
    age: pl.DataFrame
    health_condition: pl.DataFrame
    state: pl.DataFrame
    geog_type: pl.DataFrame
    phn: pl.DataFrame


# -------------------------
# Column resolver
# -------------------------
def resolve_columns(columns: Iterable[str], role: str) -> ResolvedColumns:
    """
    Find the key and label columns of a lookup table.

    Key: first column, in column order, that is one of the role's candidate
    names (``settings.KEY_CANDIDATES``), else the first column.

    Label, first hit wins (1 and 2 skip the role's other key candidates):
      1. a non-key column matching ``name|label`` (case-insensitive)
      2. the first column that is neither the key nor structural
         (``geog_id``, ``geog_type``, ``state``)
      3. the first non-key column
      4. None, when the table holds nothing but the key

    Never raises; a table without columns resolves to (None, None).
    """
    cols = list(columns)
    if not cols:
        return ResolvedColumns(key=None, label=None)

    candidates = s.KEY_CANDIDATES.get(role, ())
    key = next((c for c in cols if c in candidates), cols[0])

    others = [c for c in cols if c != key]
    pool = [c for c in others if c not in candidates]
    label = (
        next((c for c in pool if re.search(s.LABEL_PATTERN, c)), None)
        or next((c for c in pool if c not in s.STRUCTURAL_COLUMNS), None)
        or next(iter(others), None)
    )
    return ResolvedColumns(key=key, label=label)


def standardise_lookup(
    df: pl.DataFrame,
    role: str,
    key_name: str,
    label_name: str,
) -> pl.DataFrame:
    """Rename the resolved key/label to fixed names and dedupe on the key."""
    resolved = resolve_columns(df.columns, role)
    if resolved.key is None:
        return pl.DataFrame(schema={key_name: pl.Utf8, label_name: pl.Utf8})

    renames = {resolved.key: key_name}
    if resolved.label is not None:
        renames[resolved.label] = label_name

    # A stray column already carrying a target name would collide on rename
    clashes = [c for c in renames.values() if c in df.columns and c not in renames]
    out = df.drop(clashes).rename({k: v for k, v in renames.items() if k != v})

    if resolved.label is None:
        out = out.with_columns(pl.lit(None, dtype=pl.Utf8).alias(label_name))

    return out.unique(subset=[key_name], keep="first", maintain_order=True)


# -------------------------
# Per-table standardisation
# -------------------------
def standardise_age(age_lookup: pl.DataFrame) -> pl.DataFrame:
    return (
        standardise_lookup(age_lookup, "age", "age_group", "age_group_label")
        .with_columns(
            pl.col("age_group_label").cast(pl.Utf8).str.strip_prefix(s.AGE_LABEL_PREFIX)
        )
    )


def extend_health_conditions(health_condition_lookup: pl.DataFrame) -> pl.DataFrame:
    """Standard LTHC lookup plus the _T / _N sentinel rows (standard rows win)."""
    standard = (
        standardise_lookup(
            health_condition_lookup, "lthc", "lthc", "long_term_health_condition"
        )
        .select(
            pl.col("lthc").cast(pl.Utf8),
            pl.col("long_term_health_condition").cast(pl.Utf8),
        )
    )

    sentinels = pl.DataFrame(
        {
            "lthc": list(s.SENTINEL_LTHC.keys()),
            "long_term_health_condition": list(s.SENTINEL_LTHC.values()),
        },
        schema={"lthc": pl.Utf8, "long_term_health_condition": pl.Utf8},
    )

    return (
        pl.concat([standard, sentinels], how="vertical")
        .unique(subset=["lthc"], keep="first", maintain_order=True)
    )


def missing_lthc_codes(facts: pl.DataFrame, health_condition_lookup: pl.DataFrame) -> list[str]:
    """LTHC codes used by the fact rows but absent from the raw lookup (sorted)."""
    key = resolve_columns(health_condition_lookup.columns, "lthc").key
    in_data = set(facts.get_column("lthc").cast(pl.Utf8).drop_nulls().to_list())
    if key is None:
        return sorted(in_data)
    in_lookup = set(health_condition_lookup.get_column(key).cast(pl.Utf8).drop_nulls().to_list())
    return sorted(in_data - in_lookup)


def build_phn_lookup(phn_mapping: pl.DataFrame) -> pl.DataFrame:
    """One PHN per SA2 (first mapping row kept)."""
    return (
        phn_mapping
        .select(["SA2_CODE_2021", "PHN_NAME_2023"])
        .unique(subset=["SA2_CODE_2021"], keep="first", maintain_order=True)
    )


def build_lookups(
    sex_lookup: pl.DataFrame,
    age_lookup: pl.DataFrame,
    health_condition_lookup: pl.DataFrame,
    state_lookup: pl.DataFrame,
    geog_type_lookup: pl.DataFrame,
    phn_mapping: pl.DataFrame,
) -> StandardLookups:
    log("Standardising lookup column names...")
    for role, df in (
        ("age", age_lookup),
        ("sex", sex_lookup),
        ("state", state_lookup),
        ("geog_type", geog_type_lookup),
        ("lthc", health_condition_lookup),
    ):
        resolved = resolve_columns(df.columns, role)
        log(f"  - {role}: key column '{resolved.key}', label column '{resolved.label}'")

    lookups = StandardLookups(
        sex=standardise_lookup(sex_lookup, "sex", "sex", "sex_name"),
        age=standardise_age(age_lookup),
        health_condition=extend_health_conditions(health_condition_lookup),
        state=standardise_lookup(state_lookup, "state", "state", "state_name"),
        geog_type=standardise_lookup(geog_type_lookup, "geog_type", "geog_type", "geog_type_name"),
        phn=build_phn_lookup(phn_mapping),
    )

    log(f"  - Extended health condition lookup: {lookups.health_condition.height} rows")
    log(f"  - PHN mappings: {lookups.phn.height} SA2 areas")
    return lookups
