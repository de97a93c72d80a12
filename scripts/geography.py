"""
Jurisdiction filter and SA2 -> SA3 -> SA4 hierarchy for the Census tables.

ASGS codes are prefix-nested:
  - SA4: 3 digits (e.g., "301")
  - SA3: 5 digits (e.g., "30101")
  - SA2: 9 digits (e.g., "301011001")
so parent codes are derived by slicing the child code instead of being
loaded from the geography lookup.
"""
import polars as pl

import settings as s
from lookups import resolve_columns
from utils import log


LEVELS = ("SA2", "SA3", "SA4")


# ----------------------------
# Filters
# ----------------------------
def state_matches(df: pl.DataFrame, state_code: int | str) -> pl.Expr:
    # Numeric codes (Int or Float parquet columns) compare as numbers, others as text
    if df.schema["state"].is_numeric():
        return pl.col("state") == int(state_code)
    return pl.col("state").cast(pl.Utf8) == str(state_code)


def filter_state(df: pl.DataFrame, state_code: int | str = s.TARGET_STATE_CODE) -> pl.DataFrame:
    return df.filter(state_matches(df, state_code))


def filter_sa2_geography(
    geo_lookup: pl.DataFrame,
    state_code: int | str = s.TARGET_STATE_CODE,
) -> pl.DataFrame:
    """Geography rows of the target state at SA2 level only."""
    return geo_lookup.filter(state_matches(geo_lookup, state_code) & (pl.col("geog_type") == "SA2"))


# ----------------------------
# Hierarchy
# ----------------------------
def prefix(col: str, level: str) -> pl.Expr:
    return pl.col(col).str.slice(0, s.SA_PREFIX_WIDTH[level])


def derive_geography_codes(df: pl.DataFrame) -> pl.DataFrame:
    """
    Add sa2_code / sa3_code / sa4_code to fact rows of any geography level.

    SA2 rows get all three (parents by prefix), SA3 rows get sa3/sa4, SA4
    rows get sa4 only. Codes that do not apply stay null.
    """
    geog_type = pl.col("geog_type")
    return (
        df
        .with_columns(pl.col("geog_id").cast(pl.Utf8))
        .with_columns(
            sa2_code=pl.when(geog_type == "SA2").then(pl.col("geog_id")),
            sa3_code=(
                pl.when(geog_type == "SA2").then(prefix("geog_id", "SA3"))
                .when(geog_type == "SA3").then(pl.col("geog_id"))
            ),
            sa4_code=(
                pl.when(geog_type.is_in(["SA2", "SA3"])).then(prefix("geog_id", "SA4"))
                .when(geog_type == "SA4").then(pl.col("geog_id"))
            ),
        )
    )


def build_sa2_hierarchy(sa2_geo: pl.DataFrame) -> pl.DataFrame:
    """Bottom-up SA2 -> SA3 -> SA4 code table from SA2 geography rows."""
    return (
        sa2_geo
        .select(pl.col("geog_id").cast(pl.Utf8).alias("sa2_code"))
        .unique(maintain_order=True)
        .with_columns(
            sa3_code=prefix("sa2_code", "SA3"),
            sa4_code=prefix("sa2_code", "SA4"),
        )
    )


def clean_geography(
    geo_lookup: pl.DataFrame,
    state_code: int | str = s.TARGET_STATE_CODE,
) -> pl.DataFrame:
    """State-scoped geography lookup with the label renamed to geography_name."""
    name_col = resolve_columns(geo_lookup.columns, "geography").label
    log(f"  - Geography name column detected: {name_col}")

    out = filter_state(geo_lookup, state_code)
    if name_col is None:
        out = out.with_columns(pl.lit(None, dtype=pl.Utf8).alias("geography_name"))
    elif name_col != "geography_name":
        out = out.drop([c for c in ["geography_name"] if c in out.columns]).rename(
            {name_col: "geography_name"}
        )

    return (
        out
        .with_columns(pl.col("geog_id").cast(pl.Utf8))
        .unique(subset=["geog_id", "geog_type"], keep="first", maintain_order=True)
    )


def level_names(clean_geo: pl.DataFrame, level: str) -> pl.DataFrame:
    """(saN_code, saN_name) for one level; exact geog_type match only."""
    tag = level.lower()
    return (
        clean_geo
        .filter(pl.col("geog_type") == level)
        .select(
            pl.col("geog_id").alias(f"{tag}_code"),
            pl.col("geography_name").cast(pl.Utf8).alias(f"{tag}_name"),
        )
    )


def build_level_names(clean_geo: pl.DataFrame) -> dict[str, pl.DataFrame]:
    names = {level: level_names(clean_geo, level) for level in LEVELS}
    for level, df in names.items():
        log(f"  - {level} areas: {df.height}")
    return names


def unnamed_parents(hierarchy: pl.DataFrame, names: dict[str, pl.DataFrame]) -> dict[str, list[str]]:
    """SA3/SA4 codes derived from SA2 codes that have no name row."""
    out: dict[str, list[str]] = {}
    for level in ("SA3", "SA4"):
        code_col = f"{level.lower()}_code"
        out[level] = (
            hierarchy
            .select(code_col)
            .unique()
            .join(names[level], on=code_col, how="anti")
            .get_column(code_col)
            .sort()
            .to_list()
        )
    return out
