"""
Build the wide, analysis-ready Census table from a state-filtered fact table.

The joins are an explicit, ordered list of `JoinStep`s so the origin of every
output column and the match quality of every lookup can be inspected on
their own. All joins are left joins: a fact row is never dropped, unmatched
keys surface as nulls and are only counted.
"""
from dataclasses import dataclass

import polars as pl

import settings as s
from geography import derive_geography_codes
from lookups import StandardLookups
from utils import log


@dataclass(frozen=True)
class JoinStep:
    name: str
    lookup: pl.DataFrame
    fact_key: str
    lookup_key: str
    columns: tuple[str, ...]


def build_join_steps(lookups: StandardLookups, geo_names: dict[str, pl.DataFrame]) -> list[JoinStep]:
    """Join sequence: sex, lthc, age, state, geog_type, SA2/SA3/SA4 names, PHN."""
    steps = [
        JoinStep("sex", lookups.sex, "sex", "sex", ("sex_name",)),
        JoinStep("health_condition", lookups.health_condition, "lthc", "lthc", ("long_term_health_condition",)),
        JoinStep("age", lookups.age, "age_group", "age_group", ("age_group_label",)),
        JoinStep("state", lookups.state, "state", "state", ("state_name",)),
        JoinStep("geog_type", lookups.geog_type, "geog_type", "geog_type", ("geog_type_name",)),
    ]
    for level in ("SA2", "SA3", "SA4"):
        tag = level.lower()
        steps.append(
            JoinStep(tag, geo_names[level], f"{tag}_code", f"{tag}_code", (f"{tag}_name",))
        )
    steps.append(JoinStep("phn", lookups.phn, "sa2_code", "SA2_CODE_2021", ("PHN_NAME_2023",)))
    return steps


def applicable_steps(df: pl.DataFrame, steps: list[JoinStep]) -> list[JoinStep]:
    # e.g. population facts carry no lthc column
    return [step for step in steps if step.fact_key in df.columns]


def apply_join(df: pl.DataFrame, step: JoinStep) -> pl.DataFrame:
    key_dtype = df.schema[step.fact_key]
    right = (
        step.lookup
        .select([step.lookup_key, *step.columns])
        .with_columns(pl.col(step.lookup_key).cast(key_dtype, strict=False))
    )

    if step.fact_key == step.lookup_key:
        return df.join(right, on=step.fact_key, how="left", maintain_order="left")
    return df.join(
        right,
        left_on=step.fact_key,
        right_on=step.lookup_key,
        how="left",
        maintain_order="left",
    )


def apply_joins(df: pl.DataFrame, steps: list[JoinStep]) -> pl.DataFrame:
    n_rows = df.height
    out = df
    for step in applicable_steps(df, steps):
        out = apply_join(out, step)
        if out.height != n_rows:
            raise ValueError(
                f"Join '{step.name}' changed row count: {n_rows} -> {out.height} "
                f"(lookup key '{step.lookup_key}' is not unique)"
            )
    return out


def join_diagnostics(df: pl.DataFrame, steps: list[JoinStep]) -> pl.DataFrame:
    """Rows whose join key is present but found no label, per applied step."""
    rows = []
    for step in applicable_steps(df, steps):
        unmatched = df.select(
            (
                pl.col(step.fact_key).is_not_null()
                & pl.all_horizontal([pl.col(c).is_null() for c in step.columns])
            ).sum()
        ).item()
        rows.append(
            {"lookup": step.name, "join_key": step.fact_key, "unmatched_rows": unmatched}
        )

    return pl.DataFrame(
        rows,
        schema={"lookup": pl.Utf8, "join_key": pl.Utf8, "unmatched_rows": pl.Int64},
    )


def select_output_columns(df: pl.DataFrame) -> pl.DataFrame:
    return df.select([c for c in s.OUTPUT_COLUMNS if c in df.columns])


def denormalize(facts: pl.DataFrame, steps: list[JoinStep]) -> pl.DataFrame:
    """Hierarchy codes -> left joins -> fixed column order."""
    return select_output_columns(apply_joins(derive_geography_codes(facts), steps))


def summarise(df: pl.DataFrame) -> dict[str, int]:
    is_sa2 = pl.col("geog_type") == "SA2"
    if "geog_type_name" in df.columns:
        is_sa2 = is_sa2 | (pl.col("geog_type_name") == "SA2")

    summary = {
        "records": df.height,
        "unique_sa2_areas": df.filter(is_sa2.fill_null(False)).get_column("geog_id").n_unique(),
        "unique_age_groups": df.get_column("age_group").n_unique(),
        "unique_phns": df.get_column("PHN_NAME_2023").drop_nulls().n_unique(),
    }
    if "long_term_health_condition" in df.columns:
        summary["unique_health_conditions"] = df.get_column("long_term_health_condition").n_unique()
    return summary


def log_diagnostics(diag: pl.DataFrame) -> None:
    log("Checking join quality:")
    for name, key, unmatched in diag.iter_rows():
        log(f"    - {name} (on {key}): {unmatched} unmatched rows")


def log_summary(summary: dict[str, int], state_label: str = s.TARGET_STATE_LABEL) -> None:
    log("============================================")
    log(f"{state_label} Census Data Summary")
    log("============================================")
    for name, value in summary.items():
        log(f"{name.replace('_', ' ').capitalize()}: {value}")
    log("============================================")
