"""
ABS Census 2021 (QLD) denormalisation pipeline.

This module contains the configuration and the pipeline assembly. See main.py
for the CLI entrypoint.
"""

from dataclasses import dataclass
from pathlib import Path

import polars as pl

import settings as s
from denormalize import (
    build_join_steps,
    denormalize,
    join_diagnostics,
    log_diagnostics,
    log_summary,
    summarise,
)
from export import Outputs, build_geo_reference, build_lookup_bundle
from geography import (
    build_level_names,
    build_sa2_hierarchy,
    clean_geography,
    filter_sa2_geography,
    filter_state,
    unnamed_parents,
)
from load import CensusTables, load_tables, log_structures
from lookups import build_lookups, missing_lthc_codes
from utils import inspect_frame, log


# ----------------------------
# Configuration
# ----------------------------

@dataclass(frozen=True)
class PipelineConfig:
    root: Path
    data_dir: Path
    out_dir: Path
    state_code: int = s.TARGET_STATE_CODE
    state_label: str = s.TARGET_STATE_LABEL
    preview_rows: int = 10


def default_config(root: Path | None = None) -> PipelineConfig:
    root = (root or Path.cwd()).resolve()
    data_dir = root / "data"

    return PipelineConfig(
        root=root,
        data_dir=data_dir,
        out_dir=data_dir / "processed",
    )


# ----------------------------
# Pipeline assembly
# ----------------------------

def transform(tables: CensusTables, config: PipelineConfig) -> Outputs:
    """Filter, standardise and denormalise already-loaded tables."""
    # 1) Jurisdiction filter
    log(f"Filtering for {config.state_label} (State Code = {config.state_code})...")
    population = filter_state(tables.population, config.state_code)
    health = filter_state(tables.health_conditions, config.state_code)
    sa2_geo = filter_sa2_geography(tables.geo_lookup, config.state_code)
    log(f"  - {config.state_label} population data: {population.height} rows")
    log(f"  - {config.state_label} health conditions data: {health.height} rows")
    log(f"  - {config.state_label} SA2 geographic lookup: {sa2_geo.height} rows")

    # 2) LTHC codes the catalogue does not cover
    log("Handling special LTHC codes...")
    missing = missing_lthc_codes(health, tables.health_condition_lookup)
    if missing:
        log(f"  - LTHC codes in data but not in lookup: {', '.join(missing)}")

    # 3) Lookups
    lookups = build_lookups(
        sex_lookup=tables.sex_lookup,
        age_lookup=tables.age_lookup,
        health_condition_lookup=tables.health_condition_lookup,
        state_lookup=tables.state_lookup,
        geog_type_lookup=tables.geog_type_lookup,
        phn_mapping=tables.phn_mapping,
    )

    # 4) Geography names per level
    log("Building geography reference...")
    clean_geo = clean_geography(tables.geo_lookup, config.state_code)
    geog_types = clean_geo.get_column("geog_type").cast(pl.Utf8).unique(maintain_order=True)
    log(f"  - {config.state_label} geography lookup: {clean_geo.height} rows")
    log(f"  - Geography types: {', '.join(geog_types.drop_nulls().to_list())}")
    names = build_level_names(clean_geo)

    hierarchy = build_sa2_hierarchy(sa2_geo)
    for level, codes in unnamed_parents(hierarchy, names).items():
        if codes:
            log(f"  - Derived {level} codes without a name: {', '.join(codes)}")

    # 5) Denormalise
    log("Creating fully denormalized health conditions dataset...")
    steps = build_join_steps(lookups, names)
    health_analysis = denormalize(health, steps)
    log(
        f"  - Denormalized health dataset: {health_analysis.height} rows x "
        f"{health_analysis.width} columns"
    )

    log_diagnostics(join_diagnostics(health_analysis, steps))
    log_summary(summarise(health_analysis), config.state_label)

    return Outputs(
        health_analysis=health_analysis,
        geo_reference=build_geo_reference(names),
        lookups=build_lookup_bundle(lookups, names),
    )


def build_pipeline(config: PipelineConfig) -> Outputs:
    """Load every input and build the three outputs without writing them."""
    tables = load_tables(config.data_dir)
    log_structures(tables)
    return transform(tables, config)


def preview(df: pl.DataFrame, n_rows: int = 10) -> None:
    inspect_frame(df, "qld_health_analysis")
    print(df.head(n_rows))


def age_label_counts(df: pl.DataFrame) -> pl.DataFrame:
    return df.group_by("age_group_label").agg(pl.len().alias("n")).sort("age_group_label")
