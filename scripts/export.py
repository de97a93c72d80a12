"""
Write the processed QLD Census outputs.

Outputs
-------
- data/processed/qld_health_analysis.parquet  (denormalised fact table)
- data/processed/qld_geo_reference.parquet    (SA2/SA3/SA4 names, long form)
- data/processed/qld_lookups.json             (named lookup tables for dashboard dropdowns)
"""
import json
from dataclasses import dataclass
from pathlib import Path

import polars as pl

import settings as s
from lookups import StandardLookups
from utils import ensure_dir, log


@dataclass(frozen=True)
class Outputs:
    health_analysis: pl.DataFrame
    geo_reference: pl.DataFrame
    lookups: dict[str, pl.DataFrame]


def build_geo_reference(names: dict[str, pl.DataFrame]) -> pl.DataFrame:
    """Concatenate per-level name tables into geog_id, geography_name, geog_type."""
    parts = [
        names[level]
        .rename({f"{level.lower()}_code": "geog_id", f"{level.lower()}_name": "geography_name"})
        .with_columns(pl.lit(level).alias("geog_type"))
        for level in ("SA2", "SA3", "SA4")
    ]
    return pl.concat(parts, how="vertical")


def build_lookup_bundle(lookups: StandardLookups, names: dict[str, pl.DataFrame]) -> dict[str, pl.DataFrame]:
    return {
        "sex": lookups.sex,
        "age": lookups.age,
        "health_condition": lookups.health_condition,
        "geog_type": lookups.geog_type,
        "state": lookups.state,
        "phn": lookups.phn.select("PHN_NAME_2023").unique(maintain_order=True),
        "sa4": names["SA4"],
        "sa3": names["SA3"],
        "sa2": names["SA2"],
    }


def write_lookup_bundle(bundle: dict[str, pl.DataFrame], path: Path) -> None:
    payload = {name: df.to_dict(as_series=False) for name, df in bundle.items()}
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
        f.write("\n")


def output_paths(out_dir: Path) -> dict[str, Path]:
    return {
        "health_analysis": out_dir / s.HEALTH_ANALYSIS_FILE,
        "geo_reference": out_dir / s.GEO_REFERENCE_FILE,
        "lookups": out_dir / s.LOOKUPS_FILE,
    }


def write_outputs(outputs: Outputs, out_dir: Path) -> dict[str, Path]:
    ensure_dir(out_dir)
    paths = output_paths(out_dir)

    outputs.health_analysis.write_parquet(paths["health_analysis"])
    log(f"Saved: {paths['health_analysis'].name}")

    outputs.geo_reference.write_parquet(paths["geo_reference"])
    log(f"Saved: {paths['geo_reference'].name}")

    write_lookup_bundle(outputs.lookups, paths["lookups"])
    log(f"Saved: {paths['lookups'].name}")

    log(f"Processed data saved to: {out_dir}")
    return paths
