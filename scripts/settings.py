"""
Static settings for the QLD Census 2021 preprocessing pipeline.

File names, key-column candidates per lookup role, sentinel codes and the
final column order of the denormalised table.
"""

from __future__ import annotations


# Input files (relative to data/)
POPULATION_FILE = "c21_g01_sa2_population.parquet"
HEALTH_CONDITIONS_FILE = "c21_g19_sa2_health_conditions.parquet"

GEO_LOOKUP_FILE = "c21_g01_sa2_geo_lookup.parquet"
STATE_LOOKUP_FILE = "c21_g01_sa2_state_lookup.parquet"
AGE_LOOKUP_FILE = "c21_g01_sa2_age_lookup.parquet"
SEX_LOOKUP_FILE = "c21_g01_sa2_sex_lookup.parquet"
GEOG_TYPE_LOOKUP_FILE = "c21_g01_sa2_geog_type_lookup.parquet"
HEALTH_CONDITION_LOOKUP_FILE = "c21_g19_sa2_health_condition_lookup.parquet"
COMMON_HEALTH_LOOKUP_FILE = "common_health_condition_lookup.parquet"

GEO_CORRESPONDENCE_FILE = "geo_correspondence_2021.csv"
PHN_MAPPING_FILE = "phn_2023_to_SA2_2021.csv"
PHN_COLUMNS = ["SA2_CODE_2021", "SA2_NAME_2021", "PHN_NAME_2023"]

# Output files (relative to data/processed/)
HEALTH_ANALYSIS_FILE = "qld_health_analysis.parquet"
GEO_REFERENCE_FILE = "qld_geo_reference.parquet"
LOOKUPS_FILE = "qld_lookups.json"

# Queensland
TARGET_STATE_CODE = 3
TARGET_STATE_LABEL = "Queensland"

# Lookup roles -> candidate key column names (first match wins)
KEY_CANDIDATES: dict[str, tuple[str, ...]] = {
    "age": ("age", "age_id", "age_group"),
    "sex": ("sex", "sex_id"),
    "state": ("state", "state_id"),
    "geog_type": ("geog_type", "geog_type_id"),
    "lthc": ("lthc",),
    "geography": ("geog_id",),
}

# Never picked as a label by the positional fallback
STRUCTURAL_COLUMNS = ("geog_id", "geog_type", "state")

LABEL_PATTERN = r"(?i)name|label"

AGE_LABEL_PREFIX = "Age groups: "

# LTHC codes the ABS catalogue leaves out
SENTINEL_LTHC: dict[str, str] = {
    "_T": "Total Persons",
    "_N": "Not Stated",
}

# SA level -> length of the code prefix shared with its SA2 children
SA_PREFIX_WIDTH: dict[str, int] = {
    "SA2": 9,
    "SA3": 5,
    "SA4": 3,
}

OUTPUT_COLUMNS = [
    # Identifiers
    "year",
    "state_name",
    # Geography hierarchy
    "geog_type_name",
    "geog_id",
    "sa4_code",
    "sa4_name",
    "sa3_code",
    "sa3_name",
    "sa2_code",
    "sa2_name",
    # PHN (SA2 rows only)
    "PHN_NAME_2023",
    # Demographics
    "sex_name",
    "age_group",
    "age_group_label",
    # Health condition
    "long_term_health_condition",
    # Measure
    "persons",
    # Original codes
    "state",
    "geog_type",
    "sex",
    "lthc",
]
