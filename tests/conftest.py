from pathlib import Path

import polars as pl
import pytest

import settings as s


def census_frames() -> dict[str, pl.DataFrame]:
    """Small but complete set of Census inputs around Brisbane East (QLD = 3)."""
    geo_lookup = pl.DataFrame(
        {
            "geog_id": ["301011001", "301011002", "301021003", "30101", "301", "101021007", "301011001"],
            "geog_type": ["SA2", "SA2", "SA2", "SA3", "SA4", "SA2", "SA2"],
            "state": [3, 3, 3, 3, 3, 1, 3],
            "geog_name": [
                "Alexandra Hills",
                "Belmont - Gumdale",
                "Birkdale",
                "Capalaba",
                "Brisbane - East",
                "Braidwood",
                "Alexandra Hills (duplicate)",
            ],
        }
    )

    health = pl.DataFrame(
        {
            "year": [2021, 2021, 2021, 2021, 2021, 2021, 2021, 2021],
            "state": [3, 3, 3, 3, 3, 1, 4, 5],
            "geog_type": ["SA2", "SA2", "SA2", "SA3", "SA4", "SA2", "SA2", "SA2"],
            "geog_id": ["301011001", "301011002", "301021003", "30101", "301", "101021007", "401011001", "501011001"],
            "sex": ["1", "2", "1", "2", "1", "1", "2", "2"],
            "age_group": ["15_24", "0_14", "0_14", "15_24", "15_24", "0_14", "0_14", "15_24"],
            "lthc": ["ARTH", "_T", "_N", "ASTH", "ZZZZ", "ARTH", "ARTH", "ASTH"],
            "persons": [10, 20, 5, 7, 3, 99, 12, 8],
        }
    )

    return {
        s.GEO_LOOKUP_FILE: geo_lookup,
        s.STATE_LOOKUP_FILE: pl.DataFrame(
            {"state": [1, 3], "description": ["New South Wales", "Queensland"]}
        ),
        s.AGE_LOOKUP_FILE: pl.DataFrame(
            {"age": ["0_14", "15_24"], "age_group_description": ["0-14 years", "Age groups: 15-24 years"]}
        ),
        s.SEX_LOOKUP_FILE: pl.DataFrame({"sex": ["1", "2"], "sex_name": ["Male", "Female"]}),
        s.GEOG_TYPE_LOOKUP_FILE: pl.DataFrame(
            {
                "geog_type": ["SA2", "SA3", "SA4"],
                "geog_type_label": [
                    "Statistical Area Level 2",
                    "Statistical Area Level 3",
                    "Statistical Area Level 4",
                ],
            }
        ),
        s.HEALTH_CONDITION_LOOKUP_FILE: pl.DataFrame(
            {"lthc": ["ARTH", "ASTH"], "description": ["Arthritis", "Asthma"]}
        ),
        s.COMMON_HEALTH_LOOKUP_FILE: pl.DataFrame(
            {"lthc": ["ARTH"], "common_name": ["Arthritis"]}
        ),
        s.POPULATION_FILE: health.drop("lthc"),
        s.HEALTH_CONDITIONS_FILE: health,
        s.GEO_CORRESPONDENCE_FILE: pl.DataFrame(
            {
                "SA2_CODE_2021": ["301011001", "301011002"],
                "SA3_CODE_2021": ["30101", "30101"],
                "SA4_CODE_2021": ["301", "301"],
                "LGA_CODE_2021": ["06250", "06250"],
            }
        ),
        s.PHN_MAPPING_FILE: pl.DataFrame(
            {
                "PHN_CODE_2023": ["PHN301", "PHN302", "PHN301"],
                "SA2_CODE_2021": ["301011001", "301011001", "301011002"],
                "SA2_NAME_2021": ["Alexandra Hills", "Alexandra Hills", "Belmont - Gumdale"],
                "PHN_NAME_2023": ["Brisbane South", "Brisbane North", "Brisbane South"],
            }
        ),
    }


def write_inputs(data_dir: Path) -> Path:
    data_dir.mkdir(parents=True, exist_ok=True)
    for name, df in census_frames().items():
        if name.endswith(".csv"):
            df.write_csv(data_dir / name)
        else:
            df.write_parquet(data_dir / name)
    return data_dir


@pytest.fixture
def frames() -> dict[str, pl.DataFrame]:
    return census_frames()


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return write_inputs(tmp_path / "data")
