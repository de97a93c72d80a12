import polars as pl
import pytest

import settings as s
from denormalize import (
    JoinStep,
    apply_joins,
    build_join_steps,
    denormalize,
    join_diagnostics,
    summarise,
)
from geography import build_level_names, clean_geography, filter_state
from lookups import build_lookups


def _steps(frames):
    lookups = build_lookups(
        sex_lookup=frames[s.SEX_LOOKUP_FILE],
        age_lookup=frames[s.AGE_LOOKUP_FILE],
        health_condition_lookup=frames[s.HEALTH_CONDITION_LOOKUP_FILE],
        state_lookup=frames[s.STATE_LOOKUP_FILE],
        geog_type_lookup=frames[s.GEOG_TYPE_LOOKUP_FILE],
        phn_mapping=frames[s.PHN_MAPPING_FILE],
    )
    names = build_level_names(clean_geography(frames[s.GEO_LOOKUP_FILE], 3))
    return build_join_steps(lookups, names)


@pytest.fixture
def qld_health(frames):
    return filter_state(frames[s.HEALTH_CONDITIONS_FILE], 3)


def test_join_steps_follow_fixed_order(frames):
    steps = _steps(frames)

    assert [step.name for step in steps] == [
        "sex",
        "health_condition",
        "age",
        "state",
        "geog_type",
        "sa2",
        "sa3",
        "sa4",
        "phn",
    ]
    assert steps[-1].fact_key == "sa2_code"
    assert steps[-1].lookup_key == "SA2_CODE_2021"


def test_denormalize_keeps_row_count_and_column_order(frames, qld_health):
    out = denormalize(qld_health, _steps(frames))

    assert out.height == qld_health.height == 5
    assert out.columns == s.OUTPUT_COLUMNS


def test_denormalize_resolves_labels_for_sa2_row(frames, qld_health):
    out = denormalize(qld_health, _steps(frames))

    row = out.filter(pl.col("geog_id") == "301011001").row(0, named=True)
    assert row["state_name"] == "Queensland"
    assert row["geog_type_name"] == "Statistical Area Level 2"
    assert row["sa4_code"] == "301"
    assert row["sa4_name"] == "Brisbane - East"
    assert row["sa3_code"] == "30101"
    assert row["sa3_name"] == "Capalaba"
    assert row["sa2_name"] == "Alexandra Hills"
    assert row["PHN_NAME_2023"] == "Brisbane South"
    assert row["sex_name"] == "Male"
    assert row["age_group_label"] == "15-24 years"
    assert row["long_term_health_condition"] == "Arthritis"
    assert row["persons"] == 10


def test_denormalize_coarser_levels_and_unknown_codes(frames, qld_health):
    out = denormalize(qld_health, _steps(frames))

    sa3 = out.filter(pl.col("geog_type") == "SA3").row(0, named=True)
    assert sa3["sa2_code"] is None
    assert sa3["sa3_name"] == "Capalaba"
    assert sa3["sa4_name"] == "Brisbane - East"
    assert sa3["PHN_NAME_2023"] is None

    sa4 = out.filter(pl.col("geog_type") == "SA4").row(0, named=True)
    assert sa4["sa3_code"] is None
    assert sa4["sa4_name"] == "Brisbane - East"
    assert sa4["long_term_health_condition"] is None

    sentinels = dict(out.filter(pl.col("lthc").is_in(["_T", "_N"])).select(["lthc", "long_term_health_condition"]).iter_rows())
    assert sentinels == {"_T": "Total Persons", "_N": "Not Stated"}

    birkdale = out.filter(pl.col("geog_id") == "301021003").row(0, named=True)
    assert birkdale["sa3_code"] == "30102"
    assert birkdale["sa3_name"] is None


def test_join_diagnostics_counts_unmatched_keys(frames, qld_health):
    steps = _steps(frames)
    diag = join_diagnostics(denormalize(qld_health, steps), steps)

    unmatched = dict(diag.select(["lookup", "unmatched_rows"]).iter_rows())
    assert unmatched["health_condition"] == 1
    assert unmatched["sa3"] == 1
    assert unmatched["phn"] == 1
    assert unmatched["sex"] == 0
    assert unmatched["sa2"] == 0


def test_population_facts_skip_health_condition_join(frames):
    population = filter_state(frames[s.POPULATION_FILE], 3)

    out = denormalize(population, _steps(frames))

    assert out.height == population.height
    assert "lthc" not in out.columns
    assert "long_term_health_condition" not in out.columns
    assert out.columns == [c for c in s.OUTPUT_COLUMNS if c not in ("lthc", "long_term_health_condition")]


def test_apply_joins_rejects_duplicate_lookup_keys():
    facts = pl.DataFrame({"sex": ["1", "2"]})
    lookup = pl.DataFrame({"sex": ["1", "1"], "sex_name": ["Male", "M"]})

    with pytest.raises(ValueError, match="changed row count"):
        apply_joins(facts, [JoinStep("sex", lookup, "sex", "sex", ("sex_name",))])


def test_apply_joins_aligns_lookup_key_dtype():
    facts = pl.DataFrame({"state": [3, 3]})
    lookup = pl.DataFrame({"state": ["3"], "state_name": ["Queensland"]})

    out = apply_joins(facts, [JoinStep("state", lookup, "state", "state", ("state_name",))])

    assert out.get_column("state_name").to_list() == ["Queensland", "Queensland"]


def test_summarise(frames, qld_health):
    summary = summarise(denormalize(qld_health, _steps(frames)))

    assert summary["records"] == 5
    assert summary["unique_sa2_areas"] == 3
    assert summary["unique_age_groups"] == 2
    assert summary["unique_phns"] == 1
    assert summary["unique_health_conditions"] == 5
