"""
Test Scene Transform Layer - Verify the per-scene aggregations
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import polars as pl
import pytest
from carsales_story.extract.schemas import RECORDS_SCHEMA
from carsales_story.transformation.schemas import (
    STACKED_SHARE_SCHEMA,
    TOP_BRANDS_SCHEMA,
    YEARLY_SHARE_SCHEMA,
    YEARLY_TOTALS_SCHEMA,
)
from carsales_story.transformation.transformers import (
    get_summary_stats,
    stack_shares,
    top_brands_latest_year,
    yearly_share_by_origin,
    yearly_totals_by_origin,
)
from carsales_story.transformation.validators import validate_share_totals
import logging

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def make_records(rows) -> pl.DataFrame:
    """Build a record set from (year, brand, brand_origin, sales) tuples"""
    return pl.DataFrame(rows, schema=RECORDS_SCHEMA, orient="row")


EXAMPLE_RECORDS = [
    (2020, "Toyota", "Asian", 100.0),
    (2020, "Ford", "Western", 50.0),
]

MULTI_YEAR_RECORDS = [
    (2018, "Toyota", "Asian", 100.0),
    (2018, "Honda", "Asian", 60.0),
    (2018, "Ford", "Western", 90.0),
    (2019, "Ford", "Western", 80.0),
    (2019, "Toyota", "Asian", 20.0),
    (2019, "Toyota", "Asian", 30.0),
    (2019, "BMW", "Western", 70.0),
]


# ---------------------------------------------------------------------------
# Worked example
# ---------------------------------------------------------------------------


def test_worked_example_yearly_totals():
    totals = yearly_totals_by_origin(make_records(EXAMPLE_RECORDS))

    assert totals.rows() == [(2020, "Asian", 100.0), (2020, "Western", 50.0)]


def test_worked_example_yearly_share():
    shares = yearly_share_by_origin(make_records(EXAMPLE_RECORDS))

    assert shares["year"].to_list() == [2020]
    assert shares["Asian"][0] == pytest.approx(0.667, abs=1e-3)
    assert shares["Western"][0] == pytest.approx(0.333, abs=1e-3)


def test_worked_example_top_brands():
    ranked = top_brands_latest_year(make_records(EXAMPLE_RECORDS))

    assert ranked.select(["brand", "sales", "origin"]).rows() == [
        ("Toyota", 100.0, "Asian"),
        ("Ford", 50.0, "Western"),
    ]


# ---------------------------------------------------------------------------
# Yearly totals
# ---------------------------------------------------------------------------


def test_yearly_totals_match_sum_of_matching_records():
    records = make_records(MULTI_YEAR_RECORDS)

    totals = yearly_totals_by_origin(records)

    assert totals.schema == YEARLY_TOTALS_SCHEMA
    for year, origin, sales in totals.rows():
        expected = records.filter(
            (pl.col("year") == year) & (pl.col("brand_origin") == origin)
        )["sales"].sum()
        assert sales == pytest.approx(expected)
    assert totals.rows() == [
        (2018, "Asian", 160.0),
        (2018, "Western", 90.0),
        (2019, "Asian", 50.0),
        (2019, "Western", 150.0),
    ]


def test_yearly_totals_do_not_zero_fill_missing_origin():
    records = make_records(
        [
            (2018, "Ford", "Western", 10.0),
            (2019, "Toyota", "Asian", 5.0),
            (2019, "Ford", "Western", 7.0),
        ]
    )

    totals = yearly_totals_by_origin(records)

    assert totals.rows() == [
        (2018, "Western", 10.0),
        (2019, "Asian", 5.0),
        (2019, "Western", 7.0),
    ]


def test_yearly_totals_sorted_by_year_then_origin_order():
    records = make_records(
        [
            (2021, "Ford", "Western", 1.0),
            (2019, "Ford", "Western", 2.0),
            (2021, "Kia", "Asian", 3.0),
            (2019, "Kia", "Asian", 4.0),
        ]
    )

    totals = yearly_totals_by_origin(records)

    assert totals.select(["year", "origin"]).rows() == [
        (2019, "Asian"),
        (2019, "Western"),
        (2021, "Asian"),
        (2021, "Western"),
    ]


# ---------------------------------------------------------------------------
# Yearly shares and stacking
# ---------------------------------------------------------------------------


def test_yearly_shares_sum_to_one():
    shares = yearly_share_by_origin(make_records(MULTI_YEAR_RECORDS))

    assert shares.schema == YEARLY_SHARE_SCHEMA
    assert shares["year"].to_list() == [2018, 2019]
    for asian, western in shares.select(["Asian", "Western"]).rows():
        assert asian + western == pytest.approx(1.0)
    assert shares["Asian"].to_list() == pytest.approx([160 / 250, 50 / 200])


def test_zero_total_year_is_skipped():
    records = make_records(
        [
            (2018, "Toyota", "Asian", 0.0),
            (2018, "Ford", "Western", 0.0),
            (2019, "Toyota", "Asian", 3.0),
            (2019, "Ford", "Western", 1.0),
        ]
    )

    shares = yearly_share_by_origin(records)

    assert shares["year"].to_list() == [2019]
    assert shares["Asian"].to_list() == pytest.approx([0.75])


def test_overflowing_year_total_is_skipped():
    records = make_records(
        [
            (2019, "Toyota", "Asian", 3.0),
            (2019, "Ford", "Western", 1.0),
            (2020, "Toyota", "Asian", 1e308),
            (2020, "Ford", "Western", 1e308),
        ]
    )

    shares = yearly_share_by_origin(records)

    assert shares["year"].to_list() == [2019]
    assert validate_share_totals(shares)


def test_missing_origin_gets_zero_share():
    records = make_records([(2018, "Ford", "Western", 10.0)])

    shares = yearly_share_by_origin(records)

    assert shares.rows() == [(2018, 0.0, 1.0)]


def test_stack_shares_bounds_follow_key_order():
    shares = pl.DataFrame(
        {"year": [2018, 2019], "Asian": [0.25, 0.6], "Western": [0.75, 0.4]},
        schema=YEARLY_SHARE_SCHEMA,
    )

    stacked = stack_shares(shares)

    assert stacked.schema == STACKED_SHARE_SCHEMA
    rows = stacked.rows()
    assert [r[:2] for r in rows] == [
        (2018, "Asian"),
        (2019, "Asian"),
        (2018, "Western"),
        (2019, "Western"),
    ]
    assert [r[2] for r in rows] == pytest.approx([0.0, 0.0, 0.25, 0.6])
    assert [r[3] for r in rows] == pytest.approx([0.25, 0.6, 1.0, 1.0])


def test_stack_shares_of_empty_frame():
    stacked = stack_shares(pl.DataFrame(schema=YEARLY_SHARE_SCHEMA))

    assert stacked.height == 0
    assert stacked.schema == STACKED_SHARE_SCHEMA


# ---------------------------------------------------------------------------
# Top brands
# ---------------------------------------------------------------------------


def test_top_brands_only_latest_year_and_sorted():
    ranked = top_brands_latest_year(make_records(MULTI_YEAR_RECORDS))

    assert ranked.schema == TOP_BRANDS_SCHEMA
    assert ranked["year"].unique().to_list() == [2019]
    assert ranked.select(["brand", "sales"]).rows() == [
        ("Ford", 80.0),
        ("BMW", 70.0),
        ("Toyota", 50.0),
    ]


def test_top_brands_truncates_to_ten():
    rows = [(2022, f"Brand{i:02d}", "Asian", float(i)) for i in range(15)]
    rows.append((2021, "Old", "Western", 1000.0))

    ranked = top_brands_latest_year(make_records(rows))

    assert ranked.height == 10
    sales = ranked["sales"].to_list()
    assert sales == sorted(sales, reverse=True)
    assert ranked["brand"][0] == "Brand14"
    assert "Old" not in ranked["brand"].to_list()


def test_top_brands_ties_broken_by_brand_name():
    records = make_records(
        [
            (2022, "Mazda", "Asian", 10.0),
            (2022, "Audi", "Western", 10.0),
            (2022, "Kia", "Asian", 10.0),
            (2022, "Fiat", "Western", 20.0),
        ]
    )

    ranked = top_brands_latest_year(records)

    assert ranked["brand"].to_list() == ["Fiat", "Audi", "Kia", "Mazda"]


def test_top_brands_origin_from_first_record():
    records = make_records(
        [
            (2022, "Mixed", "Western", 5.0),
            (2022, "Mixed", "Asian", 5.0),
        ]
    )

    ranked = top_brands_latest_year(records)

    assert ranked.rows() == [("Mixed", 10.0, "Western", 2022)]


def test_top_brands_custom_n_and_invalid_n():
    records = make_records(MULTI_YEAR_RECORDS)

    assert top_brands_latest_year(records, n=1)["brand"].to_list() == ["Ford"]
    assert top_brands_latest_year(records, n=0).height == 0
    with pytest.raises(ValueError):
        top_brands_latest_year(records, n=-1)


# ---------------------------------------------------------------------------
# Shared properties
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "transform",
    [yearly_totals_by_origin, yearly_share_by_origin, top_brands_latest_year],
)
def test_transforms_are_idempotent(transform):
    records = make_records(MULTI_YEAR_RECORDS)

    first = transform(records)
    second = transform(records)

    assert first.equals(second)
    # The record set itself is untouched
    assert records.equals(make_records(MULTI_YEAR_RECORDS))


@pytest.mark.parametrize(
    "transform, schema",
    [
        (yearly_totals_by_origin, YEARLY_TOTALS_SCHEMA),
        (yearly_share_by_origin, YEARLY_SHARE_SCHEMA),
        (top_brands_latest_year, TOP_BRANDS_SCHEMA),
    ],
)
def test_empty_input_gives_empty_output(transform, schema):
    result = transform(pl.DataFrame(schema=RECORDS_SCHEMA))

    assert result.height == 0
    assert result.schema == schema


def test_summary_stats():
    stats = get_summary_stats(make_records(MULTI_YEAR_RECORDS))

    assert stats["total_records"] == 7
    assert stats["unique_brands"] == 4
    assert stats["year_range"] == "2018 to 2019"
    assert stats["latest_year"] == 2019
    assert stats["sales_sum"] == pytest.approx(450.0)
    assert stats["sales_by_origin"] == pytest.approx({"Asian": 210.0, "Western": 240.0})


def test_summary_stats_empty():
    stats = get_summary_stats(pl.DataFrame(schema=RECORDS_SCHEMA))

    assert stats["total_records"] == 0
    assert stats["latest_year"] is None
