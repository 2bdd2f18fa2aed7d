"""
Data Transformers - Scene Transform Layer

Pure functions folding the sales record set into per-scene derived datasets.
Every function takes the full record set and returns a new frame; nothing
is cached between calls.
"""

import polars as pl
import duckdb
from typing import Any, Dict, Sequence
from ..extract.schemas import ORIGINS
from .schemas import (
    YEARLY_TOTALS_SCHEMA,
    YEARLY_SHARE_SCHEMA,
    STACKED_SHARE_SCHEMA,
    TOP_BRANDS_SCHEMA,
)
import logging

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 10


def _origin_order() -> pl.Expr:
    """Sort key placing origins in the fixed ORIGINS order"""
    return pl.col("origin").cast(pl.Enum(list(ORIGINS)))


def yearly_totals_by_origin(records_df: pl.DataFrame) -> pl.DataFrame:
    """
    Total sales per year and brand origin (Scene 0)

    Origins missing from a year are omitted, not zero-filled.

    Args:
        records_df: Full record set

    Returns:
        pl.DataFrame: year, origin, sales sorted by year then origin order
    """
    logger.info("Creating yearly sales totals by origin")

    if records_df.height == 0:
        logger.info("No records, returning empty yearly totals")
        return pl.DataFrame(schema=YEARLY_TOTALS_SCHEMA)

    totals_df = (
        records_df.group_by(["year", "brand_origin"])
        .agg(pl.col("sales").sum())
        .rename({"brand_origin": "origin"})
        .sort([pl.col("year"), _origin_order()])
        .select(["year", "origin", "sales"])
        .cast(dict(YEARLY_TOTALS_SCHEMA))
    )

    logger.info(f"Created {totals_df.height} yearly total records")
    return totals_df


def yearly_share_by_origin(records_df: pl.DataFrame) -> pl.DataFrame:
    """
    Share of each origin in the year's combined sales (Scene 1)

    Years whose combined sales are zero, or too large to represent, have
    no defined share and are skipped with a warning.

    Args:
        records_df: Full record set

    Returns:
        pl.DataFrame: year plus one fraction column per origin, sorted by year
    """
    logger.info("Creating yearly market share by origin")

    if records_df.height == 0:
        logger.info("No records, returning empty yearly shares")
        return pl.DataFrame(schema=YEARLY_SHARE_SCHEMA)

    by_year_df = (
        records_df.group_by("year")
        .agg(
            [
                pl.col("sales").filter(pl.col("brand_origin") == origin).sum().alias(origin)
                for origin in ORIGINS
            ]
        )
        .with_columns(pl.sum_horizontal(list(ORIGINS)).alias("total"))
        .sort("year")
    )

    zero_years = by_year_df.filter(pl.col("total") == 0)["year"].to_list()
    if zero_years:
        logger.warning(f"Skipping years with zero combined sales: {zero_years}")

    overflow_years = by_year_df.filter(~pl.col("total").is_finite())["year"].to_list()
    if overflow_years:
        logger.warning(
            f"Skipping years whose combined sales overflow: {overflow_years}"
        )

    shares_df = (
        by_year_df.filter((pl.col("total") != 0) & pl.col("total").is_finite())
        .select(
            [pl.col("year")]
            + [(pl.col(origin) / pl.col("total")).alias(origin) for origin in ORIGINS]
        )
        .cast(dict(YEARLY_SHARE_SCHEMA))
    )

    logger.info(f"Created {shares_df.height} yearly share records")
    return shares_df


def stack_shares(
    shares_df: pl.DataFrame, keys: Sequence[str] = ORIGINS
) -> pl.DataFrame:
    """
    Stack share columns into cumulative lower/upper bounds

    The key order is fixed: the first key sits at the bottom of every year's
    stack, each following key starts where the previous one ends.

    Args:
        shares_df: Output of yearly_share_by_origin
        keys: Share columns to stack, bottom first

    Returns:
        pl.DataFrame: year, origin, lower, upper grouped by key, then by year
    """
    layers = []
    for i, key in enumerate(keys):
        lower = pl.sum_horizontal(list(keys[:i])) if i > 0 else pl.lit(0.0)
        layers.append(
            shares_df.select(
                [
                    pl.col("year"),
                    pl.lit(key).alias("origin"),
                    lower.alias("lower"),
                    pl.sum_horizontal(list(keys[: i + 1])).alias("upper"),
                ]
            ).cast(dict(STACKED_SHARE_SCHEMA))
        )

    if not layers:
        return pl.DataFrame(schema=STACKED_SHARE_SCHEMA)
    return pl.concat(layers)


def top_brands_latest_year(
    records_df: pl.DataFrame, n: int = DEFAULT_TOP_N
) -> pl.DataFrame:
    """
    Best-selling brands in the most recent year of the dataset (Scene 2)

    Each brand keeps the origin of its first record in input order.
    Ties in sales are broken by brand name ascending.

    Args:
        records_df: Full record set
        n: Number of brands to keep

    Returns:
        pl.DataFrame: brand, sales, origin, year ranked by sales descending
    """
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise ValueError(f"n must be a non-negative integer, got {n!r}")

    logger.info(f"Creating top {n} brands for the latest year")

    if records_df.height == 0:
        logger.info("No records, returning empty brand ranking")
        return pl.DataFrame(schema=TOP_BRANDS_SCHEMA)

    try:
        conn = duckdb.connect()
        try:
            conn.register("sales_records", records_df.with_row_index("row_nr"))

            sql = f"""
                WITH latest AS (
                    SELECT MAX(year) AS year FROM sales_records
                )
                SELECT
                    r.brand
                    , SUM(r.sales) AS total_sales
                    , arg_min(r.brand_origin, r.row_nr) AS origin
                    , l.year AS year
                FROM sales_records r
                JOIN latest l ON r.year = l.year
                GROUP BY r.brand, l.year
                ORDER BY total_sales DESC, r.brand ASC
                LIMIT {n}
            """

            result_df = conn.execute(sql).pl()
        finally:
            conn.close()

        ranked_df = (
            result_df.rename({"total_sales": "sales"})
            .select(["brand", "sales", "origin", "year"])
            .cast(dict(TOP_BRANDS_SCHEMA))
        )

        logger.info(f"Created {ranked_df.height} ranked brand records")
        return ranked_df

    except Exception as e:
        logger.error(f"❌ Error ranking brands: {e}")
        raise


def get_summary_stats(records_df: pl.DataFrame) -> Dict[str, Any]:
    """
    Get summary statistics for the record set

    Args:
        records_df: Full record set

    Returns:
        Dict: Summary statistics
    """
    logger.info("Generating summary stats for sales records")

    if records_df.height == 0:
        return {
            "total_records": 0,
            "unique_brands": 0,
            "year_range": None,
            "latest_year": None,
            "sales_sum": 0.0,
            "sales_by_origin": {origin: 0.0 for origin in ORIGINS},
        }

    min_year = records_df["year"].min()
    max_year = records_df["year"].max()
    stats = {
        "total_records": records_df.height,
        "unique_brands": records_df["brand"].n_unique(),
        "year_range": f"{min_year} to {max_year}",
        "latest_year": max_year,
        "sales_sum": records_df["sales"].sum(),
        "sales_by_origin": {
            origin: records_df.filter(pl.col("brand_origin") == origin)["sales"].sum()
            for origin in ORIGINS
        },
    }

    logger.info(f"Generated summary stats: {list(stats.keys())}")
    return stats
