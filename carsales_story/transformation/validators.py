"""
Data Validators - Scene Transform Layer

Pure functions for validating the record set and derived datasets.
Ensures data quality and schema compliance.
"""

import polars as pl
from typing import Dict, Any
from ..extract.schemas import ORIGINS, RECORDS_SCHEMA
import logging

logger = logging.getLogger(__name__)

SHARE_TOLERANCE = 1e-9


def validate_records_schema(df: pl.DataFrame) -> bool:
    """
    Validate the record set matches the expected schema

    Args:
        df: Sales records DataFrame

    Returns:
        bool: True if valid, raises exception if invalid
    """
    if df.schema != RECORDS_SCHEMA:
        raise ValueError(f"Schema mismatch: expected {RECORDS_SCHEMA}, got {df.schema}")

    # Every field is required
    for field in df.columns:
        null_count = df.select(pl.col(field).is_null().sum()).item()
        if null_count > 0:
            raise ValueError(
                f"Null values found in required field '{field}': {null_count}"
            )

    logger.info(f"Sales records validation passed: {df.height} records")
    return True


def validate_data_quality(df: pl.DataFrame) -> Dict[str, Any]:
    """
    Validate data quality and return quality metrics

    Args:
        df: Sales records DataFrame

    Returns:
        Dict: Quality metrics and validation results
    """
    logger.info("Validating data quality for sales records")

    quality_metrics = {
        "total_records": df.height,
        "null_counts": {},
        "duplicate_counts": {},
    }

    for column in df.columns:
        null_count = df.select(pl.col(column).is_null().sum()).item()
        quality_metrics["null_counts"][column] = null_count

    # Same brand reported twice for a year gets summed by the transforms
    duplicate_count = df.height - df.select(["year", "brand"]).n_unique()
    quality_metrics["duplicate_counts"]["year_brand"] = duplicate_count

    for column, null_count in quality_metrics["null_counts"].items():
        if null_count > 0:
            logger.warning(f"Column '{column}' has {null_count} null values")

    for key, duplicate_count in quality_metrics["duplicate_counts"].items():
        if duplicate_count > 0:
            logger.warning(f"Duplicate records found for '{key}': {duplicate_count}")

    logger.info("Data quality validation completed for sales records")
    return quality_metrics


def validate_business_rules(df: pl.DataFrame) -> bool:
    """
    Validate business rules of the record set

    Args:
        df: Sales records DataFrame

    Returns:
        bool: True if all business rules pass
    """
    logger.info("Validating business rules for sales records")

    negative_sales = df.filter(pl.col("sales") < 0).height
    if negative_sales > 0:
        raise ValueError(f"Found {negative_sales} records with negative sales")

    unknown_origins = (
        df.filter(~pl.col("brand_origin").is_in(list(ORIGINS)))["brand_origin"]
        .unique()
        .to_list()
    )
    if unknown_origins:
        raise ValueError(f"Found unknown brand origins: {sorted(unknown_origins)}")

    # The ranking takes a brand's origin from any one of its records
    mixed_brands = (
        df.group_by("brand")
        .agg(pl.col("brand_origin").n_unique().alias("origins"))
        .filter(pl.col("origins") > 1)["brand"]
        .sort()
        .to_list()
    )
    if mixed_brands:
        logger.warning(f"Brands with more than one origin: {mixed_brands}")

    logger.info("Business rules validation passed for sales records")
    return True


def validate_share_totals(shares_df: pl.DataFrame) -> bool:
    """
    Validate that every year's origin shares add up to 1

    Args:
        shares_df: Output of yearly_share_by_origin

    Returns:
        bool: True if valid, raises exception if invalid
    """
    off_years = (
        shares_df.with_columns(pl.sum_horizontal(list(ORIGINS)).alias("total"))
        .filter((pl.col("total") - 1.0).abs() > SHARE_TOLERANCE)["year"]
        .to_list()
    )
    if off_years:
        raise ValueError(f"Shares do not sum to 1 for years: {off_years}")

    logger.info(f"Share totals validation passed: {shares_df.height} years")
    return True


def validate_records(df: pl.DataFrame) -> Dict[str, Any]:
    """
    Run every record-set check in order

    Args:
        df: Sales records DataFrame

    Returns:
        Dict: Quality metrics from validate_data_quality
    """
    logger.info("Validating sales record set")

    validate_records_schema(df)
    quality = validate_data_quality(df)
    validate_business_rules(df)

    logger.info("Sales record set validation completed")
    return quality
