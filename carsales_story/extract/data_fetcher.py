"""
Data Fetcher - Extract Layer

Pure I/O for reading the vehicle sales table from disk or over HTTP.
No business logic, just loading, column checks and row validation that
return the raw record set.
"""

import io
import os
from typing import List, Tuple

import polars as pl
from pydantic import ValidationError

from ..coreutils.request import new_session, get_text
from .schemas import RECORDS_SCHEMA, REQUIRED_COLUMNS, SalesRecord
import logging

logger = logging.getLogger(__name__)

BAD_ROW_POLICIES = ("strict", "skip")

# How many offending rows to quote in a strict-mode error
_MAX_REPORTED_ROWS = 5


def is_url(source: str) -> bool:
    """Check whether the source points at an HTTP(S) location"""
    return source.lower().startswith(("http://", "https://"))


def read_raw_table(source: str) -> pl.DataFrame:
    """
    Read the sales table as untyped text columns

    Args:
        source: Local file path or http(s) URL of a CSV file

    Returns:
        pl.DataFrame: Raw table, every column as String
    """
    logger.info(f"Reading sales table from {source}")

    if is_url(source):
        session = new_session()
        try:
            content = io.BytesIO(get_text(session, source).encode("utf-8"))
        finally:
            session.close()
    else:
        if not os.path.exists(source):
            raise FileNotFoundError(f"Sales data file not found: {source}")
        content = source

    try:
        df = pl.read_csv(content, infer_schema=False)
    except pl.exceptions.PolarsError as e:
        raise ValueError(f"Could not parse CSV from {source}: {e}") from e

    logger.info(f"Read {df.height} raw rows with columns {df.columns}")
    return df


def normalize_columns(df: pl.DataFrame) -> pl.DataFrame:
    """
    Normalize required column names (case-insensitive, surrounding spaces
    ignored) and drop every other column.
    """
    cols = {c.strip().lower(): c for c in df.columns}
    missing = [r for r in REQUIRED_COLUMNS if r not in cols]
    if missing:
        raise ValueError(
            f"CSV is missing required columns: {missing}. Found: {list(df.columns)}"
        )
    return df.select([pl.col(cols[name]).alias(name) for name in REQUIRED_COLUMNS])


def parse_records(
    raw_df: pl.DataFrame, on_bad_rows: str = "strict"
) -> Tuple[pl.DataFrame, List[Tuple[int, str]]]:
    """
    Validate raw rows into typed records

    Args:
        raw_df: Table with the required columns, as produced by normalize_columns
        on_bad_rows: "strict" to fail on any malformed row, "skip" to drop them

    Returns:
        Tuple of the typed record frame (RECORDS_SCHEMA) and the list of
        (line number, reason) for every dropped row
    """
    if on_bad_rows not in BAD_ROW_POLICIES:
        raise ValueError(
            f"Unknown bad-row policy {on_bad_rows!r}, expected one of {BAD_ROW_POLICIES}"
        )

    records = []
    bad_rows = []
    # Line numbers are 1-based and count the header line
    for line_no, row in enumerate(raw_df.iter_rows(named=True), start=2):
        cleaned = {k: v.strip() if isinstance(v, str) else v for k, v in row.items()}
        try:
            records.append(SalesRecord(**cleaned))
        except ValidationError as e:
            error = e.errors()[0]
            field = ".".join(str(part) for part in error["loc"])
            bad_rows.append((line_no, f"{field}: {error['msg']}"))

    if bad_rows and on_bad_rows == "strict":
        quoted = ", ".join(
            f"line {line_no} ({reason})"
            for line_no, reason in bad_rows[:_MAX_REPORTED_ROWS]
        )
        raise ValueError(f"Found {len(bad_rows)} malformed rows: {quoted}")

    if bad_rows:
        logger.warning(
            f"Skipped {len(bad_rows)} malformed rows "
            f"(first at line {bad_rows[0][0]}: {bad_rows[0][1]})"
        )

    df = pl.DataFrame([r.model_dump() for r in records], schema=RECORDS_SCHEMA)
    return df, bad_rows


def load_sales_records(source: str, on_bad_rows: str = "strict") -> pl.DataFrame:
    """
    Load the full sales record set

    Args:
        source: Local file path or http(s) URL of a CSV file
        on_bad_rows: "strict" (fail the whole load) or "skip" (drop and warn)

    Returns:
        pl.DataFrame: Record set with RECORDS_SCHEMA, in input row order
    """
    logger.info(f"Loading sales records from {source} (bad rows: {on_bad_rows})")

    try:
        raw_df = normalize_columns(read_raw_table(source))
        records_df, _ = parse_records(raw_df, on_bad_rows)
    except Exception as e:
        logger.error(f"❌ Error loading sales records from {source}: {e}")
        raise

    logger.info(f"✅ Loaded {records_df.height} sales records")
    return records_df
