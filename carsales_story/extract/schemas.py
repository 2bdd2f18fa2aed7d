"""
Extract Layer Schemas

Raw record schemas for the vehicle sales table.
These represent the structure of one input row, both as a polars schema
for the whole record set and as a pydantic model for row validation.
"""

import math

import polars as pl
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Bounds of the Int64 year column
YEAR_MIN = -(2**63)
YEAR_MAX = 2**63 - 1

# Fixed category order, used wherever a stable origin order matters
ORIGINS = ("Asian", "Western")

REQUIRED_COLUMNS = ["year", "brand", "brand_origin", "sales"]

RECORDS_SCHEMA = pl.Schema(
    [
        ("year", pl.Int64()),
        ("brand", pl.String()),
        ("brand_origin", pl.String()),
        ("sales", pl.Float64()),
    ]
)


class SalesRecord(BaseModel):
    """One vehicle sales row: a brand's sales in a given year"""

    model_config = ConfigDict(frozen=True)

    year: int = Field(
        ..., ge=YEAR_MIN, le=YEAR_MAX, description="Calendar year of the sales figure"
    )
    brand: str = Field(..., description="Brand identifier (e.g. 'Toyota')")
    brand_origin: str = Field(
        ..., description="Region-of-origin category, 'Asian' or 'Western'"
    )
    sales: float = Field(..., description="Units sold, non-negative")

    @field_validator("brand")
    @classmethod
    def validate_brand(cls, v):
        """Brand must be a non-empty identifier"""
        v = v.strip()
        if not v:
            raise ValueError("Brand must not be empty")
        return v

    @field_validator("brand_origin")
    @classmethod
    def validate_brand_origin(cls, v):
        """Origin must be one of the known categories"""
        v = v.strip()
        if v not in ORIGINS:
            raise ValueError(f"brand_origin must be one of {ORIGINS}, got {v!r}")
        return v

    @field_validator("sales")
    @classmethod
    def validate_sales(cls, v):
        """Sales must be a finite, non-negative number"""
        if not math.isfinite(v):
            raise ValueError("Sales must be a finite number")
        if v < 0:
            raise ValueError("Sales must be non-negative")
        return v
