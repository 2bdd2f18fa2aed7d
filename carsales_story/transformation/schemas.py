"""
Transformation Layer Schemas

Schemas for the derived (per-scene) datasets.
Derived datasets are rebuilt on every render and never persisted as state.
"""

import polars as pl

from ..extract.schemas import ORIGINS

# Scene 0: one row per (year, origin) present in the input
YEARLY_TOTALS_SCHEMA = pl.Schema(
    [
        ("year", pl.Int64()),
        ("origin", pl.String()),
        ("sales", pl.Float64()),
    ]
)

# Scene 1: one row per year, one share column per origin
YEARLY_SHARE_SCHEMA = pl.Schema(
    [("year", pl.Int64())] + [(origin, pl.Float64()) for origin in ORIGINS]
)

# Scene 1, stacked: cumulative bounds per origin in fixed key order
STACKED_SHARE_SCHEMA = pl.Schema(
    [
        ("year", pl.Int64()),
        ("origin", pl.String()),
        ("lower", pl.Float64()),
        ("upper", pl.Float64()),
    ]
)

# Scene 2: ranked brands of the latest year
TOP_BRANDS_SCHEMA = pl.Schema(
    [
        ("brand", pl.String()),
        ("sales", pl.Float64()),
        ("origin", pl.String()),
        ("year", pl.Int64()),
    ]
)
