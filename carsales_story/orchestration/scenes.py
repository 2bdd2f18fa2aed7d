"""
Scene Definitions

The three fixed views of the story, in navigation order. A scene pairs the
transform that builds its derived dataset with the figure builder that
draws it.
"""

from dataclasses import dataclass
from typing import Callable, Optional

import plotly.graph_objects as go
import polars as pl

from ..render.figures import (
    bar_chart_by_origin,
    line_chart_by_origin,
    stacked_area_by_origin,
)
from ..transformation.transformers import (
    DEFAULT_TOP_N,
    stack_shares,
    top_brands_latest_year,
    yearly_share_by_origin,
    yearly_totals_by_origin,
)
from ..transformation.validators import validate_share_totals


@dataclass(frozen=True)
class Scene:
    """One view of the story"""

    index: int
    title: str
    annotation: str
    transform: Callable[[pl.DataFrame], pl.DataFrame]
    draw: Callable[..., go.Figure]
    check: Optional[Callable[[pl.DataFrame], bool]] = None

    def title_for(self, records_df: pl.DataFrame) -> str:
        """Title with {latest_year} filled in from the record set"""
        latest_year = records_df["year"].max() if records_df.height else None
        return self.title.format(
            latest_year=latest_year if latest_year is not None else "N/A"
        )


def _draw_stacked_shares(shares_df: pl.DataFrame, *args, **kwargs) -> go.Figure:
    return stacked_area_by_origin(stack_shares(shares_df), *args, **kwargs)


SCENES = (
    Scene(
        index=0,
        title="Total Sales by Year: Asian vs Western",
        annotation="Western brands overtook Asian brands around 2016",
        transform=yearly_totals_by_origin,
        draw=line_chart_by_origin,
    ),
    Scene(
        index=1,
        title="Market Share by Region Over Time",
        annotation="Asian brands dominated early years, Western rising since 2010",
        transform=yearly_share_by_origin,
        draw=_draw_stacked_shares,
        check=validate_share_totals,
    ),
    Scene(
        index=2,
        title=f"Top {DEFAULT_TOP_N} Brands by Sales in {{latest_year}}",
        annotation="Asian brands lead in top 10, with Toyota and Hyundai dominating",
        transform=top_brands_latest_year,
        draw=bar_chart_by_origin,
    ),
)


def get_scene(index: int) -> Scene:
    """Look up a scene by index"""
    if isinstance(index, bool) or not isinstance(index, int):
        raise ValueError(f"Scene index must be an integer, got {index!r}")
    if not 0 <= index < len(SCENES):
        raise ValueError(f"Unknown scene {index}, expected 0..{len(SCENES) - 1}")
    return SCENES[index]
