"""
Figure Builders - Render Layer

Plotly figures for the three scenes. Each builder consumes a derived dataset
only and knows nothing about the raw records or how they were aggregated.
"""

import plotly.graph_objects as go
import polars as pl

from ..extract.schemas import ORIGINS

# Color scale shared by every scene, in ORIGINS order
ORIGIN_COLORS = {"Asian": "#e41a1c", "Western": "#377eb8"}

MARGIN = {"t": 80, "r": 80, "b": 80, "l": 80}

DEFAULT_WIDTH = 960
DEFAULT_HEIGHT = 600


def _base_figure(title: str, annotation: str, width: int, height: int) -> go.Figure:
    """Empty figure with the story layout: title, callout box and legend"""
    fig = go.Figure()
    fig.update_layout(
        title=dict(text=title, x=0.5, xanchor="center", y=0.97, font=dict(size=20)),
        width=width,
        height=height,
        margin=dict(MARGIN),
        plot_bgcolor="white",
        paper_bgcolor="white",
        showlegend=True,
        legend=dict(
            x=1.01,
            y=1.0,
            xanchor="left",
            yanchor="top",
            traceorder="normal",
            font=dict(size=12),
        ),
    )
    if annotation:
        fig.add_annotation(
            text=f"<b>{annotation}</b>",
            xref="paper",
            yref="paper",
            x=0.5,
            y=1.06,
            showarrow=False,
            font=dict(size=14),
            bgcolor="rgba(255, 255, 255, 0.8)",
        )
    return fig


def _no_data(fig: go.Figure) -> go.Figure:
    fig.update_layout(xaxis={"visible": False}, yaxis={"visible": False})
    fig.add_annotation(
        text="No data", xref="paper", yref="paper", x=0.5, y=0.5, showarrow=False
    )
    return fig


def line_chart_by_origin(
    totals_df: pl.DataFrame,
    title: str,
    annotation: str = "",
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> go.Figure:
    """
    One line of total sales per origin over the years.

    Expects a frame with columns year, origin, sales. The y axis starts just
    below the smallest total so the crossing of the two lines stays visible.
    """
    fig = _base_figure(title, annotation, width, height)
    if totals_df.height == 0:
        return _no_data(fig)

    for origin in ORIGINS:
        series = totals_df.filter(pl.col("origin") == origin).sort("year")
        fig.add_trace(
            go.Scatter(
                x=series["year"].to_list(),
                y=series["sales"].to_list(),
                mode="lines",
                name=origin,
                line=dict(color=ORIGIN_COLORS[origin], width=2.5),
            )
        )

    fig.update_xaxes(
        range=[totals_df["year"].min(), totals_df["year"].max()],
        tickformat="d",
        showline=True,
        linecolor="black",
    )
    fig.update_yaxes(
        range=[totals_df["sales"].min() * 0.95, totals_df["sales"].max()],
        showline=True,
        linecolor="black",
    )
    return fig


def stacked_area_by_origin(
    stacked_df: pl.DataFrame,
    title: str,
    annotation: str = "",
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> go.Figure:
    """
    Stacked share areas, one band per origin.

    Expects a frame with columns year, origin, lower, upper. Each band is
    drawn as a closed polygon running along the upper bound and back along
    the lower bound.
    """
    fig = _base_figure(title, annotation, width, height)
    if stacked_df.height == 0:
        return _no_data(fig)

    for origin in ORIGINS:
        band = stacked_df.filter(pl.col("origin") == origin).sort("year")
        years = band["year"].to_list()
        fig.add_trace(
            go.Scatter(
                x=years + years[::-1],
                y=band["upper"].to_list() + band["lower"].to_list()[::-1],
                mode="lines",
                name=origin,
                fill="toself",
                fillcolor=ORIGIN_COLORS[origin],
                line=dict(color=ORIGIN_COLORS[origin], width=0),
                hoveron="fills",
            )
        )

    fig.update_xaxes(
        range=[stacked_df["year"].min(), stacked_df["year"].max()],
        tickformat="d",
        showline=True,
        linecolor="black",
    )
    fig.update_yaxes(range=[0, 1], tickformat=".0%", showline=True, linecolor="black")
    return fig


def bar_chart_by_origin(
    ranked_df: pl.DataFrame,
    title: str,
    annotation: str = "",
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
) -> go.Figure:
    """
    Ranked bars, one per brand, colored by origin.

    Expects a frame with columns brand, sales, origin in ranking order.
    """
    fig = _base_figure(title, annotation, width, height)
    if ranked_df.height == 0:
        return _no_data(fig)

    # One trace per origin keeps the legend keyed by origin
    for origin in ORIGINS:
        bars = ranked_df.filter(pl.col("origin") == origin)
        fig.add_trace(
            go.Bar(
                x=bars["brand"].to_list(),
                y=bars["sales"].to_list(),
                name=origin,
                marker_color=ORIGIN_COLORS[origin],
            )
        )

    fig.update_layout(barmode="overlay", bargap=0.1)
    fig.update_xaxes(
        categoryorder="array",
        categoryarray=ranked_df["brand"].to_list(),
        tickangle=-40,
        showline=True,
        linecolor="black",
    )
    fig.update_yaxes(
        range=[0, ranked_df["sales"].max()],
        tickformat=",.0f",
        showline=True,
        linecolor="black",
    )
    return fig
