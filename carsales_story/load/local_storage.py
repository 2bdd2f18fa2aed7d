"""
Local Storage - Load Layer

Pure functions for local file storage operations.
Handles rendered figures (HTML) and derived datasets (JSON).
"""

import glob
import json
import os
from typing import Optional

import plotly.graph_objects as go
import polars as pl
import logging

logger = logging.getLogger(__name__)


def _ensure_parent_dir(filepath: str) -> None:
    parent = os.path.dirname(filepath)
    if parent:
        os.makedirs(parent, exist_ok=True)


def save_figure_html(fig: go.Figure, filepath: str) -> str:
    """
    Save a figure as a standalone HTML page

    Args:
        fig: Figure to save
        filepath: Path to save file

    Returns:
        str: Path to saved file
    """
    logger.info(f"Saving figure to HTML: {filepath}")

    _ensure_parent_dir(filepath)
    fig.write_html(filepath, include_plotlyjs="cdn", full_html=True)

    logger.info(f"Saved figure with {len(fig.data)} traces to {filepath}")
    return filepath


def save_json(df: pl.DataFrame, filepath: str) -> str:
    """
    Save DataFrame to JSON file

    Args:
        df: DataFrame to save
        filepath: Path to save file

    Returns:
        str: Path to saved file
    """
    logger.info(f"Saving DataFrame to JSON: {filepath}")

    _ensure_parent_dir(filepath)

    # Convert to JSON
    data = df.to_dicts()

    with open(filepath, "w") as f:
        json.dump(data, f, indent=2, default=str)

    logger.info(f"Saved {len(data)} records to {filepath}")
    return filepath


def load_json(filepath: str) -> pl.DataFrame:
    """
    Load DataFrame from JSON file

    Args:
        filepath: Path to JSON file

    Returns:
        pl.DataFrame: Loaded DataFrame
    """
    logger.info(f"Loading DataFrame from JSON: {filepath}")

    if not os.path.exists(filepath):
        raise FileNotFoundError(f"JSON file not found: {filepath}")

    with open(filepath, "r") as f:
        data = json.load(f)

    df = pl.DataFrame(data, strict=False, infer_schema_length=10000)

    logger.info(f"Loaded {df.height} records from {filepath}")
    return df


def save_scene_outputs(
    fig: go.Figure, derived_df: pl.DataFrame, index: int, output_dir: str = "output"
) -> dict:
    """
    Save a rendered scene and the dataset it was drawn from

    Args:
        fig: Rendered scene figure
        derived_df: Derived dataset behind the figure
        index: Scene index
        output_dir: Output directory

    Returns:
        Dict: Paths to saved files
    """
    html_path = os.path.join(output_dir, f"scene_{index}.html")
    json_path = os.path.join(output_dir, f"scene_{index}.json")

    return {
        "html": save_figure_html(fig, html_path),
        "json": save_json(derived_df, json_path),
    }


def get_latest_file(pattern: str, directory: str = "output") -> Optional[str]:
    """
    Get the latest file matching a pattern

    Args:
        pattern: File pattern to match
        directory: Directory to search

    Returns:
        Optional[str]: Path to latest file or None
    """
    search_pattern = os.path.join(directory, pattern)
    files = glob.glob(search_pattern)

    if not files:
        return None

    # Return the most recently modified file
    return max(files, key=os.path.getmtime)
