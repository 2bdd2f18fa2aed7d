"""
Story Pipeline - Scene Rendering Workflow

Loads the sales record set once, then on every render request:
1. Runs the active scene's transform over the full record set
2. Draws the derived dataset
3. Writes the figure and its dataset to the output directory (unless dry run)

Derived datasets are never cached; every render recomputes from the records.
"""

from datetime import datetime
from typing import Dict, List, Optional
import logging

import plotly.graph_objects as go
import polars as pl

# Extract layer imports
from ..extract.data_fetcher import load_sales_records

# Transform layer imports
from ..transformation.transformers import get_summary_stats
from ..transformation.validators import validate_records

# Load layer imports
from ..load.local_storage import get_latest_file, save_scene_outputs

from ..coreutils.env import Settings
from ..coreutils.logging import log_function_call
from .controller import SceneController
from .scenes import SCENES, get_scene

logger = logging.getLogger(__name__)


class StoryPipeline:
    """Orchestrates loading, per-scene transforms and rendering"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        dry_run: bool = False,
        records_df: Optional[pl.DataFrame] = None,
    ):
        """
        Initialize the story pipeline

        Args:
            settings: Runtime settings (read from the environment if not provided)
            dry_run: If true, render figures without writing any files
            records_df: Pre-loaded record set; skips reading the data source
        """
        self.settings = settings or Settings.from_env()
        self.dry_run = dry_run or self.settings.dry_run
        self.scenes = SCENES
        self._records_df = records_df
        self._validated = False
        self.last_outputs: Dict[int, Dict[str, str]] = {}

        # Every navigation event triggers a full re-render
        self.controller = SceneController(len(self.scenes), on_change=self.render)

        if self.dry_run:
            logger.info("🔍 DRY RUN MODE: No output files will be written")

    def load(self) -> pl.DataFrame:
        """
        Load and validate the record set, exactly once

        Returns:
            pl.DataFrame: The immutable record set
        """
        if self._records_df is not None and self._validated:
            return self._records_df

        try:
            if self._records_df is None:
                logger.info("🔄 Loading sales records...")
                self._records_df = load_sales_records(
                    self.settings.data_source, self.settings.bad_rows
                )

            validate_records(self._records_df)
            self._validated = True

            stats = get_summary_stats(self._records_df)
            logger.info(
                f"Sales Records Stats: {stats['total_records']} records, "
                f"{stats['unique_brands']} brands, years {stats['year_range']}"
            )
            return self._records_df

        except Exception as e:
            logger.error(f"❌ Loading sales records failed: {e}")
            raise

    def derive(self, index: int) -> pl.DataFrame:
        """
        Build the derived dataset of one scene from the full record set

        Args:
            index: Scene index

        Returns:
            pl.DataFrame: Derived dataset for the scene
        """
        scene = get_scene(index)
        derived_df = scene.transform(self.load())
        if scene.check is not None:
            scene.check(derived_df)
        return derived_df

    def render(self, index: Optional[int] = None) -> go.Figure:
        """
        Render one scene, by default the controller's current scene

        Args:
            index: Scene index

        Returns:
            go.Figure: The rendered scene
        """
        if index is None:
            index = self.controller.index
        log_function_call("render", index=index, dry_run=self.dry_run)

        scene = get_scene(index)
        logger.info(f"🎬 Rendering scene {index}: {scene.title}")

        try:
            records_df = self.load()
            derived_df = self.derive(index)
            fig = scene.draw(
                derived_df,
                scene.title_for(records_df),
                scene.annotation,
                width=self.settings.chart_width,
                height=self.settings.chart_height,
            )

            if not self.dry_run:
                self.last_outputs[index] = save_scene_outputs(
                    fig, derived_df, index, self.settings.output_dir
                )
            else:
                logger.info("🔍 DRY RUN: Skipping output files")

            logger.info(f"✅ Rendered scene {index} from {derived_df.height} derived rows")
            return fig

        except Exception as e:
            logger.error(f"❌ Rendering scene {index} failed: {e}")
            raise

    def render_all(self) -> List[go.Figure]:
        """Render every scene in story order"""
        logger.info(f"🚀 Rendering all {len(self.scenes)} scenes")
        return [self.render(scene.index) for scene in self.scenes]

    def get_pipeline_status(self) -> dict:
        """
        Get current pipeline status

        Returns:
            dict: Pipeline status information
        """
        return {
            "timestamp": datetime.now().isoformat(),
            "data_source": self.settings.data_source,
            "dry_run": self.dry_run,
            "current_scene": self.controller.index,
            "records_loaded": (
                self._records_df.height if self._records_df is not None else None
            ),
            "latest_output": (
                None
                if self.dry_run
                else get_latest_file("scene_*.html", self.settings.output_dir)
            ),
        }
