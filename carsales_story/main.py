"""
Main Entry Point - Scrollytelling Story

Provides simple interfaces to render one scene, export the whole story or
browse it interactively.
"""

import argparse
import logging

from .coreutils.env import Settings
from .coreutils.logging import setup_logging
from .orchestration.navigator import StoryNavigator
from .orchestration.pipeline import StoryPipeline
from .orchestration.scenes import SCENES

logger = logging.getLogger(__name__)


def build_settings(args: argparse.Namespace) -> Settings:
    """Environment settings, overridden by command-line flags"""
    settings = Settings.from_env()
    if args.source:
        settings.data_source = args.source
    if args.output_dir:
        settings.output_dir = args.output_dir
    if args.bad_rows:
        settings.bad_rows = args.bad_rows
    settings.dry_run = args.dry_run
    return settings


def run_story(command: str, settings: Settings, scene: int = 0) -> dict:
    """
    Run one story command

    Args:
        command: "render", "export" or "story"
        settings: Runtime settings
        scene: Scene index for "render"

    Returns:
        dict: Pipeline status after the command
    """
    logger.info(f"🚀 Running {command} (dry_run={settings.dry_run})")

    pipeline = StoryPipeline(settings=settings)

    if command == "render":
        pipeline.controller.select(scene)
    elif command == "export":
        pipeline.render_all()
    elif command == "story":
        StoryNavigator(pipeline).start()
    else:
        raise ValueError(f"Unknown command: {command}")

    return pipeline.get_pipeline_status()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Asian vs Western car sales story")
    parser.add_argument(
        "command",
        choices=["render", "export", "story"],
        help="Render one scene, export all scenes, or browse interactively",
    )
    parser.add_argument(
        "--scene",
        type=int,
        choices=[scene.index for scene in SCENES],
        default=0,
        help="Scene to render (render command only)",
    )
    parser.add_argument("--source", help="CSV path or http(s) URL of the sales data")
    parser.add_argument("--output-dir", help="Directory for rendered scenes")
    parser.add_argument(
        "--bad-rows",
        choices=["strict", "skip"],
        help="Fail on malformed rows (strict) or drop them with a warning (skip)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Render without writing output files",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point"""
    args = parse_args(argv)

    try:
        settings = build_settings(args)
        setup_logging(
            logging.DEBUG if args.verbose else logging.INFO, log_dir=settings.log_dir
        )
        status = run_story(args.command, settings, args.scene)
    except Exception as e:
        logger.error(f"❌ Story failed: {e}")
        return 1

    logger.info(f"✅ Story completed: {status}")
    return 0


if __name__ == "__main__":
    exit(main())
