"""
Navigator - Orchestration Layer

Interactive terminal loop turning typed commands into navigation events.
Each event goes through the pipeline's SceneController, which re-renders
the current scene.
"""

from typing import Callable
import logging

from .pipeline import StoryPipeline

logger = logging.getLogger(__name__)

HELP_TEXT = "Commands: n/next, p/prev, 0-2 select a scene, s/status, h/help, q/quit"


class StoryNavigator:
    """Event loop for next / previous / select navigation"""

    def __init__(
        self,
        pipeline: StoryPipeline,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        self.pipeline = pipeline
        self.input_fn = input_fn
        self.output_fn = output_fn
        self.running = False

    def handle(self, command: str) -> bool:
        """
        Apply one command

        Args:
            command: Raw command text

        Returns:
            bool: False when the loop should stop
        """
        controller = self.pipeline.controller
        command = command.strip().lower()

        if command in ("q", "quit", "exit"):
            return False
        if command in ("n", "next"):
            controller.next()
        elif command in ("p", "prev", "previous"):
            controller.prev()
        elif command.isdigit():
            try:
                controller.select(int(command))
            except ValueError as e:
                logger.warning(f"⚠️ {e}")
                self.output_fn(str(e))
                return True
        elif command in ("s", "status"):
            self.output_fn(str(self.pipeline.get_pipeline_status()))
            return True
        elif command in ("h", "help", ""):
            self.output_fn(HELP_TEXT)
            return True
        else:
            logger.warning(f"⚠️ Unknown command: {command!r}")
            self.output_fn(f"Unknown command {command!r}. {HELP_TEXT}")
            return True

        self._announce()
        return True

    def _announce(self) -> None:
        index = self.pipeline.controller.index
        scene = self.pipeline.scenes[index]
        self.output_fn(f"Scene {index}: {scene.title_for(self.pipeline.load())}")

    def start(self) -> None:
        """Render the first scene, then process commands until quit or EOF"""
        logger.info("📖 Starting story navigator")
        self.running = True

        self.pipeline.render()
        self._announce()
        self.output_fn(HELP_TEXT)

        while self.running:
            try:
                command = self.input_fn("> ")
            except EOFError:
                break
            if not self.handle(command):
                break

        self.stop()

    def stop(self) -> None:
        """Stop the loop"""
        self.running = False
        logger.info("🛑 Story navigator stopped")
