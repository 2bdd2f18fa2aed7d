"""
Scene Controller - Orchestration Layer

Owns the active scene index. Navigation events move the index and every
transition is reported through the on_change callback, which the pipeline
wires to a full re-render. A transition whose re-render raises is rolled
back, so the index always names a scene that was drawn.
"""

from typing import Callable, Optional
import logging

logger = logging.getLogger(__name__)


class SceneController:
    """Finite-state navigation over a fixed number of scenes"""

    def __init__(
        self,
        scene_count: int = 3,
        on_change: Optional[Callable[[int], object]] = None,
    ):
        """
        Initialize the controller at scene 0

        Args:
            scene_count: Number of scenes, at least 1
            on_change: Called with the new index after every transition
        """
        if scene_count < 1:
            raise ValueError(f"scene_count must be at least 1, got {scene_count}")

        self.scene_count = scene_count
        self.on_change = on_change
        self._index = 0

    @property
    def index(self) -> int:
        return self._index

    @property
    def last_index(self) -> int:
        return self.scene_count - 1

    def next(self) -> int:
        """Advance one scene, staying on the last one"""
        return self._transition(min(self._index + 1, self.last_index), "next")

    def prev(self) -> int:
        """Go back one scene, staying on the first one"""
        return self._transition(max(self._index - 1, 0), "prev")

    def select(self, index: int) -> int:
        """
        Jump directly to a scene

        Raises:
            ValueError: If index is not an integer in 0..last_index
        """
        if isinstance(index, bool) or not isinstance(index, int):
            raise ValueError(f"Scene index must be an integer, got {index!r}")
        if not 0 <= index <= self.last_index:
            raise ValueError(
                f"Scene index {index} out of range 0..{self.last_index}"
            )
        return self._transition(index, "select")

    def _transition(self, index: int, event: str) -> int:
        logger.info(f"🔀 {event}: scene {self._index} -> {index}")
        previous = self._index
        self._index = index
        if self.on_change is not None:
            try:
                self.on_change(index)
            except Exception:
                # The scene was never drawn, stay where we were
                self._index = previous
                logger.error(f"❌ {event} to scene {index} failed, staying on {previous}")
                raise
        return index
