# Simulation scheduler

import logging
from typing import Callable, Optional

from graph_model import Graph
from physics import step
from positions import PositionStore

logger = logging.getLogger(__name__)


class Scheduler:
    """Runs the layout stepper once per display frame for one view.

    Single threaded: the owner calls `tick()` from its frame loop, after
    pointer events for that frame have been applied. `cancel()` stops it
    immediately and may be called any number of times.
    """

    def __init__(self, graph: Graph, store: PositionStore, config, name: str = "") -> None:
        self.graph = graph
        self.store = store
        self.config = config
        self.name = name or getattr(config, "name", "view")
        self.frames = 0
        self._running = False
        self._cancelled = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> "Scheduler":
        if self._cancelled:
            raise RuntimeError(f"scheduler {self.name!r} was cancelled and cannot restart")
        if not self._running:
            self._running = True
            logger.debug("Scheduler %s started (%d nodes)", self.name, len(self.graph))
        return self

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._running = False
        self._cancelled = True
        logger.debug("Scheduler %s cancelled after %d frames", self.name, self.frames)

    def tick(self) -> bool:
        if not self._running:
            return False
        self.store.replace(step(self.graph, self.store.snapshot(), self.config))
        self.frames += 1
        return True

    def run(self, present: Callable[[], None],
            should_continue: Optional[Callable[[], bool]] = None,
            max_frames: Optional[int] = None) -> int:
        """Alternate tick and present until cancelled, told to stop, or out of frames.

        `present` is expected to block until the next display refresh. The
        scheduler is always cancelled on return, including on errors.
        """
        self.start()
        count = 0
        try:
            while self._running:
                if should_continue is not None and not should_continue():
                    break
                if max_frames is not None and count >= max_frames:
                    break
                self.tick()
                present()
                count += 1
        finally:
            self.cancel()
        return count

    def __enter__(self) -> "Scheduler":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()
