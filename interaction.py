# Pointer interaction

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional

import pymunk
from pymunk import Vec2d

from graph_model import Graph, Node
from physics import pick_node
from positions import PositionStore, clamp_to_bounds

logger = logging.getLogger(__name__)


class DragState(enum.Enum):
    FREE = "free"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class Gesture:
    kind: str  # 'click' or 'drag'
    node_id: str


class InteractionController:
    """Turns pointer events into position overrides on the store.

    Pressing a node pins it; moving writes its position directly and zeroes its
    velocity; releasing unpins it. A press and release with no movement in
    between is a click and activates the node.
    """

    def __init__(self, graph: Graph, store: PositionStore, bounds: pymunk.BB,
                 on_activate: Optional[Callable[[Node], None]] = None,
                 click_slop: float = 0.0) -> None:
        self.graph = graph
        self.store = store
        self.bounds = bounds
        self.on_activate = on_activate
        self.click_slop = max(0.0, float(click_slop))
        self.dragged: Optional[str] = None
        self.offset = Vec2d(0.0, 0.0)
        self.moved = False
        self._press = Vec2d(0.0, 0.0)

    def state_of(self, node_id: str) -> DragState:
        return DragState.DRAGGING if node_id == self.dragged else DragState.FREE

    @property
    def is_dragging(self) -> bool:
        return self.dragged is not None

    def hover(self, x: float, y: float) -> Optional[str]:
        return pick_node(self.graph, self.store.snapshot(), (x, y))

    # ----- Pointer events -----
    def pointer_down(self, x: float, y: float) -> Optional[str]:
        if self.dragged is not None:
            # Press without a release in between; drop the stale drag first
            self._release()
        node_id = self.hover(x, y)
        if node_id is None:
            return None
        state = self.store.get(node_id)
        pointer = Vec2d(float(x), float(y))
        self.dragged = node_id
        self.offset = state.position - pointer
        self._press = pointer
        self.moved = False
        self.store.set(node_id, pinned=True, vx=0.0, vy=0.0)
        logger.debug("Drag start on %s", node_id)
        return node_id

    def pointer_move(self, x: float, y: float) -> None:
        if self.dragged is None:
            return
        pointer = Vec2d(float(x), float(y))
        if not self.moved and (pointer - self._press).length > self.click_slop:
            self.moved = True
        radius = self.graph.nodes[self.dragged].radius
        p = clamp_to_bounds(pointer + self.offset, radius, self.bounds)
        self.store.set(self.dragged, x=p.x, y=p.y, vx=0.0, vy=0.0)

    def pointer_up(self, x: Optional[float] = None, y: Optional[float] = None) -> Optional[Gesture]:
        if self.dragged is None:
            return None
        if x is not None and y is not None:
            self.pointer_move(x, y)
        node_id, moved = self.dragged, self.moved
        self._release()
        if moved:
            return Gesture("drag", node_id)
        node = self.graph.nodes[node_id]
        if self.on_activate is not None:
            self.on_activate(node)
        return Gesture("click", node_id)

    def pointer_leave(self) -> None:
        if self.dragged is None:
            return
        self._release()

    def _release(self) -> None:
        node_id = self.dragged
        self.dragged = None
        self.moved = False
        if node_id is not None and node_id in self.store:
            self.store.set(node_id, pinned=False, vx=0.0, vy=0.0)
            logger.debug("Drag end on %s", node_id)
