# Position store

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterator, List, Mapping, Optional

import pymunk
from pymunk import Vec2d

from graph_model import Graph

logger = logging.getLogger(__name__)


# ---------- Kinematic model ----------
@dataclass(frozen=True)
class KinematicState:
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    pinned: bool = False

    @property
    def position(self) -> Vec2d:
        return Vec2d(self.x, self.y)

    @property
    def velocity(self) -> Vec2d:
        return Vec2d(self.vx, self.vy)


def clamp_to_bounds(p: Vec2d, radius: float, bounds: pymunk.BB) -> Vec2d:
    """Clamp a center point so a disc of `radius` stays inside `bounds`.

    A disc wider than the bounds is centered on that axis.
    """
    left, right = bounds.left + radius, bounds.right - radius
    bottom, top = bounds.bottom + radius, bounds.top - radius
    cx, cy = bounds.center()
    x = cx if left > right else min(max(p.x, left), right)
    y = cy if bottom > top else min(max(p.y, bottom), top)
    return Vec2d(x, y)


# ---------- Seeding ----------
def seed_layout(graph: Graph, bounds: pymunk.BB, seed_radius: float) -> Dict[str, KinematicState]:
    """Root at the center, each node's children on a circle around it.

    The circle radius is `seed_radius` around the root and halves at every
    deeper level. Extra top-level roots share the root's circle.
    """
    center = Vec2d(*bounds.center())
    placed: Dict[str, Vec2d] = {}
    if graph.root_id is None:
        return {}

    top_level = [nid for nid in graph.nodes if not graph.parents(nid)]
    ring = [c for c in graph.children(graph.root_id)] + [r for r in top_level if r != graph.root_id]
    placed[graph.root_id] = center
    queue: List[tuple[str, List[str], float]] = [(graph.root_id, ring, float(seed_radius))]
    while queue:
        parent_id, kids, radius = queue.pop(0)
        kids = [k for k in kids if k not in placed]
        count = len(kids)
        origin = placed[parent_id]
        for i, kid in enumerate(kids):
            angle = 2 * math.pi * i / count
            placed[kid] = origin + Vec2d(radius * math.cos(angle), radius * math.sin(angle))
            queue.append((kid, list(graph.children(kid)), radius * 0.5))

    # Anything unreachable from the root (cycles in the input) starts at the center
    states: Dict[str, KinematicState] = {}
    for nid, node in graph.nodes.items():
        p = clamp_to_bounds(placed.get(nid, center), node.radius, bounds)
        states[nid] = KinematicState(p.x, p.y)
    return states


# ---------- Store ----------
class PositionStore:
    """Owns the kinematic state of every node of one graph."""

    def __init__(self, graph: Graph, states: Mapping[str, KinematicState]) -> None:
        missing = set(graph.nodes) - set(states)
        if missing:
            raise KeyError(f"no kinematic state for nodes: {sorted(missing)}")
        self.graph = graph
        self._states: Dict[str, KinematicState] = {nid: states[nid] for nid in graph.nodes}

    @classmethod
    def seeded(cls, graph: Graph, config) -> "PositionStore":
        return cls(graph, seed_layout(graph, config.bounds, config.seed_radius))

    def get(self, node_id: str) -> KinematicState:
        return self._states[node_id]

    def set(self, node_id: str, **partial) -> KinematicState:
        state = replace(self._states[node_id], **partial)
        self._states[node_id] = state
        return state

    def for_each(self, fn: Callable[[str, KinematicState], None]) -> None:
        for nid, state in list(self._states.items()):
            fn(nid, state)

    def snapshot(self) -> Dict[str, KinematicState]:
        return dict(self._states)

    def replace(self, states: Mapping[str, KinematicState]) -> None:
        if set(states) != set(self._states):
            raise KeyError("replacement states must cover exactly the graph's nodes")
        for nid in self._states:
            self._states[nid] = states[nid]

    def ids(self) -> List[str]:
        return list(self._states)

    def find_pinned(self) -> Optional[str]:
        for nid, state in self._states.items():
            if state.pinned:
                return nid
        return None

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._states

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._states))
