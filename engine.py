# Per-view graph engine

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from graph_model import Edge, Graph, Node, build_graph, find_subtree
from highlight import EMPTY, HighlightSet, highlight
from interaction import Gesture, InteractionController
from positions import KinematicState, PositionStore
from scheduler import Scheduler
from view_config import ViewConfig

logger = logging.getLogger(__name__)


# ---------- Frame records ----------
@dataclass(frozen=True)
class NodeFrame:
    node: Node
    state: KinematicState
    is_highlighted: bool
    is_focal: bool
    is_dimmed: bool
    is_dragged: bool


@dataclass(frozen=True)
class EdgeFrame:
    index: int
    edge: Edge
    source: KinematicState
    target: KinematicState
    is_highlighted: bool
    is_dimmed: bool


@dataclass(frozen=True)
class Frame:
    nodes: List[NodeFrame]
    edges: List[EdgeFrame]
    focal_id: Optional[str]


# ---------- View ----------
class GraphView:
    """One independent graph display: graph, positions, stepper loop, pointer.

    Two views never share state; the compact panel and the expanded window
    each own one.
    """

    def __init__(self, tree: Any, config: ViewConfig, scope: Optional[str] = None,
                 on_activate: Optional[Callable[[Node], None]] = None) -> None:
        self.config = config
        self.scope = scope
        source = tree
        if scope is not None:
            sub = find_subtree(tree, scope)
            if sub is None:
                logger.debug("Scope %r not found, showing whole tree in %s view", scope, config.name)
            else:
                source = sub
        self.graph: Graph = build_graph(source, config.radii)
        self.store = PositionStore.seeded(self.graph, config)
        self.scheduler = Scheduler(self.graph, self.store, config)
        self.controller = InteractionController(
            self.graph, self.store, config.bounds,
            on_activate=on_activate, click_slop=config.click_slop,
        )
        self.hovered: Optional[str] = None
        self.selected: Optional[str] = None
        self._highlight: HighlightSet = EMPTY
        self._highlight_for: Optional[str] = None

    # ----- Lifecycle -----
    def mount(self) -> "GraphView":
        self.scheduler.start()
        for _ in range(max(0, int(self.config.warmup_ticks))):
            self.scheduler.tick()
        logger.debug("Mounted %s view with %d nodes, %d edges",
                     self.config.name, len(self.graph), len(self.graph.edges))
        return self

    def unmount(self) -> None:
        self.controller.pointer_leave()
        self.scheduler.cancel()

    @property
    def mounted(self) -> bool:
        return self.scheduler.running

    def __enter__(self) -> "GraphView":
        return self.mount()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unmount()

    def tick(self) -> bool:
        return self.scheduler.tick()

    # ----- Focus -----
    @property
    def focal_id(self) -> Optional[str]:
        return self.hovered if self.hovered is not None else self.selected

    def _refresh_highlight(self) -> None:
        focal = self.focal_id
        if focal != self._highlight_for:
            self._highlight = highlight(self.graph, focal)
            self._highlight_for = focal

    @property
    def highlight(self) -> HighlightSet:
        return self._highlight

    def set_hovered(self, node_id: Optional[str]) -> None:
        self.hovered = node_id if node_id in self.graph else None
        self._refresh_highlight()

    def select(self, node_id: Optional[str]) -> None:
        self.selected = node_id if node_id in self.graph else None
        self._refresh_highlight()

    # ----- Pointer -----
    def hover(self, x: float, y: float) -> Optional[str]:
        if self.controller.is_dragging:
            node_id = self.controller.dragged
        else:
            node_id = self.controller.hover(x, y)
        self.set_hovered(node_id)
        return node_id

    def pointer_down(self, x: float, y: float) -> Optional[str]:
        return self.controller.pointer_down(x, y)

    def pointer_move(self, x: float, y: float) -> None:
        self.controller.pointer_move(x, y)
        self.hover(x, y)

    def pointer_up(self, x: Optional[float] = None, y: Optional[float] = None) -> Optional[Gesture]:
        gesture = self.controller.pointer_up(x, y)
        if gesture is not None and gesture.kind == "click":
            self.select(gesture.node_id)
        return gesture

    def pointer_leave(self) -> None:
        self.controller.pointer_leave()
        self.set_hovered(None)

    # ----- Output -----
    def frame(self) -> Frame:
        hl = self._highlight
        focal = self.focal_id
        dim = focal is not None and bool(hl)
        states = self.store.snapshot()
        nodes = []
        for nid, node in self.graph.nodes.items():
            lit = hl.has_node(nid)
            nodes.append(NodeFrame(
                node=node,
                state=states[nid],
                is_highlighted=lit,
                is_focal=nid == focal,
                is_dimmed=dim and not lit,
                is_dragged=nid == self.controller.dragged,
            ))
        edges = []
        for i, e in enumerate(self.graph.edges):
            lit = hl.has_edge(i)
            edges.append(EdgeFrame(i, e, states[e.source], states[e.target], lit, dim and not lit))
        return Frame(nodes, edges, focal)

    def related_topics(self, node_id: Optional[str] = None) -> List[Node]:
        """Children of the given node (default: focal node, else the root)."""
        nid = node_id or self.focal_id or self.graph.root_id
        if nid is None or nid not in self.graph:
            return []
        return [self.graph.nodes[c] for c in self.graph.children(nid) if c != nid]
