# Highlight propagation

from collections import deque
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Set

from graph_model import Graph


@dataclass(frozen=True)
class HighlightSet:
    node_ids: FrozenSet[str] = frozenset()
    edge_indices: FrozenSet[int] = frozenset()

    def __bool__(self) -> bool:
        return bool(self.node_ids)

    def has_node(self, node_id: str) -> bool:
        return node_id in self.node_ids

    def has_edge(self, index: int) -> bool:
        return index in self.edge_indices


EMPTY = HighlightSet()


def _reach(start: str, adjacency: Dict[str, List[str]], seen: Set[str]) -> None:
    # Mark before expanding so cycles terminate
    queue = deque([start])
    while queue:
        cur = queue.popleft()
        for nxt in adjacency.get(cur, ()):
            if nxt not in seen:
                seen.add(nxt)
                queue.append(nxt)


def _adjacency(pairs: Iterable[tuple]) -> Dict[str, List[str]]:
    adj: Dict[str, List[str]] = {}
    for a, b in pairs:
        adj.setdefault(a, []).append(b)
    return adj


def highlight(graph: Graph, focal_id: Optional[str]) -> HighlightSet:
    """Nodes and edges to emphasize for a focal node.

    The root emphasizes everything; any other node emphasizes itself, its
    descendants and its ancestors, plus every edge between emphasized nodes.
    """
    if focal_id is None or focal_id not in graph.nodes:
        return EMPTY
    if focal_id == graph.root_id:
        return HighlightSet(frozenset(graph.nodes), frozenset(range(len(graph.edges))))

    forward = _adjacency((e.source, e.target) for e in graph.edges)
    reverse = _adjacency((e.target, e.source) for e in graph.edges)
    descendants: Set[str] = {focal_id}
    _reach(focal_id, forward, descendants)
    ancestors: Set[str] = {focal_id}
    _reach(focal_id, reverse, ancestors)
    nodes = descendants | ancestors
    edges = frozenset(i for i, e in enumerate(graph.edges) if e.source in nodes and e.target in nodes)
    return HighlightSet(frozenset(nodes), edges)
