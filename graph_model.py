# Graph model

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from view_config import DEFAULT_RADII, radius_for_level

logger = logging.getLogger(__name__)


# ---------- Node / edge model ----------
@dataclass(frozen=True)
class Node:
    id: str
    label: str
    level: int
    radius: float
    url: Optional[str] = None


@dataclass(frozen=True)
class Edge:
    source: str
    target: str


@dataclass(frozen=True)
class Graph:
    nodes: Dict[str, Node]
    edges: Tuple[Edge, ...] = ()
    root_id: Optional[str] = None
    _children: Dict[str, Tuple[str, ...]] = field(init=False, repr=False, compare=False)
    _parents: Dict[str, Tuple[str, ...]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        children: Dict[str, List[str]] = {}
        parents: Dict[str, List[str]] = {}
        for e in self.edges:
            children.setdefault(e.source, []).append(e.target)
            parents.setdefault(e.target, []).append(e.source)
        object.__setattr__(self, "_children", {k: tuple(v) for k, v in children.items()})
        object.__setattr__(self, "_parents", {k: tuple(v) for k, v in parents.items()})

    @classmethod
    def from_parts(cls, nodes: Iterable[Node], edges: Iterable[Edge], root_id: Optional[str] = None) -> "Graph":
        """Build a graph, dropping edges whose endpoints are not known nodes."""
        by_id: Dict[str, Node] = {}
        for n in nodes:
            if n.id in by_id:
                logger.debug("Dropping duplicate node %r", n.id)
                continue
            by_id[n.id] = n
        kept: List[Edge] = []
        for e in edges:
            if e.source in by_id and e.target in by_id:
                kept.append(e)
            else:
                logger.debug("Dropping edge %s -> %s with unknown endpoint", e.source, e.target)
        if root_id not in by_id:
            root_id = next(iter(by_id), None)
        return cls(nodes=by_id, edges=tuple(kept), root_id=root_id)

    def node_ids(self) -> List[str]:
        return list(self.nodes)

    def children(self, node_id: str) -> Tuple[str, ...]:
        return self._children.get(node_id, ())

    def parents(self, node_id: str) -> Tuple[str, ...]:
        return self._parents.get(node_id, ())

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes


# ---------- Tree flattening ----------
def _as_roots(tree: Any) -> List[Mapping[str, Any]]:
    if tree is None:
        return []
    if isinstance(tree, Mapping):
        return [tree]
    return [t for t in tree if isinstance(t, Mapping)]


def build_graph(tree: Any, radii: Tuple[float, ...] = DEFAULT_RADII) -> Graph:
    """Flatten a topic tree (one root mapping or a list of them) depth first.

    Every mapping becomes a node and every parent/child relation a directed
    edge. Mappings without an id are skipped along with their subtree.
    """
    nodes: List[Node] = []
    edges: List[Edge] = []
    seen: set[str] = set()

    def visit(item: Mapping[str, Any], parent_id: Optional[str], depth: int) -> None:
        raw_id = item.get("id")
        if raw_id is None or raw_id == "":
            logger.debug("Skipping subtree without id under %r", parent_id)
            return
        node_id = str(raw_id)
        if node_id in seen:
            logger.debug("Skipping duplicate subtree %r", node_id)
            return
        seen.add(node_id)
        level = item.get("level")
        if not isinstance(level, int) or isinstance(level, bool):
            level = depth
        label = item.get("label")
        if not isinstance(label, str):
            label = str(item.get("title") or node_id)
        nodes.append(Node(node_id, label, level, radius_for_level(radii, level), item.get("url")))
        if parent_id is not None:
            edges.append(Edge(parent_id, node_id))
        for child in _as_roots(item.get("children") or ()):
            visit(child, node_id, depth + 1)

    for root in _as_roots(tree):
        visit(root, None, 0)
    return Graph.from_parts(nodes, edges, nodes[0].id if nodes else None)


def find_subtree(tree: Any, node_id: str) -> Optional[Mapping[str, Any]]:
    for item in _as_roots(tree):
        if str(item.get("id")) == str(node_id):
            return item
        found = find_subtree(item.get("children") or (), node_id)
        if found is not None:
            return found
    return None


# ---------- Page records ----------
def pages_to_tree(pages: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Convert flat page rows (id, title, slug, parent_id) into topic mappings."""
    unique: Dict[Any, Mapping[str, Any]] = {}
    for page in pages:
        if page.get("id") is None:
            continue
        unique[page["id"]] = page
    topics: Dict[Any, Dict[str, Any]] = {}
    for pid, page in unique.items():
        slug = page.get("slug") or str(pid)
        topic: Dict[str, Any] = {
            "id": str(pid),
            "label": page.get("title") or slug,
            "slug": slug,
            "url": f"/pages-arbol/{slug}",
            "children": [],
        }
        topics[pid] = topic
    roots: List[Dict[str, Any]] = []
    for pid, page in unique.items():
        parent = page.get("parent_id")
        if parent is not None and parent in topics and parent != pid:
            topics[parent]["children"].append(topics[pid])
        else:
            roots.append(topics[pid])
    return roots


def load_tree(path: str) -> List[Mapping[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, Mapping):
        return [data]
    if isinstance(data, list) and any(isinstance(d, Mapping) and "parent_id" in d for d in data):
        return pages_to_tree(d for d in data if isinstance(d, Mapping))
    return _as_roots(data)
