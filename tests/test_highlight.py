from graph_model import Edge, Graph, Node, build_graph
from highlight import EMPTY, HighlightSet, highlight


def _tree():
    # root -> chem -> organic, root -> bio -> cells -> membranes, bio -> ecology
    return build_graph({"id": "root", "label": "Root", "children": [
        {"id": "chem", "label": "Chemistry", "children": [{"id": "organic", "label": "Organic"}]},
        {"id": "bio", "label": "Biology", "children": [
            {"id": "cells", "label": "Cells", "children": [{"id": "membranes", "label": "Membranes"}]},
            {"id": "ecology", "label": "Ecology"},
        ]},
    ]})


def _reachable(graph, start, forward=True):
    seen, stack = set(), [start]
    while stack:
        cur = stack.pop()
        for e in graph.edges:
            src, dst = (e.source, e.target) if forward else (e.target, e.source)
            if src == cur and dst not in seen:
                seen.add(dst)
                stack.append(dst)
    return seen


def test_no_focus_is_empty():
    graph = _tree()

    assert highlight(graph, None) == EMPTY
    assert not highlight(graph, None)
    assert highlight(graph, "unknown") == EMPTY


def test_root_highlights_everything():
    graph = _tree()
    hl = highlight(graph, "root")

    assert hl.node_ids == set(graph.nodes)
    assert hl.edge_indices == set(range(len(graph.edges)))


def test_scenario_leaf_under_root():
    graph = build_graph({"id": "root", "label": "Root", "children": [
        {"id": "A", "label": "A"},
        {"id": "B", "label": "B"},
    ]})
    hl = highlight(graph, "A")

    assert hl == HighlightSet(frozenset({"root", "A"}), frozenset({0}))


def test_ancestors_and_descendants_only():
    graph = _tree()
    hl = highlight(graph, "cells")

    assert hl.node_ids == {"root", "bio", "cells", "membranes"}
    assert not hl.has_node("ecology")
    assert not hl.has_node("chem")


def test_closure_and_edge_symmetry_for_every_focus():
    graph = _tree()
    for focal in graph.nodes:
        if focal == graph.root_id:
            continue
        hl = highlight(graph, focal)
        expected = {focal} | _reachable(graph, focal, True) | _reachable(graph, focal, False)
        assert hl.node_ids == expected
        for i, e in enumerate(graph.edges):
            both = e.source in hl.node_ids and e.target in hl.node_ids
            assert hl.has_edge(i) == both


def test_cycles_terminate():
    nodes = [Node(n, n, 0, 10) for n in ("r", "a", "b", "c", "x")]
    edges = [Edge("r", "a"), Edge("a", "b"), Edge("b", "c"), Edge("c", "a"), Edge("r", "x")]
    graph = Graph.from_parts(nodes, edges, root_id="r")
    hl = highlight(graph, "b")

    assert hl.node_ids == {"r", "a", "b", "c"}
    assert hl.edge_indices == {0, 1, 2, 3}
