from engine import GraphView
from view_config import COMPACT_VIEW, EXPANDED_VIEW, ViewConfig

TREE = {
    "id": "science-tree",
    "label": "Science Tree",
    "children": [
        {"id": "chemistry", "label": "Chemistry", "url": "/notes/chemistry", "children": [
            {"id": "organic", "label": "Organic Chemistry"},
        ]},
        {"id": "biology", "label": "Biology", "children": [
            {"id": "genetics", "label": "Genetics"},
            {"id": "ecology", "label": "Ecology"},
        ]},
    ],
}


def test_drag_and_hold_scenario():
    config = ViewConfig(name="test", width=400, height=400, warmup_ticks=0)
    tree = {"id": "root", "label": "Root", "children": [
        {"id": "A", "label": "A", "children": [{"id": "B", "label": "B"}]},
    ]}
    with GraphView(tree, config) as view:
        view.store.set("root", x=200.0, y=200.0)
        view.store.set("A", x=150.0, y=150.0)
        view.store.set("B", x=300.0, y=300.0)
        b_start = view.store.get("B").position

        assert view.pointer_down(150, 150) == "A"
        view.pointer_move(100, 100)
        for _ in range(10):
            view.tick()

        a = view.store.get("A")
        assert (a.x, a.y) == (100.0, 100.0)
        b_end = view.store.get("B").position
        assert b_end.get_distance(a.position) < b_start.get_distance(a.position) - 5.0

        view.pointer_up(100, 100)
        assert not view.store.get("A").pinned
    assert not view.mounted


def test_mount_runs_warmup_ticks_and_unmount_stops():
    view = GraphView(TREE, COMPACT_VIEW).mount()

    assert view.mounted
    assert view.scheduler.frames == COMPACT_VIEW.warmup_ticks
    view.unmount()
    view.unmount()
    assert not view.tick()


def test_scope_builds_subgraph_with_its_own_root():
    view = GraphView(TREE, COMPACT_VIEW, scope="biology")

    assert view.graph.root_id == "biology"
    assert set(view.graph.nodes) == {"biology", "genetics", "ecology"}
    assert view.graph.nodes["biology"].radius == COMPACT_VIEW.radii[0]
    center = view.store.get("biology")
    assert (center.x, center.y) == (COMPACT_VIEW.width / 2, COMPACT_VIEW.height / 2)


def test_unknown_scope_falls_back_to_whole_tree():
    view = GraphView(TREE, COMPACT_VIEW, scope="astronomy")

    assert view.graph.root_id == "science-tree"
    assert len(view.graph) == 6


def test_views_are_independent():
    compact = GraphView(TREE, COMPACT_VIEW).mount()
    expanded = GraphView(TREE, EXPANDED_VIEW).mount()
    compact.pointer_down(*compact.store.get("chemistry").position)

    assert compact.store.get("chemistry").pinned
    assert not expanded.store.get("chemistry").pinned
    assert compact.graph.nodes["science-tree"].radius != expanded.graph.nodes["science-tree"].radius
    compact.unmount()
    assert expanded.mounted
    expanded.unmount()


def test_hover_recomputes_highlight_and_frame_flags():
    view = GraphView(TREE, COMPACT_VIEW)
    x, y = view.store.get("genetics").position
    assert view.hover(x, y) == "genetics"

    assert view.focal_id == "genetics"
    assert view.highlight.node_ids == {"science-tree", "biology", "genetics"}
    frame = view.frame()
    flags = {nf.node.id: (nf.is_highlighted, nf.is_focal, nf.is_dimmed) for nf in frame.nodes}
    assert flags["genetics"] == (True, True, False)
    assert flags["biology"] == (True, False, False)
    assert flags["ecology"] == (False, False, True)
    lit_edges = {(ef.edge.source, ef.edge.target) for ef in frame.edges if ef.is_highlighted}
    assert lit_edges == {("science-tree", "biology"), ("biology", "genetics")}

    view.set_hovered(None)
    assert view.focal_id is None
    assert not any(nf.is_dimmed for nf in view.frame().nodes)


def test_click_selects_and_activates():
    activated = []
    view = GraphView(TREE, COMPACT_VIEW, on_activate=activated.append)
    x, y = view.store.get("chemistry").position
    view.pointer_down(x, y)
    gesture = view.pointer_up(x, y)

    assert gesture.kind == "click"
    assert view.selected == "chemistry"
    assert view.focal_id == "chemistry"
    assert activated[0].url == "/notes/chemistry"


def test_pointer_leave_clears_hover_and_drag():
    view = GraphView(TREE, COMPACT_VIEW)
    x, y = view.store.get("biology").position
    view.pointer_down(x, y)
    view.hover(x, y)
    view.pointer_leave()

    assert view.focal_id is None
    assert not view.controller.is_dragging
    assert not view.store.get("biology").pinned


def test_related_topics_lists_children():
    view = GraphView(TREE, COMPACT_VIEW)

    assert [n.id for n in view.related_topics()] == ["chemistry", "biology"]
    assert [n.id for n in view.related_topics("biology")] == ["genetics", "ecology"]
    assert view.related_topics("ecology") == []
    view.select("biology")
    assert [n.label for n in view.related_topics()] == ["Genetics", "Ecology"]
