import pymunk
import pytest

from graph_model import build_graph
from interaction import DragState, Gesture, InteractionController
from positions import PositionStore
from view_config import ViewConfig

CONFIG = ViewConfig(name="test", width=400, height=400)


def _setup(on_activate=None, click_slop=0.0):
    graph = build_graph({"id": "root", "label": "Root", "children": [
        {"id": "a", "label": "A", "url": "/notes/a"},
        {"id": "b", "label": "B"},
    ]}, CONFIG.radii)
    store = PositionStore.seeded(graph, CONFIG)
    store.set("a", x=100.0, y=100.0, vx=3.0, vy=-2.0)
    store.set("b", x=300.0, y=300.0)
    ctrl = InteractionController(graph, store, CONFIG.bounds, on_activate=on_activate, click_slop=click_slop)
    return graph, store, ctrl


def test_pointer_down_pins_node_and_records_offset():
    _, store, ctrl = _setup()

    assert ctrl.pointer_down(104, 97) == "a"
    assert ctrl.state_of("a") is DragState.DRAGGING
    assert ctrl.state_of("b") is DragState.FREE
    state = store.get("a")
    assert state.pinned
    assert (state.vx, state.vy) == (0.0, 0.0)
    assert (ctrl.offset.x, ctrl.offset.y) == (-4.0, 3.0)


def test_pointer_down_on_empty_space_does_nothing():
    _, store, ctrl = _setup()

    assert ctrl.pointer_down(200, 40) is None
    assert not ctrl.is_dragging
    assert store.find_pinned() is None


def test_drag_keeps_offset_so_node_does_not_jump():
    _, store, ctrl = _setup()
    ctrl.pointer_down(104, 97)
    ctrl.pointer_move(154, 147)

    state = store.get("a")
    assert (state.x, state.y) == (150.0, 150.0)
    assert (state.vx, state.vy) == (0.0, 0.0)


def test_drag_position_is_clamped_to_bounds():
    graph, store, ctrl = _setup()
    ctrl.pointer_down(100, 100)
    ctrl.pointer_move(-50, 900)

    r = graph.nodes["a"].radius
    state = store.get("a")
    assert (state.x, state.y) == (r, 400 - r)


def test_release_after_move_is_a_drag_and_unpins():
    activated = []
    _, store, ctrl = _setup(on_activate=activated.append)
    ctrl.pointer_down(100, 100)
    ctrl.pointer_move(120, 130)
    gesture = ctrl.pointer_up(120, 130)

    assert gesture == Gesture("drag", "a")
    assert activated == []
    state = store.get("a")
    assert not state.pinned
    assert (state.x, state.y) == (120.0, 130.0)
    assert (state.vx, state.vy) == (0.0, 0.0)
    assert not ctrl.is_dragging


def test_release_without_move_is_a_click_and_activates():
    activated = []
    _, store, ctrl = _setup(on_activate=activated.append)
    ctrl.pointer_down(100, 100)
    gesture = ctrl.pointer_up(100, 100)

    assert gesture == Gesture("click", "a")
    assert [n.id for n in activated] == ["a"]
    assert activated[0].url == "/notes/a"
    assert not store.get("a").pinned


def test_small_jitter_within_slop_is_still_a_click():
    _, _, ctrl = _setup(click_slop=3.0)
    ctrl.pointer_down(100, 100)
    ctrl.pointer_move(101, 101)

    assert ctrl.pointer_up().kind == "click"


def test_pointer_leave_unpins_without_activation():
    activated = []
    _, store, ctrl = _setup(on_activate=activated.append)
    ctrl.pointer_down(100, 100)
    ctrl.pointer_leave()

    assert not store.get("a").pinned
    assert activated == []
    assert ctrl.pointer_up(100, 100) is None


def test_unmatched_events_are_noops():
    _, store, ctrl = _setup()
    before = store.snapshot()

    assert ctrl.pointer_up(100, 100) is None
    ctrl.pointer_move(10, 10)
    ctrl.pointer_leave()
    assert store.snapshot() == before


def test_second_press_releases_stale_drag():
    _, store, ctrl = _setup()
    ctrl.pointer_down(100, 100)
    assert ctrl.pointer_down(300, 300) == "b"

    assert not store.get("a").pinned
    assert store.get("b").pinned


def test_hover_hit_tests():
    _, _, ctrl = _setup()

    assert ctrl.hover(300, 305) == "b"
    assert ctrl.hover(5, 5) is None


def test_bounds_are_pymunk_bb():
    assert isinstance(CONFIG.bounds, pymunk.BB)
    assert CONFIG.bounds.right == pytest.approx(400)
