#Topic graph viewer

import argparse
import json
import logging
import os
import sys

import dearpygui.dearpygui as dpg

from engine import GraphView
from graph_model import Node, load_tree
from physics import kinetic_energy
from renderer import LIGHT, THEMES, Renderer
from ui import build_ui, refresh_related
from view_config import COMPACT_VIEW, EXPANDED_VIEW

logger = logging.getLogger("app")

# ---------- CONFIG ----------
WIN_W, WIN_H = 1100, 700
DEFAULT_TREE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "science_tree.json")
_HOME = object()


class App:
    def __init__(self, tree, page=None, settings_path=None) -> None:
        try:
            dpg.destroy_context()
        except Exception:
            pass

        self.log = logger
        self.tree = tree
        self.settings_path = settings_path or os.path.join(os.getcwd(), "settings.json")
        self.theme_name = "light"
        self.page = page
        self.compact_cfg = COMPACT_VIEW
        self.expanded_cfg = EXPANDED_VIEW
        self._load_settings()
        if page is not None:
            self.page = page

        # UI references
        self.stats = None
        self.page_status = None

        # Views and per-view pointer routing
        self.compact: GraphView = None
        self.expanded: GraphView = None
        self.renderers = {}
        self._pointer_owner = None
        self._pending_nav = None
        self._related_for = _HOME

        dpg.create_context()
        # Run callbacks on this thread, between frames, so pointer writes land before the next tick
        dpg.configure_app(manual_callback_management=True)
        dpg.create_viewport(title="Topic Graph", width=WIN_W, height=WIN_H)
        build_ui(self)
        self.renderers["compact"] = Renderer("compact_canvas", self.compact_cfg.width, self.compact_cfg.height)
        self.renderers["expanded"] = Renderer("expanded_canvas", self.expanded_cfg.width, self.expanded_cfg.height)
        self._mount_compact()
        dpg.setup_dearpygui()
        dpg.show_viewport()

    # ---------- Views ----------
    def _mount_compact(self):
        if self.compact is not None:
            self.compact.unmount()
        self.compact = GraphView(self.tree, self.compact_cfg, scope=self.page, on_activate=self.on_activate)
        self.compact.mount()
        self.compact.select(self.page)
        self._related_for = _HOME

    def expand(self):
        if self.expanded is not None and self.expanded.mounted:
            return
        self.expanded = GraphView(self.tree, self.expanded_cfg, on_activate=self.on_activate)
        self.expanded.mount()
        self.expanded.select(self.page)
        try:
            dpg.configure_item("expanded_win", show=True)
        except Exception:
            pass

    def collapse(self):
        if self.expanded is not None:
            self.expanded.unmount()
            self.expanded = None
        if self._pointer_owner == "expanded":
            self._pointer_owner = None
        try:
            dpg.configure_item("expanded_win", show=False)
        except Exception:
            pass

    def reset_layout(self):
        self._mount_compact()
        if self.expanded is not None:
            self.expanded.unmount()
            self.expanded = None
            self.expand()

    def _live_views(self):
        views = []
        if self.compact is not None and self.compact.mounted:
            views.append(("compact", self.compact))
        if self.expanded is not None and self.expanded.mounted:
            views.append(("expanded", self.expanded))
        return views

    # ---------- Navigation ----------
    def on_activate(self, node: Node):
        self.request_navigation(node.id)

    def request_navigation(self, node_id):
        # Applied between frames; the clicked view may be torn down by it
        self._pending_nav = _HOME if node_id is None else node_id

    def _apply_navigation(self):
        target, self._pending_nav = self._pending_nav, None
        if target is None:
            return
        page = None if target is _HOME else str(target)
        url = "/"
        if page is not None:
            url = page
            for _, view in self._live_views():
                node = view.graph.nodes.get(page)
                if node is not None and node.url:
                    url = node.url
        logger.info("Navigate to %s", url)
        self.page = page
        self._pointer_owner = None
        self._mount_compact()
        if self.expanded is not None:
            self.expanded.select(page)
        self._save_settings()

    # ---------- Settings callbacks ----------
    def on_theme_change(self, value):
        self.theme_name = value if value in THEMES else "light"
        self._save_settings()

    # ---------- Mouse utilities ----------
    def _local_mouse(self, canvas):
        mouse_x, mouse_y = dpg.get_mouse_pos(local=False)
        try:
            rect_min = dpg.get_item_rect_min(canvas)
        except Exception:
            rect_min = dpg.get_item_pos(canvas)
        return mouse_x - rect_min[0], mouse_y - rect_min[1]

    def _pointer_in(self, key):
        R = self.renderers[key]
        return R.to_world(*self._local_mouse(R.tag))

    def _hovered_view(self):
        # The expanded window floats above the compact panel
        for key, view in reversed(self._live_views()):
            if dpg.is_item_hovered(self.renderers[key].tag):
                return key, view
        return None, None

    def on_mouse_down(self, sender, app_data):
        key, view = self._hovered_view()
        if view is None:
            return
        wx, wy = self._pointer_in(key)
        if view.pointer_down(wx, wy) is not None:
            self._pointer_owner = key

    def on_mouse_move(self, sender, app_data):
        hovered_key, _ = self._hovered_view()
        for key, view in self._live_views():
            if key == hovered_key:
                view.pointer_move(*self._pointer_in(key))
            elif view.controller.is_dragging or view.hovered is not None:
                # Leaving the surface ends the drag without activating
                view.pointer_leave()
                if self._pointer_owner == key:
                    self._pointer_owner = None

    def on_mouse_up(self, sender, app_data):
        key, self._pointer_owner = self._pointer_owner, None
        if key is None:
            return
        view = self.compact if key == "compact" else self.expanded
        if view is None:
            return
        view.pointer_up(*self._pointer_in(key))

    # ---------- Rendering ----------
    def _render(self):
        theme = THEMES.get(self.theme_name, LIGHT)
        for key, view in self._live_views():
            try:
                self.renderers[key].draw(view.frame(), theme)
            except Exception as e:
                logger.warning("Drawing %s view failed: %s", key, e)

        focal = self.compact.focal_id if self.compact else None
        if focal != self._related_for:
            refresh_related(self, self.compact.related_topics(focal))
            self._related_for = focal

        try:
            states = self.compact.store.snapshot()
            text = (
                f"Nodes: {len(self.compact.graph)}  |  Edges: {len(self.compact.graph.edges)}  |  "
                f"KE: {kinetic_energy(states):.2f}  |  Frames: {self.compact.scheduler.frames}"
            )
            if dpg.does_item_exist(self.stats):
                dpg.set_value(self.stats, text)
            root = self.compact.graph.nodes.get(self.compact.graph.root_id)
            if dpg.does_item_exist(self.page_status):
                dpg.set_value(self.page_status, f"Page: {root.label if root else '-'}")
        except Exception as e:
            logger.warning("Stats update failed: %s", e)

    # ---------- Settings ----------
    def _load_settings(self):
        if not os.path.exists(self.settings_path):
            return
        try:
            with open(self.settings_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable settings %s: %s", self.settings_path, e)
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring settings %s: expected an object, got %s",
                           self.settings_path, type(data).__name__)
            return
        theme = data.get("theme", self.theme_name)
        self.theme_name = theme if isinstance(theme, str) and theme in THEMES else "light"
        page = data.get("page", self.page)
        self.page = str(page) if page is not None else None
        self.compact_cfg = self.compact_cfg.with_overrides(data.get("compact"))
        self.expanded_cfg = self.expanded_cfg.with_overrides(data.get("expanded"))

    def _save_settings(self):
        data = {}
        try:
            with open(self.settings_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError):
            pass
        if not isinstance(data, dict):
            data = {}
        data["theme"] = self.theme_name
        data["page"] = self.page
        try:
            with open(self.settings_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.warning("Could not save settings: %s", e)

    # ---------- Main loop ----------
    def run(self):
        try:
            while dpg.is_dearpygui_running():
                dpg.run_callbacks(dpg.get_callback_queue())
                self._apply_navigation()
                for _, view in self._live_views():
                    view.tick()
                self._render()
                dpg.render_dearpygui_frame()
        finally:
            for _, view in self._live_views():
                view.unmount()
            dpg.destroy_context()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Interactive topic graph viewer")
    parser.add_argument("--tree", default=DEFAULT_TREE,
                        help="JSON topic tree, or a list of page rows with parent_id")
    parser.add_argument("--page", default=None, help="id of the page to focus the compact view on")
    parser.add_argument("--settings", default=None, help="settings file (default ./settings.json)")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format="[%(levelname)s] %(name)s: %(message)s")
    try:
        tree = load_tree(args.tree)
    except (OSError, ValueError) as e:
        logger.error("Cannot load topic tree %s: %s", args.tree, e)
        return 1
    app = App(tree, page=args.page, settings_path=args.settings)
    app.run()
    return 0


# ---------- MAIN ----------
if __name__ == "__main__":
    sys.exit(main())
