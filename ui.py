#UI Module

import dearpygui.dearpygui as dpg

from view_config import COMPACT_VIEW, EXPANDED_VIEW


def build_ui(app):
    # ---------- Left panel ----------
    with dpg.window(label="Controls", pos=(10, 10), width=300, height=600,
                    no_close=True, no_title_bar=True, no_move=True, no_resize=True,
                    tag="controls_win"):
        wrap_w = 280
        dpg.add_text("TOPIC GRAPH", color=(59, 130, 246, 255), wrap=wrap_w)

        with dpg.collapsing_header(label="Overview", default_open=True):
            app.stats = dpg.add_text("Stats...", wrap=wrap_w)
            app.page_status = dpg.add_text("Page: -", wrap=wrap_w)

        with dpg.collapsing_header(label="View", default_open=True):
            dpg.add_radio_button(
                ["light", "dark"],
                default_value=app.theme_name,
                horizontal=True,
                tag="theme_radio",
                callback=lambda s, a: app.on_theme_change(a or "light"),
            )
            with dpg.group(horizontal=True):
                dpg.add_button(label="Expand graph", callback=lambda: app.expand())
                dpg.add_button(label="Reset layout", callback=lambda: app.reset_layout())
                dpg.add_button(label="Home", callback=lambda: app.request_navigation(None))
            with dpg.tooltip(dpg.last_item()):
                dpg.add_text(
                    "Drag a node to move it; it is released back to the layout on mouse up.\n"
                    "Click a node to open its page.\n"
                    "Hover a node to highlight its ancestors and descendants."
                )

        with dpg.collapsing_header(label="Related topics", default_open=True):
            with dpg.child_window(tag="related_panel", width=wrap_w, height=220, border=True):
                dpg.add_group(tag="related_list")

    # ---------- Compact graph panel ----------
    with dpg.window(label="Graph", pos=(320, 10), width=COMPACT_VIEW.width + 16, height=COMPACT_VIEW.height + 40,
                    no_close=True, no_resize=True, no_scrollbar=True, tag="compact_win"):
        dpg.add_drawlist(width=int(COMPACT_VIEW.width), height=int(COMPACT_VIEW.height), tag="compact_canvas")

    # ---------- Expanded graph window ----------
    with dpg.window(label="Knowledge graph", pos=(340, 60), width=EXPANDED_VIEW.width + 16,
                    height=EXPANDED_VIEW.height + 40, show=False, no_resize=True, no_scrollbar=True,
                    tag="expanded_win", on_close=lambda: app.collapse()):
        dpg.add_drawlist(width=int(EXPANDED_VIEW.width), height=int(EXPANDED_VIEW.height), tag="expanded_canvas")

    # Global handlers; routing to the view under the pointer happens in the app
    with dpg.handler_registry():
        dpg.add_mouse_click_handler(button=dpg.mvMouseButton_Left, callback=app.on_mouse_down)
        dpg.add_mouse_release_handler(button=dpg.mvMouseButton_Left, callback=app.on_mouse_up)
        dpg.add_mouse_move_handler(callback=app.on_mouse_move)

    # ---------- Theme ----------
    with dpg.theme(tag="canvas_theme"):
        with dpg.theme_component(dpg.mvAll):
            dpg.add_theme_style(dpg.mvStyleVar_WindowPadding, 8, 8)
    dpg.bind_item_theme("compact_win", "canvas_theme")
    dpg.bind_item_theme("expanded_win", "canvas_theme")


def refresh_related(app, topics):
    """Rebuild the related-topics list as buttons that navigate on click."""
    panel = "related_list"
    try:
        if not dpg.does_item_exist(panel):
            return
        dpg.delete_item(panel, children_only=True)
        if not topics:
            dpg.add_text("No related topics.", parent=panel)
            return
        for node in topics:
            dpg.add_button(
                label=node.label,
                parent=panel,
                width=-1,
                callback=lambda s, a, u: app.request_navigation(u),
                user_data=node.id,
            )
    except Exception as e:
        app.log.warning("Related topics refresh failed: %s", e)
