# Graph renderer

import math
from dataclasses import dataclass
from typing import Tuple

import dearpygui.dearpygui as dpg

from engine import Frame

Color = Tuple[int, int, int, int]


# ---------- Colors ----------
@dataclass(frozen=True)
class Theme:
    name: str
    background: Color
    edge: Color
    edge_lit: Color
    node: Color
    node_lit: Color
    node_ring: Color
    label: Color
    label_dim: Color
    bounds: Color


LIGHT = Theme(
    name="light",
    background=(240, 240, 240, 255),
    edge=(187, 187, 187, 255),
    edge_lit=(37, 99, 235, 255),
    node=(136, 136, 136, 255),
    node_lit=(37, 99, 235, 255),
    node_ring=(34, 34, 34, 255),
    label=(34, 34, 34, 255),
    label_dim=(136, 136, 136, 255),
    bounds=(200, 200, 210, 110),
)

DARK = Theme(
    name="dark",
    background=(24, 24, 27, 255),
    edge=(85, 85, 85, 255),
    edge_lit=(251, 191, 36, 255),
    node=(187, 187, 187, 255),
    node_lit=(251, 191, 36, 255),
    node_ring=(238, 238, 238, 255),
    label=(238, 238, 238, 255),
    label_dim=(170, 170, 170, 255),
    bounds=(70, 70, 80, 120),
)

THEMES = {"light": LIGHT, "dark": DARK}
DIM_ALPHA = 0.35


def dimmed(c: Color, alpha: float = DIM_ALPHA) -> Color:
    return c[0], c[1], c[2], int(c[3] * alpha)


def truncate_label(label: str, radius: float) -> str:
    """Fit a label inside its node: at most floor(radius * 1.6) characters."""
    limit = int(math.floor(radius * 1.6))
    if len(label) <= limit:
        return label
    return label[:max(0, limit - 3)] + "..."


class Renderer:
    def __init__(self, tag: str, width: float, height: float):
        self.tag = tag
        # Layout size in layout units; the drawlist may be larger
        self.layout_w = float(width)
        self.layout_h = float(height)
        self.w = int(width)
        self.h = int(height)

    # ---------- Coordinate helpers ----------
    def _scale(self) -> float:
        return max(1e-6, min(self.w / self.layout_w, self.h / self.layout_h))

    def _origin(self):
        s = self._scale()
        return (self.w - self.layout_w * s) * 0.5, (self.h - self.layout_h * s) * 0.5

    def to_screen(self, x: float, y: float):
        s = self._scale()
        ox, oy = self._origin()
        return ox + x * s, oy + y * s

    def to_world(self, sx: float, sy: float):
        s = self._scale()
        ox, oy = self._origin()
        return (sx - ox) / s, (sy - oy) / s

    # ---------- Drawing ----------
    def clear(self):
        try:
            dpg.delete_item(self.tag, children_only=True)
        except Exception:
            pass

    def draw_background(self, theme: Theme):
        dpg.draw_rectangle((0, 0), (self.w, self.h), color=theme.background, fill=theme.background, parent=self.tag)
        p0 = self.to_screen(0, 0)
        p1 = self.to_screen(self.layout_w, self.layout_h)
        dpg.draw_rectangle(p0, p1, color=theme.bounds, parent=self.tag)

    def draw(self, frame: Frame, theme: Theme):
        self.clear()
        self.draw_background(theme)
        s = self._scale()
        for ef in frame.edges:
            a = self.to_screen(ef.source.x, ef.source.y)
            b = self.to_screen(ef.target.x, ef.target.y)
            if ef.is_highlighted:
                dpg.draw_line(a, b, color=theme.edge_lit, thickness=2.5, parent=self.tag)
            else:
                color = dimmed(theme.edge) if ef.is_dimmed else theme.edge
                dpg.draw_line(a, b, color=color, thickness=1.2, parent=self.tag)
        for nf in frame.nodes:
            self.draw_node(nf, theme, s)

    def draw_node(self, nf, theme: Theme, scale: float):
        r = nf.node.radius * scale
        p = self.to_screen(nf.state.x, nf.state.y)
        fill = theme.node_lit if nf.is_highlighted else theme.node
        if nf.is_dimmed:
            fill = dimmed(fill)
        dpg.draw_circle(p, r, color=fill, fill=fill, parent=self.tag)
        if nf.is_focal or nf.is_dragged:
            dpg.draw_circle(p, r + 2, color=theme.node_ring, thickness=2, parent=self.tag)

        label = nf.node.label
        shown = truncate_label(label, nf.node.radius)
        size = max(10, int(r + 1))
        color = dimmed(theme.label) if nf.is_dimmed else theme.label
        # dearpygui has no text anchoring; approximate centering from glyph width
        tx = p[0] - len(shown) * size * 0.28
        dpg.draw_text((tx, p[1] - size * 0.5), shown, color=color, size=size, parent=self.tag)
        if nf.is_highlighted and shown != label:
            dpg.draw_text((p[0] + r + 7, p[1] + 3), label, color=theme.node_lit, size=12, parent=self.tag)
