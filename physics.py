# Physics backend

import math
from dataclasses import replace
from typing import Dict, Mapping, Optional

import pymunk
from pymunk import Vec2d

from graph_model import Graph
from positions import KinematicState, clamp_to_bounds

# ---------- Config ----------
MIN_DISTANCE = 1.0
# Golden angle, spreads the escape direction of coincident pairs
_SPREAD = math.pi * (3.0 - math.sqrt(5.0))


def _finite(v: Vec2d) -> bool:
    return math.isfinite(v.x) and math.isfinite(v.y)


def _pair_direction(i: int, j: int) -> Vec2d:
    return Vec2d(1.0, 0.0).rotated(_SPREAD * (i * 31 + j))


# ---------- Simulation ----------
def step(graph: Graph, states: Mapping[str, KinematicState], config) -> Dict[str, KinematicState]:
    """Advance the layout by one tick and return the new states.

    Order: pairwise repulsion, edge springs, damping, integration, boundary
    clamp. Pinned nodes keep their state but still push and pull on their
    neighbours.
    """
    params = config.physics
    bounds: pymunk.BB = config.bounds
    center = Vec2d(*bounds.center())
    ids = [nid for nid in graph.nodes if nid in states]

    pos: Dict[str, Vec2d] = {}
    vel: Dict[str, Vec2d] = {}
    pinned: Dict[str, bool] = {}
    for nid in ids:
        s = states[nid]
        p, v = s.position, s.velocity
        if not _finite(p):
            p = center
        if not _finite(v):
            v = Vec2d(0.0, 0.0)
        pos[nid], vel[nid], pinned[nid] = p, v, bool(s.pinned)

    # Pairwise repulsion
    for i, a in enumerate(ids):
        ra = graph.nodes[a].radius
        for j in range(i + 1, len(ids)):
            b = ids[j]
            if pinned[a] and pinned[b]:
                continue
            min_sep = ra + graph.nodes[b].radius + params.padding
            delta = pos[a] - pos[b]
            raw = delta.length
            d = max(raw, MIN_DISTANCE)
            if d >= min_sep:
                continue
            direction = delta / raw if raw > 1e-9 else _pair_direction(i, j)
            impulse = direction * (params.repulsion * (min_sep - d))
            if not pinned[a]:
                vel[a] += impulse
            if not pinned[b]:
                vel[b] -= impulse

    # Edge springs
    for e in graph.edges:
        a, b = e.source, e.target
        if a not in pos or b not in pos:
            continue
        delta = pos[b] - pos[a]
        d = delta.length
        if d <= params.min_spring_distance:
            continue
        impulse = delta / d * (params.spring * (d - params.rest_length))
        if not pinned[a]:
            vel[a] += impulse
        if not pinned[b]:
            vel[b] -= impulse

    # Damping, integration, clamp
    out: Dict[str, KinematicState] = dict(states)
    for nid in ids:
        if pinned[nid]:
            continue
        v = vel[nid] * params.damping
        p = clamp_to_bounds(pos[nid] + v, graph.nodes[nid].radius, bounds)
        out[nid] = replace(states[nid], x=p.x, y=p.y, vx=v.x, vy=v.y)
    return out


# ---------- Picking ----------
def pick_node(graph: Graph, states: Mapping[str, KinematicState], p, slop: float = 1.0) -> Optional[str]:
    """Pick the node whose disc contains point p (layout coords).

    Nodes later in drawing order win ties, matching what is visible on top.
    """
    point = Vec2d(float(p[0]), float(p[1]))
    best, dmin = None, 1e18
    for nid, node in graph.nodes.items():
        s = states.get(nid)
        if s is None:
            continue
        d = (s.position - point).length
        if d <= node.radius * slop and d <= dmin:
            best, dmin = nid, d
    return best


def kinetic_energy(states: Mapping[str, KinematicState]) -> float:
    return sum(0.5 * (s.vx * s.vx + s.vy * s.vy) for s in states.values())
