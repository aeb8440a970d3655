# View configuration

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping, Tuple

import pymunk

logger = logging.getLogger(__name__)

# ---------- Defaults ----------
DEFAULT_RADII: Tuple[float, ...] = (16.0, 10.0, 7.0, 6.0)
MAX_DAMPING = 0.99
POSITIVE_FIELDS = ("width", "height", "seed_radius")


def radius_for_level(radii: Tuple[float, ...], level: int) -> float:
    """Disc radius for a tree level; levels past the table reuse its last entry."""
    if not radii:
        radii = DEFAULT_RADII
    return float(radii[min(max(0, int(level)), len(radii) - 1)])


# ---------- Physics constants ----------
@dataclass(frozen=True)
class PhysicsParams:
    """Tunable constants of the layout stepper.

    The defaults are the hand-tuned values of the compact panel; nothing about
    them is physically meaningful, so every view may override them.
    """
    repulsion: float = 0.12
    spring: float = 0.03
    rest_length: float = 64.0
    padding: float = 18.0
    damping: float = 0.7
    min_spring_distance: float = 0.1


# ---------- View model ----------
@dataclass(frozen=True)
class ViewConfig:
    name: str
    width: float
    height: float
    physics: PhysicsParams = field(default_factory=PhysicsParams)
    radii: Tuple[float, ...] = DEFAULT_RADII
    seed_radius: float = 90.0
    warmup_ticks: int = 2
    click_slop: float = 0.0

    @property
    def bounds(self) -> pymunk.BB:
        return pymunk.BB(0.0, 0.0, float(self.width), float(self.height))

    def with_overrides(self, data: Mapping[str, Any] | None) -> "ViewConfig":
        """Return a copy with values from a settings mapping applied.

        Keys may name either a view field (``width``, ``seed_radius``...) or a
        physics field (``rest_length``, ``damping``...). Unknown keys, values
        that do not coerce and non-positive sizes are skipped.
        """
        if not data:
            return self
        if not isinstance(data, Mapping):
            logger.warning("Ignoring %s view settings: expected an object, got %s",
                           self.name, type(data).__name__)
            return self
        view_names = {f.name: f for f in fields(self) if f.name not in ("name", "physics", "radii")}
        physics_names = {f.name for f in fields(self.physics)}
        view_kw: dict[str, Any] = {}
        physics_kw: dict[str, float] = {}
        for key, value in data.items():
            try:
                if key in physics_names:
                    physics_kw[key] = float(value)
                elif key == "radii":
                    radii = tuple(float(r) for r in value)
                    if not radii or min(radii) <= 0:
                        raise ValueError("radii must be positive")
                    view_kw["radii"] = radii
                elif key in view_names:
                    caster = int if key == "warmup_ticks" else float
                    cast = caster(value)
                    if key in POSITIVE_FIELDS and cast <= 0:
                        raise ValueError(f"{key} must be positive")
                    view_kw[key] = cast
                else:
                    logger.warning("Ignoring unknown %s view setting %r", self.name, key)
            except (TypeError, ValueError):
                logger.warning("Ignoring bad %s view setting %r=%r", self.name, key, value)
        if "damping" in physics_kw:
            physics_kw["damping"] = min(MAX_DAMPING, max(0.0, physics_kw["damping"]))
        if view_kw.get("warmup_ticks", 0) < 0:
            view_kw["warmup_ticks"] = 0
        physics = replace(self.physics, **physics_kw) if physics_kw else self.physics
        return replace(self, physics=physics, **view_kw)


# ---------- Presets ----------
COMPACT_VIEW = ViewConfig(
    name="compact",
    width=320,
    height=280,
    physics=PhysicsParams(rest_length=64.0, padding=18.0),
    radii=(16.0, 12.0, 10.0),
    seed_radius=90.0,
)

EXPANDED_VIEW = ViewConfig(
    name="expanded",
    width=700,
    height=520,
    physics=PhysicsParams(rest_length=120.0, padding=10.0),
    radii=(24.0, 16.0, 10.0),
    seed_radius=170.0,
)
