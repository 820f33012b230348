import logging
import math
from dataclasses import dataclass, fields, replace
from typing import Any, Callable, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 800.0
DEFAULT_HEIGHT = 600.0


def default_node_radius(node):
    return 5.0


@dataclass(frozen=True)
class Settings:
    # Force parameters
    gravity: float = 1.0
    scaling_ratio: float = 1.0
    edge_weight_influence: float = 1.0
    dissuade_hubs: bool = True
    prevent_overlap: bool = True
    barnes_hut_theta: float = 1.2
    repulsion_strength: float = 5000.0
    cooling_rate: float = 0.1
    max_velocity: float = 1.0

    # Viewport
    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT

    node_radius: Callable[[Any], float] = default_node_radius

    @property
    def center(self):
        return self.width / 2, self.height / 2

    def merged(self, **overrides):
        """Returns a copy with `overrides` applied on top of this instance."""
        return make_settings(overrides, base=self)


# Names used by the slider panel and older saved configs
CAMEL_ALIASES = {
    "scalingRatio": "scaling_ratio",
    "edgeWeightInfluence": "edge_weight_influence",
    "dissuadeHubs": "dissuade_hubs",
    "preventOverlap": "prevent_overlap",
    "barnesHutTheta": "barnes_hut_theta",
    "repulsionStrength": "repulsion_strength",
    "coolingRate": "cooling_rate",
    "maxVelocity": "max_velocity",
    "nodeRadius": "node_radius",
}

BOOL_FIELDS = {"dissuade_hubs", "prevent_overlap"}
NON_NEGATIVE_FIELDS = {"barnes_hut_theta", "cooling_rate", "max_velocity"}
DIMENSION_FIELDS = {"width": DEFAULT_WIDTH, "height": DEFAULT_HEIGHT}


def _coerce_float(value):
    if isinstance(value, bool):
        raise ValueError(f"boolean {value!r} is not a number")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{value!r} is not finite")
    return number


def _coerce_bool(value):
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off", ""):
            return False
        raise ValueError(f"{value!r} is not a boolean")
    return bool(value)


def _coerce(name, value):
    if name == "node_radius":
        if not callable(value):
            # A bare number means a fixed radius for every node
            radius = _coerce_float(value)
            return lambda node: radius
        return value
    if name in BOOL_FIELDS:
        return _coerce_bool(value)
    number = _coerce_float(value)
    if name in NON_NEGATIVE_FIELDS and number < 0:
        raise ValueError(f"{value!r} is negative")
    return number


def make_settings(overrides: Optional[Mapping[str, Any]] = None, base: Optional[Settings] = None, **kwargs) -> Settings:
    """
    Merges overrides on top of `base` (the defaults when omitted).

    Keys may be snake_case field names or the camelCase names the slider
    panel uses. Values that cannot be coerced keep the base value; invalid
    width/height fall back to 800x600.
    """
    base = base or Settings()
    known = {f.name for f in fields(Settings)}

    merged = dict(overrides or {})
    merged.update(kwargs)

    changes = {}
    for key, value in merged.items():
        name = CAMEL_ALIASES.get(key, key)
        if name not in known:
            logger.warning(f"Ignoring unknown layout setting: {key}")
            continue
        try:
            changes[name] = _coerce(name, value)
        except (TypeError, ValueError) as e:
            if name in DIMENSION_FIELDS:
                changes[name] = DIMENSION_FIELDS[name]
                logger.warning(f"Invalid {name} {value!r}, using default {DIMENSION_FIELDS[name]}")
            else:
                logger.warning(f"Invalid value for {name}: {e}. Keeping {getattr(base, name)!r}")

    for name, default in DIMENSION_FIELDS.items():
        if name in changes and changes[name] <= 0:
            logger.warning(f"Non-positive {name} {changes[name]}, using default {default}")
            changes[name] = default

    return replace(base, **changes)
