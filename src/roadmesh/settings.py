"""Generator settings.

Settings that change the emitted geometry are grouped in
:class:`GeneratorSettings` so that one frozen value can be threaded
through every builder call.  They can be read from the ``generator:``
block of a YAML configuration with :func:`settings_from_config`.
"""

import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict

from .errors import InvalidWidth

TURN_STEPS = 3
"""Default number of sampling steps per turn shift."""

DEFAULT_EPSILON = 1e-6
DEFAULT_WIDTH = 10.0


def _as_number(name: str, value: Any) -> float:
    """Read a finite float, accepting numeric strings such as YAML's ``1e-6``."""
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return number


class JointMode(str, Enum):
    """How the ribbon is stitched where the travel direction changes."""

    MITER = "miter"
    """Shared vertices are offset along the angle bisector."""

    COLLAR = "collar"
    """Each edge keeps its own perpendicular; a 6-vertex filler is
    inserted at every direction change."""

    NONE = "none"
    """Each edge keeps its own perpendicular and joints are left open."""


class DegeneratePolicy(str, Enum):
    """What to do with a zero-length edge."""

    RAISE = "raise"
    SKIP = "skip"


@dataclass(frozen=True)
class GeneratorSettings:
    """Parameters of the ribbon sweep."""

    turn_steps: int = TURN_STEPS
    """Number of ``step_speed`` increments sampled per turn shift."""

    epsilon: float = DEFAULT_EPSILON
    """Edges not longer than this are degenerate.  Also used when
    comparing perpendiculars in collar mode."""

    joint: JointMode = JointMode.MITER

    miter_limit: float = 4.0
    """Largest allowed miter scale (multiple of the road width)."""

    degenerate: DegeneratePolicy = DegeneratePolicy.RAISE

    reject_empty_sections: bool = False
    """Raise :class:`EmptySection` instead of emitting nothing."""

    initial_width: float = DEFAULT_WIDTH
    """Road width at the origin, before the first shift."""

    def __post_init__(self):
        # Accept plain strings for the enum fields.
        object.__setattr__(self, "joint", JointMode(self.joint))
        object.__setattr__(self, "degenerate", DegeneratePolicy(self.degenerate))

        steps = _as_number("turn_steps", self.turn_steps)
        if steps != int(steps) or steps < 1:
            raise ValueError(f"turn_steps must be a positive integer, got {self.turn_steps!r}")
        object.__setattr__(self, "turn_steps", int(steps))

        epsilon = _as_number("epsilon", self.epsilon)
        if not epsilon > 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon!r}")
        object.__setattr__(self, "epsilon", epsilon)

        miter_limit = _as_number("miter_limit", self.miter_limit)
        if not miter_limit >= 1:
            raise ValueError(f"miter_limit must be >= 1, got {self.miter_limit!r}")
        object.__setattr__(self, "miter_limit", miter_limit)

        if not isinstance(self.reject_empty_sections, bool):
            raise ValueError(
                f"reject_empty_sections must be true or false, got {self.reject_empty_sections!r}"
            )

        try:
            width = _as_number("initial_width", self.initial_width)
        except ValueError:
            raise InvalidWidth(self.initial_width) from None
        if not width > 0:
            raise InvalidWidth(self.initial_width)
        object.__setattr__(self, "initial_width", width)


def settings_from_config(config: Dict[str, Any]) -> GeneratorSettings:
    """Build settings from the ``generator:`` block of a configuration.

    Parameters
    ----------
    config : dict
        Full configuration mapping.  Missing keys keep their defaults.

    Returns
    -------
    GeneratorSettings

    Raises
    ------
    ValueError
        On unknown keys or invalid values.
    """
    block = config.get("generator") or {}
    if not isinstance(block, dict):
        raise ValueError(f"'generator' must be a mapping, got {block!r}")
    known = {f.name for f in fields(GeneratorSettings)}
    unknown = sorted(set(block) - known)
    if unknown:
        raise ValueError(f"unknown generator settings: {', '.join(unknown)}")
    return GeneratorSettings(**block)
