"""Road section catalog.

A road is an ordered list of sections.  Each section is a list of
shifts: "move by this displacement; the road has this width when you
get there".  Straight sections connect their shifts with straight
edges; turn sections sample each shift in small ``step_speed``
increments, which bends the road when the step is not parallel to the
displacement.

Everything here is validated on construction, so a catalog that exists
is one the builders can sweep.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence, Tuple, Union

import numpy as np

from .errors import InvalidWidth, UnimplementedSectionKind
from .geometry import as_vector


def _check_width(width: float) -> float:
    try:
        width = float(width)
    except (TypeError, ValueError):
        raise InvalidWidth(width) from None
    if not np.isfinite(width) or width <= 0:
        raise InvalidWidth(width)
    return width


@dataclass(frozen=True)
class Shift:
    """Displacement to the next road point and the road width there."""

    width: float
    displacement: np.ndarray = field(compare=False)

    def __post_init__(self):
        object.__setattr__(self, "width", _check_width(self.width))
        object.__setattr__(self, "displacement", as_vector(self.displacement))

    def __eq__(self, other):
        if not isinstance(other, Shift) or type(other) is not type(self):
            return NotImplemented
        return (self.width == other.width
                and np.array_equal(self.displacement, other.displacement))


@dataclass(frozen=True, eq=False)
class TurnShift(Shift):
    """A shift that is walked in ``step_speed`` increments."""

    step_speed: np.ndarray = field(default_factory=lambda: np.zeros(3))

    __hash__ = Shift.__hash__

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "step_speed", as_vector(self.step_speed))

    def __eq__(self, other):
        result = super().__eq__(other)
        if result is not True:
            return result
        return np.array_equal(self.step_speed, other.step_speed)


@dataclass(frozen=True)
class StraightSection:
    """Shifts joined by straight edges."""

    shifts: Tuple[Shift, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "shifts", tuple(self.shifts))
        for shift in self.shifts:
            if not isinstance(shift, Shift):
                raise TypeError(f"straight sections hold Shift values, got {shift!r}")


@dataclass(frozen=True)
class TurnSection:
    """Shifts sampled with a per-step speed to approximate a curve."""

    shifts: Tuple[TurnShift, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "shifts", tuple(self.shifts))
        for shift in self.shifts:
            if not isinstance(shift, TurnShift):
                raise TypeError(f"turn sections hold TurnShift values, got {shift!r}")


Section = Union[StraightSection, TurnSection]

SECTION_KINDS = {
    "straight": StraightSection,
    "turn": TurnSection,
}


def straight(*pairs: Tuple[float, Sequence[float]]) -> StraightSection:
    """Build a straight section from ``(width, displacement)`` pairs."""
    return StraightSection(tuple(Shift(w, d) for w, d in pairs))


def turn(*triples: Tuple[float, Sequence[float], Sequence[float]]) -> TurnSection:
    """Build a turn section from ``(width, displacement, step_speed)`` triples."""
    return TurnSection(tuple(TurnShift(w, d, s) for w, d, s in triples))


def generate_sections() -> List[Section]:
    """Return the built-in road: three straights and a sampled left turn."""
    return [
        straight((10.0, (100.0, 0.0, 0.0))),
        straight((30.0, (100.0, 100.0, 0.0))),
        straight((50.0, (0.0, 120.0, 0.0))),
        turn(
            (40.0, (-60.0, 60.0, 0.0), (-10.0, 30.0, 0.0)),
            (30.0, (-90.0, 0.0, 0.0), (-30.0, -10.0, 0.0)),
        ),
    ]


def count_shifts(sections: Iterable[Section]) -> int:
    return sum(len(section.shifts) for section in sections)


def _parse_shift(kind: str, raw: Dict[str, Any], where: str) -> Shift:
    if not isinstance(raw, dict):
        raise ValueError(f"{where}: expected a mapping, got {raw!r}")
    try:
        width = raw["width"]
        displacement = raw["displacement"]
    except KeyError as exc:
        raise ValueError(f"{where}: missing key {exc.args[0]!r}") from None
    if kind == "turn":
        if "step_speed" not in raw:
            raise ValueError(f"{where}: turn shifts need a 'step_speed'")
        return TurnShift(width, displacement, raw["step_speed"])
    return Shift(width, displacement)


def sections_from_config(config: Dict[str, Any]) -> List[Section]:
    """Build a catalog from the ``sections:`` list of a configuration.

    Parameters
    ----------
    config : dict
        Mapping with a ``sections`` key.  Each entry is
        ``{"kind": "straight" | "turn", "shifts": [...]}`` and each shift
        is ``{"width": w, "displacement": [x, y, z]}``; turn shifts also
        carry ``"step_speed": [x, y, z]``.

    Returns
    -------
    list of Section

    Raises
    ------
    ValueError
        On malformed entries.
    InvalidWidth
        On a non-positive width.
    UnimplementedSectionKind
        On a kind without a builder.
    """
    raw_sections = config.get("sections")
    if raw_sections is None:
        raise ValueError("configuration has no 'sections' list")
    if not isinstance(raw_sections, list):
        raise ValueError(f"'sections' must be a list, got {type(raw_sections).__name__}")

    sections: List[Section] = []
    for i, raw in enumerate(raw_sections):
        if not isinstance(raw, dict):
            raise ValueError(f"sections[{i}]: expected a mapping, got {raw!r}")
        kind = raw.get("kind", "straight")
        if not isinstance(kind, str) or kind not in SECTION_KINDS:
            raise UnimplementedSectionKind(kind)
        shifts = [
            _parse_shift(kind, shift, f"sections[{i}].shifts[{j}]")
            for j, shift in enumerate(raw.get("shifts") or [])
        ]
        sections.append(SECTION_KINDS[kind](tuple(shifts)))
    return sections
