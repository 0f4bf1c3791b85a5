"""Ribbon sweep over the section catalog.

Each section is processed in two stages.  *Planning* samples the road
points the section passes through, each with the road width that
applies from that point on, and resolves degenerate edges.  *Emission*
turns consecutive point pairs into quads of six non-indexed vertices,
offset left and right along the edge perpendicular.

The sweep threads a :class:`Pivot` from one section to the next: every
call consumes the incoming pivot and returns a new one, nothing is
mutated in place.  Because emission only needs the planned points of
the section and the first direction of its successor,
:func:`build_trajectories` plans the whole road first (a sequential
scan over the pivots) and emits afterwards.

Quad vertex order, for an edge from ``first`` to ``next`` with offsets
``a`` at ``first`` and ``b`` at ``next``::

    first + a, next + b, first - a,
    next - b,  first - a, next + b
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from src.utils.logging import get_logger

from .errors import DegenerateSegment, EmptySection, RoadGenerationError, UnimplementedSectionKind
from .geometry import miter_offset, perpendicular, step_towards, unit
from .models import Pivot, Trajectory
from .sections import Section, Shift, StraightSection, TurnSection, TurnShift
from .settings import DegeneratePolicy, GeneratorSettings, JointMode

logger = get_logger(__name__)

DEFAULT_SETTINGS = GeneratorSettings()

Points = List[np.ndarray]
Widths = List[float]


@dataclass(eq=False)
class SectionPlan:
    """Road points of one section, ready for emission."""

    entry: Pivot
    points: Points
    """Starts with ``entry.position``; no two consecutive points coincide."""

    widths: Widths
    """``widths[i]`` is the road width of the edge leaving ``points[i]``."""

    exit: Pivot

    @property
    def edge_count(self) -> int:
        return max(len(self.points) - 1, 0)

    @property
    def first_direction(self) -> Optional[np.ndarray]:
        """Direction of the first edge, or ``None`` for an empty section."""
        if self.edge_count == 0:
            return None
        return self.points[1] - self.points[0]


# ----------------------------------------------------------------------
# Sampling
# ----------------------------------------------------------------------

def _sample_straight(pivot: Pivot, shifts: Sequence[Shift],
                     settings: GeneratorSettings) -> Tuple[Points, Widths]:
    points = [pivot.position]
    widths = [pivot.width]
    current = pivot.position
    for shift in shifts:
        current = current + shift.displacement
        points.append(current)
        widths.append(shift.width)
    return points, widths


def _sample_turn(pivot: Pivot, shifts: Sequence[TurnShift],
                 settings: GeneratorSettings) -> Tuple[Points, Widths]:
    points = [pivot.position]
    widths = [pivot.width]
    current = pivot.position
    for shift in shifts:
        start = current
        target = start + shift.displacement
        moved = False
        for _ in range(settings.turn_steps):
            stepped = step_towards(current, shift.step_speed, start, target)
            if np.array_equal(stepped, current):
                continue
            current = stepped
            moved = True
            points.append(current)
            widths.append(shift.width)
        # A shift that never moved still gets its point, so that a zero
        # displacement is handled by the degenerate policy.
        if not moved or not np.array_equal(current, target):
            current = target
            points.append(current)
            widths.append(shift.width)
    return points, widths


SAMPLERS: Dict[type, Callable[[Pivot, Sequence[Shift], GeneratorSettings], Tuple[Points, Widths]]] = {
    StraightSection: _sample_straight,
    TurnSection: _sample_turn,
}


def sample_section(pivot: Pivot, section: Section,
                   settings: GeneratorSettings = DEFAULT_SETTINGS) -> Tuple[Points, Widths]:
    """Sample the raw road points of ``section`` starting at ``pivot``.

    Parameters
    ----------
    pivot : Pivot
        State at the start of the section.
    section : Section
        Straight or turn section.
    settings : GeneratorSettings
        Supplies ``turn_steps``.

    Returns
    -------
    (list of numpy.ndarray, list of float)
        Points (starting with ``pivot.position``) and the width carried
        by each point.  Degenerate edges are not yet removed.

    Raises
    ------
    UnimplementedSectionKind
        If ``section`` is not one of the declared section types.
    """
    sampler = SAMPLERS.get(type(section))
    if sampler is None:
        raise UnimplementedSectionKind(type(section).__name__)
    return sampler(pivot, section.shifts, settings)


def resolve_degenerate(points: Points, widths: Widths,
                       settings: GeneratorSettings) -> Tuple[Points, Widths]:
    """Apply the degenerate-edge policy to sampled points.

    An edge whose planar length is not above ``settings.epsilon`` either
    raises :class:`DegenerateSegment` or, with the ``skip`` policy, is
    collapsed: its end point is dropped and its width replaces the width
    of the point it collapsed into.
    """
    kept_points = [points[0]]
    kept_widths = [widths[0]]
    for i in range(1, len(points)):
        delta = points[i] - kept_points[-1]
        length = float(np.hypot(delta[0], delta[1]))
        if length <= settings.epsilon:
            if settings.degenerate is DegeneratePolicy.RAISE:
                raise DegenerateSegment(len(kept_points) - 1, kept_points[-1], length)
            logger.debug("Skipping zero-length edge at %s", kept_points[-1])
            kept_widths[-1] = widths[i]
            continue
        kept_points.append(points[i])
        kept_widths.append(widths[i])
    return kept_points, kept_widths


def plan_section(pivot: Pivot, section: Section,
                 settings: GeneratorSettings = DEFAULT_SETTINGS) -> SectionPlan:
    """Sample ``section`` and compute the pivot it hands to the next one."""
    if type(section) not in SAMPLERS:
        raise UnimplementedSectionKind(type(section).__name__)
    if not section.shifts:
        if settings.reject_empty_sections:
            raise EmptySection()
        return SectionPlan(entry=pivot, points=[pivot.position], widths=[pivot.width], exit=pivot)

    points, widths = sample_section(pivot, section, settings)
    points, widths = resolve_degenerate(points, widths, settings)

    direction = pivot.direction
    if len(points) > 1:
        direction = unit(points[-1] - points[-2], settings.epsilon)
    exit_pivot = Pivot(position=points[-1], direction=direction, width=widths[-1])
    return SectionPlan(entry=pivot, points=points, widths=widths, exit=exit_pivot)


# ----------------------------------------------------------------------
# Emission
# ----------------------------------------------------------------------

def _emit_quad(vertices: List[np.ndarray], first: np.ndarray, next_: np.ndarray,
               first_offset: np.ndarray, next_offset: np.ndarray) -> None:
    vertices.extend((
        first + first_offset,
        next_ + next_offset,
        first - first_offset,
        next_ - next_offset,
        first - first_offset,
        next_ + next_offset,
    ))


def _joint_perpendicular(direction: Optional[np.ndarray],
                         settings: GeneratorSettings) -> Optional[np.ndarray]:
    if direction is None:
        return None
    return perpendicular(direction, settings.epsilon)


def _miter_offsets(perps: List[np.ndarray], entry: Optional[np.ndarray],
                   exit_: Optional[np.ndarray],
                   settings: GeneratorSettings) -> List[Tuple[np.ndarray, np.ndarray]]:
    # Joint k sits at points[k]: edge k - 1 ends there and edge k starts there.
    joints = []
    for before, after in zip([entry] + perps, perps + [exit_]):
        if before is None or after is None:
            joints.append(None)
        else:
            joints.append(miter_offset(before, after, settings.miter_limit, settings.epsilon))
    offsets = []
    for i, perp in enumerate(perps):
        start = joints[i] if joints[i] is not None else perp
        end = joints[i + 1] if joints[i + 1] is not None else perp
        offsets.append((start, end))
    return offsets


def emit_section(plan: SectionPlan, settings: GeneratorSettings = DEFAULT_SETTINGS,
                 exit_direction: Optional[np.ndarray] = None) -> Trajectory:
    """Emit the ribbon triangles of a planned section.

    Parameters
    ----------
    plan : SectionPlan
        Output of :func:`plan_section`.
    settings : GeneratorSettings
        Joint mode, miter limit and epsilon.
    exit_direction : numpy.ndarray, optional
        Direction of the first edge after this section.  Only used by the
        miter joint at the section's last point.

    Returns
    -------
    Trajectory
        ``6 * (edges + collars)`` vertices.
    """
    points, widths = plan.points, plan.widths
    perps = [
        perpendicular(points[i + 1] - points[i], settings.epsilon)
        for i in range(plan.edge_count)
    ]
    if not perps:
        return Trajectory.empty()

    entry_perp = _joint_perpendicular(plan.entry.direction, settings)
    vertices: List[np.ndarray] = []
    collars = 0

    if settings.joint is JointMode.MITER:
        exit_perp = _joint_perpendicular(exit_direction, settings)
        offsets = _miter_offsets(perps, entry_perp, exit_perp, settings)
        for i, (start, end) in enumerate(offsets):
            _emit_quad(vertices, points[i], points[i + 1], start * widths[i], end * widths[i])
    else:
        current = entry_perp
        for i, perp in enumerate(perps):
            width = widths[i]
            if (settings.joint is JointMode.COLLAR and current is not None
                    and not np.allclose(perp, current, rtol=0.0, atol=settings.epsilon)):
                _emit_quad(vertices, points[i], points[i], current * width, perp * width)
                collars += 1
            _emit_quad(vertices, points[i], points[i + 1], perp * width, perp * width)
            current = perp

    return Trajectory.from_vertices(vertices, edge_count=len(perps), collar_count=collars)


# ----------------------------------------------------------------------
# Builders
# ----------------------------------------------------------------------

def build_section(pivot: Pivot, section: Section,
                  settings: GeneratorSettings = DEFAULT_SETTINGS,
                  exit_direction: Optional[np.ndarray] = None) -> Tuple[Pivot, Trajectory]:
    """Sweep one section.

    Parameters
    ----------
    pivot : Pivot
        State at the start of the section.
    section : Section
        Straight or turn section.
    settings : GeneratorSettings
        Sweep parameters.
    exit_direction : numpy.ndarray, optional
        First direction of the following section, for the miter joint.

    Returns
    -------
    (Pivot, Trajectory)
        The pivot for the next section and this section's ribbon.

    Raises
    ------
    DegenerateSegment
        On a zero-length edge under the ``raise`` policy.
    EmptySection
        On an empty section when ``reject_empty_sections`` is set.
    UnimplementedSectionKind
        If ``section`` has no builder.
    """
    plan = plan_section(pivot, section, settings)
    trajectory = emit_section(plan, settings, exit_direction)
    logger.debug(
        "%s: %d edges, %d collars, %d vertices",
        type(section).__name__, trajectory.edge_count, trajectory.collar_count, len(trajectory),
    )
    return plan.exit, trajectory


def build_straight(pivot: Pivot, description: Sequence[Shift],
                   settings: GeneratorSettings = DEFAULT_SETTINGS,
                   exit_direction: Optional[np.ndarray] = None) -> Tuple[Pivot, Trajectory]:
    """Sweep a straight section given as a sequence of shifts."""
    return build_section(pivot, StraightSection(tuple(description)), settings, exit_direction)


def build_turn(pivot: Pivot, description: Sequence[TurnShift],
               settings: GeneratorSettings = DEFAULT_SETTINGS,
               exit_direction: Optional[np.ndarray] = None) -> Tuple[Pivot, Trajectory]:
    """Sweep a turn section given as a sequence of turn shifts."""
    return build_section(pivot, TurnSection(tuple(description)), settings, exit_direction)


def plan_road(sections: Sequence[Section], settings: GeneratorSettings = DEFAULT_SETTINGS,
              pivot: Optional[Pivot] = None) -> List[SectionPlan]:
    """Plan every section in order, threading the pivot.

    Errors carry the index of the failing section in ``section_index``.
    """
    if pivot is None:
        pivot = Pivot.initial(settings.initial_width)
    plans = []
    for index, section in enumerate(sections):
        try:
            plan = plan_section(pivot, section, settings)
        except RoadGenerationError as exc:
            exc.section_index = index
            raise
        plans.append(plan)
        pivot = plan.exit
    return plans


def build_trajectories(sections: Sequence[Section], settings: GeneratorSettings = DEFAULT_SETTINGS,
                       pivot: Optional[Pivot] = None) -> List[Trajectory]:
    """Plan the whole road, then emit one trajectory per section in order."""
    plans = plan_road(sections, settings, pivot)
    trajectories = []
    exit_direction = None
    # Walk backwards so each section knows where its successor heads.
    for plan in reversed(plans):
        trajectories.append(emit_section(plan, settings, exit_direction))
        if plan.first_direction is not None:
            exit_direction = plan.first_direction
    trajectories.reverse()
    return trajectories
