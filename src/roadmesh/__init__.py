"""Procedural road ribbon generation.

Turns a catalog of straight and turn sections into a triangle-list
mesh, plus a width-free centerline for debug drawing.
"""

from .centerline import sections_into_line
from .errors import (
    DegenerateSegment,
    EmptySection,
    InvalidWidth,
    RoadGenerationError,
    UnimplementedSectionKind,
)
from .mesh import generate_road, trajectory_to_mesh
from .models import Mesh, Pivot, Trajectory
from .sections import (
    Section,
    Shift,
    StraightSection,
    TurnSection,
    TurnShift,
    generate_sections,
    sections_from_config,
)
from .settings import TURN_STEPS, DegeneratePolicy, GeneratorSettings, JointMode
from .trajectory import build_section, build_straight, build_turn

__all__ = [
    "sections_into_line",
    "DegenerateSegment",
    "EmptySection",
    "InvalidWidth",
    "RoadGenerationError",
    "UnimplementedSectionKind",
    "generate_road",
    "trajectory_to_mesh",
    "Mesh",
    "Pivot",
    "Trajectory",
    "Section",
    "Shift",
    "StraightSection",
    "TurnSection",
    "TurnShift",
    "generate_sections",
    "sections_from_config",
    "TURN_STEPS",
    "DegeneratePolicy",
    "GeneratorSettings",
    "JointMode",
    "build_section",
    "build_straight",
    "build_turn",
]
