"""Errors raised while building a road mesh.

All of them are detected before any geometry is handed to the
renderer.  :func:`src.roadmesh.mesh.generate_road` attaches the index of
the failing section as ``section_index`` and aborts the whole build.
"""

from typing import Optional, Sequence


class RoadGenerationError(Exception):
    """Base class for road generation failures."""

    section_index: Optional[int] = None


class DegenerateSegment(RoadGenerationError):
    """Two consecutive road points are (nearly) coincident.

    The perpendicular of a zero-length edge is undefined.
    """

    def __init__(self, index: int, point: Sequence[float], length: float):
        self.index = index
        self.point = tuple(float(c) for c in point)
        self.length = length
        super().__init__(
            f"edge {index} at {self.point} has length {length:.3g}; "
            "its perpendicular is undefined"
        )


class EmptySection(RoadGenerationError):
    """A section description without any shift."""

    def __init__(self, section_index: Optional[int] = None):
        self.section_index = section_index
        where = "" if section_index is None else f" {section_index}"
        super().__init__(f"section{where} has no shifts")


class InvalidWidth(RoadGenerationError, ValueError):
    """Road width is not a positive number."""

    def __init__(self, width: float):
        self.width = width
        super().__init__(f"road width must be positive, got {width!r}")


class UnimplementedSectionKind(RoadGenerationError, TypeError):
    """No builder exists for this kind of section."""

    def __init__(self, kind: object):
        self.kind = kind
        super().__init__(f"no builder for section kind {kind!r}")
