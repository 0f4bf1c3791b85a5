"""Debug overlay geometry.

Line segments drawn on top of the road while tuning a catalog: the
centerline, short markers along each centerline segment's
perpendicular, the mesh wireframe, and the ribbon's own spine.
Segments are arrays of shape ``(S, 2, 3)``.
"""

from typing import Sequence

import numpy as np

from .geometry import perpendicular
from .models import Mesh, VERTICES_PER_QUAD

NORMAL_MARKER_LENGTH = 40.0


def line_to_segments(line: Sequence[Sequence[float]]) -> np.ndarray:
    """Pair each point with its predecessor.

    The first segment joins the first point to itself, so a line of
    ``N`` points gives ``N`` segments.
    """
    points = np.asarray(line, dtype=float)
    if len(points) == 0:
        raise ValueError("cannot draw an empty line")
    previous = np.vstack([points[:1], points[:-1]])
    return np.stack([previous, points], axis=1)


def segment_normals(segments: np.ndarray, length: float = NORMAL_MARKER_LENGTH,
                    epsilon: float = 1e-6) -> np.ndarray:
    """Perpendicular markers at both ends of every segment.

    Each non-degenerate segment ``(start, stop)`` yields two markers,
    ``(stop, stop + n * length)`` and ``(start, start + n * length)``,
    where ``n`` is its unit perpendicular.  Zero-length segments are
    left out.
    """
    markers = []
    for start, stop in np.asarray(segments, dtype=float):
        normal = perpendicular(stop - start, epsilon)
        if normal is None:
            continue
        markers.append((stop, stop + normal * length))
        markers.append((start, start + normal * length))
    if not markers:
        return np.empty((0, 2, 3))
    return np.asarray(markers)


def mesh_wireframe(mesh: Mesh) -> np.ndarray:
    """The three edges of every triangle, following the index buffer."""
    triangles = mesh.triangles().astype(float)
    if len(triangles) == 0:
        return np.empty((0, 2, 3))
    edges = np.stack([
        np.stack([triangles[:, 0], triangles[:, 1]], axis=1),
        np.stack([triangles[:, 1], triangles[:, 2]], axis=1),
        np.stack([triangles[:, 2], triangles[:, 0]], axis=1),
    ], axis=1)
    return edges.reshape(-1, 2, 3)


def mesh_spine(mesh: Mesh) -> np.ndarray:
    """Centre points of the ribbon, recovered from its quads.

    Each block of six vertices starts ``first + a, next + b, first - a,
    next - b``, so averaging vertices 0/2 and 1/3 gives the two road
    points the quad spans.
    """
    blocks = mesh.positions.astype(float).reshape(-1, VERTICES_PER_QUAD, 3)
    starts = (blocks[:, 0] + blocks[:, 2]) / 2.0
    ends = (blocks[:, 1] + blocks[:, 3]) / 2.0
    return np.stack([starts, ends], axis=1).reshape(-1, 3)
