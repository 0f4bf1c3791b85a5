"""Vector helpers for the ribbon sweep.

Road geometry is planar but carried in 3D so that the renderer can use
the positions directly.  Vectors are float64 ``numpy`` arrays of shape
``(3,)``.  The perpendicular of a travel direction is
``normalize(cross(direction, Z))``, i.e. ``(dy, -dx, 0)``; for a road
heading along +X it points to -Y.
"""

from typing import Optional, Sequence

import numpy as np

Z_AXIS = np.array([0.0, 0.0, 1.0])
X_AXIS = np.array([1.0, 0.0, 0.0])
ORIGIN = np.zeros(3)


def as_vector(value: Sequence[float]) -> np.ndarray:
    """Convert a 2- or 3-sequence to a read-only float64 Vector3.

    The result is always a copy; z defaults to 0 for 2D input.
    """
    try:
        vec = np.array(value, dtype=float).reshape(-1)
    except (TypeError, ValueError):
        raise ValueError(f"expected a 2D or 3D vector, got {value!r}") from None
    if vec.shape == (2,):
        vec = np.append(vec, 0.0)
    if vec.shape != (3,):
        raise ValueError(f"expected a 2D or 3D vector, got {value!r}")
    if not np.all(np.isfinite(vec)):
        raise ValueError(f"vector components must be finite, got {value!r}")
    vec.setflags(write=False)
    return vec


def perpendicular(direction: np.ndarray, epsilon: float) -> Optional[np.ndarray]:
    """Unit vector rotated 90 degrees clockwise from ``direction`` in the XY plane.

    Returns ``None`` when the planar length of ``direction`` is not above
    ``epsilon``.
    """
    perp = np.cross(direction, Z_AXIS)
    norm = np.linalg.norm(perp)
    if norm <= epsilon:
        return None
    return perp / norm


def unit(vector: np.ndarray, epsilon: float) -> Optional[np.ndarray]:
    norm = np.linalg.norm(vector)
    if norm <= epsilon:
        return None
    return vector / norm


def step_towards(position: np.ndarray, step: np.ndarray,
                 start: np.ndarray, target: np.ndarray) -> np.ndarray:
    """Advance ``position`` by ``step`` without passing ``target``.

    Only the target side is clamped: a component whose target lies at or
    above the shift's start behaves as ``min(position + step, target)``,
    one whose target lies below it as ``max(position + step, target)``.
    A step pointing away from the target is taken unchanged.
    """
    moved = position + step
    return np.where(target >= start, np.minimum(moved, target), np.maximum(moved, target))


def miter_offset(incoming: np.ndarray, outgoing: np.ndarray,
                 limit: float, epsilon: float) -> Optional[np.ndarray]:
    """Offset direction at a joint between two unit perpendiculars.

    The bisector of both perpendiculars, scaled by ``1 / cos(theta / 2)``
    so the road keeps its width on both edges.  The scale is capped at
    ``limit``.  Returns ``None`` for a reversal, where no bisector exists.
    """
    bisector = unit(incoming + outgoing, epsilon)
    if bisector is None:
        return None
    cos_half = float(np.dot(bisector, outgoing))
    scale = min(1.0 / max(cos_half, epsilon), limit)
    return bisector * scale
