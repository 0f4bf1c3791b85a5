"""Data carried through the sweep and handed to the renderer.

``Pivot`` is the running state between sections, ``Trajectory`` the
ribbon geometry of one section and ``Mesh`` the assembled result.  The
mesh attribute arrays are the contract with the rendering layer: flat
float32 position and normal triples, float32 UV pairs and a uint32
triangle-list index buffer of the same length.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

import numpy as np

from .errors import InvalidWidth
from .geometry import ORIGIN, X_AXIS, as_vector

PLACEHOLDER_NORMAL = (1.0, 1.0, 1.0)
"""Constant normal written for every vertex; lighting is not used."""

PLACEHOLDER_UV = (0.0, 0.0)

VERTICES_PER_QUAD = 6


@dataclass(frozen=True, eq=False)
class Pivot:
    """Position, heading and width where the next section starts."""

    position: np.ndarray
    direction: np.ndarray
    """Unit direction of the last travelled edge."""

    width: float

    def __post_init__(self):
        object.__setattr__(self, "position", as_vector(self.position))
        object.__setattr__(self, "direction", as_vector(self.direction))
        if not float(self.width) > 0:
            raise InvalidWidth(self.width)
        object.__setattr__(self, "width", float(self.width))

    @classmethod
    def initial(cls, width: float) -> "Pivot":
        """Pivot at the origin heading along +X."""
        return cls(position=ORIGIN.copy(), direction=X_AXIS.copy(), width=width)


@dataclass(eq=False)
class Trajectory:
    """Non-indexed triangle list of one section."""

    positions: np.ndarray
    normals: np.ndarray
    uvs: np.ndarray
    edge_count: int = 0
    collar_count: int = 0

    def __post_init__(self):
        n = len(self.positions)
        if len(self.normals) != n or len(self.uvs) != n:
            raise ValueError(
                f"attribute lengths differ: {n} positions, "
                f"{len(self.normals)} normals, {len(self.uvs)} uvs"
            )
        if n % VERTICES_PER_QUAD:
            raise ValueError(f"vertex count {n} is not a multiple of {VERTICES_PER_QUAD}")

    @classmethod
    def from_vertices(cls, vertices: Sequence[np.ndarray], edge_count: int = 0,
                      collar_count: int = 0) -> "Trajectory":
        """Wrap emitted vertices, filling in placeholder normals and UVs."""
        n = len(vertices)
        positions = np.asarray(vertices, dtype=np.float32).reshape(n, 3)
        normals = np.tile(np.asarray(PLACEHOLDER_NORMAL, dtype=np.float32), (n, 1))
        uvs = np.tile(np.asarray(PLACEHOLDER_UV, dtype=np.float32), (n, 1))
        return cls(positions, normals, uvs, edge_count, collar_count)

    @classmethod
    def empty(cls) -> "Trajectory":
        return cls.from_vertices([])

    def __len__(self) -> int:
        return len(self.positions)


@dataclass(eq=False)
class Mesh:
    """Triangle-list mesh; ``indices[i] == i`` (no vertex sharing)."""

    positions: np.ndarray
    normals: np.ndarray
    uvs: np.ndarray
    indices: np.ndarray
    topology: str = "triangle_list"

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def triangle_count(self) -> int:
        return len(self.indices) // 3

    def triangles(self) -> np.ndarray:
        """Vertex positions grouped per triangle, shape ``(T, 3, 3)``."""
        return self.positions[self.indices].reshape(-1, 3, 3)

    def to_dict(self) -> Dict[str, List[Any]]:
        """Attribute lists in the shape the renderer consumes."""
        return {
            "positions": self.positions.tolist(),
            "normals": self.normals.tolist(),
            "uvs": self.uvs.tolist(),
            "indices": self.indices.tolist(),
        }
