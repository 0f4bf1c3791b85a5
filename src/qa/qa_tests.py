"""Quality assurance checks for generated road meshes.

`RoadMeshQA` verifies the structural contract of a mesh before it is
handed to the renderer (matching attribute lengths, whole quads, a
sequential index buffer, finite coordinates) and that the ribbon
actually follows the debug centerline: every centerline waypoint must
be one of the road points the ribbon's quads span.
"""

from dataclasses import dataclass
from typing import Dict

import numpy as np

from src.roadmesh.models import Mesh, VERTICES_PER_QUAD
from src.roadmesh.overlays import mesh_spine


@dataclass
class RoadMeshQA:
    """Validate a generated road mesh."""

    tolerance: float = 1e-3
    """Maximum distance between a centerline point and the ribbon spine."""

    def check_attributes(self, mesh: Mesh) -> bool:
        n = len(mesh.positions)
        return (mesh.positions.shape == (n, 3)
                and mesh.normals.shape == (n, 3)
                and mesh.uvs.shape == (n, 2)
                and len(mesh.indices) == n)

    def check_triangles(self, mesh: Mesh) -> bool:
        return len(mesh.positions) % VERTICES_PER_QUAD == 0

    def check_indices(self, mesh: Mesh) -> bool:
        return bool(np.array_equal(mesh.indices, np.arange(len(mesh.indices))))

    def check_finite(self, mesh: Mesh) -> bool:
        return bool(np.all(np.isfinite(mesh.positions))
                    and np.all(np.isfinite(mesh.normals))
                    and np.all(np.isfinite(mesh.uvs)))

    def check_centerline(self, mesh: Mesh, centerline: np.ndarray) -> bool:
        """Check that every centerline point lies on the ribbon spine.

        A centerline of only the origin is trivially satisfied by an
        empty mesh.  Otherwise each point must be within ``tolerance``
        of some spine point.
        """
        centerline = np.asarray(centerline, dtype=float)
        if len(centerline) <= 1 and len(mesh.positions) == 0:
            return True
        if len(mesh.positions) == 0:
            return False
        spine = mesh_spine(mesh)
        # Pairwise distances; catalogs are small enough for a dense matrix.
        dists = np.linalg.norm(centerline[:, None, :] - spine[None, :, :], axis=2)
        return bool(np.all(dists.min(axis=1) <= self.tolerance))

    def run(self, mesh: Mesh, centerline: np.ndarray) -> Dict[str, bool]:
        """Run all checks.

        Parameters
        ----------
        mesh : Mesh
            Output of :func:`src.roadmesh.mesh.generate_road`.
        centerline : numpy.ndarray
            Output of :func:`src.roadmesh.centerline.sections_into_line`
            for the same catalog.

        Returns
        -------
        dict
            Mapping from check names to pass/fail.
        """
        structural = self.check_attributes(mesh) and self.check_triangles(mesh)
        return {
            "attributes_ok": self.check_attributes(mesh),
            "triangles_ok": self.check_triangles(mesh),
            "indices_ok": self.check_indices(mesh),
            "finite_ok": self.check_finite(mesh),
            "centerline_ok": structural and self.check_centerline(mesh, centerline),
        }
