"""Debug rendering of a road mesh.

Draws the filled ribbon, its triangle wireframe (green), the catalog
centerline (blue) and perpendicular markers along it (red) into a PNG,
so a catalog can be checked without starting the game.
"""

from pathlib import Path
from typing import Optional, Union

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.collections import LineCollection, PolyCollection
import numpy as np

from src.roadmesh.models import Mesh
from src.roadmesh.overlays import (
    NORMAL_MARKER_LENGTH,
    line_to_segments,
    mesh_wireframe,
    segment_normals,
)


class DebugOverlayVisualizer:
    """Render road meshes and their debug overlays to image files."""

    def __init__(self, output_dir: Union[str, Path], dpi: int = 100,
                 normal_length: float = NORMAL_MARKER_LENGTH):
        """Initialize visualizer.

        Parameters
        ----------
        output_dir : Path
            Directory for output images.  Created if missing.
        dpi : int
            Resolution of the saved figure.
        normal_length : float
            Length of the perpendicular markers in world units.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.dpi = dpi
        self.normal_length = normal_length

    def render(self, mesh: Mesh, centerline: Optional[np.ndarray] = None,
               filename: str = "road_debug.png", title: Optional[str] = None) -> Path:
        """Draw ``mesh`` and optionally ``centerline`` and save the figure.

        Parameters
        ----------
        mesh : Mesh
            Road mesh to draw.
        centerline : numpy.ndarray, optional
            Polyline of shape ``(N, 3)``.
        filename : str
            Output file name inside ``output_dir``.
        title : str, optional
            Figure title.

        Returns
        -------
        Path
            Path of the written image.
        """
        fig, ax = plt.subplots(figsize=(8, 8))
        try:
            triangles = mesh.triangles()[:, :, :2]
            if len(triangles):
                ax.add_collection(PolyCollection(
                    triangles, facecolors='0.8', edgecolors='none', zorder=1))
                ax.add_collection(LineCollection(
                    mesh_wireframe(mesh)[:, :, :2], colors='green', linewidths=0.5, zorder=2))

            if centerline is not None and len(centerline):
                segments = line_to_segments(centerline)
                ax.add_collection(LineCollection(
                    segments[:, :, :2], colors='blue', linewidths=1.5, zorder=3))
                markers = segment_normals(segments, self.normal_length)
                if len(markers):
                    ax.add_collection(LineCollection(
                        markers[:, :, :2], colors='red', linewidths=1.0, zorder=3))

            ax.autoscale()
            ax.set_aspect('equal')
            ax.set_xlabel('x')
            ax.set_ylabel('y')
            if title:
                ax.set_title(title)

            output_path = self.output_dir / filename
            fig.savefig(output_path, dpi=self.dpi, bbox_inches='tight')
        finally:
            plt.close(fig)
        return output_path
