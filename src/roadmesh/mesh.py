"""Assemble per-section trajectories into one renderable mesh."""

from typing import Iterable, Optional, Sequence

import numpy as np

from src.utils.logging import get_logger

from .models import Mesh, Pivot, Trajectory
from .sections import Section
from .settings import GeneratorSettings
from .trajectory import DEFAULT_SETTINGS, build_trajectories

logger = get_logger(__name__)


def _concatenate(arrays, columns: int) -> np.ndarray:
    return np.concatenate([np.empty((0, columns), dtype=np.float32)] + list(arrays))


def trajectory_to_mesh(trajectories: Iterable[Trajectory]) -> Mesh:
    """Concatenate trajectories, in order, into a triangle-list mesh.

    Vertices are not shared: the index buffer is ``0 .. N-1``.  An empty
    input gives an empty mesh.
    """
    trajectories = list(trajectories)
    positions = _concatenate((t.positions for t in trajectories), 3)
    normals = _concatenate((t.normals for t in trajectories), 3)
    uvs = _concatenate((t.uvs for t in trajectories), 2)
    indices = np.arange(len(positions), dtype=np.uint32)
    return Mesh(positions=positions, normals=normals, uvs=uvs, indices=indices)


def generate_road(sections: Sequence[Section], settings: Optional[GeneratorSettings] = None,
                  initial_width: Optional[float] = None) -> Mesh:
    """Build the road mesh for a section catalog.

    Parameters
    ----------
    sections : sequence of Section
        The catalog, in driving order.
    settings : GeneratorSettings, optional
        Sweep parameters; defaults to :class:`GeneratorSettings()`.
    initial_width : float, optional
        Road width at the origin.  Overrides ``settings.initial_width``.

    Returns
    -------
    Mesh
        The assembled ribbon.

    Raises
    ------
    RoadGenerationError
        If any section fails; ``section_index`` names it.  No partial
        mesh is returned.
    """
    if settings is None:
        settings = DEFAULT_SETTINGS
    pivot = None
    if initial_width is not None:
        pivot = Pivot.initial(initial_width)
    trajectories = build_trajectories(sections, settings, pivot)
    mesh = trajectory_to_mesh(trajectories)
    logger.debug(
        "Road mesh: %d sections, %d triangles (%s joints)",
        len(trajectories), mesh.triangle_count, settings.joint.value,
    )
    return mesh
