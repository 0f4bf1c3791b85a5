"""Width-free polyline through the section waypoints.

Used for debug overlays only.  Turns are not sampled: the line jumps
straight from one shift target to the next.
"""

from typing import Iterable

import numpy as np

from .geometry import ORIGIN
from .sections import Section


def sections_into_line(sections: Iterable[Section]) -> np.ndarray:
    """Return the origin plus the cumulative position after every shift.

    Parameters
    ----------
    sections : iterable of Section
        The road catalog.

    Returns
    -------
    numpy.ndarray
        Array of shape ``(N + 1, 3)`` for a catalog of ``N`` shifts.
    """
    current = ORIGIN.copy()
    points = [current]
    for section in sections:
        for shift in section.shifts:
            current = current + shift.displacement
            points.append(current)
    return np.vstack(points)
