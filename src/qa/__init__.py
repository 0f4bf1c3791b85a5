"""Quality assurance for generated road meshes."""

from .qa_tests import RoadMeshQA
from .visualizer import DebugOverlayVisualizer

__all__ = ["RoadMeshQA", "DebugOverlayVisualizer"]
