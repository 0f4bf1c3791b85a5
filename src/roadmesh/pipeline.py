"""End-to-end road generation.

This module ties the catalog, the sweep, the centerline and the QA
checks together in one step-by-step workflow, the same sequence the
game runs when it builds its scene.

Usage:
    python -m src.roadmesh.pipeline --config configs/road.yaml --debug-png out/road.png
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import yaml

from src.qa.qa_tests import RoadMeshQA
from src.qa.visualizer import DebugOverlayVisualizer
from src.utils.config import DEFAULT_CONFIG_PATH, load_config
from src.utils.logging import get_logger

from .centerline import sections_into_line
from .errors import RoadGenerationError
from .mesh import generate_road
from .models import Mesh
from .sections import Section, count_shifts, generate_sections, sections_from_config
from .settings import GeneratorSettings, settings_from_config

logger = get_logger(__name__)


class RoadPipeline:
    """Build a road mesh from a catalog and check it.

    The pipeline holds the results of the last run so callers can hand
    the mesh and centerline to the renderer afterwards.
    """

    def __init__(self, settings: Optional[GeneratorSettings] = None,
                 qa: Optional[RoadMeshQA] = None):
        """Initialize the pipeline.

        Parameters
        ----------
        settings : GeneratorSettings, optional
            Sweep parameters (default settings if omitted).
        qa : RoadMeshQA, optional
            QA checker (default tolerance if omitted).
        """
        self.settings = settings or GeneratorSettings()
        self.qa = qa or RoadMeshQA()

        # Pipeline state
        self.sections: List[Section] = []
        self.mesh: Optional[Mesh] = None
        self.centerline: Optional[np.ndarray] = None
        self.qa_flags: Dict[str, bool] = {}

    def step_1_load_catalog(self, config: Optional[Dict[str, Any]] = None) -> List[Section]:
        """Step 1: Build the section catalog.

        Parameters
        ----------
        config : dict, optional
            Configuration with a ``sections`` list.  Without one the
            built-in catalog is used.

        Returns
        -------
        list of Section
        """
        if config and config.get("sections") is not None:
            self.sections = sections_from_config(config)
            source = "configuration"
        else:
            self.sections = generate_sections()
            source = "built-in catalog"
        logger.info("Loaded %d sections (%d shifts) from %s",
                    len(self.sections), count_shifts(self.sections), source)
        return self.sections

    def step_2_build_mesh(self, sections: Sequence[Section]) -> Mesh:
        """Step 2: Sweep the catalog and assemble the mesh."""
        self.mesh = generate_road(sections, self.settings)
        logger.info("Built mesh: %d vertices, %d triangles (%s joints)",
                    self.mesh.vertex_count, self.mesh.triangle_count,
                    self.settings.joint.value)
        return self.mesh

    def step_3_extract_centerline(self, sections: Sequence[Section]) -> np.ndarray:
        """Step 3: Debug centerline through the section waypoints."""
        self.centerline = sections_into_line(sections)
        logger.info("Centerline: %d points", len(self.centerline))
        return self.centerline

    def step_4_run_qa(self, mesh: Mesh, centerline: np.ndarray) -> Dict[str, bool]:
        """Step 4: Structural and centerline QA."""
        self.qa_flags = self.qa.run(mesh, centerline)
        failed = [name for name, ok in self.qa_flags.items() if not ok]
        if failed:
            logger.warning("QA failed: %s", ", ".join(failed))
        else:
            logger.info("QA passed (%d checks)", len(self.qa_flags))
        return self.qa_flags

    def step_5_render_debug(self, mesh: Mesh, centerline: np.ndarray, path: Path) -> Path:
        """Step 5: Write a debug overlay image."""
        path = Path(path)
        visualizer = DebugOverlayVisualizer(path.parent)
        output = visualizer.render(mesh, centerline, filename=path.name,
                                   title=f"{self.settings.joint.value} joints")
        logger.info("Debug overlay written to %s", output)
        return output

    def run(self, sections: Optional[Sequence[Section]] = None,
            debug_png: Optional[Path] = None) -> Dict[str, Any]:
        """Run the complete pipeline.

        Parameters
        ----------
        sections : sequence of Section, optional
            Catalog to build.  Uses the built-in catalog if omitted.
        debug_png : Path, optional
            Where to write the debug overlay; skipped if omitted.

        Returns
        -------
        dict
            Summary statistics.

        Raises
        ------
        RoadGenerationError
            If the catalog cannot be swept.
        """
        if sections is None:
            sections = self.step_1_load_catalog()
        else:
            self.sections = list(sections)

        mesh = self.step_2_build_mesh(self.sections)
        centerline = self.step_3_extract_centerline(self.sections)
        qa_flags = self.step_4_run_qa(mesh, centerline)

        debug_path = None
        if debug_png is not None:
            debug_path = self.step_5_render_debug(mesh, centerline, debug_png)

        summary = {
            "sections": len(self.sections),
            "shifts": count_shifts(self.sections),
            "vertices": mesh.vertex_count,
            "triangles": mesh.triangle_count,
            "centerline_points": len(centerline),
            "joint": self.settings.joint.value,
            "qa_ok": all(qa_flags.values()),
            "debug_png": str(debug_path) if debug_path else None,
        }
        return summary


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(
        description="Generate the road ribbon mesh and check it"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=str(DEFAULT_CONFIG_PATH),
        help="YAML file with 'sections' and 'generator' blocks"
    )
    parser.add_argument(
        "--joint",
        choices=["miter", "collar", "none"],
        help="Override the joint mode"
    )
    parser.add_argument(
        "--degenerate",
        choices=["raise", "skip"],
        help="Override the zero-length edge policy"
    )
    parser.add_argument(
        "--turn-steps",
        type=int,
        help="Override the number of sampling steps per turn shift"
    )
    parser.add_argument(
        "--debug-png",
        type=str,
        help="Write a debug overlay image to this path"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-section details"
    )

    args = parser.parse_args(argv)
    if args.verbose:
        for name in (__name__, "src.roadmesh.trajectory", "src.roadmesh.mesh"):
            get_logger(name, logging.DEBUG)

    try:
        config = load_config(args.config)
        overrides = {
            key: value for key, value in (
                ("joint", args.joint),
                ("degenerate", args.degenerate),
                ("turn_steps", args.turn_steps),
            ) if value is not None
        }
        settings = replace(settings_from_config(config), **overrides)
    except (ValueError, yaml.YAMLError) as exc:
        logger.error("Invalid configuration %s: %s", args.config, exc)
        return 1

    pipeline = RoadPipeline(settings)
    try:
        sections = pipeline.step_1_load_catalog(config)
        summary = pipeline.run(
            sections,
            debug_png=Path(args.debug_png) if args.debug_png else None,
        )
    except RoadGenerationError as exc:
        where = "" if exc.section_index is None else f" in section {exc.section_index}"
        logger.error("Road generation failed%s: %s", where, exc)
        return 1
    except ValueError as exc:
        logger.error("Invalid catalog in %s: %s", args.config, exc)
        return 1

    logger.info("Sections: %d, shifts: %d, vertices: %d, triangles: %d",
                summary["sections"], summary["shifts"],
                summary["vertices"], summary["triangles"])
    return 0 if summary["qa_ok"] else 1


if __name__ == "__main__":
    sys.exit(main())
