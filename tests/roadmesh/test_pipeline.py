"""Integration tests for the road pipeline and its CLI."""

import numpy as np
import yaml

from src.qa.qa_tests import RoadMeshQA
from src.roadmesh.pipeline import RoadPipeline, main
from src.roadmesh.sections import straight
from src.roadmesh.settings import GeneratorSettings


def write_config(path, config):
    with open(path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(config, f)
    return str(path)


class TestRoadPipeline:
    """Integration tests for RoadPipeline."""

    def test_pipeline_end_to_end(self):
        """The built-in road builds and passes QA."""
        pipeline = RoadPipeline()

        summary = pipeline.run()

        assert summary["sections"] == 4
        assert summary["shifts"] == 5
        assert summary["centerline_points"] == 6
        assert summary["vertices"] == pipeline.mesh.vertex_count
        assert summary["triangles"] * 3 == summary["vertices"]
        assert summary["qa_ok"] is True
        assert summary["debug_png"] is None
        assert all(pipeline.qa_flags.values())

    def test_pipeline_with_collars(self):
        """The legacy joint mode also passes QA."""
        pipeline = RoadPipeline(GeneratorSettings(joint="collar"))

        summary = pipeline.run()

        assert summary["joint"] == "collar"
        assert summary["qa_ok"] is True

    def test_pipeline_uses_given_qa(self):
        """A supplied checker is the one the QA step runs."""
        qa = RoadMeshQA(tolerance=-1.0)
        pipeline = RoadPipeline(qa=qa)

        summary = pipeline.run()

        assert pipeline.qa is qa
        assert summary["qa_ok"] is False
        assert pipeline.qa_flags["centerline_ok"] is False
        assert pipeline.qa_flags["indices_ok"] is True

    def test_pipeline_with_custom_sections(self):
        """Explicit catalogs replace the built-in one."""
        pipeline = RoadPipeline()

        summary = pipeline.run([straight((10.0, (100.0, 0.0, 0.0)))])

        assert summary["sections"] == 1
        assert summary["vertices"] == 6
        np.testing.assert_allclose(pipeline.centerline, [[0, 0, 0], [100, 0, 0]])

    def test_pipeline_debug_png(self, tmp_path):
        """A debug overlay is written when requested."""
        output = tmp_path / "debug" / "road.png"

        summary = RoadPipeline().run(debug_png=output)

        assert output.exists()
        assert output.stat().st_size > 0
        assert summary["debug_png"] == str(output)


class TestMain:
    """Tests for the command-line entry point."""

    def test_default_config(self):
        """The shipped configuration succeeds."""
        assert main([]) == 0

    def test_overrides(self, tmp_path):
        """CLI flags override the configuration."""
        png = tmp_path / "road.png"

        assert main(["--joint", "collar", "--turn-steps", "5", "--debug-png", str(png)]) == 0
        assert png.exists()

    def test_missing_config_uses_builtin_catalog(self, tmp_path):
        """A missing file falls back to the built-in road."""
        assert main(["--config", str(tmp_path / "absent.yaml")]) == 0

    def test_degenerate_catalog_fails(self, tmp_path):
        """A zero-length shift makes the run fail."""
        config = write_config(tmp_path / "road.yaml", {"sections": [
            {"kind": "straight", "shifts": [{"width": 10, "displacement": [0, 0, 0]}]},
        ]})

        assert main(["--config", config]) == 1

    def test_degenerate_catalog_skipped(self, tmp_path):
        """The same catalog succeeds when zero edges are skipped."""
        config = write_config(tmp_path / "road.yaml", {"sections": [
            {"kind": "straight", "shifts": [
                {"width": 10, "displacement": [100, 0, 0]},
                {"width": 10, "displacement": [0, 0, 0]},
            ]},
        ]})

        assert main(["--config", config, "--degenerate", "skip"]) == 0

    def test_invalid_settings_fail(self, tmp_path):
        """Bad generator settings are reported as a failed run."""
        config = write_config(tmp_path / "road.yaml", {"generator": {"joint": "round"}})

        assert main(["--config", config]) == 1

    def test_invalid_width_fails(self, tmp_path):
        """Non-positive widths are rejected while loading the catalog."""
        config = write_config(tmp_path / "road.yaml", {"sections": [
            {"kind": "straight", "shifts": [{"width": -3, "displacement": [10, 0, 0]}]},
        ]})

        assert main(["--config", config]) == 1

    def test_exponent_epsilon_in_yaml(self, tmp_path):
        """YAML reads 1e-6 as a string; it is still accepted as a number."""
        config = tmp_path / "road.yaml"
        config.write_text("generator:\n  epsilon: 1e-6\n  turn_steps: 3.0\n", encoding="utf-8")

        assert main(["--config", str(config)]) == 0

    def test_non_numeric_setting_fails(self, tmp_path):
        """A setting that is not a number is a failed run, not a crash."""
        config = write_config(tmp_path / "road.yaml", {"generator": {"epsilon": "tiny"}})

        assert main(["--config", config]) == 1

    def test_generator_block_must_be_mapping(self, tmp_path):
        """A generator list is reported as a failed run."""
        config = write_config(tmp_path / "road.yaml", {"generator": ["miter"]})

        assert main(["--config", config]) == 1

    def test_list_section_kind_fails(self, tmp_path):
        """A section kind written as a YAML list is a failed run."""
        config = write_config(tmp_path / "road.yaml", {"sections": [
            {"kind": ["turn"], "shifts": []},
        ]})

        assert main(["--config", config]) == 1
