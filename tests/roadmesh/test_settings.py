"""Unit tests for generator settings."""

import pytest

from src.roadmesh.errors import InvalidWidth
from src.roadmesh.mesh import generate_road
from src.roadmesh.sections import turn
from src.roadmesh.settings import (
    TURN_STEPS,
    DegeneratePolicy,
    GeneratorSettings,
    JointMode,
    settings_from_config,
)


class TestGeneratorSettings:
    """Test suite for GeneratorSettings."""

    def test_defaults(self):
        """Mitered joints, raising on degenerate edges, three turn steps."""
        settings = GeneratorSettings()

        assert settings.turn_steps == TURN_STEPS == 3
        assert settings.joint is JointMode.MITER
        assert settings.degenerate is DegeneratePolicy.RAISE
        assert settings.reject_empty_sections is False
        assert settings.initial_width == 10.0

    def test_string_enums(self):
        """Enum fields accept their string values."""
        settings = GeneratorSettings(joint="collar", degenerate="skip")

        assert settings.joint is JointMode.COLLAR
        assert settings.degenerate is DegeneratePolicy.SKIP

    def test_numeric_values_are_coerced(self):
        """Whole floats and numeric strings become int and float values."""
        settings = GeneratorSettings(turn_steps=3.0, epsilon="1e-6", miter_limit="2",
                                     initial_width="7.5")

        assert settings.turn_steps == 3
        assert isinstance(settings.turn_steps, int)
        assert settings.epsilon == 1e-6
        assert settings.miter_limit == 2.0
        assert settings.initial_width == 7.5

    @pytest.mark.parametrize("kwargs", [
        {"turn_steps": 0},
        {"turn_steps": 1.5},
        {"turn_steps": "three"},
        {"turn_steps": True},
        {"epsilon": "1e-6x"},
        {"epsilon": None},
        {"miter_limit": float("inf")},
        {"reject_empty_sections": "false"},
        {"epsilon": 0.0},
        {"miter_limit": 0.5},
        {"joint": "round"},
        {"degenerate": "ignore"},
    ])
    def test_invalid_values(self, kwargs):
        """Out-of-range values are rejected."""
        with pytest.raises(ValueError):
            GeneratorSettings(**kwargs)

    def test_invalid_initial_width(self):
        """The starting width must be positive."""
        with pytest.raises(InvalidWidth):
            GeneratorSettings(initial_width=-1.0)

        with pytest.raises(InvalidWidth):
            GeneratorSettings(initial_width="wide")

    def test_frozen(self):
        """Settings cannot be changed once built."""
        settings = GeneratorSettings()

        with pytest.raises(AttributeError):
            settings.turn_steps = 5


class TestSettingsFromConfig:
    """Test suite for settings_from_config."""

    def test_empty_config(self):
        """No generator block means defaults."""
        assert settings_from_config({}) == GeneratorSettings()

    def test_generator_block(self):
        """Known keys are applied."""
        settings = settings_from_config({"generator": {
            "turn_steps": 5,
            "joint": "none",
            "initial_width": 12.5,
        }})

        assert settings.turn_steps == 5
        assert settings.joint is JointMode.NONE
        assert settings.initial_width == 12.5

    def test_unknown_key(self):
        """Typos are reported, not ignored."""
        with pytest.raises(ValueError, match="turn_step"):
            settings_from_config({"generator": {"turn_step": 5}})

    def test_block_must_be_mapping(self):
        """A generator block that is not a mapping is rejected."""
        with pytest.raises(ValueError, match="mapping"):
            settings_from_config({"generator": ["miter"]})

    def test_whole_float_turn_steps_builds(self):
        """turn_steps read as 3.0 can drive the turn sampler."""
        settings = settings_from_config({"generator": {"turn_steps": 3.0}})

        mesh = generate_road([turn((10.0, (100.0, 0.0, 0.0), (20.0, 0.0, 0.0)))], settings)

        assert mesh.vertex_count == 6 * 4
