"""
Tests for Storyboard Types - Data Contract Validation

Tests the shared type definitions used by effect generators and the
storyboard serializer.
"""

import pytest
from storyboard_types import (
    TimeRange,
    Stage,
    DEFAULT_STAGE,
    Easing,
    Fade,
    Move,
    Color,
    Loop,
    Element,
    Layer,
    Origin,
    EffectError,
    InvalidTimeRangeError,
    InvalidConfigError,
    UnsupportedFormatError,
    validate_time_range,
    validate_color,
)


# ============================================================================
# TimeRange & Stage Tests
# ============================================================================

class TestTimeRange:
    """Test TimeRange dataclass"""

    def test_duration(self):
        """Duration is end minus start"""
        assert TimeRange(1000, 2500).duration == 1500

    def test_contains_is_inclusive(self):
        """Both window edges are inside the window"""
        window = TimeRange(1000, 2000)
        assert window.contains(1000)
        assert window.contains(2000)
        assert not window.contains(2001)

    def test_validate_accepts_empty_window(self):
        """start == end is a valid (zero-length) window"""
        assert validate_time_range(TimeRange(1000, 1000)) is True

    def test_validate_rejects_reversed_window(self):
        """end < start raises with effect and parameter context"""
        with pytest.raises(InvalidTimeRangeError) as exc_info:
            validate_time_range(TimeRange(2000, 1000), effect="particles", parameter="window")

        assert exc_info.value.effect == "particles"
        assert exc_info.value.parameter == "window"
        assert "particles" in str(exc_info.value)


class TestStage:
    """Test playfield bounds"""

    def test_default_bounds(self):
        """Default playfield is x in [-107, 747], y in [0, 480]"""
        assert DEFAULT_STAGE.center == (320.0, 240.0)
        assert DEFAULT_STAGE.contains(-107, 0)
        assert DEFAULT_STAGE.contains(747, 480)

    def test_outside_bounds(self):
        """Points just past any edge are outside"""
        assert not DEFAULT_STAGE.contains(-107.5, 100)
        assert not DEFAULT_STAGE.contains(747.5, 100)
        assert not DEFAULT_STAGE.contains(100, -0.1)
        assert not DEFAULT_STAGE.contains(100, 480.1)

    def test_custom_stage(self):
        """Custom stage dimensions replace the defaults"""
        stage = Stage(center=(960, 540), min_x=0, max_x=1920, min_y=0, max_y=1080)
        assert stage.contains(1900, 1000)
        assert not DEFAULT_STAGE.contains(1900, 1000)


# ============================================================================
# Command Tests
# ============================================================================

class TestCommands:
    """Test command dataclasses"""

    def test_static_constructor(self):
        """at() builds a zero-length command holding one value"""
        fade = Fade.at(500, 0.8)
        assert fade.start == fade.end == 500
        assert fade.start_value == fade.end_value == 0.8
        assert fade.is_static

    def test_dynamic_command_not_static(self):
        """A command spanning time is not static"""
        assert not Fade(0, 100, 0, 1).is_static

    def test_default_easing_linear(self):
        """Commands default to linear easing"""
        assert Move(0, 100, (0, 0), (10, 10)).easing == Easing.LINEAR

    def test_command_codes(self):
        """Each command type knows its script code"""
        assert Fade.code == "F"
        assert Move.code == "M"
        assert Color.code == "C"
        assert Loop.code == "L"

    def test_commands_are_frozen(self):
        """Commands cannot be mutated after creation"""
        fade = Fade(0, 100, 0, 1)
        with pytest.raises(Exception):
            fade.start = 50


class TestEasing:
    """Test easing name parsing"""

    def test_camel_case(self):
        assert Easing.from_name("OutQuad") == Easing.OUT_QUAD

    def test_snake_case(self):
        assert Easing.from_name("in_out_sine") == Easing.IN_OUT_SINE

    def test_plain_name(self):
        assert Easing.from_name("Linear") == Easing.LINEAR

    def test_unknown_name(self):
        with pytest.raises(InvalidConfigError):
            Easing.from_name("Wobbly")

    def test_easing_ids(self):
        """Ids match the numbers written into storyboard scripts"""
        assert int(Easing.LINEAR) == 0
        assert int(Easing.IN_OUT_BOUNCE) == 34


# ============================================================================
# Element Tests
# ============================================================================

class TestElement:
    """Test Element dataclass"""

    def test_commands_of(self):
        """commands_of filters top-level commands by type"""
        element = Element(
            kind="sprite",
            asset="sb/dot.png",
            layer=Layer.BACKGROUND,
            origin=Origin.CENTRE,
            position=(320, 240),
            commands=(Fade(0, 100, 0, 1), Move(0, 100, (0, 0), (1, 1)), Fade(100, 200, 1, 0))
        )
        assert len(element.commands_of(Fade)) == 2
        assert len(element.commands_of(Move)) == 1

    def test_default_text_empty(self):
        element = Element("sprite", "sb/dot.png", Layer.BACKGROUND, Origin.CENTRE, (0, 0))
        assert element.text == ""
        assert element.commands == ()


# ============================================================================
# Validation & Error Tests
# ============================================================================

class TestValidation:
    """Test validation helpers and error hierarchy"""

    def test_valid_color(self):
        assert validate_color((255, 128, 0)) is True

    def test_color_out_of_range(self):
        with pytest.raises(InvalidConfigError):
            validate_color((256, 0, 0))

    def test_color_wrong_length(self):
        with pytest.raises(InvalidConfigError):
            validate_color((255, 255))

    def test_errors_are_value_errors(self):
        """All effect errors can be caught as ValueError"""
        for error_type in (InvalidTimeRangeError, InvalidConfigError, UnsupportedFormatError):
            assert issubclass(error_type, EffectError)
            assert issubclass(error_type, ValueError)

    def test_error_message_without_context(self):
        assert str(EffectError("boom")) == "boom"
