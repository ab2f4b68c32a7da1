"""
Storyboard Data Types - Shared Contract

Defines the data contract between effect generators and whatever consumes
their output (the .osb serializer, tests, a custom backend).

Type Hierarchy:
    Command (Fade, Scale, ScaleVec, Move, Rotate, Color) → one timed keyframe
    Loop → repeats a body of commands in loop-relative time
    Element → one created sprite/text with its ordered commands
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Callable, ClassVar, Tuple


Vector2 = Tuple[float, float]
RGB = Tuple[int, int, int]


# ============================================================================
# Errors
# ============================================================================

class EffectError(ValueError):
    """Base error for effect generation

    Carries the effect name and offending parameter so the caller can fix
    the configuration without digging through a traceback.
    """

    def __init__(self, message: str, effect: str = "", parameter: str = ""):
        self.effect = effect
        self.parameter = parameter
        prefix = f"[{effect}] " if effect else ""
        suffix = f" (parameter: {parameter})" if parameter else ""
        super().__init__(f"{prefix}{message}{suffix}")


class InvalidTimeRangeError(EffectError):
    """Time range with end before start"""


class UnsupportedFormatError(EffectError):
    """Input file extension that no loader understands"""


class InvalidConfigError(EffectError):
    """Effect option outside its valid domain"""


# ============================================================================
# Enumerations
# ============================================================================

class Layer(str, Enum):
    BACKGROUND = "Background"
    FAIL = "Fail"
    PASS = "Pass"
    FOREGROUND = "Foreground"
    OVERLAY = "Overlay"


class Origin(str, Enum):
    TOP_LEFT = "TopLeft"
    TOP_CENTRE = "TopCentre"
    TOP_RIGHT = "TopRight"
    CENTRE_LEFT = "CentreLeft"
    CENTRE = "Centre"
    CENTRE_RIGHT = "CentreRight"
    BOTTOM_LEFT = "BottomLeft"
    BOTTOM_CENTRE = "BottomCentre"
    BOTTOM_RIGHT = "BottomRight"


class Easing(IntEnum):
    """Storyboard easing ids (the number written into each command line)"""
    LINEAR = 0
    OUT = 1
    IN = 2
    IN_QUAD = 3
    OUT_QUAD = 4
    IN_OUT_QUAD = 5
    IN_CUBIC = 6
    OUT_CUBIC = 7
    IN_OUT_CUBIC = 8
    IN_QUART = 9
    OUT_QUART = 10
    IN_OUT_QUART = 11
    IN_QUINT = 12
    OUT_QUINT = 13
    IN_OUT_QUINT = 14
    IN_SINE = 15
    OUT_SINE = 16
    IN_OUT_SINE = 17
    IN_EXPO = 18
    OUT_EXPO = 19
    IN_OUT_EXPO = 20
    IN_CIRC = 21
    OUT_CIRC = 22
    IN_OUT_CIRC = 23
    IN_ELASTIC = 24
    OUT_ELASTIC = 25
    OUT_ELASTIC_HALF = 26
    OUT_ELASTIC_QUARTER = 27
    IN_OUT_ELASTIC = 28
    IN_BACK = 29
    OUT_BACK = 30
    IN_OUT_BACK = 31
    IN_BOUNCE = 32
    OUT_BOUNCE = 33
    IN_OUT_BOUNCE = 34

    @classmethod
    def from_name(cls, name: str) -> "Easing":
        """Parse 'OutQuad', 'out_quad' or 'OUT_QUAD' into an Easing"""
        normalized = name.replace("-", "_").strip()
        if "_" not in normalized:
            # CamelCase → SNAKE_CASE
            normalized = "".join(
                f"_{c}" if c.isupper() and i > 0 else c
                for i, c in enumerate(normalized)
            )
        try:
            return cls[normalized.upper()]
        except KeyError:
            raise InvalidConfigError(f"Unknown easing '{name}'", parameter="easing")


DEFAULT_PALETTE = {
    "white": (255, 255, 255),
    "black": (0, 0, 0),
    "red": (255, 0, 0),
    "green": (0, 255, 0),
    "blue": (0, 0, 255),
    "yellow": (255, 255, 0),
    "cyan": (0, 255, 255),
    "magenta": (255, 0, 255),
}
WHITE: RGB = DEFAULT_PALETTE["white"]


# ============================================================================
# Time & Layout
# ============================================================================

@dataclass(frozen=True)
class TimeRange:
    """Closed time window in milliseconds

    Attributes:
        start: Window start (ms)
        end: Window end (ms), must not precede start
    """
    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start

    def contains(self, time: float) -> bool:
        return self.start <= time <= self.end


@dataclass(frozen=True)
class Stage:
    """Presentation-space layout constants

    The playfield is wider than the visible 640x480 area so sprites can be
    staged off-screen on widescreen displays.

    Attributes:
        center: Screen centre used for horizontal/vertical anchoring
        min_x, max_x: Horizontal playfield bounds (inclusive)
        min_y, max_y: Vertical playfield bounds (inclusive)
    """
    center: Vector2 = (320.0, 240.0)
    min_x: float = -107.0
    max_x: float = 747.0
    min_y: float = 0.0
    max_y: float = 480.0

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y


DEFAULT_STAGE = Stage()


# ============================================================================
# Commands
# ============================================================================

@dataclass(frozen=True)
class Command:
    """One timed keyframe applied to an element

    A static command (start == end) sets a value at an instant.

    Attributes:
        start: Start time (ms, absolute or loop-relative inside a Loop)
        end: End time (ms)
        start_value: Value at start
        end_value: Value at end
        easing: Interpolation easing between start and end
    """
    code: ClassVar[str] = ""

    start: float
    end: float
    start_value: Any
    end_value: Any
    easing: Easing = Easing.LINEAR

    @classmethod
    def at(cls, time: float, value: Any):
        """Static form: hold `value` from `time` on"""
        return cls(time, time, value, value)

    @property
    def is_static(self) -> bool:
        return self.start == self.end and self.start_value == self.end_value


@dataclass(frozen=True)
class Fade(Command):
    code: ClassVar[str] = "F"


@dataclass(frozen=True)
class Scale(Command):
    code: ClassVar[str] = "S"


@dataclass(frozen=True)
class ScaleVec(Command):
    code: ClassVar[str] = "V"


@dataclass(frozen=True)
class Move(Command):
    code: ClassVar[str] = "M"


@dataclass(frozen=True)
class Rotate(Command):
    """Rotation in radians"""
    code: ClassVar[str] = "R"


@dataclass(frozen=True)
class Color(Command):
    code: ClassVar[str] = "C"


@dataclass(frozen=True)
class Loop:
    """Repeat `body` `count` times starting at `start`

    Body commands use loop-relative time; one iteration lasts until the
    latest body end time.
    """
    code: ClassVar[str] = "L"

    start: float
    count: int
    body: Tuple[Command, ...] = ()


# ============================================================================
# Elements
# ============================================================================

@dataclass(frozen=True)
class Element:
    """A created visual element and its ordered commands

    Attributes:
        kind: "sprite" or "text"
        asset: Image path relative to the beatmap folder
        layer: Storyboard layer
        origin: Anchor point of the image
        position: Initial position (presentation pixels)
        commands: Commands in emission order (time-ascending)
        text: Source text for text elements, empty for sprites
    """
    kind: str
    asset: str
    layer: Layer
    origin: Origin
    position: Vector2
    commands: Tuple[Any, ...] = ()
    text: str = ""

    def commands_of(self, command_type: type) -> list:
        """Top-level commands of one type, in order"""
        return [c for c in self.commands if isinstance(c, command_type)]


# ============================================================================
# Effect Inputs
# ============================================================================

@dataclass(frozen=True)
class HitCircle:
    time: float
    position: Vector2


@dataclass(frozen=True)
class Slider:
    """Slider hit object

    Attributes:
        start_time: Slider head time (ms)
        end_time: Slider tail time (ms)
        position_at_time: Callable returning the ball position at any time
            in [start_time, end_time]
    """
    start_time: float
    end_time: float
    position_at_time: Callable[[float], Vector2] = field(compare=False)


@dataclass(frozen=True)
class Cue:
    """One lyric line with its display window"""
    text: str
    range: TimeRange


@dataclass(frozen=True)
class SpectrumSchema:
    """Pre-analyzed spectrum: one frame of bar magnitudes per 1000/fps ms"""
    fps: float
    frames: Tuple[Tuple[float, ...], ...]


# ============================================================================
# Validation Functions
# ============================================================================

def validate_time_range(time_range: TimeRange, effect: str = "", parameter: str = "time range") -> bool:
    """Validate a time window

    Returns:
        True if valid, raises InvalidTimeRangeError otherwise
    """
    if time_range.end < time_range.start:
        raise InvalidTimeRangeError(
            f"End time {time_range.end} precedes start time {time_range.start}",
            effect=effect,
            parameter=parameter
        )
    return True


def validate_color(color: RGB, effect: str = "", parameter: str = "color") -> bool:
    """Validate an RGB color tuple

    Returns:
        True if valid, raises InvalidConfigError otherwise
    """
    if len(color) != 3:
        raise InvalidConfigError(f"Color must be RGB tuple, got {color}", effect, parameter)

    if not all(0 <= c <= 255 for c in color):
        raise InvalidConfigError(f"Color values must be in range [0, 255], got {color}", effect, parameter)

    return True
