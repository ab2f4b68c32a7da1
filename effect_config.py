"""
Effect Configuration - Validated Option Records

One frozen dataclass per effect. Every field has a documented default;
callers override a subset with `from_overrides`, which merges the overrides
onto the defaults and validates the result once. Configs are never mutated
after construction.
"""

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from storyboard_types import (
    DEFAULT_STAGE,
    EffectError,
    RGB,
    WHITE,
    Easing,
    InvalidConfigError,
    Layer,
    Origin,
    Stage,
    Vector2,
    validate_color,
)


# ============================================================================
# Angle Configuration Variants
# ============================================================================

@dataclass(frozen=True)
class AngleRange:
    """Explicit movement angle range in degrees, drawn uniformly from [min, max]"""
    min_deg: float
    max_deg: float

    def bounds(self) -> Tuple[float, float]:
        return (self.min_deg, self.max_deg)


@dataclass(frozen=True)
class AngleSpread:
    """Movement angle spread symmetrically around a centre direction

    Angles are drawn uniformly from [center - spread/2, center + spread/2],
    so `spread_deg` is the full width of the cone.
    """
    center_deg: float
    spread_deg: float

    def bounds(self) -> Tuple[float, float]:
        half = self.spread_deg / 2
        return (self.center_deg - half, self.center_deg + half)


AngleConfig = Union[AngleRange, AngleSpread]


# ============================================================================
# Helpers
# ============================================================================

def _require(condition: bool, message: str, effect: str, parameter: str) -> None:
    if not condition:
        raise InvalidConfigError(message, effect=effect, parameter=parameter)


def _coerce_easing(value: Any) -> Easing:
    if isinstance(value, str):
        return Easing.from_name(value)
    return Easing(value)


def _coerce_stage(value: Any) -> Stage:
    stage = dict(value)
    if "center" in stage:
        stage["center"] = tuple(stage["center"])
    return Stage(**stage)


_COERCIONS = {
    "easing": (Easing, _coerce_easing),
    "layer": (Layer, Layer),
    "origin": (Origin, Origin),
    "stage": (Stage, _coerce_stage),
    "particle_color": (tuple, tuple),
    "bar_color": (tuple, tuple),
    "text_color": (tuple, tuple),
    "spawn_origin": (tuple, tuple),
}


def _coerce_enums(values: Dict[str, Any], effect: str = "") -> Dict[str, Any]:
    """Convert plain JSON values into the enum/tuple types the configs expect

    Raises:
        InvalidConfigError: A value that can't be converted, naming its key
    """
    coerced = dict(values)
    for key, (expected, convert) in _COERCIONS.items():
        if key not in coerced or isinstance(coerced[key], expected):
            continue
        value = coerced[key]
        try:
            coerced[key] = convert(value)
        except EffectError as e:
            raise InvalidConfigError(f"Invalid value {value!r}", effect=effect, parameter=key) from e
        except (TypeError, ValueError) as e:
            raise InvalidConfigError(f"Invalid value {value!r}: {e}", effect=effect, parameter=key) from e
    return coerced


class _OverridableConfig:
    """Mixin providing defaults-plus-overrides construction"""

    EFFECT_NAME = ""

    @classmethod
    def from_overrides(cls, overrides: Optional[Dict[str, Any]] = None):
        """Merge caller overrides onto the documented defaults

        Args:
            overrides: Field name → value; unknown names are rejected

        Returns:
            Validated config instance

        Raises:
            InvalidConfigError: Unknown field or invalid value
        """
        overrides = _coerce_enums(overrides or {}, cls.EFFECT_NAME)
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise InvalidConfigError(
                f"Unknown option(s): {', '.join(unknown)}",
                effect=cls.EFFECT_NAME,
                parameter=unknown[0]
            )
        return cls(**overrides)


# ============================================================================
# Hit Object Highlight
# ============================================================================

@dataclass(frozen=True)
class HighlightConfig(_OverridableConfig):
    """Options for the hit object highlight effect

    Attributes:
        fps: Slider path samples per second
        flourish_duration: Length of the circle fade/shrink flourish (ms)
        fade_slider: Fade the slider sprite from 1 to 0 over the slider body
        layer: Storyboard layer of created sprites
        origin: Sprite origin
        stage: Layout constants
    """
    EFFECT_NAME = "highlight"

    fps: float = 30
    flourish_duration: float = 100
    fade_slider: bool = True
    layer: Layer = Layer.BACKGROUND
    origin: Origin = Origin.CENTRE
    stage: Stage = DEFAULT_STAGE

    def __post_init__(self):
        _require(self.fps > 0, f"fps must be positive, got {self.fps}", self.EFFECT_NAME, "fps")
        _require(self.flourish_duration >= 0,
                 f"flourish_duration must be non-negative, got {self.flourish_duration}",
                 self.EFFECT_NAME, "flourish_duration")


# ============================================================================
# Particles
# ============================================================================

@dataclass(frozen=True)
class ParticlesConfig(_OverridableConfig):
    """Options for the particle effect

    Attributes:
        easing: Easing applied to each particle's movement
        fade_duration: Fade in/out duration inside each loop (ms)
        particle_count: Particles to attempt (culled ones are dropped)
        particle_color: RGB color of each particle
        particle_scale: Scale factor of each particle
        particle_start_angle: Sprite rotation at spawn (degrees)
        particle_opacity: Peak opacity
        spawn_origin: Centre of the spawn area
        spawn_spread: Maximum spawn distance from spawn_origin (px)
        uniform_disk: Spread spawns uniformly over the disk (sqrt draw);
            False draws the distance linearly, clustering near the centre
        angle: AngleRange or AngleSpread for the movement direction
        speed: Pixels travelled per second
        lifetime: Nominal lifetime of one loop iteration (ms)
        rotate_with_motion: Rotate the sprite by the movement angle over each loop
        layer: Storyboard layer
        origin: Sprite origin
        stage: Layout constants; playfield bounds drive culling
    """
    EFFECT_NAME = "particles"

    easing: Easing = Easing.LINEAR
    fade_duration: float = 300
    particle_count: int = 20
    particle_color: RGB = WHITE
    particle_scale: float = 1
    particle_start_angle: float = 0
    particle_opacity: float = 1
    spawn_origin: Vector2 = (420.0, 0.0)
    spawn_spread: float = 10
    uniform_disk: bool = True
    angle: AngleConfig = AngleRange(50, 150)
    speed: float = 480
    lifetime: float = 1000
    rotate_with_motion: bool = True
    layer: Layer = Layer.BACKGROUND
    origin: Origin = Origin.CENTRE
    stage: Stage = DEFAULT_STAGE

    def __post_init__(self):
        name = self.EFFECT_NAME
        _require(self.particle_count >= 0, f"particle_count must be non-negative, got {self.particle_count}",
                 name, "particle_count")
        _require(self.lifetime > 0, f"lifetime must be positive, got {self.lifetime}", name, "lifetime")
        _require(self.fade_duration >= 0, f"fade_duration must be non-negative, got {self.fade_duration}",
                 name, "fade_duration")
        _require(self.spawn_spread >= 0, f"spawn_spread must be non-negative, got {self.spawn_spread}",
                 name, "spawn_spread")
        _require(self.speed >= 0, f"speed must be non-negative, got {self.speed}", name, "speed")
        _require(0 <= self.particle_opacity <= 1,
                 f"particle_opacity must be in [0, 1], got {self.particle_opacity}", name, "particle_opacity")
        _require(isinstance(self.angle, (AngleRange, AngleSpread)),
                 f"angle must be AngleRange or AngleSpread, got {self.angle!r}", name, "angle")
        low, high = self.angle.bounds()
        _require(low <= high, f"angle bounds reversed: {low} > {high}", name, "angle")
        validate_color(self.particle_color, name, "particle_color")

    @classmethod
    def from_overrides(cls, overrides: Optional[Dict[str, Any]] = None) -> "ParticlesConfig":
        """Merge overrides, accepting `angle_range` or `angle_spread` shapes

        `angle_range: [min, max]` builds an AngleRange and
        `angle_spread: [center, spread]` builds an AngleSpread. Only one
        shape may be given; an explicit `angle` object wins over neither.
        """
        overrides = dict(overrides or {})
        angle_range = overrides.pop("angle_range", None)
        angle_spread = overrides.pop("angle_spread", None)
        given = [a for a in (angle_range, angle_spread, overrides.get("angle")) if a is not None]
        if len(given) > 1:
            raise InvalidConfigError(
                "Give only one of angle, angle_range or angle_spread",
                effect=cls.EFFECT_NAME,
                parameter="angle"
            )
        for key, shape, value in (("angle_range", AngleRange, angle_range),
                                  ("angle_spread", AngleSpread, angle_spread)):
            if value is None:
                continue
            try:
                low, high = value
                overrides["angle"] = shape(float(low), float(high))
            except (TypeError, ValueError) as e:
                raise InvalidConfigError(
                    f"{key} must be a pair of numbers, got {value!r}",
                    effect=cls.EFFECT_NAME,
                    parameter=key
                ) from e
        return super().from_overrides(overrides)


# ============================================================================
# Spectrum
# ============================================================================

@dataclass(frozen=True)
class SpectrumConfig(_OverridableConfig):
    """Options for the spectrum effect

    Defaults assume a 1x1 "dot" sprite stretched into bars.

    Attributes:
        sprite_width: Real width of the bar sprite (px)
        sprite_height: Real height of the bar sprite (px)
        bar_count: Number of bars
        bar_width: Displayed width of each bar (px)
        max_bar_height: Displayed height at magnitude 1.0 (px)
        bar_color: RGB color of each bar
        gap: Horizontal gap between bars (px)
        opacity: Bar opacity
        y: Vertical position of the bars; None uses the stage centre
        layer: Storyboard layer
        origin: Sprite origin; CentreLeft keeps the block exactly centred
        stage: Layout constants
    """
    EFFECT_NAME = "spectrum"

    sprite_width: float = 1
    sprite_height: float = 1
    bar_count: int = 32
    bar_width: float = 20
    max_bar_height: float = 80
    bar_color: RGB = WHITE
    gap: float = 3
    opacity: float = 1
    y: Optional[float] = None
    layer: Layer = Layer.BACKGROUND
    origin: Origin = Origin.CENTRE_LEFT
    stage: Stage = DEFAULT_STAGE

    def __post_init__(self):
        name = self.EFFECT_NAME
        _require(self.sprite_width > 0, f"sprite_width must be positive, got {self.sprite_width}",
                 name, "sprite_width")
        _require(self.sprite_height > 0, f"sprite_height must be positive, got {self.sprite_height}",
                 name, "sprite_height")
        _require(self.bar_count >= 0, f"bar_count must be non-negative, got {self.bar_count}",
                 name, "bar_count")
        _require(self.bar_width >= 0, f"bar_width must be non-negative, got {self.bar_width}",
                 name, "bar_width")
        _require(self.gap >= 0, f"gap must be non-negative, got {self.gap}", name, "gap")
        _require(0 <= self.opacity <= 1, f"opacity must be in [0, 1], got {self.opacity}", name, "opacity")
        validate_color(self.bar_color, name, "bar_color")

    @property
    def bar_y(self) -> float:
        return self.stage.center[1] if self.y is None else self.y


# ============================================================================
# Lyrics
# ============================================================================

@dataclass(frozen=True)
class LyricsConfig(_OverridableConfig):
    """Options for the lyrics effect

    Attributes:
        font_name: Registered font name used to measure text
        font_path: Non-system font file to register under font_name
        font_size: Font size used when measuring (px)
        font_scale: Scale applied to generated text images
        per_character: One element per character instead of per line
        fade_duration: Fade in/out duration (ms)
        opacity: Text opacity
        y: Vertical position of the first line
        text_color: RGB text color
        space_width: Cursor advance for spaces in per-character mode;
            None uses the measured width of a space glyph
        osb_folder: Folder (relative to the beatmap) holding text images
        layer: Storyboard layer
        stage: Layout constants; text is centred on stage.center x
    """
    EFFECT_NAME = "lyrics"

    font_name: str = "Arial"
    font_path: Optional[str] = None
    font_size: int = 32
    font_scale: float = 1
    per_character: bool = False
    fade_duration: float = 300
    opacity: float = 1
    y: float = 400
    text_color: RGB = WHITE
    space_width: Optional[float] = None
    osb_folder: str = "sb/lyrics"
    layer: Layer = Layer.BACKGROUND
    stage: Stage = DEFAULT_STAGE

    def __post_init__(self):
        name = self.EFFECT_NAME
        _require(self.font_size > 0, f"font_size must be positive, got {self.font_size}", name, "font_size")
        _require(self.font_scale > 0, f"font_scale must be positive, got {self.font_scale}", name, "font_scale")
        _require(self.fade_duration >= 0, f"fade_duration must be non-negative, got {self.fade_duration}",
                 name, "fade_duration")
        _require(0 <= self.opacity <= 1, f"opacity must be in [0, 1], got {self.opacity}", name, "opacity")
        _require(self.space_width is None or self.space_width >= 0,
                 f"space_width must be non-negative, got {self.space_width}", name, "space_width")
        validate_color(self.text_color, name, "text_color")
