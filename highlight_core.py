"""
Hit Object Highlight - Functional Core

Pure functions that turn beatmap hit objects into highlight sprites:
a short fade-and-shrink flourish on every circle and a sprite that
follows each slider along a piecewise-linear approximation of its path.

Geometry comes from a beatmap geometry provider (see hitobjects_shell.py);
this module never reads files.
"""

from typing import List, Sequence

from effect_config import HighlightConfig
from storyboard_types import (
    Element,
    Fade,
    HitCircle,
    Move,
    Scale,
    Slider,
    TimeRange,
    validate_time_range,
)
from vector_core import round_half_up


EFFECT_NAME = "highlight"


# ============================================================================
# Selection
# ============================================================================

def select_circles(circles: Sequence[HitCircle], window: TimeRange) -> List[HitCircle]:
    """Circles whose hit time lies inside the window (inclusive)"""
    return [circle for circle in circles if window.start <= circle.time <= window.end]


def select_sliders(sliders: Sequence[Slider], window: TimeRange) -> List[Slider]:
    """Sliders lying entirely inside the window

    Partially overlapping sliders are skipped rather than clipped.
    """
    return [
        slider for slider in sliders
        if slider.start_time >= window.start and slider.end_time <= window.end
    ]


# ============================================================================
# Command Building
# ============================================================================

def circle_flourish(time: float, duration: float = 100) -> List:
    """Fade 1→0 and grow 0→1 starting at the circle's hit time"""
    return [
        Fade(time, time + duration, 1, 0),
        Scale(time, time + duration, 0, 1),
    ]


def slider_step_count(slider: Slider, fps: float) -> int:
    """Number of fixed-timestep segments used to approximate a slider

    Returns 0 for sliders shorter than half a frame.
    """
    timestep = 1000 / fps
    return round_half_up((slider.end_time - slider.start_time) / timestep)


def slider_segments(slider: Slider, fps: float) -> List[Move]:
    """Approximate the slider path with one Move per timestep

    Segment i spans [start + i*timestep, start + (i+1)*timestep] and moves
    between the slider positions sampled at those two instants.

    Args:
        slider: Slider with a position_at_time function
        fps: Samples per second

    Returns:
        Moves in time order (empty when the slider is shorter than one step)
    """
    timestep = 1000 / fps
    total_steps = slider_step_count(slider, fps)

    moves = []
    for i in range(total_steps):
        segment_start = slider.start_time + timestep * i
        segment_end = slider.start_time + timestep * (i + 1)
        moves.append(Move(
            segment_start,
            segment_end,
            slider.position_at_time(segment_start),
            slider.position_at_time(segment_end)
        ))
    return moves


# ============================================================================
# Effect Generation
# ============================================================================

def generate_highlight(
    window: TimeRange,
    sprite_path: str,
    circles: Sequence[HitCircle],
    sliders: Sequence[Slider],
    config: HighlightConfig = None
) -> List[Element]:
    """Highlight every hit object in a time window

    Args:
        window: Effect time window
        sprite_path: Relative path to the highlight image
        circles: Circle hit objects
        sliders: Slider hit objects
        config: Effect options (defaults when None)

    Returns:
        One element per selected circle, then one per selected slider

    Raises:
        InvalidTimeRangeError: If the window ends before it starts
    """
    config = config or HighlightConfig()
    validate_time_range(window, effect=EFFECT_NAME, parameter="window")

    elements = []

    for circle in select_circles(circles, window):
        elements.append(Element(
            kind="sprite",
            asset=sprite_path,
            layer=config.layer,
            origin=config.origin,
            position=circle.position,
            commands=tuple(circle_flourish(circle.time, config.flourish_duration))
        ))

    for slider in select_sliders(sliders, window):
        commands = []
        if config.fade_slider:
            commands.append(Fade(slider.start_time, slider.end_time, 1, 0))
        commands.extend(slider_segments(slider, config.fps))

        elements.append(Element(
            kind="sprite",
            asset=sprite_path,
            layer=config.layer,
            origin=config.origin,
            position=slider.position_at_time(slider.start_time),
            commands=tuple(commands)
        ))

    return elements
