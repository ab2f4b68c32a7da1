"""
Spectrum Compressor - Functional Core

Turns a per-frame bar magnitude series into one bar sprite per index whose
vertical scale tracks the signal. Runs of equal values collapse: a bar
emits one ScaleVec per value change, never one per frame.

Frames come from a spectrum provider (see spectrum_shell.py).
"""

from typing import List, Optional, Sequence

import numpy as np  # type: ignore

from effect_config import SpectrumConfig
from storyboard_types import (
    Color,
    Element,
    Fade,
    InvalidConfigError,
    ScaleVec,
    TimeRange,
    Vector2,
    validate_time_range,
)


EFFECT_NAME = "spectrum"


# ============================================================================
# Layout
# ============================================================================

def bar_block_width(bar_count: int, bar_width: float, gap: float) -> float:
    """Total width of all bars plus the gaps between them"""
    if bar_count <= 0:
        return 0.0
    return bar_width * bar_count + gap * (bar_count - 1)


def bar_positions(bar_count: int, bar_width: float, gap: float, center_x: float) -> List[float]:
    """Left edge x of every bar, with the block centred on center_x

    Examples:
        >>> bar_positions(2, 10, 4, 100)
        [88.0, 102.0]
    """
    x0 = center_x - bar_block_width(bar_count, bar_width, gap) / 2
    return [float(x0 + i * (bar_width + gap)) for i in range(bar_count)]


# ============================================================================
# Scale Mapping
# ============================================================================

def bar_scale(magnitude: float, config: SpectrumConfig) -> Vector2:
    """Vector scale that displays `magnitude` with the configured bar geometry

    Horizontal scale is constant; vertical scale maps magnitude 1.0 to
    max_bar_height pixels.
    """
    return (
        config.bar_width / config.sprite_width,
        float(magnitude) * config.max_bar_height / config.sprite_height
    )


# ============================================================================
# Run-Length Compression
# ============================================================================

def transition_indices(values: np.ndarray) -> np.ndarray:
    """Indices j where values[j + 1] differs from values[j]

    Series shorter than two frames have no transitions.

    Examples:
        >>> transition_indices(np.array([0.2, 0.2, 0.5, 0.5, 0.5, 0.1])).tolist()
        [1, 4]
    """
    values = np.asarray(values, dtype=float)
    if len(values) < 2:
        return np.array([], dtype=int)
    return np.flatnonzero(values[1:] != values[:-1])


def compress_bar(
    values: Sequence[float],
    start_time: float,
    timestep: float,
    config: SpectrumConfig
) -> List[ScaleVec]:
    """Keyframes for one bar, one per value transition

    Transition j spans [start + j*timestep, start + (j+1)*timestep] and
    interpolates from the scale of frame j to the scale of frame j + 1.
    A series of two or more frames without any transition gets a single
    static keyframe so the constant height is still displayed; shorter
    series emit nothing.

    Args:
        values: Magnitudes of this bar, one per frame
        start_time: Time of frame 0 (ms)
        timestep: Milliseconds between frames
        config: Bar geometry

    Returns:
        ScaleVec commands in time order
    """
    values = np.asarray(values, dtype=float)
    if len(values) < 2:
        return []

    indices = transition_indices(values)
    if len(indices) == 0:
        return [ScaleVec.at(start_time, bar_scale(values[0], config))]

    return [
        ScaleVec(
            start_time + timestep * j,
            start_time + timestep * (j + 1),
            bar_scale(values[j], config),
            bar_scale(values[j + 1], config)
        )
        for j in indices.tolist()
    ]


# ============================================================================
# Effect Generation
# ============================================================================

def generate_spectrum(
    window: TimeRange,
    sprite_path: str,
    frames: Sequence[Sequence[float]],
    fps: float,
    config: SpectrumConfig = None,
    frames_start: Optional[float] = None
) -> List[Element]:
    """Display a spectrum as a centred row of animated bars

    Each bar gets one ScaleVec per value change. A bar whose value never
    changes over two or more frames still gets one static ScaleVec so its
    constant height is displayed; that is the only keyframe not tied to a
    transition.

    Args:
        window: Effect time window (bars appear at window.start)
        sprite_path: Relative path to the bar sprite
        frames: One frame of bar magnitudes per 1000/fps ms
        fps: Analysis frame rate of `frames`
        config: Effect options (defaults when None)
        frames_start: Time at which frame 0 was sampled; defaults to
            window.start

    Returns:
        One element per bar, left to right

    Raises:
        InvalidTimeRangeError: If the window ends before it starts
        InvalidConfigError: If fps is not positive
    """
    config = config or SpectrumConfig()
    validate_time_range(window, effect=EFFECT_NAME, parameter="window")
    if fps <= 0:
        raise InvalidConfigError(f"fps must be positive, got {fps}", effect=EFFECT_NAME, parameter="fps")

    timestep = 1000 / fps
    if frames_start is None:
        frames_start = window.start
    positions = bar_positions(config.bar_count, config.bar_width, config.gap, config.stage.center[0])

    elements = []
    for i, x in enumerate(positions):
        # Frames narrower than bar_count leave the missing bars at zero
        bar_values = [frame[i] if i < len(frame) else 0.0 for frame in frames]

        commands = [
            Fade.at(window.start, config.opacity),
            Color.at(window.start, config.bar_color),
        ]
        commands.extend(compress_bar(bar_values, frames_start, timestep, config))

        elements.append(Element(
            kind="sprite",
            asset=sprite_path,
            layer=config.layer,
            origin=config.origin,
            position=(x, config.bar_y),
            commands=tuple(commands)
        ))

    return elements
