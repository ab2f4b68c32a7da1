"""
Particle Simulator - Functional Core

Stochastic particle generation: each particle spawns near an origin, moves
in a straight line for one lifetime, and repeats that motion in a loop that
tiles the effect window. Particles whose path would leave the playfield are
culled whole instead of being clipped.

All randomness comes from a numpy Generator passed in by the caller, so a
fixed seed reproduces the exact same command streams.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np  # type: ignore

from effect_config import ParticlesConfig
from storyboard_types import (
    Color,
    Element,
    Fade,
    Loop,
    Move,
    Rotate,
    Scale,
    Stage,
    TimeRange,
    Vector2,
    validate_time_range,
)
from vector_core import (
    add_vec,
    deg_to_rad,
    interpolate_segment,
    mul_vec_scalar,
    unit_vector,
)


EFFECT_NAME = "particles"


@dataclass(frozen=True)
class Particle:
    """Randomly drawn parameters of one particle

    Attributes:
        start_position: Spawn point
        end_position: Point reached after one lifetime
        move_angle: Movement direction (radians)
    """
    start_position: Vector2
    end_position: Vector2
    move_angle: float


# ============================================================================
# Loop Timing
# ============================================================================

def loop_timing(duration: float, lifetime: float) -> Tuple[int, float]:
    """Split a window into whole loop iterations

    At least one loop runs, and the loops exactly tile the window, so each
    iteration may drift slightly from the nominal lifetime.

    Args:
        duration: Effect window length (ms)
        lifetime: Nominal particle lifetime (ms)

    Returns:
        (loop_count, loop_duration) tuple
    """
    loop_count = max(1, int(math.floor(duration / lifetime)))
    return loop_count, duration / loop_count


# ============================================================================
# Random Draws
# ============================================================================

def draw_particle(rng: np.random.Generator, config: ParticlesConfig) -> Particle:
    """Draw one particle's spawn point and movement

    Draw order is fixed (spawn angle, spawn distance, move angle) so a
    seeded generator always yields the same particle sequence.
    """
    spawn_angle = rng.uniform(0, 2 * math.pi)
    if config.uniform_disk:
        spawn_distance = config.spawn_spread * math.sqrt(rng.uniform(0, 1))
    else:
        spawn_distance = config.spawn_spread * rng.uniform(0, 1)

    min_angle, max_angle = config.angle.bounds()
    move_angle = deg_to_rad(rng.uniform(min_angle, max_angle))
    move_distance = config.speed * config.lifetime / 1000

    start_position = add_vec(
        config.spawn_origin,
        mul_vec_scalar(unit_vector(spawn_angle), spawn_distance)
    )
    end_position = add_vec(
        start_position,
        mul_vec_scalar(unit_vector(move_angle), move_distance)
    )
    return Particle(start_position, end_position, move_angle)


# ============================================================================
# Culling
# ============================================================================

def path_samples(start_position: Vector2, end_position: Vector2, loop_duration: float) -> np.ndarray:
    """Points on the straight path at every whole millisecond in [0, loop_duration)"""
    if loop_duration <= 0:
        return np.empty((0, 2))
    fractions = np.arange(0, loop_duration) / loop_duration
    return interpolate_segment(start_position, end_position, fractions)


def will_leave_playfield(
    start_position: Vector2,
    end_position: Vector2,
    loop_duration: float,
    stage: Stage
) -> bool:
    """Check whether any sampled point of the path lies outside the playfield"""
    points = path_samples(start_position, end_position, loop_duration)
    if len(points) == 0:
        return False
    outside_x = (points[:, 0] < stage.min_x) | (points[:, 0] > stage.max_x)
    outside_y = (points[:, 1] < stage.min_y) | (points[:, 1] > stage.max_y)
    return bool(np.any(outside_x | outside_y))


# ============================================================================
# Command Building
# ============================================================================

def particle_commands(
    particle: Particle,
    start_time: float,
    loop_count: int,
    loop_duration: float,
    config: ParticlesConfig
) -> List:
    """Spawn-time setup commands followed by the looped motion

    Loop body times are loop-relative: each iteration runs over
    [0, loop_duration].
    """
    start_rotation = deg_to_rad(config.particle_start_angle)

    commands = [
        Color.at(start_time, config.particle_color),
        Scale.at(start_time, config.particle_scale),
    ]
    if start_rotation != 0:
        commands.append(Rotate.at(start_time, start_rotation))

    fade_duration = min(config.fade_duration, loop_duration / 2)
    body = [
        Fade(0, fade_duration, 0, config.particle_opacity),
        Fade(loop_duration - fade_duration, loop_duration, config.particle_opacity, 0),
        Move(0, loop_duration, particle.start_position, particle.end_position, config.easing),
    ]
    if config.rotate_with_motion:
        body.append(Rotate(0, loop_duration, start_rotation, start_rotation + particle.move_angle))

    commands.append(Loop(start_time, loop_count, tuple(body)))
    return commands


# ============================================================================
# Effect Generation
# ============================================================================

def generate_particles(
    window: TimeRange,
    sprite_path: str,
    config: ParticlesConfig = None,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None
) -> List[Element]:
    """Generate looping particles over a time window

    Args:
        window: Effect time window
        sprite_path: Relative path to the particle image, e.g. `sb/petal.png`
        config: Effect options (defaults when None)
        seed: Seed for a fresh generator; ignored when rng is given
        rng: Explicit random generator

    Returns:
        One element per particle that stays inside the playfield
        (fewer than particle_count when some are culled)

    Raises:
        InvalidTimeRangeError: If the window ends before it starts
    """
    config = config or ParticlesConfig()
    validate_time_range(window, effect=EFFECT_NAME, parameter="window")

    if window.duration == 0:
        return []

    if rng is None:
        rng = np.random.default_rng(seed)

    loop_count, loop_duration = loop_timing(window.duration, config.lifetime)

    elements = []
    for _ in range(config.particle_count):
        particle = draw_particle(rng, config)

        if will_leave_playfield(particle.start_position, particle.end_position, loop_duration, config.stage):
            continue

        elements.append(Element(
            kind="sprite",
            asset=sprite_path,
            layer=config.layer,
            origin=config.origin,
            position=particle.start_position,
            commands=tuple(particle_commands(particle, window.start, loop_count, loop_duration, config))
        ))

    return elements
