"""
Vector Core - Functional Core

Pure 2D vector helpers shared by every effect generator.
No side effects - only math on tuples and numpy arrays.
"""

import math

import numpy as np  # type: ignore

from storyboard_types import Vector2


# ============================================================================
# Tuple Vector Math
# ============================================================================

def add_vec(a: Vector2, b: Vector2) -> Vector2:
    return (a[0] + b[0], a[1] + b[1])


def sub_vec(a: Vector2, b: Vector2) -> Vector2:
    return (a[0] - b[0], a[1] - b[1])


def mul_vec_scalar(v: Vector2, scalar: float) -> Vector2:
    return (v[0] * scalar, v[1] * scalar)


def vec_length(v: Vector2) -> float:
    return math.hypot(v[0], v[1])


def unit_vector(angle_rad: float) -> Vector2:
    """Unit vector pointing at `angle_rad` (0 = +x, clockwise on screen since y grows downward)"""
    return (math.cos(angle_rad), math.sin(angle_rad))


def interpolate_vec(a: Vector2, b: Vector2, t: float) -> Vector2:
    """Linear interpolation between two points

    Args:
        a: Start point
        b: End point
        t: Fraction (0.0 = a, 1.0 = b)

    Returns:
        Interpolated point
    """
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def interpolate_segment(a: Vector2, b: Vector2, fractions: np.ndarray) -> np.ndarray:
    """Sample many points on the segment a→b at once

    Args:
        a: Start point
        b: End point
        fractions: 1D array of interpolation fractions

    Returns:
        (N, 2) array of points
    """
    start = np.asarray(a, dtype=float)
    delta = np.asarray(b, dtype=float) - start
    return start + np.outer(np.asarray(fractions, dtype=float), delta)


# ============================================================================
# Angles & Rounding
# ============================================================================

def deg_to_rad(degrees: float) -> float:
    return degrees * math.pi / 180.0


def rad_to_deg(radians: float) -> float:
    return radians * 180.0 / math.pi


def round_half_up(value: float) -> int:
    """Round to nearest integer with .5 going up

    Python's round() rounds half to even; step counts need the usual
    half-up behaviour so 2.5 steps become 3.
    """
    return int(math.floor(value + 0.5))
