"""
Hit Objects Shell - Imperative Shell

Loads hit object geometry exported as JSON and turns it into the HitCircle
and Slider contract consumed by highlight_core.py:

    {
      "circles": [{"time": 1000, "position": [256, 192]}],
      "sliders": [{"startTime": 2000, "endTime": 2600,
                   "path": [[100, 100], [200, 100], [200, 200]]}]
    }

Slider paths are polylines already flattened by the exporter; the ball
travels along them at constant speed.
"""

import json
from bisect import bisect_right
from itertools import accumulate
from pathlib import Path
from typing import Callable, List, Sequence, Tuple

from storyboard_types import HitCircle, InvalidConfigError, Slider, Vector2
from vector_core import interpolate_vec, sub_vec, vec_length


# ============================================================================
# Path Evaluation (pure)
# ============================================================================

def polyline_position_at_time(
    points: Sequence[Vector2],
    start_time: float,
    end_time: float
) -> Callable[[float], Vector2]:
    """Build position_at_time for constant-speed travel along a polyline

    Times outside [start_time, end_time] clamp to the path ends.

    Args:
        points: Path vertices in travel order (at least one)
        start_time: Time at the first vertex (ms)
        end_time: Time at the last vertex (ms)

    Returns:
        Function mapping a time to a position on the path
    """
    points = [tuple(float(c) for c in p) for p in points]
    if not points:
        raise InvalidConfigError("Slider path needs at least one point", effect="highlight", parameter="path")

    lengths = [vec_length(sub_vec(b, a)) for a, b in zip(points, points[1:])]
    cumulative = [0.0] + list(accumulate(lengths))
    total = cumulative[-1]
    duration = end_time - start_time

    def position_at_time(time: float) -> Vector2:
        if total == 0 or duration <= 0:
            return points[0] if time <= start_time else points[-1]

        progress = min(max((time - start_time) / duration, 0.0), 1.0)
        distance = progress * total
        segment = min(bisect_right(cumulative, distance) - 1, len(lengths) - 1)
        segment_length = lengths[segment]
        if segment_length == 0:
            return points[segment]
        t = (distance - cumulative[segment]) / segment_length
        return interpolate_vec(points[segment], points[segment + 1], t)

    return position_at_time


def parse_hit_objects(data: dict) -> Tuple[List[HitCircle], List[Slider]]:
    """Convert decoded JSON into circles and sliders (pure)"""
    circles = [
        HitCircle(time=float(c["time"]), position=tuple(float(v) for v in c["position"]))
        for c in data.get("circles", [])
    ]
    sliders = []
    for s in data.get("sliders", []):
        start_time = float(s["startTime"])
        end_time = float(s["endTime"])
        sliders.append(Slider(
            start_time=start_time,
            end_time=end_time,
            position_at_time=polyline_position_at_time(s["path"], start_time, end_time)
        ))
    return circles, sliders


# ============================================================================
# File Loading (Imperative Shell)
# ============================================================================

def load_hit_objects(hitobjects_path: str) -> Tuple[List[HitCircle], List[Slider]]:
    """Load circles and sliders from a JSON export

    Imperative shell: performs file I/O.

    Raises:
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(hitobjects_path)
    if not path.exists():
        raise FileNotFoundError(f"Hit objects file not found: {hitobjects_path}")

    return parse_hit_objects(json.loads(path.read_text(encoding="utf-8")))
