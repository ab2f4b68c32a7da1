"""
Spectrum Shell - Imperative Shell

Loads pre-analyzed spectrum schema files and slices them to an effect
window. The schema is a JSON document:

    {"fps": 30, "spectrumFrames": [[0.1, 0.4, ...], ...]}

with one frame of bar magnitudes every 1000/fps milliseconds from t=0.
"""

import json
import math
from pathlib import Path
from typing import List, Sequence

import numpy as np  # type: ignore

from storyboard_types import (
    InvalidConfigError,
    SpectrumSchema,
    TimeRange,
    validate_time_range,
)


# ============================================================================
# File Loading (Imperative Shell)
# ============================================================================

def load_spectrum_schema(schema_path: str) -> SpectrumSchema:
    """Load a spectrum schema from disk

    Imperative shell: performs file I/O.

    Args:
        schema_path: Path to the JSON schema

    Returns:
        SpectrumSchema with fps and frames

    Raises:
        FileNotFoundError: If the schema doesn't exist
        InvalidConfigError: If fps is missing or not positive
    """
    path = Path(schema_path)
    if not path.exists():
        raise FileNotFoundError(f"Spectrum schema not found: {schema_path}")

    data = json.loads(path.read_text(encoding="utf-8"))
    return parse_spectrum_schema(data)


def parse_spectrum_schema(data: dict) -> SpectrumSchema:
    """Build a SpectrumSchema from decoded JSON (pure)"""
    fps = data.get("fps")
    if fps is None or fps <= 0:
        raise InvalidConfigError(f"Spectrum schema fps must be positive, got {fps}",
                                 effect="spectrum", parameter="fps")

    frames = tuple(tuple(float(v) for v in frame) for frame in data.get("spectrumFrames", []))
    return SpectrumSchema(fps=float(fps), frames=frames)


# ============================================================================
# Frame Extraction
# ============================================================================

def frame_index_range(window: TimeRange, fps: float) -> range:
    """Indices of the frames sampled inside [start, end]

    Frame k is sampled at k * 1000/fps ms.
    """
    timestep = 1000 / fps
    first = int(math.ceil(window.start / timestep - 1e-9))
    last = int(math.floor(window.end / timestep + 1e-9))
    return range(max(first, 0), last + 1)


def first_frame_time(window: TimeRange, fps: float) -> float:
    """Sample time of the first frame at or after window.start

    Examples:
        >>> first_frame_time(TimeRange(50, 500), 10)
        100.0
    """
    return frame_index_range(window, fps).start * 1000 / fps


def extract_frames(
    frames: Sequence[Sequence[float]],
    start_time: float,
    end_time: float,
    fps: float
) -> List[np.ndarray]:
    """Frames of a series covering the window [start_time, end_time]

    Pure function. Frames past the end of the series are dropped, so a
    window beyond the analyzed audio yields an empty list.

    Returns:
        List of per-frame magnitude arrays, in time order
    """
    window = TimeRange(start_time, end_time)
    validate_time_range(window, effect="spectrum", parameter="window")
    indices = frame_index_range(window, fps)
    return [np.asarray(frames[k], dtype=float) for k in indices if k < len(frames)]
