#!/usr/bin/env python3
"""
Generate an osu! storyboard from a project file describing effects.

Project file (JSON), paths relative to the project file:

    {
      "output": "storyboard.osb",
      "effects": [
        {"type": "particles", "start": 0, "end": 10000, "sprite": "sb/dot.png",
         "options": {"particle_count": 40, "angle_spread": [90, 60]}},
        {"type": "spectrum", "start": 0, "end": 10000, "sprite": "sb/dot.png",
         "schema": "spectrum.json", "options": {"bar_count": 16}},
        {"type": "lyrics", "source": "lyrics.srt", "options": {"per_character": true}},
        {"type": "highlight", "start": 0, "end": 10000, "sprite": "sb/hl.png",
         "hitobjects": "hitobjects.json", "options": {"fps": 30}}
      ]
    }

Each effect produces its own element list; lists are concatenated in
project order before serialization.

Lyrics are written as sprites referencing one image per distinct text
(`<osb_folder>/_<n>.png`). This tool does not render those images; produce
them with a separate text renderer before loading the storyboard.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import numpy as np  # type: ignore

from effect_config import HighlightConfig, LyricsConfig, ParticlesConfig, SpectrumConfig
from font_shell import load_font_metrics
from highlight_core import generate_highlight
from hitobjects_shell import load_hit_objects
from lyrics_core import generate_lyrics
from lyrics_shell import load_lyrics
from particles_core import generate_particles
from spectrum_core import generate_spectrum
from spectrum_shell import extract_frames, first_frame_time, load_spectrum_schema
from storyboard_shell import write_storyboard
from storyboard_types import Element, EffectError, InvalidConfigError, TimeRange


# ============================================================================
# Effect Runners
# ============================================================================

def _window(effect: Dict[str, Any]) -> TimeRange:
    return TimeRange(float(effect["start"]), float(effect["end"]))


def _resolve(base_dir: Path, relative: str) -> str:
    return str(base_dir / relative)


def run_highlight(effect: Dict[str, Any], base_dir: Path, rng: np.random.Generator) -> List[Element]:
    config = HighlightConfig.from_overrides(effect.get("options"))
    circles, sliders = load_hit_objects(_resolve(base_dir, effect["hitobjects"]))
    return generate_highlight(_window(effect), effect["sprite"], circles, sliders, config)


def run_particles(effect: Dict[str, Any], base_dir: Path, rng: np.random.Generator) -> List[Element]:
    config = ParticlesConfig.from_overrides(effect.get("options"))
    return generate_particles(_window(effect), effect["sprite"], config, rng=rng)


def run_spectrum(effect: Dict[str, Any], base_dir: Path, rng: np.random.Generator) -> List[Element]:
    config = SpectrumConfig.from_overrides(effect.get("options"))
    window = _window(effect)
    schema = load_spectrum_schema(_resolve(base_dir, effect["schema"]))
    frames = extract_frames(schema.frames, window.start, window.end, schema.fps)
    return generate_spectrum(window, effect["sprite"], frames, schema.fps, config,
                             frames_start=first_frame_time(window, schema.fps))


def run_lyrics(effect: Dict[str, Any], base_dir: Path, rng: np.random.Generator) -> List[Element]:
    config = LyricsConfig.from_overrides(effect.get("options"))
    cues = load_lyrics(_resolve(base_dir, effect["source"]))
    metrics = None
    if config.per_character:
        font_path = _resolve(base_dir, config.font_path) if config.font_path else None
        if font_path and not Path(font_path).exists():
            print(f"WARNING: Font '{config.font_path}' not found, falling back to a system font")
        metrics = load_font_metrics(config.font_name, config.font_size, font_path)
    return generate_lyrics(cues, metrics, config)


EFFECT_RUNNERS: Dict[str, Callable[[Dict[str, Any], Path, np.random.Generator], List[Element]]] = {
    "highlight": run_highlight,
    "particles": run_particles,
    "spectrum": run_spectrum,
    "lyrics": run_lyrics,
}


# ============================================================================
# Project Generation
# ============================================================================

def generate_project(
    project: Dict[str, Any],
    base_dir: Path,
    seed: Optional[int] = None,
    verbose: bool = True
) -> List[Element]:
    """Run every effect of a project in order

    Args:
        project: Decoded project file
        base_dir: Folder that relative input paths are resolved against
        seed: Seed for particle randomness (None = unseeded)
        verbose: Print one status line per effect

    Returns:
        All elements, effect by effect

    Raises:
        InvalidConfigError: Unknown effect type
        EffectError, FileNotFoundError: From the individual effects
    """
    rng = np.random.default_rng(seed)
    elements = []

    for index, effect in enumerate(project.get("effects", [])):
        effect_type = effect.get("type")
        runner = EFFECT_RUNNERS.get(effect_type)
        if runner is None:
            raise InvalidConfigError(
                f"Unknown effect type '{effect_type}', expected one of {', '.join(sorted(EFFECT_RUNNERS))}",
                parameter=f"effects[{index}].type"
            )

        effect_elements = runner(effect, base_dir, rng)
        if verbose:
            print(f"  {effect_type}: {len(effect_elements)} elements")
        elements.extend(effect_elements)

    return elements


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='Generate an osu! storyboard (.osb) from an effects project file',
        epilog="""
Examples:
  python generate_storyboard.py project.json                 # Write to the project's output
  python generate_storyboard.py project.json -o my.osb       # Explicit output file
  python generate_storyboard.py project.json --seed 42       # Reproducible particles

Lyrics reference text images (sb/lyrics/_0.png, ...) that this tool does
not render; create them with an external text renderer.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('project', help='Path to the project JSON file')
    parser.add_argument('-o', '--output', default=None,
                        help='Output .osb path (default: project "output" or storyboard.osb)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for particle effects (default: unseeded)')
    parser.add_argument('--quiet', action='store_true',
                        help='Only print errors')

    args = parser.parse_args(argv)
    verbose = not args.quiet

    project_path = Path(args.project)
    if not project_path.exists():
        print(f"ERROR: Project file not found: {project_path}")
        return 1

    try:
        project = json.loads(project_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        print(f"ERROR: Invalid project file: {e}")
        return 1

    base_dir = project_path.parent
    output = args.output or _resolve(base_dir, project.get("output", "storyboard.osb"))

    if verbose:
        print(f"Status Update: Generating storyboard")
        print(f"Project: {project_path}")

    try:
        elements = generate_project(project, base_dir, seed=args.seed, verbose=verbose)
    except (EffectError, FileNotFoundError) as e:
        print(f"ERROR: {e}")
        return 1
    except KeyError as e:
        print(f"ERROR: Effect is missing required field {e}")
        return 1

    written = write_storyboard(output, elements)

    if verbose:
        print(f"Status Update: Storyboard complete")
        print(f"  {len(elements)} elements saved to: {written}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
