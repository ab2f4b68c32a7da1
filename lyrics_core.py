"""
Lyrics Layout - Functional Core

Lays out lyric cues as keyframed text elements, either one element per
line of text or one element per character. Every element fades in at its
cue's start and fades out so the fade ends exactly at the cue's end.

Text measurement is delegated to a font metrics provider exposing
`measure_line_width(line)`, `measure_line_height(line)` and
`measure_glyph_width(char)` (see font_shell.PillowFontMetrics). This module
performs no I/O and never renders glyphs.
"""

from typing import Dict, List, Sequence, Tuple

from effect_config import LyricsConfig
from storyboard_types import (
    Color,
    Cue,
    Element,
    Fade,
    Origin,
    Scale,
    Vector2,
    validate_time_range,
)


EFFECT_NAME = "lyrics"


# ============================================================================
# Keyframes
# ============================================================================

def text_keyframes(start_time: float, end_time: float, config: LyricsConfig) -> List:
    """Scale, color, fade in and fade out for one text element

    Fades are clamped to half the cue so they never overlap or start
    before the cue.

    Returns:
        Commands in time order
    """
    fade_duration = min(config.fade_duration, (end_time - start_time) / 2)
    return [
        Scale.at(start_time, config.font_scale),
        Color.at(start_time, config.text_color),
        Fade(start_time, start_time + fade_duration, 0, config.opacity),
        Fade(end_time - fade_duration, end_time, config.opacity, 0),
    ]


def text_image_paths(texts: Sequence[str], osb_folder: str) -> Dict[str, str]:
    """Image path for every distinct text, numbered by first appearance

    Only the paths are produced; the images themselves come from an
    external text renderer.

    Examples:
        >>> text_image_paths(["a", "b", "a"], "sb/lyrics")
        {'a': 'sb/lyrics/_0.png', 'b': 'sb/lyrics/_1.png'}
    """
    paths = {}
    folder = osb_folder.rstrip("/")
    for text in texts:
        if text not in paths:
            paths[text] = f"{folder}/_{len(paths)}.png"
    return paths


def split_lines(text: str) -> List[str]:
    """Split cue text on line breaks (\\n or \\r\\n)"""
    return text.replace("\r\n", "\n").split("\n")


# ============================================================================
# Layout
# ============================================================================

def layout_line(line: str, y: float, metrics, config: LyricsConfig) -> List[Tuple[str, Vector2]]:
    """Cursor position of every visible character of one centred line

    Spaces produce no entry but still advance the cursor, by
    config.space_width when set or by the measured space advance.

    Args:
        line: One line of text
        y: Vertical position of the line
        metrics: Font metrics provider
        config: Effect options

    Returns:
        List of (character, (x, y)) with x the left edge of the glyph
    """
    line_width = metrics.measure_line_width(line) * config.font_scale
    x = config.stage.center[0] - line_width / 2

    placed = []
    for character in line:
        if character.isspace():
            if config.space_width is not None:
                x += config.space_width
            else:
                x += metrics.measure_glyph_width(character) * config.font_scale
            continue

        placed.append((character, (x, y)))
        x += metrics.measure_glyph_width(character) * config.font_scale

    return placed


def layout_cue(cue: Cue, metrics, config: LyricsConfig) -> List[Tuple[str, Vector2]]:
    """Per-character positions for all lines of a cue, stacked top-down"""
    y = config.y
    placed = []
    for line in split_lines(cue.text):
        placed.extend(layout_line(line, y, metrics, config))
        y += metrics.measure_line_height(line) * config.font_scale
    return placed


# ============================================================================
# Effect Generation
# ============================================================================

def generate_line_lyrics(cues: Sequence[Cue], config: LyricsConfig) -> List[Element]:
    """One centred text element per cue"""
    paths = text_image_paths([cue.text for cue in cues], config.osb_folder)
    return [
        Element(
            kind="text",
            asset=paths[cue.text],
            layer=config.layer,
            origin=Origin.CENTRE,
            position=(config.stage.center[0], config.y),
            commands=tuple(text_keyframes(cue.range.start, cue.range.end, config)),
            text=cue.text
        )
        for cue in cues
    ]


def generate_character_lyrics(cues: Sequence[Cue], metrics, config: LyricsConfig) -> List[Element]:
    """One text element per visible character, all synchronized to their cue"""
    layouts = [(cue, layout_cue(cue, metrics, config)) for cue in cues]
    paths = text_image_paths(
        [character for _, placed in layouts for character, _ in placed],
        config.osb_folder
    )

    elements = []
    for cue, placed in layouts:
        for character, position in placed:
            elements.append(Element(
                kind="text",
                asset=paths[character],
                layer=config.layer,
                origin=Origin.CENTRE_LEFT,
                position=position,
                commands=tuple(text_keyframes(cue.range.start, cue.range.end, config)),
                text=character
            ))
    return elements


def generate_lyrics(cues: Sequence[Cue], metrics=None, config: LyricsConfig = None) -> List[Element]:
    """Lay out lyric cues as keyframed text elements

    Args:
        cues: Lyric lines with their display windows
        metrics: Font metrics provider (required for per-character mode)
        config: Effect options (defaults when None)

    Returns:
        Text elements in cue order

    Raises:
        InvalidTimeRangeError: If any cue ends before it starts
        ValueError: If per-character mode is requested without metrics
    """
    config = config or LyricsConfig()

    # All cues are checked before the first element is built
    for index, cue in enumerate(cues):
        validate_time_range(cue.range, effect=EFFECT_NAME, parameter=f"cues[{index}]")

    if not config.per_character:
        return generate_line_lyrics(cues, config)

    if metrics is None:
        raise ValueError("Per-character lyrics require a font metrics provider")
    return generate_character_lyrics(cues, metrics, config)
