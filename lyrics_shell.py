"""
Lyrics Shell - Imperative Shell

Loads lyric cues from subtitle files (.srt, .vtt) or pre-structured JSON
and normalizes them into Cue objects for lyrics_core.py.

JSON lyrics are a list of {"text": ..., "startTime": ms, "endTime": ms}.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

import pysubs2  # type: ignore

from storyboard_types import Cue, TimeRange, UnsupportedFormatError


SUBTITLE_EXTENSIONS = {".srt", ".vtt"}
JSON_EXTENSIONS = {".json"}


# ============================================================================
# Normalization (pure)
# ============================================================================

def cue_from_dict(data: Dict[str, Any]) -> Cue:
    """Convert a {text, startTime, endTime} record into a Cue"""
    return Cue(
        text=str(data["text"]),
        range=TimeRange(float(data["startTime"]), float(data["endTime"]))
    )


def cues_from_subtitles(subs: pysubs2.SSAFile) -> List[Cue]:
    """Convert parsed subtitle events into Cues, skipping comments

    Subtitle line breaks become "\\n" so multi-line cues lay out per line.
    """
    return [
        Cue(text=event.plaintext, range=TimeRange(float(event.start), float(event.end)))
        for event in subs
        if not event.is_comment
    ]


# ============================================================================
# File Loading (Imperative Shell)
# ============================================================================

def load_lyrics(lyrics_path: str) -> List[Cue]:
    """Load lyric cues from a subtitle or JSON file

    Imperative shell: performs file I/O.

    Args:
        lyrics_path: Path to a .srt, .vtt or .json file

    Returns:
        Cues in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        UnsupportedFormatError: If the extension is not .srt, .vtt or .json
    """
    path = Path(lyrics_path)
    extension = path.suffix.lower()

    if extension not in SUBTITLE_EXTENSIONS | JSON_EXTENSIONS:
        raise UnsupportedFormatError(
            f"Unsupported lyrics file type '{extension or path.name}', expected .srt, .vtt or .json",
            effect="lyrics",
            parameter="lyrics_path"
        )

    if not path.exists():
        raise FileNotFoundError(f"Lyrics file not found: {lyrics_path}")

    if extension in JSON_EXTENSIONS:
        records = json.loads(path.read_text(encoding="utf-8"))
        return [cue_from_dict(record) for record in records]

    subs = pysubs2.load(str(path), encoding="utf-8")
    return cues_from_subtitles(subs)
