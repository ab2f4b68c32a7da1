"""
Font Metrics Shell - Imperative Shell

Font metrics provider backed by Pillow. Loads font files (I/O) and measures
text for lyrics_core.py; never draws anything.

Provider contract:
    register_font(path, name)
    measure_line_width(line) -> float
    measure_line_height(line) -> float
    measure_glyph_width(char) -> float
"""

from pathlib import Path
from typing import Dict, Optional

from PIL import ImageFont  # type: ignore


# Tried in order when the requested font isn't registered or fails to load
SYSTEM_FONT_PATHS = [
    '/System/Library/Fonts/Supplemental/Arial.ttf',  # macOS
    '/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf',  # Linux
    'C:\\Windows\\Fonts\\arial.ttf',  # Windows
]


def _load_font(font_path: Optional[str], size: int):
    """Load a font file or fall back to system fonts

    Args:
        font_path: Preferred font file, or None
        size: Font size in pixels

    Returns:
        PIL font object (FreeTypeFont unless nothing could be loaded)
    """
    candidates = ([font_path] if font_path else []) + SYSTEM_FONT_PATHS

    for candidate in candidates:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue

    # Fall back to default font
    try:
        return ImageFont.load_default(size)
    except TypeError:
        # Pillow < 10.1 has no sized default font
        return ImageFont.load_default()


class PillowFontMetrics:
    """Measures text with a Pillow font

    Fonts are looked up by name in a registry filled by `register_font`;
    an unknown name or missing file falls back to a system font.

    Args:
        font_name: Name of the font to measure with
        size: Font size in pixels
        registry: Optional pre-filled name → path mapping
    """

    def __init__(self, font_name: str = "Arial", size: int = 32, registry: Dict[str, str] = None):
        self.font_name = font_name
        self.size = size
        self.registry: Dict[str, str] = dict(registry or {})
        self._font = None

    def register_font(self, path: str, name: str) -> None:
        """Make a font file available under `name`

        Raises:
            FileNotFoundError: If the font file doesn't exist
        """
        if not Path(path).exists():
            raise FileNotFoundError(f"Font file not found: {path}")
        self.registry[name] = str(path)
        if name == self.font_name:
            self._font = None

    @property
    def font(self):
        if self._font is None:
            self._font = _load_font(self.registry.get(self.font_name), self.size)
        return self._font

    def measure_line_width(self, line: str) -> float:
        """Advance width of a whole line"""
        return float(self.font.getlength(line))

    def measure_glyph_width(self, character: str) -> float:
        """Advance width of one character (spaces included)"""
        return float(self.font.getlength(character))

    def measure_line_height(self, line: str) -> float:
        """Tallest glyph box in the line

        Blank lines use the font's ascent + descent so empty lines still
        take vertical space.
        """
        heights = []
        for character in line:
            left, top, right, bottom = self.font.getbbox(character)
            heights.append(bottom - top)
        tallest = max(heights, default=0)
        if tallest > 0:
            return float(tallest)
        return float(sum(self.font.getmetrics()))


def load_font_metrics(
    font_name: str = "Arial",
    size: int = 32,
    font_path: Optional[str] = None
) -> PillowFontMetrics:
    """Create a metrics provider, registering `font_path` when it exists

    Imperative shell: checks the filesystem. A missing font_path is not an
    error; measurement falls back to a system font.

    Returns:
        Provider ready for lyrics_core.generate_lyrics
    """
    metrics = PillowFontMetrics(font_name, size)
    if font_path and Path(font_path).exists():
        metrics.register_font(font_path, font_name)
    return metrics
