"""
Storyboard Shell - Imperative Shell

Writes serialized storyboards to disk. Serialization itself lives in
osb_core.py.
"""

from pathlib import Path
from typing import Iterable

from osb_core import build_osb
from storyboard_types import Element


def write_storyboard(output_path: str, elements: Iterable[Element]) -> Path:
    """Serialize elements and write them as a .osb file

    Imperative shell: performs file I/O.

    Args:
        output_path: Destination file (parent folders are created)
        elements: Elements to write

    Returns:
        Path of the written file
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(build_osb(elements), encoding="utf-8")
    return path
