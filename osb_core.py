"""
Storyboard Script Serialization - Functional Core

Pure functions converting elements into osu! storyboard script (.osb) text.
No file I/O: storyboard_shell.py writes the result to disk.

Script shape:
    Sprite,<layer>,<origin>,"<path>",<x>,<y>
     <code>,<easing>,<start>,<end>,<values...>
     L,<start>,<count>
      <code>,<easing>,<start>,<end>,<values...>
"""

from typing import Iterable, List

from storyboard_types import Command, Element, Layer, Loop


LAYER_HEADERS = [
    (Layer.BACKGROUND, "//Storyboard Layer 0 (Background)"),
    (Layer.FAIL, "//Storyboard Layer 1 (Fail)"),
    (Layer.PASS, "//Storyboard Layer 2 (Pass)"),
    (Layer.FOREGROUND, "//Storyboard Layer 3 (Foreground)"),
    (Layer.OVERLAY, "//Storyboard Layer 4 (Overlay)"),
]


# ============================================================================
# Number Formatting
# ============================================================================

def format_number(value: float, precision: int = 4) -> str:
    """Compact decimal representation without trailing zeros

    Examples:
        >>> format_number(1.50)
        '1.5'
        >>> format_number(2.0)
        '2'
        >>> format_number(-0.00001)
        '0'
    """
    text = f"{float(value):.{precision}f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_time(value: float) -> str:
    """Storyboard times are whole milliseconds"""
    return str(int(round(value)))


def format_value(value) -> List[str]:
    """Flatten a scalar, vector or RGB value into script fields"""
    if isinstance(value, (tuple, list)):
        return [format_number(v) for v in value]
    return [format_number(value)]


# ============================================================================
# Command Lines
# ============================================================================

def command_line(command: Command, depth: int = 1) -> str:
    """One script line for a keyframe command

    Static commands omit the end time and the repeated value.
    """
    indent = " " * depth
    start = format_time(command.start)
    if command.is_static:
        fields = [command.code, str(int(command.easing)), start, ""]
        fields.extend(format_value(command.start_value))
    else:
        fields = [command.code, str(int(command.easing)), start, format_time(command.end)]
        fields.extend(format_value(command.start_value))
        fields.extend(format_value(command.end_value))
    return indent + ",".join(fields)


def command_lines(commands: Iterable, depth: int = 1) -> List[str]:
    """Script lines for commands, expanding loops one level deeper"""
    lines = []
    for command in commands:
        if isinstance(command, Loop):
            lines.append(" " * depth + f"L,{format_time(command.start)},{command.count}")
            lines.extend(command_lines(command.body, depth + 1))
        else:
            lines.append(command_line(command, depth))
    return lines


def element_lines(element: Element) -> List[str]:
    """Declaration line followed by all command lines of an element"""
    x, y = element.position
    header = (
        f'Sprite,{element.layer.value},{element.origin.value},'
        f'"{element.asset}",{format_number(x)},{format_number(y)}'
    )
    return [header] + command_lines(element.commands)


# ============================================================================
# Whole Storyboard
# ============================================================================

def build_osb(elements: Iterable[Element]) -> str:
    """Complete [Events] section for the given elements

    Elements are grouped by layer; within a layer they keep their
    insertion order.

    Returns:
        Storyboard script text ending with a newline
    """
    elements = list(elements)
    lines = ["[Events]", "//Background and Video events"]

    for layer, header in LAYER_HEADERS:
        lines.append(header)
        for element in elements:
            if element.layer == layer:
                lines.extend(element_lines(element))

    lines.append("//Storyboard Sound Samples")
    return "\n".join(lines) + "\n"
