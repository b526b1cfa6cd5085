"""Indentation units: one tab, or exactly `tab_size` spaces."""

from ..errors import ParseError


def _unit_width(text: str, offset: int, tab_size: int) -> int:
    """Width of the indent unit starting at `offset`, or 0 if there is none."""
    if text.startswith("\t", offset):
        return 1
    if tab_size > 0 and text.startswith(" " * tab_size, offset):
        return tab_size
    return 0


def get_indent_level(text: str, tab_size: int) -> int:
    """
    Count leading indent units.

    Examples:
        >>> get_indent_level("\\t\\tx", 4)
        2
        >>> get_indent_level("  x", 4)
        0
    """
    level = 0
    offset = 0
    while True:
        width = _unit_width(text, offset, tab_size)
        if not width:
            return level
        level += 1
        offset += width


def trim_indent(text: str, level: int, tab_size: int, line_no: int | None = None) -> str:
    """Remove `level` indent units from the start of `text`. Blank lines pass through."""
    if not text.strip():
        return text

    offset = 0
    for _ in range(level):
        width = _unit_width(text, offset, tab_size)
        if not width:
            raise ParseError(f'"{text}" isn\'t indented enough.', line_no)
        offset += width
    return text[offset:]
