"""Block markdown for specmark sources."""

from ..core.model import Line
from .comments import remove_comments
from .indent import get_indent_level, trim_indent
from .parser import parse
from .tokenizer import TokenStream, tokenize_lines


def to_lines(text: str, first_index: int = 1) -> list[Line]:
    """Split source text into numbered lines."""
    return [Line(i, t) for i, t in enumerate(text.splitlines(), start=first_index)]


def parse_text(text: str, tab_size: int = 4) -> str:
    """Parse a markdown source string into an HTML string."""
    return "\n".join(parse(to_lines(text), tab_size))


__all__ = [
    "get_indent_level",
    "parse",
    "parse_text",
    "remove_comments",
    "to_lines",
    "tokenize_lines",
    "trim_indent",
    "TokenStream",
]
