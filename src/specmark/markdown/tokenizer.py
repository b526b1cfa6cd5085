"""Turn source lines into block tokens.

Raw regions (opaque elements and fenced code) are tracked on a stack; lines
inside them are never classified.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass

from ..core.model import Line, Token, TokenKind
from ..core.vocab import INLINE_ELEMENT_TAGS, NESTABLE_OPAQUE_TAGS, OPAQUE_ELEMENT_TAGS
from .indent import get_indent_level

FENCED_LINE_RE = re.compile(r"^\s*(?P<tag>`{3,}|~{3,})(?P<info>[^`]*)$")
EQUALS_LINE_RE = re.compile(r"^={3,}\s*$")
DASH_LINE_RE = re.compile(r"^-{3,}\s*$")
HORIZONTAL_RULE_RE = re.compile(r"^(?:(?:\*\s*){3,}|(?:-\s*){3,}|(?:_\s*){3,})$")
HEADING_RE = re.compile(
    r"""
    ^(?P<prefix>\#{1,5})
    \s+
    (?P<text>[^\#]+)
    (?:
        (?P<another_prefix>\#{1,5})
        \s*
        \{\#(?P<id>[^}]+)\}
    )?
    \s*$
    """,
    re.VERBOSE,
)
NUMBERED_RE = re.compile(r"^\s*(?P<num>-?[0-9]+)\.(?:\s+(?P<text>.*)|$)")
BULLETED_RE = re.compile(r"^\s*[*+-](?:\s+(?P<text>.*)|$)")
DEF_RE = re.compile(r"^\s*(?P<prefix>:{1,2})(?:\s+(?P<text>.*)|$)")
QUOTE_RE = re.compile(r"^\s*>\s?(?P<text>.*)$")
MARKUP_BLOCK_RE = re.compile(r"^\s*</?(?P<tag>[\w-]+)")
OPAQUE_START_RE = re.compile(
    r"^\s*<(?P<tag>%s)(?:[\s>]|$)" % "|".join(OPAQUE_ELEMENT_TAGS), re.IGNORECASE
)


@dataclass
class RawRegion:
    tag: str  # element name, or the fence run for fenced code
    fenced: bool
    nestable: bool


def _end_tag_re(tag: str) -> re.Pattern[str]:
    return re.compile(r"</%s\s*>" % re.escape(tag), re.IGNORECASE)


def is_single_line_heading(line: str) -> bool:
    m = HEADING_RE.match(line)
    if m is None:
        return False
    if m.group("another_prefix") is None:
        return True
    return len(m.group("prefix")) == len(m.group("another_prefix"))


def _def_kind(line: str) -> TokenKind | None:
    m = DEF_RE.match(line)
    if m is None:
        return None
    return TokenKind.DT if len(m.group("prefix")) == 1 else TokenKind.DD


def _is_markup_block(line: str) -> bool:
    m = MARKUP_BLOCK_RE.match(line)
    return m is not None and m.group("tag").lower() not in INLINE_ELEMENT_TAGS


def classify_line(line: str) -> TokenKind:
    """Token kind of a line outside any raw region (raw starts excluded)."""
    if not line.strip():
        return TokenKind.BLANK
    if EQUALS_LINE_RE.match(line):
        return TokenKind.EQUALS_LINE
    if DASH_LINE_RE.match(line):
        return TokenKind.DASH_LINE
    if HORIZONTAL_RULE_RE.match(line):
        return TokenKind.HORIZONTAL_RULE
    if is_single_line_heading(line):
        return TokenKind.HEAD
    if NUMBERED_RE.match(line):
        return TokenKind.NUMBERED
    if BULLETED_RE.match(line):
        return TokenKind.BULLETED
    def_kind = _def_kind(line)
    if def_kind is not None:
        return def_kind
    if QUOTE_RE.match(line):
        return TokenKind.QUOTE_BLOCK
    if _is_markup_block(line):
        return TokenKind.MARKUP_BLOCK
    return TokenKind.TEXT


def _fence_start_markup(info: str) -> str:
    lang = info.strip().split()[0] if info.strip() else ""
    if lang:
        return f'<pre class="language-{html.escape(lang)}">'
    return "<pre>"


def _escape_raw(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;")


def tokenize_lines(lines: list[Line], tab_size: int) -> list[Token]:
    """Classify each line. Lines inside raw regions become RAW tokens."""
    tokens: list[Token] = []
    stack: list[RawRegion] = []

    for line in lines:
        text = line.text

        if stack:
            top = stack[-1]
            if top.fenced:
                m = FENCED_LINE_RE.match(text)
                if m and m.group("tag")[0] == top.tag[0] and len(m.group("tag")) >= len(top.tag):
                    stack.pop()
                    tokens.append(Token.raw(text, line.index, "</pre>"))
                else:
                    tokens.append(Token.raw(text, line.index, _escape_raw(text)))
                continue

            start = OPAQUE_START_RE.match(text)
            if top.nestable and start and start.group("tag").lower() == top.tag:
                if not _end_tag_re(top.tag).search(text, start.end()):
                    stack.append(RawRegion(top.tag, fenced=False, nestable=True))
            elif _end_tag_re(top.tag).search(text):
                stack.pop()
            tokens.append(Token.raw(text, line.index))
            continue

        indent = get_indent_level(text, tab_size)

        if not text.strip():
            tokens.append(Token.blank(line.index))
            continue

        start = OPAQUE_START_RE.match(text)
        if start:
            tag = start.group("tag").lower()
            if not _end_tag_re(tag).search(text, start.end()):
                stack.append(RawRegion(tag, fenced=False, nestable=tag in NESTABLE_OPAQUE_TAGS))
            tokens.append(Token(TokenKind.RAW, text, indent, line.index))
            continue

        fence = FENCED_LINE_RE.match(text)
        if fence:
            stack.append(RawRegion(fence.group("tag"), fenced=True, nestable=False))
            tokens.append(
                Token(TokenKind.RAW, text, indent, line.index, _fence_start_markup(fence.group("info")))
            )
            continue

        tokens.append(Token(classify_line(text), text, indent, line.index))

    return tokens


class TokenStream:
    """Read cursor over tokens, with a BLANK before the first and END after the last."""

    def __init__(self, tokens: list[Token], tab_size: int):
        self.tokens = tokens
        self.tab_size = tab_size
        self.index = 0
        self._before = Token.blank()
        self._after = Token.end()

    def advance(self) -> None:
        if self.index < len(self.tokens):
            self.index += 1

    def _nth(self, i: int) -> Token:
        if i < 0:
            return self._before
        if i >= len(self.tokens):
            return self._after
        return self.tokens[i]

    @property
    def curr(self) -> Token:
        return self._nth(self.index)

    @property
    def prev(self) -> Token:
        return self._nth(self.index - 1)

    @property
    def next(self) -> Token:
        return self._nth(self.index + 1)

    @property
    def next_next(self) -> Token:
        return self._nth(self.index + 2)
