"""Block-level markdown: tokens in, HTML lines out.

Each section parser leaves the stream on the last token it consumed; the
dispatch loop advances past it.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass

from ..core.model import Line, Token, TokenKind
from ..errors import ParseError
from .indent import trim_indent
from .tokenizer import (
    BULLETED_RE,
    DEF_RE,
    HEADING_RE,
    NUMBERED_RE,
    QUOTE_RE,
    TokenStream,
    tokenize_lines,
)

MAX_NESTING_DEPTH = 32

TEXT_WITH_ID_RE = re.compile(r"^(?P<text>.*?)\s*\{\s*\#(?P<id>[^}]+?)\s*\}\s*$")

LIST_KINDS = (TokenKind.NUMBERED, TokenKind.BULLETED, TokenKind.DT, TokenKind.DD)


@dataclass
class HeadingLevel:
    """Last heading level seen, shared by a parse and the parses nested in it."""
    last: int | None = None


def parse(
    lines: list[Line],
    tab_size: int,
    depth: int = 0,
    headings: HeadingLevel | None = None,
) -> list[str]:
    """Parse source lines into HTML lines."""
    if depth > MAX_NESTING_DEPTH:
        line_no = lines[0].index if lines else None
        raise ParseError(f"Blocks nested deeper than {MAX_NESTING_DEPTH} levels.", line_no)
    tokens = tokenize_lines(lines, tab_size)
    return BlockParser(tokens, tab_size, depth, headings).parse()


def _heading(level: int, text: str, id: str | None) -> str:
    id_attr = f' id="{html.escape(id.strip(), quote=True)}"' if id else ""
    return f"<h{level}{id_attr}>{text.strip()}</h{level}>"


class BlockParser:
    def __init__(
        self,
        tokens: list[Token],
        tab_size: int,
        depth: int = 0,
        headings: HeadingLevel | None = None,
    ):
        self.stream = TokenStream(tokens, tab_size)
        self.tab_size = tab_size
        self.depth = depth
        self.headings = headings if headings is not None else HeadingLevel()

    def parse(self) -> list[str]:
        stream = self.stream
        out: list[str] = []

        while stream.curr.kind is not TokenKind.END:
            kind = stream.curr.kind

            if kind in (TokenKind.RAW, TokenKind.MARKUP_BLOCK):
                out.append(stream.curr.text)
            elif kind is TokenKind.HEAD:
                out.append(self.parse_single_line_heading())
            elif kind is TokenKind.TEXT:
                if stream.next.kind in (TokenKind.EQUALS_LINE, TokenKind.DASH_LINE):
                    out.append(self.parse_multi_line_heading())
                elif stream.prev.kind is TokenKind.BLANK:
                    out.extend(self.parse_paragraph())
                else:
                    out.append(stream.curr.text)
            elif kind in (TokenKind.HORIZONTAL_RULE, TokenKind.DASH_LINE):
                out.append("<hr>")
            elif kind is TokenKind.EQUALS_LINE:
                raise ParseError(
                    "Equals line without heading text above it.", stream.curr.line_no
                )
            elif kind in LIST_KINDS:
                out.extend(self.parse_list())
            elif kind is TokenKind.QUOTE_BLOCK:
                out.extend(self.parse_quote_block())
            # BLANK tokens produce nothing.

            stream.advance()

        return out

    def _check_heading_level(self, level: int, line_no: int | None) -> None:
        last = self.headings.last
        if last is not None and level > last + 1:
            raise ParseError(f"Heading level jumps from h{last} to h{level}.", line_no)
        self.headings.last = level

    def parse_single_line_heading(self) -> str:
        token = self.stream.curr
        m = HEADING_RE.match(token.raw_line)
        if m is None:
            raise ParseError(f'Malformed heading: "{token.raw_line}"', token.line_no)
        level = len(m.group("prefix")) + 1
        self._check_heading_level(level, token.line_no)
        return _heading(level, m.group("text"), m.group("id"))

    def parse_multi_line_heading(self) -> str:
        stream = self.stream
        token = stream.curr
        if stream.next.kind is TokenKind.EQUALS_LINE:
            level = 2
        elif stream.next.kind is TokenKind.DASH_LINE:
            level = 3
        else:
            raise ParseError(
                f"Fail to parse a multi-line heading from:\n{token.raw_line}\n{stream.next.raw_line}",
                token.line_no,
            )
        self._check_heading_level(level, token.line_no)

        m = TEXT_WITH_ID_RE.match(token.raw_line)
        if m:
            heading = _heading(level, m.group("text"), m.group("id"))
        else:
            heading = _heading(level, token.raw_line, None)

        stream.advance()
        return heading

    def parse_paragraph(self) -> list[str]:
        stream = self.stream
        lines = [f"<p>{stream.curr.text}"]

        # Stop before a line that starts a multi-line heading.
        while stream.next.kind is TokenKind.TEXT and stream.next_next.kind not in (
            TokenKind.EQUALS_LINE,
            TokenKind.DASH_LINE,
        ):
            stream.advance()
            lines.append(stream.curr.text)

        lines[-1] = lines[-1].rstrip() + "</p>"
        return lines

    def parse_list(self) -> list[str]:
        stream = self.stream
        first = stream.curr

        if first.kind is TokenKind.NUMBERED:
            targets, marker_re, outer_tag = (TokenKind.NUMBERED,), NUMBERED_RE, "ol"
        elif first.kind is TokenKind.BULLETED:
            targets, marker_re, outer_tag = (TokenKind.BULLETED,), BULLETED_RE, "ul"
        elif first.kind in (TokenKind.DT, TokenKind.DD):
            targets, marker_re, outer_tag = (TokenKind.DT, TokenKind.DD), DEF_RE, "dl"
        else:
            raise ParseError("Try to parse a line that isn't a list.", first.line_no)

        outer_attrs = "data-md"
        if first.kind is TokenKind.NUMBERED:
            start = int(NUMBERED_RE.match(first.raw_line).group("num"))
            if start != 1:
                outer_attrs += f' start="{start}"'

        top_indent_level = first.indent_level
        out = [f"<{outer_tag} {outer_attrs}>"]

        while True:
            item_kind, item_lines = self._parse_item(marker_re, top_indent_level)
            if item_kind is TokenKind.DT:
                tag = "dt"
            elif item_kind is TokenKind.DD:
                tag = "dd"
            else:
                tag = "li"

            out.append(f"<{tag} data-md>")
            out.extend(parse(item_lines, self.tab_size, self.depth + 1, self.headings))
            out.append(f"</{tag}>")

            # Another item follows directly or after a single blank line.
            candidate = stream.next
            skip_blank = candidate.kind is TokenKind.BLANK
            if skip_blank:
                candidate = stream.next_next
            if candidate.kind not in targets or candidate.indent_level != top_indent_level:
                break

            if skip_blank:
                stream.advance()
            stream.advance()

        out.append(f"</{outer_tag}>")
        return out

    def _parse_item(self, marker_re: re.Pattern[str], top_indent_level: int) -> tuple[TokenKind, list[Line]]:
        stream = self.stream
        marker = stream.curr
        m = marker_re.match(marker.raw_line)
        if m is None:
            raise ParseError(f'Malformed list item: "{marker.raw_line}"', marker.line_no)
        lines = [Line(marker.line_no or 0, m.group("text") or "")]

        while True:
            nxt = stream.next
            if nxt.kind is TokenKind.END:
                break
            if nxt.kind is TokenKind.BLANK:
                after = stream.next_next
                if after.kind in (TokenKind.BLANK, TokenKind.END) or after.indent_level <= top_indent_level:
                    break
                stream.advance()
                lines.append(Line(stream.curr.line_no or 0, ""))
                continue
            if nxt.indent_level <= top_indent_level:
                break

            stream.advance()
            token = stream.curr
            lines.append(
                Line(
                    token.line_no or 0,
                    trim_indent(token.raw_line, top_indent_level + 1, self.tab_size, token.line_no),
                )
            )

        return marker.kind, lines

    def parse_quote_block(self) -> list[str]:
        stream = self.stream
        top_indent_level = stream.curr.indent_level
        lines = [self._quote_line(stream.curr)]

        while (
            stream.next.kind in (TokenKind.QUOTE_BLOCK, TokenKind.TEXT)
            and stream.next.indent_level >= top_indent_level
        ):
            stream.advance()
            lines.append(self._quote_line(stream.curr))

        return ["<blockquote>", *parse(lines, self.tab_size, self.depth + 1, self.headings), "</blockquote>"]

    @staticmethod
    def _quote_line(token: Token) -> Line:
        m = QUOTE_RE.match(token.raw_line)
        if token.kind is TokenKind.QUOTE_BLOCK and m is not None:
            text = m.group("text")
        else:
            text = token.raw_line.lstrip()
        return Line(token.line_no or 0, text)
