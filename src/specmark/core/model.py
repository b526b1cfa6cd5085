from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bs4 import Tag


@dataclass(frozen=True)
class Line:
    index: int  # 1-based line number in the source document
    text: str


class TokenKind(Enum):
    BLANK = "blank"
    EQUALS_LINE = "equals-line"
    DASH_LINE = "dash-line"
    HORIZONTAL_RULE = "horizontal-rule"
    HEAD = "head"
    NUMBERED = "numbered"
    BULLETED = "bulleted"
    DT = "dt"
    DD = "dd"
    RAW = "raw"
    QUOTE_BLOCK = "quote-block"
    MARKUP_BLOCK = "markup-block"
    TEXT = "text"
    END = "end"


# Sentinel tokens sit at "infinite" indentation so they never extend a list.
SENTINEL_INDENT = 1 << 30


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    raw_line: str  # the source line as written; list items re-parse from this
    indent_level: int
    line_no: int | None = None
    output: str | None = None  # replacement markup for RAW tokens, e.g. "<pre>" for a fence

    @property
    def text(self) -> str:
        return self.raw_line if self.output is None else self.output

    @classmethod
    def blank(cls, line_no: int | None = None) -> Token:
        return cls(TokenKind.BLANK, "", SENTINEL_INDENT, line_no)

    @classmethod
    def end(cls) -> Token:
        return cls(TokenKind.END, "", SENTINEL_INDENT)

    @classmethod
    def raw(cls, raw_line: str, line_no: int | None = None, output: str | None = None) -> Token:
        return cls(TokenKind.RAW, raw_line, SENTINEL_INDENT, line_no, output)


@dataclass(frozen=True)
class Reference:
    link_type: str
    url: str
    status: str
    spec: str | None = None
    for_values: tuple[str, ...] = ()


@dataclass(frozen=True)
class Query:
    link_type: str
    link_text: str
    status: str | None = None
    for_values: tuple[str, ...] | None = None
    explicit_for: bool = False


@dataclass
class Dfn:
    element: "Tag"
    dfn_type: str
    id: str
    link_text: str
    for_values: tuple[str, ...] = ()
    export: bool = False


class BiblioFormat(Enum):
    DICT = "dict"
    STRING = "string"
    ALIAS = "alias"


@dataclass
class BiblioEntry:
    format: BiblioFormat
    link_text: str
    date: str | None = None
    status: str | None = None
    title: str | None = None
    url: str | None = None
    snapshot_url: str | None = None
    current_url: str | None = None
    authors: list[str] = field(default_factory=list)
    data: str | None = None  # preformatted citation for STRING entries
    alias_of: str | None = None

    def url_for(self, status: str | None) -> str | None:
        """Url for a `current` or `snapshot` citation, falling back to `url`."""
        if status == "snapshot" and self.snapshot_url:
            return self.snapshot_url
        if status == "current" and self.current_url:
            return self.current_url
        return self.url

    def to_dict(self) -> dict[str, Any]:
        return {
            "format": self.format.value,
            "linkText": self.link_text,
            "date": self.date,
            "status": self.status,
            "title": self.title,
            "url": self.url,
            "authors": list(self.authors),
            "data": self.data,
            "aliasOf": self.alias_of,
        }
