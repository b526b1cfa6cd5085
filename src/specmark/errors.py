"""Exception hierarchy for specmark.

Every failure is fatal for the document being built. Library code raises;
only the CLI turns an exception into an exit status.
"""

from enum import Enum


class SpecmarkError(Exception):
    """Base class for all specmark errors."""


class ParseError(SpecmarkError):
    """Malformed markdown structure or indentation."""

    def __init__(self, message: str, line: int | None = None):
        self.message = message
        self.line = line
        super().__init__(f"[Line {line}] {message}" if line is not None else message)


class ClassificationError(SpecmarkError):
    """A definition element could not be classified."""


class QueryErrorKind(Enum):
    TEXT = "text"
    LINK_TYPE = "link-type"
    STATUS = "status"
    FOR = "for"


class QueryError(SpecmarkError):
    """A reference query was emptied by one of the filter stages."""

    def __init__(self, kind: QueryErrorKind, link_text: str):
        self.kind = kind
        self.link_text = link_text
        super().__init__(f"No reference for '{link_text}' ({kind.value} mismatch)")


class LinkResolutionError(SpecmarkError):
    """No lookup tier could resolve a link."""


class DataSourceError(SpecmarkError):
    """An on-disk anchor or biblio file is unreadable or malformed."""


class BiblioError(SpecmarkError):
    """A biblio alias chain loops or never ends."""
