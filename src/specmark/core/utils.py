"""Utility functions for specmark."""

import re

_DASHABLE_RE = re.compile(r"[\s/(,]+")
_USELESS_RE = re.compile(r"[^a-z0-9_-]+")
_GROUP_CHARS = "abcdefghijklmnopqrstuvwxyz0123456789"
_GROUP_LENGTH = 2


def generate_name(text: str) -> str:
    """
    Convert free text to an id-safe name.

    - Lowercase
    - Drop "()" pairs
    - Whitespace, `/`, `(` and `,` runs become a single `-`
    - Anything outside [a-z0-9_-] is removed

    Examples:
        >>> generate_name("Flex Container")
        'flex-container'
        >>> generate_name("getComputedStyle()")
        'getcomputedstyle'
    """
    text = text.lower()
    text = text.replace("()", "")
    text = _DASHABLE_RE.sub("-", text)
    text = _USELESS_RE.sub("", text)
    return text


def generate_group_name(key: str) -> str:
    """
    Shard key for the on-disk stores: the first two safe characters of the
    lowercased key, padded with `_`.
    """
    group = ""
    for ch in key.lower():
        if len(group) == _GROUP_LENGTH:
            break
        if ch in _GROUP_CHARS:
            group += ch
    return group.ljust(_GROUP_LENGTH, "_")


def split_for_values(text: str) -> tuple[str, ...]:
    """Split a `for` attribute value on commas, keeping the `/` sentinel."""
    if text.strip() == "/":
        return ("/",)
    return tuple(v.strip() for v in text.split(",") if v.strip())


def fragment_of(url: str) -> str:
    """Part of a url after the last `#`, or the whole url."""
    return url.rsplit("#", 1)[-1]
