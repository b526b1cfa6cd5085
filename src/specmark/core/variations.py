"""Inflected spellings of a link text, for loose matching of dfn links."""

from collections.abc import Iterator

_DOUBLING_CONSONANTS = "bdfgklmnprstvz"

_IRREGULAR = {
    "throw": "thrown",
    "know": "known",
    "show": "shown",
    "grow": "grown",
    "write": "written",
    "hide": "hidden",
    "choose": "chosen",
    "begin": "begun",
    "run": "ran",
    "find": "found",
    "bind": "bound",
    "hold": "held",
    "build": "built",
    "send": "sent",
    "leave": "left",
    "child": "children",
    "index": "indices",
    "matrix": "matrices",
    "vertex": "vertices",
}
_IRREGULAR_REVERSE = {v: k for k, v in _IRREGULAR.items()}


def _inflections(text: str) -> Iterator[str]:
    last1, last2, last3 = text[-1:], text[-2:], text[-3:]

    # Berries <-> Berry, Blockified <-> Blockify
    if last3 in ("ies", "ied"):
        yield text[:-3] + "y"
    if last1 == "y":
        yield text[:-1] + "ies"
        yield text[:-1] + "ied"

    # Zeroes <-> Zero
    if last2 == "es":
        yield text[:-2]
    else:
        yield text + "es"

    # Element's <-> Element
    if last2 in ("'s", "’s"):
        yield text[:-2]
    else:
        yield text + "'s"

    # Elements <-> Element
    if last1 == "s":
        yield text[:-1]
    else:
        yield text + "s"

    # Snapped <-> Snap
    if last2 == "ed" and len(text) >= 4 and text[-3] == text[-4]:
        yield text[:-3]
    elif last1 and last1 in _DOUBLING_CONSONANTS:
        yield text + last1 + "ed"

    # Zeroed <-> Zero, Generated <-> Generate
    if last2 == "ed":
        yield text[:-2]
    else:
        yield text + "ed"
    if last1 == "d":
        yield text[:-1]
    else:
        yield text + "d"

    # Navigating <-> Navigate
    if last3 == "ing":
        yield text[:-3]
        yield text[:-3] + "e"
    elif last1 == "e":
        yield text[:-1] + "ing"
    else:
        yield text + "ing"

    # Snapping <-> Snap
    if last3 == "ing" and len(text) >= 5 and text[-4] == text[-5]:
        yield text[:-4]
    elif last1 and last1 in _DOUBLING_CONSONANTS:
        yield text + last1 + "ing"

    # Insensitively <-> Insensitive
    if last2 == "ly":
        yield text[:-2]
    else:
        yield text + "ly"

    lowered = text.lower()
    for table in (_IRREGULAR, _IRREGULAR_REVERSE):
        if lowered in table:
            yield table[lowered]


def ordered_link_text_variations(link_type: str, text: str) -> list[str]:
    """
    The text itself first, then its variants in a stable order, without
    duplicates or empty strings.
    """
    if link_type != "dfn" or not text:
        return [text]
    variants = dict.fromkeys([text, *_inflections(text)])
    return [v for v in variants if v]


def link_text_variations(link_type: str, text: str) -> set[str]:
    """
    Spellings to try when a dfn link does not match exactly, e.g.
    "Navigating" also tries "Navigate". Other link types only match
    their own text.
    """
    return set(ordered_link_text_variations(link_type, text))
