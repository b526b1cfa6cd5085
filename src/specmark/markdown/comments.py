"""Strip HTML comments from source lines before tokenizing."""

from ..core.model import Line


def _remove_comments_in_text(text: str, in_comment: bool) -> tuple[str, bool]:
    kept = []
    while True:
        if in_comment:
            _, sep, rest = text.partition("-->")
            if not sep:
                return "".join(kept), True
            text, in_comment = rest, False
        else:
            left, sep, rest = text.partition("<!--")
            kept.append(left)
            if not sep:
                return "".join(kept), False
            text, in_comment = rest, True


def remove_comments(lines: list[Line]) -> list[Line]:
    """
    Drop `<!-- ... -->` comments, including ones spanning several lines.

    A line that only held comment text disappears entirely; every other line
    is right-trimmed.
    """
    in_comment = False
    out: list[Line] = []

    for line in lines:
        was_in_comment = in_comment
        text, in_comment = _remove_comments_in_text(line.text, in_comment)

        if not text.strip() and (text != line.text or was_in_comment or in_comment):
            continue

        out.append(Line(line.index, text.rstrip()))

    return out
