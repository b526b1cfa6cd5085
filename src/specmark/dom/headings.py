from bs4 import Tag

from ..core.utils import generate_name
from ..core.vocab import HEADING_SELECTOR
from .tree import add_class, get_text_content, select


def process_headings(root: Tag) -> None:
    """Give h2-h6 the `heading settled` classes and an id made from their text."""
    for heading in select(root, HEADING_SELECTOR):
        add_class(heading, "heading")
        add_class(heading, "settled")
        if not heading.get("id"):
            name = generate_name(get_text_content(heading))
            if name:
                heading["id"] = name
