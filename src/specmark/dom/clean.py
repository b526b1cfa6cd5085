"""Tidy markdown artifacts in the tree before serialization."""

from bs4 import NavigableString, Tag

from .tree import select


def _significant_children(el: Tag) -> list:
    return [
        child
        for child in el.contents
        if not (isinstance(child, NavigableString) and not child.strip())
    ]


def _only_child(el: Tag) -> Tag | None:
    children = _significant_children(el)
    if len(children) == 1 and isinstance(children[0], Tag):
        return children[0]
    return None


def unwrap_single_paragraphs(root: Tag) -> None:
    # A markdown item holding one paragraph keeps just the inline content.
    for item in select(root, "dt[data-md], li[data-md]"):
        child = _only_child(item)
        if child is not None and child.name == "p":
            child.unwrap()


def merge_wrapped_lists(root: Tag) -> None:
    # Allow a markdown list to sit inside a hand-written list container.
    for list_el in select(root, "ol, ul, dl"):
        child = _only_child(list_el)
        if (
            child is not None
            and child.name == list_el.name
            and not list_el.has_attr("data-md")
            and child.has_attr("data-md")
        ):
            for grandchild in list(child.contents):
                list_el.append(grandchild.extract())
            child.decompose()
        if list_el.has_attr("data-md"):
            del list_el["data-md"]


def clean_dom(root: Tag) -> None:
    unwrap_single_paragraphs(root)
    merge_wrapped_lists(root)
