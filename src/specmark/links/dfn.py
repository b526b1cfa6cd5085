"""Definition classification: type, export flag and id of every dfn."""

from bs4 import Tag

from ..core.model import Dfn
from ..core.utils import generate_name, split_for_values
from ..core.vocab import DFN_SELECTOR, DFN_TYPE_TO_CLASS, DFN_TYPES
from ..dom.tree import compute_scopes, get_text_content, select
from ..errors import ClassificationError


def _dfn_text(el: Tag) -> str:
    lt = el.get("data-lt")
    if lt:
        first = lt.split("|")[0].strip()
        if first:
            return first
    return get_text_content(el)


def classify_dfns(root: Tag) -> list[Dfn]:
    """
    Tag every definition under `root` with `data-dfn-type`, an export
    marker and an id, and return them in document order.

    - type: the element's `data-dfn-type`, else a definition-class on an
      ancestor (e.g. `propdef`), else "dfn"
    - export: `data-export`/`data-noexport` on the element or its closest
      ancestor; otherwise only non-"dfn" types are exported
    - id: generated from the text, prefixed for typed definitions
      (`propdef-width`); ids are not deduplicated here

    Raises:
        ClassificationError: unknown type, or no text to build an id from
    """
    scopes = compute_scopes(root)
    dfns = []

    for el in select(root, DFN_SELECTOR):
        scope = scopes[id(el)]

        dfn_type = el.get("data-dfn-type") or scope.class_dfn_type or "dfn"
        if dfn_type not in DFN_TYPES:
            raise ClassificationError(f"Unknown dfn type '{dfn_type}' on '{get_text_content(el)}'")
        el["data-dfn-type"] = dfn_type

        export = scope.export
        if export is None:
            export = dfn_type != "dfn"
        if export:
            el["data-export"] = ""
        else:
            el["data-noexport"] = ""

        text = _dfn_text(el)
        if not el.get("id"):
            name = generate_name(text)
            if not name:
                raise ClassificationError(f"Cannot generate an id for the definition {str(el)!r}")
            prefix = DFN_TYPE_TO_CLASS.get(dfn_type)
            el["id"] = f"{prefix}-{name}" if prefix else name

        for_values = split_for_values(scope.dfn_for) if scope.dfn_for else ()
        dfns.append(Dfn(el, dfn_type, el["id"], text, for_values, export))

    return dfns
