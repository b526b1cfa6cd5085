"""Fixed vocabularies: element categories, definition types and their id prefixes."""

SOURCE_FILE_EXTENSIONS = (".bs", ".src.html")

INLINE_ELEMENT_TAGS = frozenset({
    "a", "em", "strong", "small", "s", "cite", "q", "dfn", "abbr", "data",
    "time", "code", "var", "samp", "kbd", "sub", "sup", "i", "b", "u", "mark",
    "ruby", "bdi", "bdo", "span", "br", "wbr", "img", "meter", "progress",
    "css", "l",
})

# Raw-text elements whose content never goes through markdown.
# Only <pre> may nest inside itself.
OPAQUE_ELEMENT_TAGS = ("pre", "xmp", "script", "style")
NESTABLE_OPAQUE_TAGS = frozenset({"pre"})

DFN_CLASS_TO_TYPE = {
    "propdef": "property",
    "descdef": "descriptor",
    "valdef": "value",
    "typedef": "type",
    "at-ruledef": "at-rule",
    "funcdef": "function",
    "selectordef": "selector",
    "elementdef": "element",
    "element-attrdef": "element-attr",
    "eventdef": "event",
    "interfacedef": "interface",
    "methoddef": "method",
    "attrdef": "attribute",
    "dictdef": "dictionary",
    "dict-memberdef": "dict-member",
    "enumdef": "enum",
    "enum-valuedef": "enum-value",
    "grammardef": "grammar",
    "abstract-opdef": "abstract-op",
}

DFN_TYPE_TO_CLASS = {dfn_type: cls for cls, dfn_type in DFN_CLASS_TO_TYPE.items()}

DFN_TYPES = frozenset({"dfn", *DFN_CLASS_TO_TYPE.values()})

LINK_TYPES = DFN_TYPES | {"biblio"}

DFN_SELECTOR = "dfn, h2[data-dfn-type], h3[data-dfn-type], h4[data-dfn-type], h5[data-dfn-type], h6[data-dfn-type]"

HEADING_SELECTOR = "h2, h3, h4, h5, h6"

CIRCLED_DIGITS = "⓪①②③④⑤⑥⑦⑧⑨"

MARKUP_SHORTHANDS = ("markdown", "biblio", "algorithm", "dfn", "css")
