"""specmark - compile markdown-flavored spec sources into cross-referenced HTML."""

__version__ = "0.1.0"
