from typing import Iterator, Mapping, MutableMapping


class ToggleSet(MutableMapping[str, bool]):
    """
    Named feature switches with a fallback value, e.g. markup shorthands:
    - "markdown": True
    - "css": False
    Names that were never set report the default.
    """

    def __init__(self, initial: Mapping[str, bool] | None = None, default: bool = True):
        self._d = {k: bool(v) for k, v in (initial or {}).items()}
        self.default = default

    # MutableMapping interface
    def __getitem__(self, k: str) -> bool:
        return self._d.get(k, self.default)

    def __setitem__(self, k: str, v: bool) -> None:
        self._d[k] = bool(v)

    def __delitem__(self, k: str) -> None:
        del self._d[k]

    def __iter__(self) -> Iterator[str]:
        return iter(self._d)

    def __len__(self) -> int:
        return len(self._d)

    def update_from(self, other: "ToggleSet") -> None:
        """Take every explicit value and the default of `other`."""
        self._d.update(other._d)
        self.default = other.default
