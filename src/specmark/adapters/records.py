from pathlib import Path

from ..errors import DataSourceError

RECORD_END = "-"


class RecordReader:
    """Cursor over the lines of one line-oriented data file."""

    def __init__(self, path: Path, lines: list[str]):
        self.path = path
        self.lines = lines
        self.pos = 0

    @classmethod
    def open(cls, path: Path) -> "RecordReader | None":
        """Reader over `path`, or None when the file does not exist."""
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise DataSourceError(f"Cannot read data file {path}: {e}") from e
        return cls(path, text.splitlines())

    def at_end(self) -> bool:
        return self.pos >= len(self.lines)

    def field(self, name: str) -> str:
        if self.at_end():
            raise DataSourceError(f"{self.path}: record truncated, missing '{name}' field")
        line = self.lines[self.pos]
        self.pos += 1
        return line

    def fields(self, *names: str) -> list[str]:
        return [self.field(name) for name in names]

    def until_end(self, name: str) -> list[str]:
        """Lines up to (and consuming) the `-` terminator."""
        values = []
        while True:
            line = self.field(name)
            if line == RECORD_END:
                return values
            values.append(line)

    def expect_end(self) -> None:
        line = self.field(RECORD_END)
        if line != RECORD_END:
            raise DataSourceError(
                f"{self.path}:{self.pos}: expected '{RECORD_END}', got {line!r}"
            )
