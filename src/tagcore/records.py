"""
Tag records - one line of a ctags-style tag file

<symbol>\t<file>\t<line>;"\t<kind>\t...
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

PSEUDO_TAG_PREFIX = "!_TAG_"


class TagParseError(ValueError):
    """Malformed tag line."""

    def __init__(self, reason: str, line_number: Optional[int] = None, text: str = ""):
        self.reason = reason
        self.line_number = line_number
        self.text = text
        if line_number is not None:
            super().__init__(f"line {line_number}: {reason}")
        else:
            super().__init__(reason)


@dataclass(frozen=True)
class TagRecord:
    symbol: str
    file: str
    line: int
    extras: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.symbol:
            raise TagParseError("empty symbol")
        if not self.file:
            raise TagParseError("empty file path")
        if self.line < 1:
            raise TagParseError(f"line number must be >= 1, got {self.line}")

    @property
    def kind(self) -> Optional[str]:
        """Bare kind letter, or the value of a kind: extension field."""
        for index, field in enumerate(self.extras):
            if index == 0 and ":" not in field:
                return field or None
            if field.startswith("kind:"):
                return field[len("kind:"):] or None
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "file": self.file,
            "line": self.line,
            "kind": self.kind,
            "extras": list(self.extras),
        }


@dataclass(frozen=True)
class TagWarning:
    """A skipped line, reported alongside a successful load."""

    line_number: int
    text: str
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {"line_number": self.line_number, "text": self.text, "reason": self.reason}


def is_record_line(text: str) -> bool:
    """Empty lines and !_TAG_ headers carry no record; whitespace-only lines are malformed."""
    stripped = text.rstrip("\r\n")
    return bool(stripped) and not stripped.startswith(PSEUDO_TAG_PREFIX)


def parse_locator(locator: str) -> int:
    """Line number from `42;"` or plain `42`."""
    segment = locator.split(";", 1)[0]
    # int() would also take "+4", " 4" and "4_2"
    if not (segment.isascii() and segment.isdigit()):
        raise TagParseError(f"locator is not a line number: {locator!r}")
    line = int(segment)
    if line < 1:
        raise TagParseError(f"line number must be >= 1, got {line}")
    return line


def parse_tag_line(text: str) -> TagRecord:
    fields = text.rstrip("\r\n").split("\t")
    if len(fields) < 3:
        raise TagParseError(f"expected at least 3 tab-separated fields, got {len(fields)}")

    symbol, file, locator = fields[0], fields[1], fields[2]
    if not symbol:
        raise TagParseError("empty symbol")
    if not file:
        raise TagParseError("empty file path")

    return TagRecord(
        symbol=symbol,
        file=file,
        line=parse_locator(locator),
        extras=tuple(fields[3:]),
    )
