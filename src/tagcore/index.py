"""
Tag index - flat record list, exact-name lookup, three-way resolve

Built once per load and never mutated. A reload builds a new TagIndex and
swaps the module-level reference.
"""

import logging
import re
import threading
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .fingerprint import TagFileTracker, fingerprint_bytes
from .locate import DEFAULT_TAGS_FILENAME, locate_tags_file
from .records import TagParseError, TagRecord, TagWarning, is_record_line, parse_tag_line

logger = logging.getLogger(__name__)

_UNDECODABLE = re.compile("[\udc80-\udcff]")


@dataclass(frozen=True)
class NotFound:
    symbol: str
    status: str = "not_found"

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, "symbol": self.symbol}


@dataclass(frozen=True)
class Unique:
    record: TagRecord
    status: str = "unique"

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status, **self.record.to_dict()}


@dataclass(frozen=True)
class Ambiguous:
    symbol: str
    candidates: Tuple[TagRecord, ...]
    status: str = "ambiguous"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "symbol": self.symbol,
            "candidates": [record.to_dict() for record in self.candidates],
        }


Resolution = Union[NotFound, Unique, Ambiguous]


class TagIndex:
    """Records in file order plus a name -> records table."""

    __slots__ = ("_path", "_records", "_by_symbol", "_warnings", "_fingerprint")

    def __init__(self, records: Tuple[TagRecord, ...] = (),
                 warnings: Tuple[TagWarning, ...] = (),
                 path: Optional[str] = None,
                 fingerprint: str = ""):
        by_symbol: Dict[str, List[TagRecord]] = {}
        for record in records:
            by_symbol.setdefault(record.symbol, []).append(record)

        object.__setattr__(self, "_path", path)
        object.__setattr__(self, "_records", tuple(records))
        object.__setattr__(self, "_by_symbol", MappingProxyType(
            {symbol: tuple(matches) for symbol, matches in by_symbol.items()}))
        object.__setattr__(self, "_warnings", tuple(warnings))
        object.__setattr__(self, "_fingerprint", fingerprint)

    def __setattr__(self, name, value):
        raise AttributeError("TagIndex is immutable")

    def __delattr__(self, name):
        raise AttributeError("TagIndex is immutable")

    @classmethod
    def load(cls, path: str, strict: bool = False, encoding: str = "utf-8") -> "TagIndex":
        """
        Read and parse a tag file.

        Missing or unreadable files raise OSError. Malformed lines are
        skipped and collected as warnings, or raise TagParseError when
        strict is set.
        """
        with open(path, "rb") as f:
            data = f.read()

        records: List[TagRecord] = []
        warnings: List[TagWarning] = []
        # undecodable bytes survive as lone surrogates so each line can be
        # rejected on its own; "replace" would merge distinct symbols
        text = data.decode(encoding, errors="surrogateescape")

        # line numbers count \n only; str.splitlines() also splits on \x0c
        for line_number, line in enumerate(text.split("\n"), start=1):
            line = line.rstrip("\r")
            if not is_record_line(line):
                continue
            try:
                if _UNDECODABLE.search(line):
                    line = line.encode(encoding, "surrogateescape").decode(encoding, "replace")
                    raise TagParseError(f"undecodable bytes for encoding {encoding}")
                records.append(parse_tag_line(line))
            except TagParseError as e:
                if strict:
                    raise TagParseError(e.reason, line_number, line) from e
                logger.warning(f"Skipping {path}:{line_number}: {e.reason}")
                warnings.append(TagWarning(line_number=line_number, text=line, reason=e.reason))

        logger.info(f"Loaded {len(records)} tags from {path} ({len(warnings)} lines skipped)")
        return cls(tuple(records), tuple(warnings), path=str(path), fingerprint=fingerprint_bytes(data))

    @property
    def path(self) -> Optional[str]:
        return self._path

    @property
    def records(self) -> Tuple[TagRecord, ...]:
        return self._records

    @property
    def warnings(self) -> Tuple[TagWarning, ...]:
        return self._warnings

    @property
    def fingerprint(self) -> str:
        return self._fingerprint

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TagRecord]:
        return iter(self._records)

    def __repr__(self) -> str:
        return f"TagIndex(path={self._path!r}, records={len(self._records)}, warnings={len(self._warnings)})"

    def lookup(self, symbol: str) -> Tuple[TagRecord, ...]:
        """Exact, case-sensitive match on the symbol field, in file order."""
        return self._by_symbol.get(symbol, ())

    def resolve(self, symbol: str) -> Resolution:
        matches = self.lookup(symbol)
        if not matches:
            return NotFound(symbol)
        if len(matches) == 1:
            return Unique(matches[0])
        return Ambiguous(symbol, matches)

    def symbols(self) -> Tuple[str, ...]:
        """Distinct symbol names, first-seen order."""
        return tuple(self._by_symbol.keys())

    def source_path(self, record: TagRecord) -> str:
        """Relative record paths are relative to the tag file's directory."""
        file_path = Path(record.file)
        if file_path.is_absolute() or not self._path:
            return str(file_path)
        return str(Path(self._path).parent / file_path)

    def symbol_table(self) -> Mapping[str, Tuple[TagRecord, ...]]:
        return self._by_symbol

    def get_stats(self) -> Dict[str, Any]:
        return {
            "path": self._path,
            "record_count": len(self._records),
            "symbol_count": len(self._by_symbol),
            "warning_count": len(self._warnings),
            "fingerprint": self._fingerprint,
        }


def load_index(path: str, strict: bool = False, encoding: str = "utf-8") -> TagIndex:
    return TagIndex.load(path, strict=strict, encoding=encoding)


def resolve(index: TagIndex, symbol_text: str) -> Resolution:
    return index.resolve(symbol_text)


_current_index: Optional[TagIndex] = None
_load_options: Dict[str, Any] = {"strict": False, "encoding": "utf-8"}
_tracker = TagFileTracker()
_index_lock = threading.RLock()


def get_index() -> TagIndex:
    with _index_lock:
        if _current_index is None:
            raise RuntimeError("Index not initialized")
        return _current_index


def index_exists() -> bool:
    with _index_lock:
        return _current_index is not None


def set_tags_path(path: str, filename: str = DEFAULT_TAGS_FILENAME,
                  strict: bool = False, encoding: str = "utf-8") -> TagIndex:
    """Locate, load and install a tag file as the current index."""
    global _current_index
    tags_file = locate_tags_file(path, filename)
    index = TagIndex.load(tags_file, strict=strict, encoding=encoding)

    with _index_lock:
        if _current_index is not None and _current_index.path:
            _tracker.forget(_current_index.path)
        _current_index = index
        _load_options.update(strict=strict, encoding=encoding)
        _tracker.remember(tags_file, index.fingerprint)
    return index


def reload_index(force: bool = False) -> Tuple[TagIndex, bool]:
    """
    Rebuild the current index if its file changed.

    Returns the index now installed and whether it was replaced. Queries
    running against the old instance are unaffected by the swap.
    """
    global _current_index
    with _index_lock:
        current = get_index()
        options = dict(_load_options)
    if not current.path:
        raise RuntimeError("Current index has no source file")
    if not force and not _tracker.is_changed(current.path):
        logger.debug(f"Tag file unchanged: {current.path}")
        return current, False

    # read and parse without the lock; only the swap is guarded
    index = TagIndex.load(current.path, **options)

    with _index_lock:
        if _current_index is not current:
            # set_tags_path or another reload won the race
            return get_index(), True
        _current_index = index
        _tracker.remember(current.path, index.fingerprint)
        return index, True


def clear_index() -> None:
    global _current_index
    with _index_lock:
        _current_index = None
        _tracker.fingerprints.clear()
