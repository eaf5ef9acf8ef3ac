"""
Tag index core - ctags-style tag file parsing and symbol lookup

Immutable index, exact-name lookup, three-way resolve.
"""

from .index import (Ambiguous, NotFound, Resolution, TagIndex, Unique, clear_index,
                    get_index, index_exists, load_index, reload_index, resolve,
                    set_tags_path)
from .locate import locate_tags_file
from .records import TagParseError, TagRecord, TagWarning, parse_tag_line

__all__ = [
    "TagIndex",
    "TagRecord",
    "TagWarning",
    "TagParseError",
    "Resolution",
    "Unique",
    "Ambiguous",
    "NotFound",
    "load_index",
    "resolve",
    "parse_tag_line",
    "locate_tags_file",
    "get_index",
    "set_tags_path",
    "reload_index",
    "index_exists",
    "clear_index",
]
