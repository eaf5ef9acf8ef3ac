"""
Tag file fingerprints - xxhash3 over the raw bytes

A reload only rebuilds the index when the fingerprint moved.
"""

from dataclasses import dataclass, field
from typing import Dict

import xxhash


def fingerprint_bytes(data: bytes) -> str:
    return xxhash.xxh3_64(data).hexdigest()


def fingerprint_file(file_path: str) -> str:
    """Content hash of a file; empty string when it cannot be read."""
    try:
        with open(file_path, "rb") as f:
            return fingerprint_bytes(f.read())
    except OSError:
        return ""


@dataclass
class TagFileTracker:
    """Last fingerprint seen for each tag file."""

    fingerprints: Dict[str, str] = field(default_factory=dict)

    def remember(self, file_path: str, fingerprint: str) -> None:
        self.fingerprints[file_path] = fingerprint

    def forget(self, file_path: str) -> None:
        self.fingerprints.pop(file_path, None)

    def is_changed(self, file_path: str) -> bool:
        # mtime is too coarse: a regenerated file can keep it
        cached = self.fingerprints.get(file_path)
        if cached is None:
            return True
        return fingerprint_file(file_path) != cached
