"""
Configuration Management for Tag Index MCP

Sensible defaults with optional environment variable overrides.
"""

import codecs
import logging
import os
from typing import Any, Dict, Optional


class TagIndexConfig:
    """Tag index server configuration"""

    DEFAULT_TAGS_FILENAME = "tags"
    DEFAULT_ENCODING = "utf-8"
    DEFAULT_MAX_WARNINGS = 100
    DEFAULT_LOG_LEVEL = "ERROR"

    def __init__(self):
        self.tags_path = self._get_str_env("TAG_INDEX_PATH", None)
        self.tags_filename = self._get_str_env("TAG_INDEX_FILENAME", self.DEFAULT_TAGS_FILENAME)
        self.encoding = self._get_str_env("TAG_INDEX_ENCODING", self.DEFAULT_ENCODING)
        self.strict = self._get_bool_env("TAG_INDEX_STRICT", False)
        self.max_warnings = self._get_int_env("TAG_INDEX_MAX_WARNINGS", self.DEFAULT_MAX_WARNINGS)
        self.log_level = self._get_str_env("TAG_INDEX_LOG_LEVEL", self.DEFAULT_LOG_LEVEL).upper()

        self._validate_config()

    def _get_str_env(self, key: str, default: Optional[str]) -> Optional[str]:
        value = os.environ.get(key)
        if value is None or not value.strip():
            return default
        return value.strip()

    def _get_int_env(self, key: str, default: int) -> int:
        """Get integer from environment variable with fallback"""
        try:
            value = os.environ.get(key)
            if value is not None:
                return int(value)
        except (ValueError, TypeError):
            pass
        return default

    def _get_bool_env(self, key: str, default: bool) -> bool:
        value = os.environ.get(key)
        if value is None:
            return default
        value = value.strip().lower()
        if value in ("1", "true", "yes", "on"):
            return True
        if value in ("0", "false", "no", "off"):
            return False
        return default

    def _validate_config(self):
        """Validate configuration values"""
        if self.max_warnings <= 0:
            raise ValueError("max_warnings must be positive")
        if not self.tags_filename or "/" in self.tags_filename or "\\" in self.tags_filename:
            raise ValueError(f"tags_filename must be a bare file name, got {self.tags_filename!r}")
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ValueError(f"Unknown encoding: {self.encoding}")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

    def get_log_level(self) -> int:
        return logging.getLevelName(self.log_level)

    def to_public_dict(self) -> Dict[str, Any]:
        return {
            "tags_path": self.tags_path,
            "tags_filename": self.tags_filename,
            "encoding": self.encoding,
            "strict": self.strict,
            "max_warnings": self.max_warnings,
            "log_level": self.log_level,
        }

    def __repr__(self) -> str:
        return (
            f"TagIndexConfig("
            f"tags_path={self.tags_path!r}, "
            f"tags_filename={self.tags_filename!r}, "
            f"encoding={self.encoding!r}, "
            f"strict={self.strict}, "
            f"max_warnings={self.max_warnings}, "
            f"log_level={self.log_level!r})"
        )


# Global configuration instance
_config: Optional[TagIndexConfig] = None


def get_config() -> TagIndexConfig:
    """Get global configuration instance"""
    global _config
    if _config is None:
        _config = TagIndexConfig()
    return _config


def reset_config():
    """Reset configuration (mainly for testing)"""
    global _config
    _config = None


# Environment documentation
CONFIG_DOCS = """
Tag Index Configuration Environment Variables:

- TAG_INDEX_PATH: Tag file, or directory to search upward from, loaded at startup (default: unset)
- TAG_INDEX_FILENAME: Tag file name looked for in directories (default: tags)
- TAG_INDEX_ENCODING: Tag file encoding (default: utf-8)
- TAG_INDEX_STRICT: Fail the load on the first malformed line (default: false)
- TAG_INDEX_MAX_WARNINGS: Maximum parse warnings returned per request (default: 100)
- TAG_INDEX_LOG_LEVEL: Server log level (default: ERROR)

Example usage:
    export TAG_INDEX_PATH=$HOME/go/src/myproject
    export TAG_INDEX_LOG_LEVEL=INFO
"""
