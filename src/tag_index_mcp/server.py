"""
Tag Index MCP Server

Jump-to-definition over a ctags-style tag file. Every tool forwards to
tagcore.tools; the server holds no index state of its own.
"""

import json
import logging
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Optional

from mcp.server.fastmcp import FastMCP

from tagcore.tools import execute_tool

from .config import get_config

logger = logging.getLogger(__name__)


@dataclass
class TagIndexContext:
    tags_path: Optional[str]
    loaded: bool


def preload_index() -> Dict[str, Any]:
    """Load TAG_INDEX_PATH, if configured."""
    config = get_config()
    if not config.tags_path:
        return {"success": False, "error": "TAG_INDEX_PATH not set"}

    result = set_tags_path(config.tags_path)
    if not result.get("success"):
        logger.error(f"Could not load tag file at startup: {result.get('error')}")
    return result


@asynccontextmanager
async def tag_index_lifespan(_server: FastMCP) -> AsyncIterator[TagIndexContext]:
    config = get_config()
    loaded = bool(config.tags_path) and preload_index().get("success", False)
    yield TagIndexContext(tags_path=config.tags_path, loaded=loaded)


mcp = FastMCP("TagIndex", lifespan=tag_index_lifespan)


@mcp.resource("config://tag-index")
def get_config_resource() -> str:
    return json.dumps(get_config().to_public_dict(), indent=2)


@mcp.tool()
def set_tags_path(path: str) -> Dict[str, Any]:
    """Load a tag file, or the nearest one at or above a directory."""
    config = get_config()
    return execute_tool(
        "set_tags_path",
        path=path,
        filename=config.tags_filename,
        strict=config.strict,
        encoding=config.encoding,
    )


@mcp.tool()
def lookup_symbol(symbol: str) -> Dict[str, Any]:
    """All tag records for a symbol, exact case-sensitive match, in file order."""
    return execute_tool("lookup_symbol", symbol=symbol)


@mcp.tool()
def resolve_symbol(symbol: str) -> Dict[str, Any]:
    """
    Resolve a symbol to its definition.

    status is "unique" (jump straight to file:line), "ambiguous" (pick one
    of the candidates) or "not_found".
    """
    return execute_tool("resolve_symbol", symbol=symbol)


@mcp.tool()
def get_index_stats() -> Dict[str, Any]:
    """Record, symbol and skipped-line counts for the loaded tag file."""
    return execute_tool("get_index_stats")


@mcp.tool()
def get_index_warnings(limit: Optional[int] = None) -> Dict[str, Any]:
    """Lines skipped while loading, with the reason for each."""
    config = get_config()
    if limit is None or limit > config.max_warnings:
        limit = config.max_warnings
    return execute_tool("get_index_warnings", limit=limit)


@mcp.tool()
def reload_index(force: bool = False) -> Dict[str, Any]:
    """Re-read the tag file if it changed since it was loaded."""
    return execute_tool("reload_index", force=force)


def main():
    logging.basicConfig(level=get_config().get_log_level(), stream=sys.stderr)
    mcp.run()


if __name__ == "__main__":
    main()
