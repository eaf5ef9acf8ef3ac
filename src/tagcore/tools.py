"""
Tag index tools - plain functions behind the MCP server

Each returns a dict with a success flag; the server only forwards.
"""

import time
from typing import Any, Callable, Dict, List, Optional

from .decorators import handle_mcp_errors
from .index import TagIndex, get_index, reload_index, set_tags_path
from .locate import DEFAULT_TAGS_FILENAME
from .records import TagRecord


def _located(index: TagIndex, record: TagRecord) -> Dict[str, Any]:
    return {**record.to_dict(), "path": index.source_path(record)}


def _clean_symbol(symbol: str) -> str:
    symbol = symbol.strip()
    if not symbol:
        raise ValueError("symbol must not be empty")
    return symbol


@handle_mcp_errors
def tool_set_tags_path(
    path: str,
    filename: str = DEFAULT_TAGS_FILENAME,
    strict: bool = False,
    encoding: str = "utf-8",
) -> Dict[str, Any]:
    start_time = time.time()
    index = set_tags_path(path, filename=filename, strict=strict, encoding=encoding)
    return {
        "success": True,
        "path": index.path,
        "records_indexed": len(index),
        "symbols_indexed": len(index.symbol_table()),
        "lines_skipped": len(index.warnings),
        "load_time": time.time() - start_time,
    }


@handle_mcp_errors
def tool_lookup_symbol(symbol: str) -> Dict[str, Any]:
    index = get_index()
    matches = index.lookup(_clean_symbol(symbol))
    return {
        "success": True,
        "symbol": symbol.strip(),
        "matches": [_located(index, record) for record in matches],
        "total_count": len(matches),
    }


@handle_mcp_errors
def tool_resolve_symbol(symbol: str) -> Dict[str, Any]:
    """Unique carries file/line/path; ambiguous carries every candidate."""
    index = get_index()
    resolution = index.resolve(_clean_symbol(symbol))
    result = resolution.to_dict()

    if resolution.status == "unique":
        result["path"] = index.source_path(resolution.record)
    elif resolution.status == "ambiguous":
        result["candidates"] = [_located(index, record) for record in resolution.candidates]
        result["total_count"] = len(resolution.candidates)

    return {"success": True, **result}


@handle_mcp_errors
def tool_get_index_warnings(limit: Optional[int] = 100) -> Dict[str, Any]:
    index = get_index()
    warnings = index.warnings if limit is None else index.warnings[:max(limit, 0)]
    return {
        "success": True,
        "warnings": [warning.to_dict() for warning in warnings],
        "total_count": len(index.warnings),
        "truncated": len(warnings) < len(index.warnings),
    }


@handle_mcp_errors
def tool_get_index_stats() -> Dict[str, Any]:
    return {"success": True, **get_index().get_stats()}


@handle_mcp_errors
def tool_reload_index(force: bool = False) -> Dict[str, Any]:
    start_time = time.time()
    index, changed = reload_index(force=force)
    return {
        "success": True,
        "changed": changed,
        "path": index.path,
        "records_indexed": len(index),
        "lines_skipped": len(index.warnings),
        "reload_time": time.time() - start_time,
    }


TOOL_REGISTRY: Dict[str, Callable[..., Dict[str, Any]]] = {
    "set_tags_path": tool_set_tags_path,
    "lookup_symbol": tool_lookup_symbol,
    "resolve_symbol": tool_resolve_symbol,
    "get_index_warnings": tool_get_index_warnings,
    "get_index_stats": tool_get_index_stats,
    "reload_index": tool_reload_index,
}


def list_tools() -> List[str]:
    return sorted(TOOL_REGISTRY)


def execute_tool(tool_name: str, **kwargs) -> Dict[str, Any]:
    """Single dispatch point for every tool."""
    tool_func = TOOL_REGISTRY.get(tool_name)
    if not tool_func:
        return {"success": False, "error": f"Unknown tool: {tool_name}"}
    return tool_func(**kwargs)
