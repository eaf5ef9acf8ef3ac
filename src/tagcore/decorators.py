"""
Error envelopes for tool entry points

Engine code raises; tool functions return {"success": False, "error": ...}.
"""

import logging
from functools import wraps
from typing import Any, Callable, Dict, cast

from .records import TagParseError

logger = logging.getLogger(__name__)


def create_error_response(error: Exception, context: str = "") -> Dict[str, Any]:
    """Specific message per failure kind."""
    if isinstance(error, FileNotFoundError):
        return {"success": False, "error": f"File not found: {error.filename}"}
    elif isinstance(error, PermissionError):
        return {"success": False, "error": f"Permission denied: {error.filename}"}
    elif isinstance(error, IsADirectoryError):
        return {"success": False, "error": f"Is a directory: {error.filename}"}
    elif isinstance(error, TagParseError):
        response: Dict[str, Any] = {"success": False, "error": f"Malformed tag file: {error}"}
        if error.line_number is not None:
            response["line_number"] = error.line_number
        return response
    elif isinstance(error, ValueError):
        return {"success": False, "error": f"Invalid value: {str(error)}"}
    else:
        error_msg = f"{context}: {str(error)}" if context else str(error)
        return {"success": False, "error": error_msg}


def handle_mcp_errors(func: Callable) -> Callable:
    """Turn exceptions into error envelopes and tag successes."""

    @wraps(func)
    def wrapper(*args, **kwargs) -> Dict[str, Any]:
        try:
            result = func(*args, **kwargs)
            if isinstance(result, dict) and "success" not in result:
                result["success"] = True
            return cast(Dict[str, Any], result)
        except Exception as e:
            logger.error(f"{func.__name__} failed: {e}")
            response = create_error_response(e)
            response["function"] = func.__name__
            return response

    return wrapper
