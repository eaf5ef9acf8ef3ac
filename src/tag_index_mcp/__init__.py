"""Tag Index MCP - MCP server over tagcore."""

__version__ = "0.1.0"
