# tools package for the GHL MCP server
# Each public module exposes `get_tools() -> dict[str, {"func", "title", "description"}]`;
# server.py imports every module not starting with "_" and registers the returned callables.
__all__ = []
