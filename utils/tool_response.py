"""Helpers that turn tool outcomes into MCP tool results."""
import json
import logging
from typing import Any

from mcp.types import CallToolResult, TextContent


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)


def success(message: str | None = None, data: Any = None) -> CallToolResult:
    """Text result: optional message line, then the data as indented JSON."""
    parts = []
    if message:
        parts.append(message)
    if data is not None:
        parts.append(to_json(data))
    return CallToolResult(content=[TextContent(type="text", text="\n\n".join(parts))])


def error(exc: Exception | str, logger: logging.Logger | None = None) -> CallToolResult:
    """Error result flagged with isError so the calling agent can react to it."""
    message = str(exc)
    if logger is not None:
        logger.warning("Tool call failed: %s", message)
    return CallToolResult(content=[TextContent(type="text", text=f"Error: {message}")], isError=True)


def mask_secret(secret: str | None) -> str:
    """Show only the edges of a token, e.g. ``pit-abcd...wxyz``."""
    if not secret:
        return "<not set>"
    if len(secret) <= 12:
        return "*" * len(secret)
    return f"{secret[:8]}...{secret[-4:]}"
