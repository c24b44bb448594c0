from core.config import get_config, resolve_path
from core.logging_config import setup_logging
from core.resources import load_resources, set_resource_map
from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.resources import TextResource
from pathlib import Path
from importlib import import_module
import functools
import logging
import pkgutil
import sys
from typing import Any, Callable, Dict

# Set up logging before discovery so bootstrap messages reach the log
_cfg = get_config()
setup_logging(logs_dir=resolve_path(_cfg.get("logs_dir") or "~/.ghl-mcp/logs"), level=_cfg.get("log_level", "INFO"))
logger = logging.getLogger(__name__)

SERVER_NAME = "GoHighLevel MCP Server"
TOOLS_PACKAGE = "tools"
TRANSPORTS = ("stdio", "sse", "streamable-http")


def make_wrapper(tool_name: str, func: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap a tool function with call logging, keeping its signature for FastMCP's schema."""

    @functools.wraps(func)
    async def _wrapped(*call_args, **call_kwargs):
        # argument names only; values may hold tokens
        logger.info("Tool call %s(%s)", tool_name, ", ".join(sorted(call_kwargs)))
        result = await func(*call_args, **call_kwargs)
        if getattr(result, "isError", False):
            logger.info("Tool %s returned an error result", tool_name)
        return result

    return _wrapped


###################################################### MCP Resources ######################################################


def register_resources(mcp: FastMCP, resource_files) -> None:
    for file_path, content in resource_files:
        try:
            resource = TextResource(
                uri=f"resource://{file_path.stem.replace(' ', '_')}",
                name=file_path.stem,
                text=content,
                description=f"Contents of {file_path.name}",
                mime_type="text/markdown",
            )
            mcp.add_resource(resource)
        except Exception:
            logger.exception(f"Failed to add resource {file_path}")
    logger.info(f"Total resources loaded into MCP: {len(resource_files)}")


###################################################### MCP Tools ######################################################


def discover_tools() -> Dict[str, Dict[str, Any]]:
    """Collect `get_tools()` mappings from every public module of the tools package."""
    tools_path = Path(__file__).resolve().parent / TOOLS_PACKAGE
    discovered: Dict[str, Dict[str, Any]] = {}
    for _, name, _ in pkgutil.iter_modules([str(tools_path)]):
        if name.startswith("_"):
            continue
        module_name = f"{TOOLS_PACKAGE}.{name}"
        mod = import_module(module_name)
        logger.info(f"Imported tools module: {module_name}")
        if not hasattr(mod, "get_tools"):
            continue
        # mapping: tool_name -> { 'func': callable, 'title': str, 'description': str }
        for tool_name, meta in mod.get_tools().items():
            if tool_name in discovered:
                raise ValueError(f"Duplicate tool name {tool_name} in {module_name}")
            if not isinstance(meta, dict):
                meta = {"func": meta}
            if not meta.get("func"):
                logger.warning(f"Tool {tool_name} in {module_name} did not provide a callable; skipping")
                continue
            discovered[tool_name] = meta
    return discovered


def register_tools(mcp: FastMCP, tools: Dict[str, Dict[str, Any]]) -> list[str]:
    registered: list[str] = []
    for tool_name, meta in tools.items():
        wrapper = make_wrapper(tool_name, meta["func"])
        mcp.add_tool(wrapper, name=tool_name, title=meta.get("title"), description=meta.get("description"))
        logger.info(f"Added tool via add_tool: {tool_name} (title={meta.get('title')})")
        registered.append(tool_name)
    logger.info(f"Total tools registered: {len(registered)} , tool names: {registered}")
    return registered


def build_server() -> FastMCP:
    """Create the FastMCP instance with resources and all discovered tools."""
    logger.info("Loading MCP resources...")
    resource_files = load_resources()
    resource_map = {path.stem.lower(): content for path, content in resource_files}
    set_resource_map(resource_map)
    logger.info(f"Total resources discovered: {len(resource_files)}, resource names: {list(resource_map)}")

    # assistant_instructions doubles as the server instructions sent on initialize
    server = FastMCP(SERVER_NAME, instructions=resource_map.get("assistant_instructions"))
    register_resources(server, resource_files)

    logger.info("Loading MCP tools...")
    register_tools(server, discover_tools())
    return server


mcp = build_server()

###################################################### Startup ######################################################


def main() -> None:
    cfg = get_config()
    transport = cfg.get("transport") or "stdio"
    if transport not in TRANSPORTS:
        logger.error("Unsupported transport %r, expected one of %s", transport, ", ".join(TRANSPORTS))
        sys.exit(2)

    logger.info("Starting MCP server (transport=%s)...", transport)
    try:
        mcp.run(transport=transport)
        logger.info("MCP server shut down.")
    except Exception:
        logger.exception("Unhandled exception running MCP server")
        print("Unhandled exception occurred. See the log file under the configured logs_dir.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
