"""Tool and resource surface over the Orchestrator client."""

from uipath_mcp.tools.dispatcher import (
    TOOLS,
    ToolDefinition,
    ToolDispatcher,
    format_error,
    get_tool,
    list_tools,
)
from uipath_mcp.tools.resources import RESOURCES, ResourceDefinition, ResourceReader, list_resources

__all__ = [
    "format_error",
    "get_tool",
    "list_resources",
    "list_tools",
    "ResourceDefinition",
    "ResourceReader",
    "RESOURCES",
    "ToolDefinition",
    "ToolDispatcher",
    "TOOLS",
]
