"""Tool bridge component.

Hosts an MCP server and client inside the process, joined by a pair of
in-memory channels, so the park search is discovered and invoked exactly as
it would be over a real connection.
"""

from .bridge import (
    BridgeNotStartedError,
    ToolBridge,
    ToolInvocationError,
    create_park_tool_bridge,
)
from .models import RegisteredTool, ToolDescriptor, ToolInvocation, single_string_schema

__all__ = [
    "BridgeNotStartedError",
    "RegisteredTool",
    "ToolBridge",
    "ToolDescriptor",
    "ToolInvocation",
    "ToolInvocationError",
    "create_park_tool_bridge",
    "single_string_schema",
]
