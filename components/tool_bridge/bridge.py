"""
In-process MCP server and client connected through memory channels.

Two unidirectional channels form one duplex connection: channel A carries
client-to-server messages and channel B carries server-to-client messages.
The server reads A and writes B; the client writes A and reads B. Requests and
responses are correlated by JSON-RPC id, so the same framing works unchanged
over a real socket.
"""

import asyncio
import logging
from contextlib import AsyncExitStack
from typing import Any, Dict, List, Optional, Sequence, Tuple

import anyio
import mcp.types as types
from components.park_tools import SearchTool
from components.park_tools.search_tool import (
    QUERY_DESCRIPTION,
    SEARCH_TOOL_DESCRIPTION,
    SEARCH_TOOL_NAME,
)
from mcp import ClientSession
from mcp.server.lowlevel import Server
from park_knowledge.config import BridgeConfig

from .models import RegisteredTool, ToolDescriptor, ToolInvocation, single_string_schema

logger = logging.getLogger(__name__)


class BridgeNotStartedError(RuntimeError):
    """Raised when the bridge is used before start() or after stop()."""


class ToolInvocationError(Exception):
    """Raised when a tool is unknown or reports an error."""


class ToolBridge:
    """Owns the in-process MCP server, its client, and the discovered tools."""

    def __init__(
        self,
        tools: Sequence[RegisteredTool],
        server_name: str = "ParkKnowledgeAPI",
        server_version: str = "1.0.0",
        shutdown_timeout: float = 5.0,
    ):
        """
        Args:
            tools: The tools the server advertises. Fixed for the bridge lifetime.
            server_name: Name reported by the server during initialization.
            server_version: Version reported by the server during initialization.
            shutdown_timeout: Seconds to wait for the server loop before cancelling it.
        """
        self._registered: Dict[str, RegisteredTool] = {
            tool.descriptor.name: tool for tool in tools
        }
        self.server_name = server_name
        self.server_version = server_version
        self.shutdown_timeout = shutdown_timeout

        self._tools: Tuple[ToolDescriptor, ...] = ()
        self._session: Optional[ClientSession] = None
        self._exit_stack: Optional[AsyncExitStack] = None
        self._server_task: Optional[asyncio.Task] = None
        self._client_streams: List[Any] = []
        self._server_streams: List[Any] = []

    @property
    def tools(self) -> Tuple[ToolDescriptor, ...]:
        """The tool descriptors discovered at start-up. Empty when stopped."""
        return self._tools

    @property
    def is_running(self) -> bool:
        return self._session is not None

    def _build_server(self) -> Server:
        server: Server = Server(self.server_name, version=self.server_version)
        registered = self._registered

        @server.list_tools()
        async def list_tools() -> List[types.Tool]:
            return [
                types.Tool(
                    name=tool.descriptor.name,
                    description=tool.descriptor.description,
                    inputSchema=tool.descriptor.input_schema,
                )
                for tool in registered.values()
            ]

        @server.call_tool()
        async def call_tool(
            name: str, arguments: Dict[str, Any]
        ) -> List[types.TextContent]:
            tool = registered.get(name)
            if tool is None:
                raise ValueError(f"Unknown tool: {name}")
            text = await tool.handler(**(arguments or {}))
            return [types.TextContent(type="text", text=text)]

        return server

    async def start(self) -> None:
        """
        Starts the server loop, connects the client and discovers the tools.

        Raises:
            RuntimeError: If the bridge is already running.
        """
        if self._server_task is not None:
            raise RuntimeError("Tool bridge is already running")

        # Channel A: client -> server. Channel B: server -> client.
        a_send, a_receive = anyio.create_memory_object_stream(0)
        b_send, b_receive = anyio.create_memory_object_stream(0)
        self._client_streams = [a_send, b_receive]
        self._server_streams = [a_receive, b_send]

        server = self._build_server()
        self._server_task = asyncio.create_task(
            server.run(a_receive, b_send, server.create_initialization_options()),
            name="tool-bridge-server",
        )

        try:
            self._exit_stack = AsyncExitStack()
            session = await self._exit_stack.enter_async_context(
                ClientSession(b_receive, a_send)
            )
            await session.initialize()
            listed = await session.list_tools()
        except BaseException:
            await self.stop()
            raise

        self._session = session
        self._tools = tuple(
            ToolDescriptor(
                name=tool.name,
                description=tool.description or "",
                input_schema=dict(tool.inputSchema),
            )
            for tool in listed.tools
        )
        logger.info(
            f"Tool bridge started with {len(self._tools)} tools: "
            f"{', '.join(tool.name for tool in self._tools)}"
        )

    async def stop(self) -> None:
        """
        Shuts the bridge down: client first, then the server channels, then the
        server loop. Safe to call more than once.
        """
        self._session = None

        if self._exit_stack is not None:
            exit_stack, self._exit_stack = self._exit_stack, None
            await exit_stack.aclose()

        for stream in self._client_streams:
            await stream.aclose()
        self._client_streams = []

        for stream in self._server_streams:
            await stream.aclose()
        self._server_streams = []

        if self._server_task is not None:
            task, self._server_task = self._server_task, None
            try:
                done, _ = await asyncio.wait({task}, timeout=self.shutdown_timeout)
            except asyncio.CancelledError:
                # The caller was cancelled; take the server loop down with it.
                task.cancel()
                self._tools = ()
                raise

            if not done:
                logger.warning(
                    f"Tool bridge server did not stop within "
                    f"{self.shutdown_timeout}s and was cancelled"
                )
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)
            elif not task.cancelled() and task.exception() is not None:
                error = task.exception()
                logger.error(
                    f"Tool bridge server loop failed: {error}", exc_info=error
                )

        if self._tools:
            logger.info("Tool bridge stopped")
        self._tools = ()

    async def __aenter__(self) -> "ToolBridge":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.stop()

    async def invoke(self, name: str, arguments: Dict[str, Any]) -> ToolInvocation:
        """
        Calls a discovered tool and captures its result or error text.

        Raises:
            BridgeNotStartedError: If the bridge is not running.
            ToolInvocationError: If no discovered tool has this name.
        """
        session = self._session
        if session is None:
            raise BridgeNotStartedError("Tool bridge is not running")
        if name not in {tool.name for tool in self._tools}:
            raise ToolInvocationError(f"Unknown tool: {name}")

        result = await session.call_tool(name, arguments)
        text = "".join(
            item.text for item in result.content if isinstance(item, types.TextContent)
        )
        return ToolInvocation(
            tool_name=name,
            arguments=arguments,
            text=text,
            is_error=bool(result.isError),
        )

    async def call_tool(self, name: str, arguments: Dict[str, Any]) -> str:
        """
        Calls a discovered tool and returns its text.

        Raises:
            ToolInvocationError: If the tool is unknown or reports an error.
        """
        invocation = await self.invoke(name, arguments)
        if invocation.is_error:
            raise ToolInvocationError(invocation.text or f"Tool '{name}' failed")
        return invocation.text


def create_park_tool_bridge(search_tool: SearchTool, config: BridgeConfig) -> ToolBridge:
    """Create a bridge advertising the park search as its only tool."""
    search = RegisteredTool(
        descriptor=ToolDescriptor(
            name=SEARCH_TOOL_NAME,
            description=SEARCH_TOOL_DESCRIPTION,
            input_schema=single_string_schema("query", QUERY_DESCRIPTION),
        ),
        handler=search_tool.search,
    )
    return ToolBridge(
        [search],
        server_name=config.server_name,
        server_version=config.server_version,
        shutdown_timeout=config.shutdown_timeout,
    )
