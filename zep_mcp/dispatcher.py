"""Tool dispatch and response normalization.

Maps a tool name and argument object onto Zep Cloud calls and renders the
result as a single text item. Unknown tools, missing arguments and
remote failures, including malformed responses, all come back from
`dispatch` as an error ToolResult.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from mcp import types

from zep_mcp import formatting
from zep_mcp.client import ZepClient, ZepError
from zep_mcp.config import Config
from zep_mcp.log_config import get_logger
from zep_mcp.models import retrieval_from
from zep_mcp.tools import (
    CONTEXT_MODES,
    GET_GRAPH_EDGES,
    GET_GRAPH_NODES,
    GET_MEMORY,
    GET_NODE_DETAILS,
    GET_THREAD_CONTEXT,
    ROLES,
    SEARCH_MEMORY,
    STORE_MEMORY,
    TOOLS_BY_NAME,
    ToolDescriptor,
)

log = get_logger("dispatcher")

STORE_PROMPT = "Store this information"


@dataclass
class ToolResult:
    """Outcome of one tool call: a single text item and an error flag."""

    text: str
    is_error: bool = False

    @property
    def content(self) -> list[dict[str, str]]:
        return [{"type": "text", "text": self.text}]

    @classmethod
    def error(cls, exc: BaseException) -> "ToolResult":
        return cls(f"Error: {_error_message(exc)}", is_error=True)

    def to_mcp(self) -> types.CallToolResult:
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=self.text)],
            isError=self.is_error,
        )


class ToolArgumentError(Exception):
    """Arguments do not satisfy the tool's declared schema."""


class UnknownToolError(Exception):
    """Tool name is not in the catalog."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


def _error_message(exc: BaseException) -> str:
    message = str(exc)
    if message:
        return message
    try:
        return json.dumps({"type": type(exc).__name__, "args": list(exc.args)}, default=str)
    except (TypeError, ValueError):
        return repr(exc)


def _int_arg(arguments: dict[str, Any], key: str, default: int | None = None) -> int | None:
    """Integer argument, or `default` when absent or not a number."""
    value = arguments.get(key)
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        log.debug(f"Ignoring non-numeric {key}={value!r}")
        return default


def _choice_arg(arguments: dict[str, Any], key: str, choices: list[str], default: str | None = None) -> str | None:
    value = arguments.get(key)
    if value in choices:
        return value
    if value is not None:
        log.debug(f"Ignoring {key}={value!r}, expected one of {choices}")
    return default


def _utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


Handler = Callable[[ToolDescriptor, dict[str, Any]], Awaitable[str]]


class Dispatcher:
    """Runs tool calls against a Zep client.

    Args:
        client: Shared Zep client (read-only after construction)
        config: Server configuration; supplies the identity that owns
            threads and the knowledge graph
    """

    def __init__(self, client: ZepClient, config: Config):
        self.client = client
        self.config = config
        self._handlers: dict[str, Handler] = {
            STORE_MEMORY: self.store_memory,
            SEARCH_MEMORY: self.search_memory,
            GET_MEMORY: self.get_memory,
            GET_GRAPH_NODES: self.get_graph_nodes,
            GET_GRAPH_EDGES: self.get_graph_edges,
            GET_NODE_DETAILS: self.get_node_details,
            GET_THREAD_CONTEXT: self.get_thread_context,
        }

    @property
    def user_id(self) -> str:
        return self.config.user_id

    async def dispatch(self, name: str, arguments: dict[str, Any] | None) -> ToolResult:
        """Run a tool call and normalize its outcome into a ToolResult."""
        arguments = arguments or {}
        log.info(f"Tool: {name} called (args={sorted(arguments)})")
        try:
            descriptor = TOOLS_BY_NAME.get(name)
            handler = self._handlers.get(name)
            if descriptor is None or handler is None:
                raise UnknownToolError(name)

            missing = descriptor.missing(arguments)
            if missing:
                raise ToolArgumentError(
                    f"Missing required argument(s) for {name}: {', '.join(missing)}"
                )

            text = await handler(descriptor, arguments)
        except (ZepError, ToolArgumentError, UnknownToolError) as e:
            log.warning(f"Tool: {name} failed: {e}")
            return ToolResult.error(e)

        log.info(f"Tool: {name} complete ({len(text)} chars)")
        return ToolResult(text)

    # ═══════════════════════════════════════════════════════════════════════════════
    # HANDLERS
    # ═══════════════════════════════════════════════════════════════════════════════

    async def store_memory(self, descriptor: ToolDescriptor, arguments: dict[str, Any]) -> str:
        session_id = arguments["session_id"]
        metadata = arguments.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}

        await self.client.ensure_user(
            self.user_id,
            email=self.config.user_email,
            first_name=self.config.user_first_name,
            last_name=self.config.user_last_name,
        )
        await self.client.ensure_thread(session_id, self.user_id)

        await self.client.add_messages(
            session_id,
            [
                {"role": "user", "content": STORE_PROMPT},
                {
                    "role": "assistant",
                    "content": arguments["content"],
                    "metadata": {**metadata, "stored_at": _utc_timestamp()},
                },
            ],
        )
        return formatting.format_stored(session_id)

    async def search_memory(self, descriptor: ToolDescriptor, arguments: dict[str, Any]) -> str:
        # Searches the whole user graph; session_id does not narrow the scope
        limit = _int_arg(arguments, "limit", descriptor.default("limit"))
        edges = await self.client.search_graph(self.user_id, arguments["query"], limit=limit)
        return formatting.numbered(
            [formatting.format_search_edge(e) for e in edges],
            formatting.NO_RESULTS,
        )

    async def get_memory(self, descriptor: ToolDescriptor, arguments: dict[str, Any]) -> str:
        retrieval = retrieval_from(
            lastn=_int_arg(arguments, "lastn"),
            limit=_int_arg(arguments, "limit"),
            cursor=_int_arg(arguments, "cursor"),
        )
        role_filter = _choice_arg(arguments, "role_filter", ROLES)

        thread = await self.client.get_messages(arguments["session_id"], retrieval)
        messages = thread.messages
        if role_filter:
            messages = [m for m in messages if m.role == role_filter]

        return formatting.format_messages(messages, retrieval)

    async def get_graph_nodes(self, descriptor: ToolDescriptor, arguments: dict[str, Any]) -> str:
        limit = _int_arg(arguments, "limit", descriptor.default("limit"))
        nodes = await self.client.get_user_nodes(self.user_id, limit=limit)
        return formatting.numbered(
            [formatting.format_node(n) for n in nodes],
            formatting.NO_NODES,
        )

    async def get_graph_edges(self, descriptor: ToolDescriptor, arguments: dict[str, Any]) -> str:
        limit = _int_arg(arguments, "limit", descriptor.default("limit"))
        edges = await self.client.get_user_edges(self.user_id, limit=limit)
        return formatting.numbered(
            [formatting.format_edge(e) for e in edges],
            formatting.NO_EDGES,
        )

    async def get_node_details(self, descriptor: ToolDescriptor, arguments: dict[str, Any]) -> str:
        node_uuid = arguments["node_uuid"]
        node = await self.client.get_node(node_uuid)
        edges = await self.client.get_node_edges(node_uuid)
        episodes = await self.client.get_node_episodes(node_uuid)
        return formatting.format_node_details(node, edges, episodes)

    async def get_thread_context(self, descriptor: ToolDescriptor, arguments: dict[str, Any]) -> str:
        session_id = arguments["session_id"]
        mode = _choice_arg(arguments, "mode", CONTEXT_MODES, descriptor.default("mode"))
        context = await self.client.get_user_context(session_id, mode=mode)
        return formatting.format_thread_context(session_id, context.context)
