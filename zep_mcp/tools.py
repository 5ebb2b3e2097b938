"""Tool catalog exposed over MCP.

The catalog is fixed at import time and returned in full, in order, on
every list-tools request.
"""

from dataclasses import dataclass, field
from typing import Any

from mcp import types

STORE_MEMORY = "zep_store_memory"
SEARCH_MEMORY = "zep_search_memory"
GET_MEMORY = "zep_get_memory"
GET_GRAPH_NODES = "zep_get_graph_nodes"
GET_GRAPH_EDGES = "zep_get_graph_edges"
GET_NODE_DETAILS = "zep_get_node_details"
GET_THREAD_CONTEXT = "zep_get_thread_context"

ROLES = ["user", "assistant", "system"]
CONTEXT_MODES = ["summary", "basic"]


@dataclass(frozen=True)
class ToolDescriptor:
    """Name, description and JSON input schema of one tool."""

    name: str
    description: str
    properties: dict[str, dict[str, Any]] = field(default_factory=dict)
    required: tuple[str, ...] = ()

    @property
    def input_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "object", "properties": dict(self.properties)}
        if self.required:
            schema["required"] = list(self.required)
        return schema

    def default(self, param: str) -> Any:
        """Declared default for a parameter, or None."""
        return self.properties.get(param, {}).get("default")

    def missing(self, arguments: dict[str, Any]) -> list[str]:
        """Required parameters absent from `arguments`."""
        return [p for p in self.required if arguments.get(p) is None]

    def to_mcp(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
        )


_SESSION_ID = {
    "type": "string",
    "description": 'Thread/Session ID (e.g., "global" or "project-my-app")',
}

CATALOG: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name=STORE_MEMORY,
        description="Store information in Zep Cloud memory for a specific session",
        properties={
            "session_id": _SESSION_ID,
            "content": {"type": "string", "description": "Content to store"},
            "metadata": {
                "type": "object",
                "description": "Optional metadata (category, tags, etc.)",
            },
        },
        required=("session_id", "content"),
    ),
    ToolDescriptor(
        name=SEARCH_MEMORY,
        description="Search Zep Cloud memory (facts from the user knowledge graph)",
        properties={
            "session_id": {**_SESSION_ID, "description": "Thread/Session ID to search"},
            "query": {"type": "string", "description": "Search query"},
            "limit": {
                "type": "number",
                "description": "Maximum results (default: 10)",
                "default": 10,
            },
        },
        required=("session_id", "query"),
    ),
    ToolDescriptor(
        name=GET_MEMORY,
        description="Get recent memories from a session with pagination and filtering support",
        properties={
            "session_id": {**_SESSION_ID, "description": "Thread/Session ID to retrieve"},
            "lastn": {
                "type": "number",
                "description": (
                    "Number of most recent messages to return (e.g., 50, 100, 200). "
                    "Useful for large sessions."
                ),
            },
            "limit": {
                "type": "number",
                "description": "Limit the number of results returned (alternative to lastn)",
            },
            "cursor": {
                "type": "number",
                "description": "Cursor for pagination (used with limit)",
            },
            "role_filter": {
                "type": "string",
                "description": 'Filter by message role: "user", "assistant", or "system"',
                "enum": ROLES,
            },
        },
        required=("session_id",),
    ),
    ToolDescriptor(
        name=GET_GRAPH_NODES,
        description="Get all nodes (entities) from the user knowledge graph",
        properties={
            "limit": {
                "type": "number",
                "description": "Maximum number of nodes to return (default: 50)",
                "default": 50,
            },
        },
    ),
    ToolDescriptor(
        name=GET_GRAPH_EDGES,
        description="Get all edges (relationships) from the user knowledge graph",
        properties={
            "limit": {
                "type": "number",
                "description": "Maximum number of edges to return (default: 50)",
                "default": 50,
            },
        },
    ),
    ToolDescriptor(
        name=GET_NODE_DETAILS,
        description=(
            "Get detailed information about a specific node including its edges and episodes"
        ),
        properties={
            "node_uuid": {"type": "string", "description": "UUID of the node to retrieve"},
        },
        required=("node_uuid",),
    ),
    ToolDescriptor(
        name=GET_THREAD_CONTEXT,
        description=(
            "Get relevant context from ALL past threads based on recent messages in "
            "current thread. Automatically pulls in relevant memories from entire "
            "conversation history."
        ),
        properties={
            "session_id": {
                **_SESSION_ID,
                "description": "Thread/Session ID to get context for",
            },
            "mode": {
                "type": "string",
                "description": 'Mode: "summary" (default, more detailed) or "basic" (faster, less latency)',
                "enum": CONTEXT_MODES,
                "default": "summary",
            },
        },
        required=("session_id",),
    ),
)

TOOLS_BY_NAME: dict[str, ToolDescriptor] = {tool.name: tool for tool in CATALOG}


def list_tools() -> list[types.Tool]:
    """The full catalog as MCP tool definitions."""
    return [tool.to_mcp() for tool in CATALOG]
