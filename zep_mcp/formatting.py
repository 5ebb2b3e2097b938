"""Text rendering for tool results.

Downstream consumers read this text directly, so the layout is fixed:
entries are numbered from 1 and separated by a blank line, and missing
fields are shown as placeholder words instead of being dropped.
"""

import json
from typing import Any

from zep_mcp.models import Episode, GraphEdge, GraphNode, Message, Retrieval

# Placeholders for missing display fields
NOT_AVAILABLE = "N/A"
UNKNOWN = "Unknown"
UNNAMED = "Unnamed"
NO_FACT = "No fact"
NO_CONTENT = "No content"
NO_SUMMARY = "No summary"

# Empty-collection sentinels
NO_RESULTS = "No results found"
NO_MEMORIES = "No memories found in this thread"
NO_NODES = "No nodes found in the knowledge graph"
NO_EDGES = "No edges found in the knowledge graph"
NO_CONTEXT = "No relevant context found from past conversations."

MAX_EPISODES = 5
EPISODE_EXCERPT_CHARS = 100
INDENT = "   "


def _or(value: Any, placeholder: str) -> Any:
    return value if value else placeholder


def _labels(labels: list[str]) -> str:
    return _or(", ".join(labels), UNKNOWN)


def numbered(entries: list[str], empty: str) -> str:
    """Number entries from 1 and join them with a blank line."""
    if not entries:
        return empty
    return "\n\n".join(f"{i}. {entry}" for i, entry in enumerate(entries, start=1))


def format_metadata(metadata: dict[str, Any]) -> str:
    """Compact JSON line for a non-empty metadata map, else empty string."""
    if not metadata:
        return ""
    return "\n" + INDENT + json.dumps(metadata, ensure_ascii=False, separators=(",", ":"))


def format_message(message: Message) -> str:
    role = f"[{message.role}]" if message.role else ""
    return f"{role} {_or(message.content, NO_CONTENT)}{format_metadata(message.metadata)}"


def format_search_edge(edge: GraphEdge) -> str:
    return edge.fact or edge.name or NOT_AVAILABLE


def format_node(node: GraphNode) -> str:
    return (
        f"**{_or(node.name, UNNAMED)}** ({_labels(node.labels)})\n"
        f"{INDENT}UUID: {_or(node.uuid, NOT_AVAILABLE)}"
    )


def format_edge(edge: GraphEdge) -> str:
    return (
        f"{_or(edge.source_node_name, UNKNOWN)} → {_or(edge.target_node_name, UNKNOWN)}\n"
        f"{INDENT}Fact: {_or(edge.fact, NO_FACT)}\n"
        f"{INDENT}Name: {_or(edge.name, UNNAMED)}"
    )


def format_messages(messages: list[Message], retrieval: Retrieval) -> str:
    """Render thread messages, prefixed with the retrieval banner if any."""
    text = numbered([format_message(m) for m in messages], NO_MEMORIES)
    banner = retrieval.banner()
    if banner:
        return f"{banner}\n\n{text}"
    return text


def format_node_details(node: GraphNode, edges: list[GraphEdge], episodes: list[Episode]) -> str:
    """Render an entity with its relationships and the episodes mentioning it.

    Only the first MAX_EPISODES episodes are listed, each cut to
    EPISODE_EXCERPT_CHARS characters.
    """
    result = f"# Node: {_or(node.name, UNNAMED)}\n\n"
    result += f"**Labels:** {_labels(node.labels)}\n"
    result += f"**UUID:** {_or(node.uuid, NOT_AVAILABLE)}\n"
    result += f"**Summary:** {_or(node.summary, NO_SUMMARY)}\n\n"

    if edges:
        result += f"## Relationships ({len(edges)})\n\n"
        for i, edge in enumerate(edges, start=1):
            result += f"{i}. → {_or(edge.target_node_name, UNKNOWN)}: {_or(edge.fact, NO_FACT)}\n"
        result += "\n"

    if episodes:
        result += f"## Mentioned In ({len(episodes)} episodes)\n\n"
        for i, episode in enumerate(episodes[:MAX_EPISODES], start=1):
            excerpt = (episode.content or "")[:EPISODE_EXCERPT_CHARS]
            result += f"{i}. {_or(excerpt, NO_CONTENT)}...\n"

    return result


def format_thread_context(thread_id: str, context: str | None) -> str:
    return f"# Relevant Context for Thread: {thread_id}\n\n{_or(context, NO_CONTEXT)}"


def format_stored(thread_id: str) -> str:
    return f'✓ Stored in thread "{thread_id}"'
