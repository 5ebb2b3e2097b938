"""Result structs for Zep Cloud responses and thread retrieval modes.

The remote API returns loosely-shaped JSON. Each struct reads only the
fields the tools display, and every display field is optional; placeholder
text for missing values lives in zep_mcp.formatting.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EnsureResult(str, Enum):
    """Outcome of an idempotent create call."""

    CREATED = "created"
    ALREADY_PRESENT = "already_present"


# ═══════════════════════════════════════════════════════════════════════════════
# RETRIEVAL MODES
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class Recent:
    """Last `n` messages of a thread."""

    n: int

    def params(self) -> dict[str, int]:
        return {"lastn": self.n}

    def banner(self) -> str:
        return f"Showing last {self.n} messages:"


@dataclass(frozen=True)
class Paged:
    """Up to `limit` messages starting at `cursor`."""

    limit: int
    cursor: int | None = None

    def params(self) -> dict[str, int]:
        params = {"limit": self.limit}
        if self.cursor is not None:
            params["cursor"] = self.cursor
        return params

    def banner(self) -> str:
        # A zero cursor is the first page and is not shown
        suffix = f" (cursor: {self.cursor})" if self.cursor else ""
        return f"Showing up to {self.limit} messages{suffix}:"


@dataclass(frozen=True)
class All:
    """Every message in the thread, unpaginated."""

    def params(self) -> dict[str, int]:
        return {}

    def banner(self) -> str | None:
        return None


Retrieval = Recent | Paged | All


def retrieval_from(lastn: int | None, limit: int | None, cursor: int | None) -> Retrieval:
    """Pick the retrieval mode; `lastn` wins over `limit`/`cursor`."""
    if lastn is not None:
        return Recent(lastn)
    if limit is not None:
        return Paged(limit, cursor)
    return All()


# ═══════════════════════════════════════════════════════════════════════════════
# REMOTE RESULTS
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class Message:
    """A message stored in a thread."""

    role: str | None = None
    content: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Message":
        return cls(
            role=data.get("role"),
            content=data.get("content"),
            metadata=data.get("metadata") or {},
        )


@dataclass
class ThreadMessages:
    """Messages returned for a thread."""

    messages: list[Message] = field(default_factory=list)


@dataclass
class GraphEdge:
    """A relationship (fact) in the knowledge graph."""

    name: str | None = None
    fact: str | None = None
    source_node_name: str | None = None
    target_node_name: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GraphEdge":
        return cls(
            name=data.get("name"),
            fact=data.get("fact"),
            source_node_name=data.get("source_node_name"),
            target_node_name=data.get("target_node_name"),
        )


@dataclass
class GraphNode:
    """An entity in the knowledge graph."""

    uuid: str | None = None
    name: str | None = None
    labels: list[str] = field(default_factory=list)
    summary: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GraphNode":
        return cls(
            uuid=data.get("uuid"),
            name=data.get("name"),
            labels=[str(label) for label in data.get("labels") or [] if label],
            summary=data.get("summary"),
        )


@dataclass
class Episode:
    """A source record a graph entity was extracted from."""

    content: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Episode":
        return cls(content=data.get("content"))


@dataclass
class ThreadContext:
    """Context block synthesized from the user's history."""

    context: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ThreadContext":
        return cls(context=data.get("context"))
