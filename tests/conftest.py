"""Shared pytest fixtures for zep-mcp tests."""

from __future__ import annotations

import os
import tempfile
from typing import Any
from unittest.mock import AsyncMock

# Keep test logs out of the home directory; must run before zep_mcp imports
os.environ.setdefault("ZEP_MCP_LOG_DIR", tempfile.mkdtemp(prefix="zep_mcp_logs_"))

import pytest

from zep_mcp.client import ZepClient, ZepError
from zep_mcp.config import Config
from zep_mcp.models import (
    All,
    EnsureResult,
    Message,
    Paged,
    Recent,
    Retrieval,
    ThreadContext,
    ThreadMessages,
)

TEST_API_URL = "http://zep.test/api/v2"


@pytest.fixture
def config() -> Config:
    """Config pointing at a fake API host."""
    return Config(api_key="test-key", api_url=TEST_API_URL, user_id="default_user")


@pytest.fixture
def mock_client() -> AsyncMock:
    """AsyncMock standing in for ZepClient, with empty default responses."""
    client = AsyncMock(spec=ZepClient)
    client.ensure_user.return_value = EnsureResult.CREATED
    client.ensure_thread.return_value = EnsureResult.CREATED
    client.add_messages.return_value = {}
    client.get_messages.return_value = ThreadMessages()
    client.search_graph.return_value = []
    client.get_user_nodes.return_value = []
    client.get_user_edges.return_value = []
    client.get_node_edges.return_value = []
    client.get_node_episodes.return_value = []
    client.get_user_context.return_value = ThreadContext()
    return client


class InMemoryZep:
    """Recording stand-in for ZepClient that keeps threads in memory.

    Only the thread operations are implemented; that is enough for
    store-then-get round trips.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.users: set[str] = set()
        self.threads: dict[str, list[Message]] = {}

    async def ensure_user(self, user_id: str, **kwargs: Any) -> EnsureResult:
        self.calls.append(("ensure_user", (user_id,)))
        if user_id in self.users:
            return EnsureResult.ALREADY_PRESENT
        self.users.add(user_id)
        return EnsureResult.CREATED

    async def ensure_thread(self, thread_id: str, user_id: str) -> EnsureResult:
        self.calls.append(("ensure_thread", (thread_id, user_id)))
        if thread_id in self.threads:
            return EnsureResult.ALREADY_PRESENT
        self.threads[thread_id] = []
        return EnsureResult.CREATED

    async def add_messages(self, thread_id: str, messages: list[dict[str, Any]]) -> dict:
        self.calls.append(("add_messages", (thread_id, messages)))
        if thread_id not in self.threads:
            raise ZepError(404, f"thread {thread_id} not found")
        self.threads[thread_id].extend(Message.from_dict(m) for m in messages)
        return {}

    async def get_messages(self, thread_id: str, retrieval: Retrieval) -> ThreadMessages:
        self.calls.append(("get_messages", (thread_id, retrieval)))
        if thread_id not in self.threads:
            raise ZepError(404, f"thread {thread_id} not found")
        messages = self.threads[thread_id]
        if isinstance(retrieval, Recent):
            messages = messages[-retrieval.n:]
        elif isinstance(retrieval, Paged):
            start = retrieval.cursor or 0
            messages = messages[start:start + retrieval.limit]
        else:
            assert isinstance(retrieval, All)
        return ThreadMessages(messages=list(messages))


@pytest.fixture
def in_memory_zep() -> InMemoryZep:
    return InMemoryZep()
