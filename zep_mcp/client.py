"""Zep Cloud API client.

Makes authenticated HTTP requests to the Zep Cloud REST API and turns the
JSON responses into the structs in zep_mcp.models. A single client instance
is shared by every tool call.
"""

from typing import Any
from urllib.parse import quote

import httpx

from zep_mcp.config import DEFAULT_API_URL
from zep_mcp.log_config import get_logger, log_timing
from zep_mcp.models import (
    EnsureResult,
    Episode,
    GraphEdge,
    GraphNode,
    Message,
    Retrieval,
    ThreadContext,
    ThreadMessages,
)

log = get_logger("client")


class ZepError(Exception):
    """Error from the Zep Cloud API."""

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Zep API error {status_code}: {detail}")

    @property
    def is_conflict(self) -> bool:
        """True when the request failed because the entity already exists."""
        if self.status_code == 409:
            return True
        return self.status_code == 400 and "already exists" in self.detail.lower()


class ZepClient:
    """Async HTTP client for the Zep Cloud API.

    Handles:
    - Api-Key authentication
    - Error mapping to ZepError
    - Idempotent user/thread creation
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 60.0,
    ):
        """Initialize the client.

        Args:
            api_key: Zep Cloud API key
            base_url: API base URL
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Api-Key {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=httpx.Timeout(self.timeout),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        json_data: dict | None = None,
        params: dict | None = None,
    ) -> Any:
        """Make an HTTP request to the API.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: API path relative to the base URL (e.g., "/threads")
            json_data: Request body
            params: Query parameters

        Returns:
            Response JSON data (None for an empty body)

        Raises:
            ZepError: If the request fails
        """
        client = await self._get_client()

        try:
            with log_timing(f"{method} {path}", log):
                response = await client.request(
                    method=method,
                    url=path,
                    json=json_data,
                    params=params,
                )
        except httpx.RequestError as e:
            log.error(f"Request to {path} failed: {e}")
            raise ZepError(0, str(e) or type(e).__name__) from e

        if response.status_code >= 400:
            raise ZepError(response.status_code, _error_detail(response))

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            log.error(f"Non-JSON response from {path}: {response.text[:200]!r}")
            raise ZepError(response.status_code, f"Invalid JSON in response from {path}") from e

    # ═══════════════════════════════════════════════════════════════════════════════
    # USERS & THREADS
    # ═══════════════════════════════════════════════════════════════════════════════

    async def ensure_user(
        self,
        user_id: str,
        email: str | None = None,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> EnsureResult:
        """Create a user unless it already exists.

        Raises:
            ZepError: For any failure other than "already exists"
        """
        data: dict[str, Any] = {"user_id": user_id}
        if email:
            data["email"] = email
        if first_name:
            data["first_name"] = first_name
        if last_name:
            data["last_name"] = last_name
        return await self._ensure("/users", data, f"user {user_id}")

    async def ensure_thread(self, thread_id: str, user_id: str) -> EnsureResult:
        """Create a thread owned by `user_id` unless it already exists.

        Raises:
            ZepError: For any failure other than "already exists"
        """
        data = {"thread_id": thread_id, "user_id": user_id}
        return await self._ensure("/threads", data, f"thread {thread_id}")

    async def _ensure(self, path: str, data: dict, label: str) -> EnsureResult:
        try:
            await self._request("POST", path, json_data=data)
        except ZepError as e:
            if e.is_conflict:
                log.debug(f"{label} already present")
                return EnsureResult.ALREADY_PRESENT
            raise
        log.info(f"Created {label}")
        return EnsureResult.CREATED

    async def add_messages(self, thread_id: str, messages: list[dict[str, Any]]) -> dict:
        """Append messages to a thread."""
        path = f"/threads/{_segment(thread_id)}/messages"
        result = await self._request("POST", path, json_data={"messages": messages})
        return _object(result, path)

    async def get_messages(self, thread_id: str, retrieval: Retrieval) -> ThreadMessages:
        """Retrieve messages from a thread using the given retrieval mode."""
        path = f"/threads/{_segment(thread_id)}/messages"
        data = _object(
            await self._request("GET", path, params=retrieval.params() or None),
            path,
        )
        return ThreadMessages(
            messages=[Message.from_dict(m) for m in _objects(data.get("messages"), path)]
        )

    async def get_user_context(self, thread_id: str, mode: str = "summary") -> ThreadContext:
        """Get the context block Zep assembles for a thread's user."""
        path = f"/threads/{_segment(thread_id)}/context"
        data = await self._request("GET", path, params={"mode": mode})
        return ThreadContext.from_dict(_object(data, path))

    # ═══════════════════════════════════════════════════════════════════════════════
    # GRAPH
    # ═══════════════════════════════════════════════════════════════════════════════

    async def search_graph(self, user_id: str, query: str, limit: int = 10) -> list[GraphEdge]:
        """Search the user's graph for facts relevant to `query`."""
        path = "/graph/search"
        data = _object(
            await self._request(
                "POST",
                path,
                json_data={
                    "user_id": user_id,
                    "query": query,
                    "limit": limit,
                    "scope": "edges",
                },
            ),
            path,
        )
        return [GraphEdge.from_dict(e) for e in _objects(data.get("edges"), path)]

    async def get_user_nodes(self, user_id: str, limit: int = 50) -> list[GraphNode]:
        """List entities in the user's graph."""
        path = f"/graph/node/user/{_segment(user_id)}"
        data = await self._request("POST", path, json_data={"limit": limit})
        return [GraphNode.from_dict(n) for n in _objects(data, path)]

    async def get_user_edges(self, user_id: str, limit: int = 50) -> list[GraphEdge]:
        """List relationships in the user's graph."""
        path = f"/graph/edge/user/{_segment(user_id)}"
        data = await self._request("POST", path, json_data={"limit": limit})
        return [GraphEdge.from_dict(e) for e in _objects(data, path)]

    async def get_node(self, node_uuid: str) -> GraphNode:
        """Get a single entity."""
        path = f"/graph/node/{_segment(node_uuid)}"
        return GraphNode.from_dict(_object(await self._request("GET", path), path))

    async def get_node_edges(self, node_uuid: str) -> list[GraphEdge]:
        """Get the relationships attached to an entity."""
        path = f"/graph/node/{_segment(node_uuid)}/entity-edges"
        data = await self._request("GET", path)
        return [GraphEdge.from_dict(e) for e in _objects(data, path)]

    async def get_node_episodes(self, node_uuid: str) -> list[Episode]:
        """Get the episodes an entity was mentioned in."""
        path = f"/graph/node/{_segment(node_uuid)}/episodes"
        data = _object(await self._request("GET", path), path)
        return [Episode.from_dict(e) for e in _objects(data.get("episodes"), path)]


def _segment(value: str) -> str:
    """Percent-encode a caller-supplied ID as a single path segment.

    "." and ".." are encoded too so they are never resolved as dot segments.
    """
    encoded = quote(str(value), safe="")
    if encoded in (".", ".."):
        return encoded.replace(".", "%2E")
    return encoded


def _object(data: Any, path: str) -> dict[str, Any]:
    """A JSON object body; an empty body counts as an empty object."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ZepError(0, f"Unexpected response from {path}: expected an object, got {type(data).__name__}")
    return data


def _objects(data: Any, path: str) -> list[dict[str, Any]]:
    """A JSON array of objects; missing or null counts as empty."""
    if data is None:
        return []
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ZepError(0, f"Unexpected response from {path}: expected a list of objects")
    return data


def _error_detail(response: httpx.Response) -> str:
    """Pull a readable message out of an error response."""
    try:
        error_data = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(error_data, dict):
        detail = error_data.get("message") or error_data.get("detail")
        if detail:
            return str(detail)
    return response.text or response.reason_phrase
