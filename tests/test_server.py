"""Tests for the MCP binding and process entry point."""

from unittest.mock import patch

import pytest
from mcp import types

from zep_mcp.dispatcher import Dispatcher
from zep_mcp.server import create_server, main


@pytest.fixture
def server(mock_client, config):
    return create_server(Dispatcher(mock_client, config))


class TestMCPHandlers:

    @pytest.mark.asyncio
    async def test_list_tools(self, server):
        handler = server.request_handlers[types.ListToolsRequest]

        result = await handler(types.ListToolsRequest(method="tools/list"))

        names = [tool.name for tool in result.root.tools]
        assert names[0] == "zep_store_memory"
        assert len(names) == 7

    @pytest.mark.asyncio
    async def test_call_unknown_tool(self, server):
        handler = server.request_handlers[types.CallToolRequest]

        result = await handler(types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="zep_nope", arguments={}),
        ))

        assert result.root.isError is True
        assert len(result.root.content) == 1
        assert "zep_nope" in result.root.content[0].text

    @pytest.mark.asyncio
    async def test_call_tool_success(self, server, mock_client):
        handler = server.request_handlers[types.CallToolRequest]

        result = await handler(types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(
                name="zep_search_memory",
                arguments={"session_id": "global", "query": "tea"},
            ),
        ))

        assert result.root.isError is False
        assert result.root.content[0].text == "No results found"


class TestMain:

    def test_missing_api_key_exits_nonzero(self, monkeypatch, capsys):
        monkeypatch.delenv("ZEP_API_KEY", raising=False)

        with patch("zep_mcp.server.serve") as serve:
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1
        assert "ZEP_API_KEY" in capsys.readouterr().err
        serve.assert_not_called()

    def test_fatal_error_exits_nonzero(self, monkeypatch):
        monkeypatch.setenv("ZEP_API_KEY", "z_key")

        with patch("zep_mcp.server.asyncio.run", side_effect=RuntimeError("boom")) as run:
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1
        run.call_args.args[0].close()
