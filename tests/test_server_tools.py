"""
Tests for the MCP tool functions in server.py.
The dispatcher is replaced per test; no test talks to Google.
"""
import pytest
from unittest.mock import MagicMock, patch

from mcp.shared.exceptions import McpError

import server
from server import (
    list_sheets,
    read_range,
    write_range,
    create_spreadsheet,
    search_spreadsheets,
    tools_help,
)
from lib.errors import AuthenticationRequired


@pytest.fixture
def configured(context):
    """Install a dispatcher over the mock context, restoring the previous one afterwards."""
    previous = server._dispatcher
    dispatcher = server.configure(context)
    yield dispatcher
    server._dispatcher = previous


class TestToolForwarding:
    """Tool functions forward their arguments to the dispatcher"""

    @pytest.mark.asyncio
    async def test_unset_optionals_are_dropped(self):
        mock_dispatcher = MagicMock()
        mock_dispatcher.call.return_value = {"ok": True, "op": "read_range", "data": {}}
        with patch("server.get_dispatcher", return_value=mock_dispatcher):
            result = await read_range(spreadsheet_id="S", range="A1:B2")

        assert result["ok"] is True
        mock_dispatcher.call.assert_called_once_with("read_range", {"spreadsheet_id": "S", "range": "A1:B2"})

    @pytest.mark.asyncio
    async def test_write_range(self, configured, mock_sheets_client):
        result = await write_range(spreadsheet_id="S", start_position="B2", values=[[1, 2], [3, 4]])

        assert result["ok"] is True
        assert result["data"]["range"] == "B2:C3"

    @pytest.mark.asyncio
    async def test_list_sheets(self, configured):
        result = await list_sheets(spreadsheet_id="S")

        assert result["ok"] is True
        assert result["data"]["count"] == 2

    @pytest.mark.asyncio
    async def test_validation_error_is_envelope(self, configured):
        result = await search_spreadsheets(query="")

        assert result["ok"] is False
        assert result["error"]["code"] == "BAD_REQUEST"

    @pytest.mark.asyncio
    async def test_tools_help(self, configured):
        result = await tools_help()

        assert result["ok"] is True
        assert result["data"]["count"] == 10


class TestAuthenticationFault:
    """AuthenticationRequired surfaces as a protocol error, not an envelope"""

    @pytest.mark.asyncio
    async def test_raises_mcp_error(self, configured, mock_sheets_client):
        mock_sheets_client.get_sheet_properties.side_effect = AuthenticationRequired("please authenticate")

        with pytest.raises(McpError) as exc_info:
            await list_sheets(spreadsheet_id="S")

        assert "please authenticate" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_create_spreadsheet_without_credentials(self, configured, mock_sheets_client):
        mock_sheets_client.create_spreadsheet.side_effect = AuthenticationRequired("please authenticate")

        with pytest.raises(McpError):
            await create_spreadsheet(title="Budget")


class TestGetDispatcher:
    def test_configure_replaces_dispatcher(self, context):
        previous = server._dispatcher
        try:
            dispatcher = server.configure(context)
            assert server.get_dispatcher() is dispatcher
        finally:
            server._dispatcher = previous
