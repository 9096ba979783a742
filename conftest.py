"""
Pytest configuration and fixtures for MCP server tests.

The backend gateway (SheetsClient) is replaced with MagicMock instances;
no test talks to Google.
"""
import os
import pytest
from pathlib import Path
from unittest.mock import MagicMock

# Set test environment variables before importing anything
os.environ.pop("GOOGLE_CREDENTIALS_FILE", None)
os.environ.pop("GOOGLE_CREDENTIALS_JSON", None)
os.environ.pop("GOOGLE_DRIVE_DEFAULT_FOLDER_ID", None)
os.environ.setdefault("GOOGLE_OAUTH_TOKEN_FILE", "/nonexistent/google-sheets-mcp/token.json")
os.environ.setdefault("GOOGLE_AUTH_MODE", "oauth")

from core.context import ServerContext  # noqa: E402
from core.dispatcher import Dispatcher  # noqa: E402
from env_loader import Settings  # noqa: E402


# ========== Response Assertion Helpers ==========

class ResponseAssertions:
    """Helper class for asserting API response structures."""

    @staticmethod
    def assert_success(response: dict, op: str | None = None) -> dict:
        """Assert response is successful and return data.

        Args:
            response: The response dict to check
            op: Optional operation name to verify

        Returns:
            The data dict from the response
        """
        assert response.get("ok") is True, f"Expected success, got: {response}"
        if op:
            assert response.get("op") == op, f"Expected op={op}, got {response.get('op')}"
        return response.get("data", {})

    @staticmethod
    def assert_error(response: dict, code: str, op: str | None = None) -> dict:
        """Assert response is an error with given code.

        Args:
            response: The response dict to check
            code: Expected error code
            op: Optional operation name to verify

        Returns:
            The error dict from the response
        """
        assert response.get("ok") is False, f"Expected error, got success: {response}"
        assert response.get("error", {}).get("code") == code, \
            f"Expected error code {code}, got {response.get('error', {}).get('code')}"
        if op:
            assert response.get("op") == op, f"Expected op={op}, got {response.get('op')}"
        return response.get("error", {})


@pytest.fixture
def assertions():
    """Fixture providing response assertion helpers."""
    return ResponseAssertions()


@pytest.fixture
def sample_sheet_properties():
    """Sheet properties as returned by spreadsheets.get(fields=sheets.properties)."""
    return [
        {
            "sheetId": 0,
            "title": "Sheet1",
            "index": 0,
            "gridProperties": {"rowCount": 1000, "columnCount": 26},
        },
        {
            "sheetId": 123456,
            "title": "Data",
            "index": 1,
            "gridProperties": {"rowCount": 2, "columnCount": 2},
        },
    ]


@pytest.fixture
def mock_sheets_client(sample_sheet_properties):
    """
    Mock SheetsClient for unit tests.
    Returns a MagicMock that can be configured per test.
    """
    mock = MagicMock()
    mock.get_sheet_properties.return_value = sample_sheet_properties
    mock.get_values.return_value = []
    mock.update_values.return_value = {}
    mock.append_values.return_value = {}
    mock.clear_values.return_value = {}
    mock.batch_update.return_value = {"replies": [{}]}
    mock.search_spreadsheets.return_value = []
    return mock


@pytest.fixture
def settings():
    """Settings with no credentials and no default folder."""
    return Settings(oauth_token_path=Path("/nonexistent/google-sheets-mcp/token.json"))


@pytest.fixture
def context(mock_sheets_client, settings):
    """ServerContext wired to the mock SheetsClient."""
    return ServerContext(settings=settings, provider=MagicMock(), sheets=mock_sheets_client)


@pytest.fixture
def dispatcher(context):
    """Dispatcher over the mock context."""
    return Dispatcher(context)


@pytest.fixture
def api_error():
    """
    Factory for gspread APIError instances with a given HTTP status.

    Usage:
        err = api_error(404, "Requested entity was not found.")
    """
    from gspread.exceptions import APIError

    def _make(status: int, message: str = "error") -> APIError:
        response = MagicMock()
        response.status_code = status
        response.json.return_value = {
            "error": {"code": status, "message": message, "status": "ERROR"}
        }
        response.text = message
        return APIError(response)

    return _make
