"""
Configuration constants for the MCP server.
Centralizes API scopes, size limits and defaults for new sheets.
"""
from typing import Final

# OAuth scopes requested by every credential provider
SCOPES: Final[list[str]] = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive.file",
]

SPREADSHEET_MIME_TYPE: Final[str] = "application/vnd.google-apps.spreadsheet"
SPREADSHEET_URL_TEMPLATE: Final[str] = "https://docs.google.com/spreadsheets/d/{id}/edit"

# Read limits
DEFAULT_ROW_LIMIT: Final[int] = 100
MAX_ROW_LIMIT: Final[int] = 1000

# New sheet defaults
DEFAULT_SHEET_TITLE: Final[str] = "Sheet1"
DEFAULT_NEW_SHEET_ROWS: Final[int] = 1000
DEFAULT_NEW_SHEET_COLS: Final[int] = 26

# Hard ceiling for auto-expand and sheet creation
MAX_SHEET_ROWS: Final[int] = 10000
MAX_SHEET_COLS: Final[int] = 1000

# Drive search
DEFAULT_SEARCH_RESULTS: Final[int] = 10
MAX_SEARCH_RESULTS: Final[int] = 1000

# Default location of the stored authorized-user token (interactive OAuth)
DEFAULT_TOKEN_PATH: Final[str] = "~/.config/google-sheets-mcp/token.json"

# Default values written by the append operation
DEFAULT_VALUE_INPUT_OPTION: Final[str] = "USER_ENTERED"
DEFAULT_INSERT_DATA_OPTION: Final[str] = "INSERT_ROWS"
