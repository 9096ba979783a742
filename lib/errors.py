"""
Standardized error handling for the MCP server.
Provides error codes, the exception taxonomy and response helpers.
"""
from enum import Enum
from typing import Any

from lib.common import ng


class ErrorCode(str, Enum):
    """Standardized error codes used across the MCP server."""
    BAD_REQUEST = "BAD_REQUEST"
    UNKNOWN_TOOL = "UNKNOWN_TOOL"
    INVALID_RANGE_FORMAT = "INVALID_RANGE_FORMAT"
    ROW_LIMIT_EXCEEDED = "ROW_LIMIT_EXCEEDED"
    SHEET_SIZE_LIMIT_EXCEEDED = "SHEET_SIZE_LIMIT_EXCEEDED"
    SPREADSHEET_NOT_FOUND = "SPREADSHEET_NOT_FOUND"
    SHEET_NOT_FOUND = "SHEET_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    BACKEND_ERROR = "BACKEND_ERROR"


class SheetsToolError(Exception):
    """Base class for errors that map onto an error envelope."""

    code: ErrorCode = ErrorCode.BACKEND_ERROR

    def __init__(self, message: str, extra: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.extra = extra or {}

    def to_response(self, op: str) -> dict[str, Any]:
        return ng(op, self.code.value, self.message, self.extra or None)


class ArgumentError(SheetsToolError):
    code = ErrorCode.BAD_REQUEST


class UnknownTool(SheetsToolError):
    code = ErrorCode.UNKNOWN_TOOL


class InvalidRangeFormat(SheetsToolError, ValueError):
    code = ErrorCode.INVALID_RANGE_FORMAT


class RowLimitExceeded(SheetsToolError):
    code = ErrorCode.ROW_LIMIT_EXCEEDED


class SheetSizeLimitExceeded(SheetsToolError):
    code = ErrorCode.SHEET_SIZE_LIMIT_EXCEEDED


class SpreadsheetNotFound(SheetsToolError):
    code = ErrorCode.SPREADSHEET_NOT_FOUND


class SheetNotFound(SheetsToolError):
    code = ErrorCode.SHEET_NOT_FOUND


class PermissionDenied(SheetsToolError):
    code = ErrorCode.PERMISSION_DENIED


class FolderNotFound(SheetsToolError):
    code = ErrorCode.FOLDER_NOT_FOUND


class AuthenticationRequired(SheetsToolError):
    """No stored credential is available; the caller must authenticate first."""
    code = ErrorCode.AUTHENTICATION_REQUIRED


# === Message templates ===

def spreadsheet_not_found_message(spreadsheet_id: str) -> str:
    return f"spreadsheet not found: {spreadsheet_id}"


def sheet_not_found_message(sheet_name: str) -> str:
    return f"sheet not found: {sheet_name}"


PERMISSION_DENIED_MESSAGE = (
    "permission denied; check the sharing settings of the spreadsheet"
)


def row_limit_message(limit: int) -> str:
    return f"row limit exceeded; at most {limit} rows can be read"


def sheet_size_message(max_rows: int, max_cols: int) -> str:
    return f"sheet size limit exceeded; at most {max_rows} rows and {max_cols} columns are supported"


def folder_not_found_message(folder_id: str) -> str:
    return f"folder not found: {folder_id}"


AUTHENTICATION_REQUIRED_MESSAGE = (
    "Google Sheets authentication is required. "
    "Configure credentials and authorize the server, then retry."
)


# === Response helpers ===

def backend_error(op: str, message: str) -> dict[str, Any]:
    """Create a BACKEND_ERROR response carrying the backend message as-is."""
    return ng(op, ErrorCode.BACKEND_ERROR.value, message)
