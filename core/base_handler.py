"""
Base handler class for spreadsheet operations.

Provides common functionality for all handlers:
- Sheet metadata loading and target sheet resolution
- Backend error classification (404 / 403 / passthrough)
- Response helpers (ok)
"""
from abc import ABC
from typing import Any, Callable

from google.auth.exceptions import GoogleAuthError
from gspread.exceptions import APIError, GSpreadException, WorksheetNotFound
from gspread.exceptions import SpreadsheetNotFound as GSpreadSpreadsheetNotFound
from requests.exceptions import RequestException

from env_loader import Settings
from sheets_client import SheetsClient
from lib.common import ok, log
from lib.errors import (
    PERMISSION_DENIED_MESSAGE,
    AuthenticationRequired,
    PermissionDenied,
    SheetNotFound,
    SheetsToolError,
    SpreadsheetNotFound,
    backend_error,
    sheet_not_found_message,
    spreadsheet_not_found_message,
)
from lib.types import SheetDescriptor, sheet_descriptor

# Errors raised by the backend stack that are turned into error envelopes
BACKEND_ERRORS = (GSpreadException, RequestException, GoogleAuthError)


def status_code_of(error: BaseException) -> int | None:
    """HTTP status carried by a backend error, if any."""
    response = getattr(error, "response", None)
    code = getattr(response, "status_code", None)
    if isinstance(code, int):
        return code
    code = getattr(error, "code", None)
    return code if isinstance(code, int) else None


class BaseHandler(ABC):
    """
    Abstract base class for all spreadsheet handlers.

    Subclasses implement operations as plain methods returning response
    dicts, wrapping backend calls in `self.run(...)` so every failure comes
    back as an error envelope. AuthenticationRequired is the one exception
    that is re-raised: the server reports it as a protocol-level fault.
    """

    def __init__(self, sheets: SheetsClient, settings: Settings | None = None) -> None:
        """
        Initialize handler with sheets client and settings.

        Args:
            sheets: SheetsClient instance
            settings: Process settings (defaults are used when omitted)
        """
        self.sheets = sheets
        self.settings = settings or Settings()

    # === Sheet Metadata ===

    def list_sheet_descriptors(self, spreadsheet_id: str) -> list[SheetDescriptor]:
        """Fetch a fresh snapshot of every sheet's properties."""
        return [sheet_descriptor(p) for p in self.sheets.get_sheet_properties(spreadsheet_id)]

    def resolve_sheet(
        self,
        spreadsheet_id: str,
        sheet_name: str | None = None,
        sheet_id: int | None = None,
    ) -> SheetDescriptor:
        """
        Find the target sheet: by ID, else by name, else the first sheet by index.

        Raises:
            SheetNotFound: no sheet matches (or the spreadsheet has no sheets)
        """
        sheets = self.list_sheet_descriptors(spreadsheet_id)
        if sheet_id is not None:
            for s in sheets:
                if s["sheet_id"] == sheet_id:
                    return s
            raise SheetNotFound(sheet_not_found_message(f"sheet_id={sheet_id}"))
        if sheet_name:
            for s in sheets:
                if s["title"] == sheet_name:
                    return s
            raise SheetNotFound(sheet_not_found_message(sheet_name))
        if not sheets:
            raise SheetNotFound(sheet_not_found_message("first sheet"))
        return min(sheets, key=lambda s: s["index"])

    # === Error Classification ===

    def classify_error(
        self,
        error: BaseException,
        spreadsheet_id: str | None = None,
        sheet_name: str | None = None,
    ) -> SheetsToolError | None:
        """
        Map a backend error onto the error taxonomy.

        A 404 always refers to the spreadsheet. The Sheets API reports an
        unknown sheet name inside a range as a 400 "Unable to parse range",
        which maps to SheetNotFound when the call addressed a sheet by name.
        Returns None for errors that pass through unclassified.
        """
        if isinstance(error, WorksheetNotFound):
            return SheetNotFound(sheet_not_found_message(sheet_name or str(error)))
        if isinstance(error, GSpreadSpreadsheetNotFound):
            return SpreadsheetNotFound(spreadsheet_not_found_message(spreadsheet_id or ""))

        status = status_code_of(error) if isinstance(error, (APIError, RequestException)) else None
        if status == 404:
            return SpreadsheetNotFound(spreadsheet_not_found_message(spreadsheet_id or ""))
        if status == 403:
            return PermissionDenied(PERMISSION_DENIED_MESSAGE)
        if status == 400 and sheet_name and "Unable to parse range" in str(error):
            return SheetNotFound(sheet_not_found_message(sheet_name))
        return None

    def run(
        self,
        op: str,
        action: Callable[[], dict[str, Any]],
        spreadsheet_id: str | None = None,
        sheet_name: str | None = None,
    ) -> dict[str, Any]:
        """
        Run an operation body and convert failures into error envelopes.

        Args:
            op: Operation name
            action: Callable returning the success data dict
            spreadsheet_id: Spreadsheet addressed (for not-found messages)
            sheet_name: Sheet addressed by name, if any

        Returns:
            Success or error response dict
        """
        try:
            return self._ok(op, action())
        except AuthenticationRequired:
            raise
        except SheetsToolError as e:
            return e.to_response(op)
        except BACKEND_ERRORS as e:
            log(f"{op} failed: {type(e).__name__}: {e}")
            classified = self.classify_error(e, spreadsheet_id, sheet_name)
            if classified is not None:
                return classified.to_response(op)
            return backend_error(op, str(e))

    # === Response Helpers ===

    def _ok(self, op: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Return success response.

        Args:
            op: Operation name
            data: Response data

        Returns:
            Success response dict
        """
        return ok(op, data or {})

