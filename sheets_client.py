"""
Google Sheets / Drive API client using gspread.
Thin gateway: every method is a single API round trip through gspread's HTTP client.
"""
from typing import Any

import gspread
from gspread.http_client import HTTPClient
from gspread.urls import DRIVE_FILES_API_V3_URL, SPREADSHEETS_API_V4_BASE_URL

from config import SPREADSHEET_MIME_TYPE
from core.auth import CredentialProvider


class SheetsClient:
    """Wrapper around gspread for Google Sheets and Drive API access."""

    def __init__(self, provider: CredentialProvider):
        """
        Initialize the client with a credential provider.

        Authorization is deferred to the first API call, so a server without
        stored credentials still starts and answers with an
        authentication-required error.

        Args:
            provider: Credential provider selected at startup
        """
        self.provider = provider
        self._gc: gspread.Client | None = None

    @property
    def gc(self) -> gspread.Client:
        """Authorized gspread client (created on first use)."""
        if self._gc is None:
            creds = self.provider.require_credential()
            self._gc = gspread.authorize(creds)
        return self._gc

    @property
    def http(self) -> HTTPClient:
        return self.gc.http_client

    # === Sheets API ===

    def get_sheet_properties(self, spreadsheet_id: str) -> list[dict[str, Any]]:
        """Get the `properties` object of every sheet, in sheet order."""
        meta = self.http.fetch_sheet_metadata(spreadsheet_id, params={"fields": "sheets.properties"})
        return [s.get("properties") or {} for s in meta.get("sheets") or []]

    def get_values(self, spreadsheet_id: str, range_notation: str) -> list[list[Any]]:
        """Get unformatted values from a range (e.g., 'Sheet1!A1:D30')."""
        data = self.http.values_get(
            spreadsheet_id,
            range_notation,
            params={"majorDimension": "ROWS", "valueRenderOption": "UNFORMATTED_VALUE"},
        )
        return data.get("values") or []

    def update_values(
        self,
        spreadsheet_id: str,
        range_notation: str,
        values: list[list[Any]],
        value_input_option: str = "RAW",
    ) -> dict[str, Any]:
        """Overwrite a range of cells."""
        return self.http.values_update(
            spreadsheet_id,
            range_notation,
            params={"valueInputOption": value_input_option},
            body={"majorDimension": "ROWS", "values": values},
        )

    def append_values(
        self,
        spreadsheet_id: str,
        range_notation: str,
        values: list[list[Any]],
        value_input_option: str,
        insert_data_option: str,
    ) -> dict[str, Any]:
        """Append rows after the table found in range_notation."""
        return self.http.values_append(
            spreadsheet_id,
            range_notation,
            params={
                "valueInputOption": value_input_option,
                "insertDataOption": insert_data_option,
            },
            body={"majorDimension": "ROWS", "values": values},
        )

    def clear_values(self, spreadsheet_id: str, range_notation: str) -> dict[str, Any]:
        """Clear values (not formatting) in a range."""
        return self.http.values_clear(spreadsheet_id, range_notation)

    def batch_update(self, spreadsheet_id: str, requests: list[dict[str, Any]]) -> dict[str, Any]:
        """
        Apply structural requests (addSheet, deleteSheet, updateSheetProperties).

        Args:
            requests: List of Sheets API request objects,
                     e.g., [{'deleteSheet': {'sheetId': 0}}]
        """
        return self.http.batch_update(spreadsheet_id, {"requests": requests})

    def create_spreadsheet(self, title: str, sheets: list[dict[str, Any]]) -> dict[str, Any]:
        """Create a spreadsheet with the given sheet properties."""
        body = {
            "properties": {"title": title},
            "sheets": [{"properties": props} for props in sheets],
        }
        r = self.http.request("post", SPREADSHEETS_API_V4_BASE_URL, json=body)
        return r.json()

    # === Drive API ===

    def move_to_folder(self, file_id: str, folder_id: str) -> dict[str, Any]:
        """Move a file from My Drive root into folder_id."""
        r = self.http.request(
            "patch",
            f"{DRIVE_FILES_API_V3_URL}/{file_id}",
            params={
                "addParents": folder_id,
                "removeParents": "root",
                "supportsAllDrives": True,
                "fields": "id, parents",
            },
        )
        return r.json()

    def search_spreadsheets(self, query: str, max_results: int) -> list[dict[str, Any]]:
        """Find spreadsheets whose name contains query, most recently modified first."""
        escaped = query.replace("\\", "\\\\").replace("'", "\\'")
        q = f"mimeType='{SPREADSHEET_MIME_TYPE}' and name contains '{escaped}' and trashed=false"
        r = self.http.request(
            "get",
            DRIVE_FILES_API_V3_URL,
            params={
                "q": q,
                "pageSize": max_results,
                "orderBy": "modifiedTime desc",
                "fields": "files(id, name, modifiedTime, webViewLink)",
                "supportsAllDrives": True,
                "includeItemsFromAllDrives": True,
            },
        )
        return r.json().get("files") or []
