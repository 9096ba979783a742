"""
Spreadsheets handler class.

Creates spreadsheets (optionally moving them into a Drive folder) and
searches Drive for spreadsheets by name.
"""
from __future__ import annotations

from typing import Any

from config import (
    DEFAULT_SHEET_TITLE,
    MAX_SHEET_COLS,
    MAX_SHEET_ROWS,
    SPREADSHEET_URL_TEMPLATE,
)
from core.base_handler import BACKEND_ERRORS, BaseHandler, status_code_of
from lib.arguments import CreateSpreadsheetArgs, NewSheetSpec, SearchSpreadsheetsArgs
from lib.common import log
from lib.errors import (
    FolderNotFound,
    SheetSizeLimitExceeded,
    SheetsToolError,
    folder_not_found_message,
    sheet_size_message,
)
from lib.types import sheet_descriptor


class SpreadsheetsHandler(BaseHandler):
    """
    Handler for spreadsheet documents.

    Creation and the follow-up folder move are separate API calls. When the
    move fails the spreadsheet is kept where it was created; the error
    envelope carries its spreadsheet_id so the caller can still use it.
    """

    def create_spreadsheet(self, args: CreateSpreadsheetArgs) -> dict[str, Any]:
        op = "create_spreadsheet"
        specs = args.sheets or [NewSheetSpec(title=DEFAULT_SHEET_TITLE)]
        if any(s.rows > MAX_SHEET_ROWS or s.cols > MAX_SHEET_COLS for s in specs):
            return SheetSizeLimitExceeded(sheet_size_message(MAX_SHEET_ROWS, MAX_SHEET_COLS)).to_response(op)

        folder_id = args.folder_id or self.settings.default_folder_id
        properties = [
            {
                "title": s.title,
                "gridProperties": {"rowCount": s.rows, "columnCount": s.cols},
            }
            for s in specs
        ]

        def action() -> dict[str, Any]:
            created = self.sheets.create_spreadsheet(args.title, properties)
            spreadsheet_id = created.get("spreadsheetId")
            if not spreadsheet_id:
                raise SheetsToolError("spreadsheet creation returned no spreadsheetId")

            data: dict[str, Any] = {
                "spreadsheet_id": spreadsheet_id,
                "title": args.title,
                "url": created.get("spreadsheetUrl") or SPREADSHEET_URL_TEMPLATE.format(id=spreadsheet_id),
                "sheets": [sheet_descriptor(s.get("properties") or {}) for s in created.get("sheets") or []],
                "folder_id": None,
            }
            if folder_id:
                self._move_to_folder(spreadsheet_id, folder_id, data["url"])
                data["folder_id"] = folder_id
            return data

        return self.run(op, action)

    def _move_to_folder(self, spreadsheet_id: str, folder_id: str, url: str) -> None:
        """
        Move a freshly created spreadsheet into folder_id.

        Raises:
            FolderNotFound: the folder does not exist (404)
            SheetsToolError: any other failure; the spreadsheet is not rolled back
        """
        extra = {"spreadsheet_id": spreadsheet_id, "url": url, "created": True}
        try:
            self.sheets.move_to_folder(spreadsheet_id, folder_id)
        except BACKEND_ERRORS as e:
            log(f"moving {spreadsheet_id} to folder {folder_id} failed: {e}")
            if status_code_of(e) == 404:
                raise FolderNotFound(folder_not_found_message(folder_id), extra) from e
            classified = self.classify_error(e, spreadsheet_id)
            if classified is None:
                raise SheetsToolError(str(e), extra) from e
            classified.extra.update(extra)
            raise classified from e

    def search_spreadsheets(self, args: SearchSpreadsheetsArgs) -> dict[str, Any]:
        op = "search_spreadsheets"

        def action() -> dict[str, Any]:
            files = self.sheets.search_spreadsheets(args.query, args.max_results)
            results = [
                {
                    "spreadsheet_id": f.get("id"),
                    "name": f.get("name"),
                    "modified_time": f.get("modifiedTime"),
                    "url": f.get("webViewLink") or SPREADSHEET_URL_TEMPLATE.format(id=f.get("id")),
                }
                for f in files[: args.max_results]
            ]
            return {"query": args.query, "files": results, "count": len(results)}

        return self.run(op, action)
