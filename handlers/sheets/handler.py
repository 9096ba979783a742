"""
Sheets handler class.
Lists, creates and deletes the sheets (tabs) of an existing spreadsheet.
"""
from __future__ import annotations

from typing import Any

from config import MAX_SHEET_COLS, MAX_SHEET_ROWS
from core.base_handler import BaseHandler
from lib.arguments import CreateSheetArgs, DeleteSheetArgs, ListSheetsArgs
from lib.errors import SheetSizeLimitExceeded, SheetsToolError, sheet_size_message
from lib.types import sheet_descriptor


class SheetsHandler(BaseHandler):
    """Handler for sheet-level structure operations."""

    def list_sheets(self, args: ListSheetsArgs) -> dict[str, Any]:
        op = "list_sheets"

        def action() -> dict[str, Any]:
            sheets = self.list_sheet_descriptors(args.spreadsheet_id)
            return {"spreadsheet_id": args.spreadsheet_id, "sheets": sheets, "count": len(sheets)}

        return self.run(op, action, args.spreadsheet_id)

    def create_sheet(self, args: CreateSheetArgs) -> dict[str, Any]:
        op = "create_sheet"
        if args.rows > MAX_SHEET_ROWS or args.cols > MAX_SHEET_COLS:
            return SheetSizeLimitExceeded(sheet_size_message(MAX_SHEET_ROWS, MAX_SHEET_COLS)).to_response(op)

        def action() -> dict[str, Any]:
            result = self.sheets.batch_update(args.spreadsheet_id, [
                {
                    "addSheet": {
                        "properties": {
                            "title": args.title,
                            "gridProperties": {"rowCount": args.rows, "columnCount": args.cols},
                        }
                    }
                }
            ])
            replies = result.get("replies") or [{}]
            properties = (replies[0].get("addSheet") or {}).get("properties")
            if not properties:
                raise SheetsToolError("addSheet reply did not include sheet properties")
            return {"sheet": sheet_descriptor(properties)}

        return self.run(op, action, args.spreadsheet_id)

    def delete_sheet(self, args: DeleteSheetArgs) -> dict[str, Any]:
        op = "delete_sheet"

        def action() -> dict[str, Any]:
            sheet = self.resolve_sheet(args.spreadsheet_id, args.sheet_name, args.sheet_id)
            self.sheets.batch_update(args.spreadsheet_id, [
                {"deleteSheet": {"sheetId": sheet["sheet_id"]}}
            ])
            return {"deleted": True, "sheet_id": sheet["sheet_id"], "title": sheet["title"]}

        return self.run(op, action, args.spreadsheet_id, args.sheet_name)
