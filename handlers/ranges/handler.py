"""
Ranges handler class.

Reads, writes, appends and clears cell ranges. Writes resolve the exact
target extent with the range algebra and grow the sheet before writing.
"""
from __future__ import annotations

from typing import Any

from config import MAX_ROW_LIMIT, MAX_SHEET_COLS, MAX_SHEET_ROWS
from core.base_handler import BaseHandler
from lib.arguments import AppendRangeArgs, ClearRangeArgs, ReadRangeArgs, StartCoordinate, WriteRangeArgs
from lib.common import format_grid, log, normalize_values, to_cell_value
from lib.errors import (
    ArgumentError,
    RowLimitExceeded,
    SheetSizeLimitExceeded,
    SheetsToolError,
    row_limit_message,
    sheet_size_message,
)
from lib.ranges import compute_end_position, qualify_range, range_for_grid, split_sheet_qualifier
from lib.sheet_utils import from_a1
from lib.types import Coordinate, SheetDescriptor, SheetValues


class RangesHandler(BaseHandler):
    """
    Handler for cell range operations.

    Validation (row limits, A1 parsing, sheet size ceiling) happens before
    any backend call, so a rejected request has no side effects.
    """

    # === Read ===

    def read_range(self, args: ReadRangeArgs) -> dict[str, Any]:
        op = "read_range"
        if args.row_limit > MAX_ROW_LIMIT:
            return RowLimitExceeded(row_limit_message(MAX_ROW_LIMIT)).to_response(op)

        try:
            sheet_name, label = self._split_target(args.range, args.sheet_name)
        except SheetsToolError as e:
            return e.to_response(op)
        target = qualify_range(label, sheet_name)

        def action() -> dict[str, Any]:
            raw = self.sheets.get_values(args.spreadsheet_id, target)
            values = normalize_values(
                [[to_cell_value(cell) for cell in row] for row in raw[: args.row_limit]]
            )
            return {
                "range": target,
                "values": values,
                "row_count": len(values),
                "truncated": len(raw) > args.row_limit,
                "text": format_grid(values),
            }

        return self.run(op, action, args.spreadsheet_id, sheet_name)

    # === Write ===

    def write_range(self, args: WriteRangeArgs) -> dict[str, Any]:
        op = "write_range"
        try:
            sheet_name, start = self._resolve_start(args.start_position, args.sheet_name)
        except SheetsToolError as e:
            return e.to_response(op)

        values = normalize_values(args.values)
        end = compute_end_position(start, values)
        required_rows = end.row + 1
        required_cols = end.col + 1
        if required_rows > MAX_SHEET_ROWS or required_cols > MAX_SHEET_COLS:
            return SheetSizeLimitExceeded(sheet_size_message(MAX_SHEET_ROWS, MAX_SHEET_COLS)).to_response(op)

        target = qualify_range(range_for_grid(start, values), sheet_name)

        def action() -> dict[str, Any]:
            sheet = self.resolve_sheet(args.spreadsheet_id, sheet_name)
            expanded = self.expand_sheet_if_needed(args.spreadsheet_id, sheet, required_rows, required_cols)
            self.sheets.update_values(args.spreadsheet_id, target, values, value_input_option="RAW")
            rows = len(values)
            cols = len(values[0]) if values else 0
            return {
                "range": target,
                "sheet": sheet["title"],
                "updated_rows": rows,
                "updated_columns": cols,
                "updated_cells": rows * cols,
                "expanded": expanded,
            }

        return self.run(op, action, args.spreadsheet_id, sheet_name)

    def _resolve_start(
        self,
        start_position: str | StartCoordinate,
        sheet_name: str | None,
    ) -> tuple[str | None, Coordinate]:
        """
        Parse the start position into (sheet name, coordinate).

        A sheet-qualified label ("Sheet1!B2") supplies the sheet name unless
        one was given explicitly; the two must agree when both are present.
        """
        if isinstance(start_position, StartCoordinate):
            return sheet_name, Coordinate(row=start_position.row, col=start_position.col)

        sheet, label = self._split_target(start_position, sheet_name)
        # "B2:C3" is accepted; only the top-left cell is used
        start_label = label.split(":", 1)[0]
        return sheet, from_a1(start_label)

    def _split_target(self, range_notation: str, sheet_name: str | None) -> tuple[str | None, str]:
        """
        Separate a sheet qualifier from a range ("Sheet1!A1" -> ("Sheet1", "A1")).

        Raises:
            ArgumentError: the qualifier and an explicit sheet_name disagree
        """
        qualifier, label = split_sheet_qualifier(range_notation)
        if qualifier and sheet_name and qualifier != sheet_name:
            raise ArgumentError(
                f"range sheet '{qualifier}' does not match sheet_name '{sheet_name}'"
            )
        return (sheet_name or qualifier), label

    def expand_sheet_if_needed(
        self,
        spreadsheet_id: str,
        sheet: SheetDescriptor,
        required_rows: int,
        required_cols: int,
    ) -> bool:
        """
        Grow the sheet so it holds required_rows x required_cols. Never shrinks.

        Returns:
            True when a resize request was issued
        """
        if required_rows > MAX_SHEET_ROWS or required_cols > MAX_SHEET_COLS:
            raise SheetSizeLimitExceeded(sheet_size_message(MAX_SHEET_ROWS, MAX_SHEET_COLS))

        current_rows = sheet["row_count"]
        current_cols = sheet["column_count"]
        if required_rows <= current_rows and required_cols <= current_cols:
            return False

        new_rows = max(current_rows, required_rows)
        new_cols = max(current_cols, required_cols)
        log(
            f"expanding sheet '{sheet['title']}' from {current_rows}x{current_cols} "
            f"to {new_rows}x{new_cols}"
        )
        self.sheets.batch_update(spreadsheet_id, [
            {
                "updateSheetProperties": {
                    "properties": {
                        "sheetId": sheet["sheet_id"],
                        "gridProperties": {"rowCount": new_rows, "columnCount": new_cols},
                    },
                    "fields": "gridProperties.rowCount,gridProperties.columnCount",
                }
            }
        ])
        return True

    # === Append / Clear ===

    def append_range(self, args: AppendRangeArgs) -> dict[str, Any]:
        op = "append_range"
        try:
            sheet_name, label = self._split_target(args.range, args.sheet_name)
        except SheetsToolError as e:
            return e.to_response(op)
        target = qualify_range(label, sheet_name)
        values: SheetValues = normalize_values(args.values)

        def action() -> dict[str, Any]:
            result = self.sheets.append_values(
                args.spreadsheet_id,
                target,
                values,
                value_input_option=args.value_input_option,
                insert_data_option=args.insert_data_option,
            )
            updates = result.get("updates") or {}
            return {
                "range": target,
                "table_range": result.get("tableRange"),
                "updated_range": updates.get("updatedRange"),
                "updated_rows": updates.get("updatedRows", len(values)),
                "updated_cells": updates.get("updatedCells"),
            }

        return self.run(op, action, args.spreadsheet_id, sheet_name)

    def clear_range(self, args: ClearRangeArgs) -> dict[str, Any]:
        op = "clear_range"
        try:
            sheet_name, label = self._split_target(args.range, args.sheet_name)
        except SheetsToolError as e:
            return e.to_response(op)
        target = qualify_range(label, sheet_name)

        def action() -> dict[str, Any]:
            result = self.sheets.clear_values(args.spreadsheet_id, target)
            return {"range": target, "cleared_range": result.get("clearedRange", target)}

        return self.run(op, action, args.spreadsheet_id, sheet_name)
