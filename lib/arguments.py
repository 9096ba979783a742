"""
Typed argument models for every tool.

Each tool call is validated into exactly one of these models before any
handler runs. Unknown fields, missing required fields and wrong types are
all reported as a single BAD_REQUEST error.
"""
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from config import (
    DEFAULT_INSERT_DATA_OPTION,
    DEFAULT_NEW_SHEET_COLS,
    DEFAULT_NEW_SHEET_ROWS,
    DEFAULT_ROW_LIMIT,
    DEFAULT_SEARCH_RESULTS,
    DEFAULT_VALUE_INPUT_OPTION,
    MAX_ROW_LIMIT,
    MAX_SEARCH_RESULTS,
)
from lib.common import to_cell_value
from lib.errors import ArgumentError, UnknownTool
from lib.input_parser import coerce_spreadsheet_id, coerce_values, strip_quotes

CellInput = str | int | float | bool


class ToolArguments(BaseModel):
    """Base for all tool argument models."""

    model_config = ConfigDict(extra="forbid")


class SpreadsheetArguments(ToolArguments):
    spreadsheet_id: str = Field(
        min_length=1,
        description="Spreadsheet ID, or the full spreadsheet URL",
    )

    @field_validator("spreadsheet_id", mode="before")
    @classmethod
    def _coerce_spreadsheet_id(cls, value: Any) -> Any:
        return coerce_spreadsheet_id(value)


def _coerce_grid(value: Any) -> Any:
    value = coerce_values(value)
    if isinstance(value, list):
        return [
            [to_cell_value(cell) for cell in row] if isinstance(row, list) else row
            for row in value
        ]
    return value


class ListSheetsArgs(SpreadsheetArguments):
    pass


class ReadRangeArgs(SpreadsheetArguments):
    range: str = Field(min_length=1, description="Range to read (e.g. 'A1:D10')")
    sheet_name: str | None = Field(default=None, description="Sheet name (optional)")
    row_limit: int = Field(
        default=DEFAULT_ROW_LIMIT,
        ge=1,
        description=f"Maximum number of rows to return (max {MAX_ROW_LIMIT})",
        json_schema_extra={"maximum": MAX_ROW_LIMIT},
    )


class StartCoordinate(ToolArguments):
    row: int = Field(ge=0, description="Start row (0-based)")
    col: int = Field(ge=0, description="Start column (0-based)")


class WriteRangeArgs(SpreadsheetArguments):
    start_position: str | StartCoordinate = Field(
        description="Start cell in A1 notation (e.g. 'B2' or 'Sheet1!B2') or {row, col} (0-based)",
    )
    values: list[list[CellInput]] = Field(
        min_length=1,
        description="Data to write (2-D array, or a tab-separated text block)",
    )
    sheet_name: str | None = Field(default=None, description="Sheet name (optional, defaults to the first sheet)")

    @field_validator("start_position", mode="before")
    @classmethod
    def _strip_start_position(cls, value: Any) -> Any:
        if isinstance(value, str):
            return strip_quotes(value)
        return value

    @field_validator("values", mode="before")
    @classmethod
    def _coerce_values(cls, value: Any) -> Any:
        return _coerce_grid(value)


class CreateSheetArgs(SpreadsheetArguments):
    title: str = Field(min_length=1, description="Name of the new sheet")
    rows: int = Field(default=DEFAULT_NEW_SHEET_ROWS, ge=1, description="Row count")
    cols: int = Field(default=DEFAULT_NEW_SHEET_COLS, ge=1, description="Column count")


class DeleteSheetArgs(SpreadsheetArguments):
    sheet_id: int | None = Field(default=None, ge=0, description="Numeric sheet ID")
    sheet_name: str | None = Field(default=None, description="Sheet name (used when sheet_id is omitted)")

    @model_validator(mode="after")
    def _require_sheet(self) -> "DeleteSheetArgs":
        if self.sheet_id is None and not self.sheet_name:
            raise ValueError("sheet_id or sheet_name is required")
        return self


class AppendRangeArgs(SpreadsheetArguments):
    range: str = Field(min_length=1, description="Table range to append after (e.g. 'A1' or 'A:C')")
    values: list[list[CellInput]] = Field(min_length=1, description="Rows to append (2-D array)")
    sheet_name: str | None = Field(default=None, description="Sheet name (optional)")
    value_input_option: Literal["RAW", "USER_ENTERED"] = Field(
        default=DEFAULT_VALUE_INPUT_OPTION,
        description="How input values are interpreted",
    )
    insert_data_option: Literal["OVERWRITE", "INSERT_ROWS"] = Field(
        default=DEFAULT_INSERT_DATA_OPTION,
        description="Whether new rows are inserted or existing cells overwritten",
    )

    @field_validator("values", mode="before")
    @classmethod
    def _coerce_values(cls, value: Any) -> Any:
        return _coerce_grid(value)


class ClearRangeArgs(SpreadsheetArguments):
    range: str = Field(min_length=1, description="Range to clear (e.g. 'A1:D10')")
    sheet_name: str | None = Field(default=None, description="Sheet name (optional)")


class NewSheetSpec(ToolArguments):
    title: str = Field(min_length=1, description="Sheet name")
    rows: int = Field(default=DEFAULT_NEW_SHEET_ROWS, ge=1, description="Row count")
    cols: int = Field(default=DEFAULT_NEW_SHEET_COLS, ge=1, description="Column count")


class CreateSpreadsheetArgs(ToolArguments):
    title: str = Field(min_length=1, description="Spreadsheet title")
    folder_id: str | None = Field(
        default=None,
        description="Destination Drive folder ID (defaults to GOOGLE_DRIVE_DEFAULT_FOLDER_ID when set)",
    )
    sheets: list[NewSheetSpec] | None = Field(
        default=None,
        min_length=1,
        description="Sheets to create (defaults to a single 'Sheet1')",
    )


class SearchSpreadsheetsArgs(ToolArguments):
    query: str = Field(min_length=1, description="Substring of the spreadsheet name")
    max_results: int = Field(
        default=DEFAULT_SEARCH_RESULTS,
        ge=1,
        le=MAX_SEARCH_RESULTS,
        description="Maximum number of results",
    )


class NoArguments(ToolArguments):
    pass


ARGUMENT_MODELS: dict[str, type[ToolArguments]] = {
    "list_sheets": ListSheetsArgs,
    "read_range": ReadRangeArgs,
    "write_range": WriteRangeArgs,
    "append_range": AppendRangeArgs,
    "clear_range": ClearRangeArgs,
    "create_sheet": CreateSheetArgs,
    "delete_sheet": DeleteSheetArgs,
    "create_spreadsheet": CreateSpreadsheetArgs,
    "search_spreadsheets": SearchSpreadsheetsArgs,
    "tools_help": NoArguments,
}


def format_validation_error(exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        problems.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(problems)


def parse_arguments(name: str, arguments: dict[str, Any] | None) -> ToolArguments:
    """
    Validate a raw argument map into the model registered for `name`.

    Raises:
        UnknownTool: no tool is registered under `name`
        ArgumentError: arguments are missing, unknown or mistyped
    """
    model = ARGUMENT_MODELS.get(name)
    if model is None:
        raise UnknownTool(f"unknown tool: {name}")
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise ArgumentError("arguments must be an object")
    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        raise ArgumentError(format_validation_error(e)) from e
