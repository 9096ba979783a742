"""
Type definitions for the MCP server.
Provides type safety for responses, coordinates, sheet metadata and cell data.
"""
from dataclasses import dataclass
from typing import Any, TypedDict


class ErrorDetail(TypedDict):
    """Error detail structure."""
    code: str
    message: str


class SuccessResponse(TypedDict):
    """Successful API response."""
    ok: bool
    op: str
    data: dict[str, Any]


class ErrorResponse(TypedDict):
    """Error API response."""
    ok: bool
    op: str
    error: ErrorDetail


# Union type for all API responses
Response = SuccessResponse | ErrorResponse

# Cell data types. Absent cells are represented by "".
CellValue = str | int | float | bool
SheetRow = list[CellValue]
SheetValues = list[SheetRow]


@dataclass(frozen=True)
class Coordinate:
    """Zero-based (row, col) cell position."""
    row: int
    col: int

    def __post_init__(self) -> None:
        if self.row < 0 or self.col < 0:
            raise ValueError(f"coordinate must be non-negative: ({self.row}, {self.col})")


class SheetDescriptor(TypedDict):
    """Snapshot of one sheet's properties."""
    title: str
    sheet_id: int
    row_count: int
    column_count: int
    index: int


def sheet_descriptor(properties: dict[str, Any]) -> SheetDescriptor:
    """Build a SheetDescriptor from a Sheets API `properties` object."""
    grid = properties.get("gridProperties") or {}
    return {
        "title": properties.get("title") or "",
        "sheet_id": int(properties.get("sheetId") or 0),
        "row_count": int(grid.get("rowCount") or 0),
        "column_count": int(grid.get("columnCount") or 0),
        "index": int(properties.get("index") or 0),
    }
