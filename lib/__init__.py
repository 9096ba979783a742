"""
Utility libraries for the MCP server.
Contains pure functions for A1 notation, ranges and cell values.
"""
from .common import (
    normalize_values,
    infer_value,
    format_value,
    to_cell_value,
    format_grid,
    parse_grid_text,
    ok,
    ng,
    log,
)
from .ranges import (
    CellRange,
    parse_range,
    compute_end_position,
    render_range,
    range_for_grid,
    qualify_range,
    split_sheet_qualifier,
)
from .sheet_utils import (
    column_to_letter,
    letter_to_column,
    to_a1,
    from_a1,
    extract_spreadsheet_id,
)
from .types import (
    Response,
    SuccessResponse,
    ErrorResponse,
    ErrorDetail,
    CellValue,
    SheetRow,
    SheetValues,
    Coordinate,
    SheetDescriptor,
)

__all__ = [
    # Types
    "Response",
    "SuccessResponse",
    "ErrorResponse",
    "ErrorDetail",
    "CellValue",
    "SheetRow",
    "SheetValues",
    "Coordinate",
    "SheetDescriptor",
    "CellRange",
    # Coordinate codec
    "column_to_letter",
    "letter_to_column",
    "to_a1",
    "from_a1",
    "extract_spreadsheet_id",
    # Range algebra
    "parse_range",
    "compute_end_position",
    "render_range",
    "range_for_grid",
    "qualify_range",
    "split_sheet_qualifier",
    # Values
    "normalize_values",
    "infer_value",
    "format_value",
    "to_cell_value",
    "format_grid",
    "parse_grid_text",
    # Responses
    "ok",
    "ng",
    "log",
]
