"""
Range algebra on top of the coordinate codec.

Parses range strings into start/end coordinates, computes the extent of a
value block written at a start position and renders ranges back to A1
notation. Sheet qualification ("Sheet1!A1:B2") is plain string handling
layered on top; the algebra itself never looks at sheet names.
"""
import re
from typing import NamedTuple

from lib.errors import InvalidRangeFormat
from lib.sheet_utils import from_a1, to_a1
from lib.types import Coordinate, SheetValues


# Sheet names usable bare in a range; anything else is quoted
_BARE_SHEET_NAME = re.compile(r"[A-Za-z0-9_]+")
# Names the API would read as a cell reference (A1 or R1C1)
_CELL_LIKE_NAME = re.compile(r"[A-Za-z]{1,3}[0-9]+|[Rr][0-9]*[Cc][0-9]*|[0-9]+")


class CellRange(NamedTuple):
    start: Coordinate
    end: Coordinate


def parse_range(range_notation: str) -> CellRange:
    """
    Parse "A1" or "A1:C10" into a CellRange.

    Raises:
        InvalidRangeFormat: more than one ":" or a malformed label
    """
    parts = range_notation.split(":")
    if len(parts) == 1:
        position = from_a1(parts[0])
        return CellRange(position, position)
    if len(parts) == 2:
        return CellRange(from_a1(parts[0]), from_a1(parts[1]))
    raise InvalidRangeFormat(f"invalid range format: {range_notation!r}")


def compute_end_position(start: Coordinate, values: SheetValues) -> Coordinate:
    """
    Bottom-right coordinate of `values` written at `start`.

    Width comes from the first row only; normalize jagged grids first.
    """
    if not values or not values[0]:
        return start
    return Coordinate(
        row=start.row + len(values) - 1,
        col=start.col + len(values[0]) - 1,
    )


def render_range(start_label: str, end_label: str) -> str:
    if start_label == end_label:
        return start_label
    return f"{start_label}:{end_label}"


def range_for_grid(start: Coordinate, values: SheetValues) -> str:
    """A1 range covering `values` written at `start`."""
    return render_range(to_a1(start), to_a1(compute_end_position(start, values)))


def quote_sheet_name(sheet_name: str) -> str:
    """
    Quote a sheet name for use in a range when it is not a plain identifier.
    "Sheet1" stays bare; "It's" becomes "'It''s'"; "Q1" becomes "'Q1'".
    """
    if _BARE_SHEET_NAME.fullmatch(sheet_name) and not _CELL_LIKE_NAME.fullmatch(sheet_name):
        return sheet_name
    return "'" + sheet_name.replace("'", "''") + "'"


def qualify_range(range_notation: str, sheet_name: str | None) -> str:
    if sheet_name:
        return f"{quote_sheet_name(sheet_name)}!{range_notation}"
    return range_notation


def split_sheet_qualifier(range_notation: str) -> tuple[str | None, str]:
    """
    Split "Sheet1!A1:B2" into ("Sheet1", "A1:B2").
    Unqualified ranges yield (None, range). Quoted names ('My Sheet') are unquoted.
    """
    if "!" not in range_notation:
        return None, range_notation
    sheet, _, rest = range_notation.rpartition("!")
    if len(sheet) >= 2 and sheet.startswith("'") and sheet.endswith("'"):
        sheet = sheet[1:-1].replace("''", "'")
    return (sheet or None), rest
