"""
Sheet utility functions.
Conversion between zero-based coordinates, column letters and A1 labels.
"""
import re
from typing import Any

from lib.errors import InvalidRangeFormat
from lib.types import Coordinate

A1_PATTERN = re.compile(r"([A-Z]+)([0-9]+)")
_LETTERS_PATTERN = re.compile(r"[A-Z]+")
_SPREADSHEET_URL_PATTERN = re.compile(r"/spreadsheets/d/([a-zA-Z0-9-_]+)")


def column_to_letter(col: int) -> str:
    """
    Convert 0-based column index to column letter(s) (bijective base-26).
    0 -> A, 1 -> B, ..., 25 -> Z, 26 -> AA, etc.
    """
    if col < 0:
        raise ValueError(f"column index must be non-negative: {col}")
    result = ""
    while col >= 0:
        result = chr(ord("A") + col % 26) + result
        col = col // 26 - 1
    return result


def letter_to_column(letters: str) -> int:
    """
    Convert column letter(s) to 0-based index.
    A -> 0, B -> 1, ..., Z -> 25, AA -> 26, etc.
    """
    if not _LETTERS_PATTERN.fullmatch(letters or ""):
        raise InvalidRangeFormat(f"invalid column letters: {letters!r}")
    result = 0
    for char in letters:
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result - 1


def to_a1(position: Coordinate | str) -> str:
    """Convert a coordinate to an A1 label; strings pass through unchanged."""
    if isinstance(position, str):
        return position
    return f"{column_to_letter(position.col)}{position.row + 1}"


def from_a1(label: str) -> Coordinate:
    """Parse an A1 label (uppercase letters then a 1-based row) into a Coordinate."""
    match = A1_PATTERN.fullmatch(label)
    if not match:
        raise InvalidRangeFormat(f"invalid A1 notation: {label!r}")
    letters, row_text = match.groups()
    row = int(row_text)
    if row < 1:
        raise InvalidRangeFormat(f"invalid A1 notation: {label!r}")
    return Coordinate(row=row - 1, col=letter_to_column(letters))


def extract_spreadsheet_id(url: Any) -> str | None:
    """
    Extract spreadsheet ID from a Google Sheets URL or raw ID string.

    Args:
        url: A Google Sheets URL or raw spreadsheet ID

    Returns:
        The spreadsheet ID, or None for empty input
    """
    if not url:
        return None
    s = str(url).strip()
    match = _SPREADSHEET_URL_PATTERN.search(s)
    if match:
        return match.group(1)
    return s
