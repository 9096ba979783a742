"""
Common utility functions.
Cell value normalization/typing, response envelopes and logging.
"""
import math
import re
import sys
from decimal import Decimal
from typing import Any

from lib.types import CellValue, SheetValues

# Plain decimal integer (no fraction or exponent)
_INT_PATTERN = re.compile(r"^\s*[+-]?[0-9]+\s*$")
# Longer digit strings go through float() and overflow to inf
_MAX_INT_DIGITS = 4300


def log(*a: Any) -> None:
    print(*a, file=sys.stderr, flush=True)


def normalize_values(values: SheetValues) -> SheetValues:
    """
    Pad jagged rows with "" so every row has the same length.
    Returns a new grid; the input is left untouched.
    """
    if not values:
        return []
    max_width = max(len(row) for row in values)
    return [list(row) + [""] * (max_width - len(row)) for row in values]


def infer_value(text: str) -> CellValue:
    """
    Best-effort conversion of a string into a typed cell value.
    - "" stays ""
    - finite numbers become int/float
    - "true"/"false" (any case) become bool
    - anything else is returned unchanged
    """
    if text == "":
        return ""

    number = _parse_number(text)
    if number is not None:
        return number

    lower = text.lower()
    if lower == "true":
        return True
    if lower == "false":
        return False

    return text


def _parse_number(text: str) -> int | float | None:
    if "_" in text or not text.isascii():
        return None
    if _INT_PATTERN.match(text) and len(text.strip()) <= _MAX_INT_DIGITS:
        return int(text)
    try:
        f = float(text)
    except ValueError:
        return None
    if not math.isfinite(f):
        return None
    return f


def format_value(value: CellValue) -> str:
    """Render a cell value the way the backend expects literal tokens."""
    # bool is a subclass of int; check it first
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    return str(value)


def _format_float(value: float) -> str:
    """
    Shortest round-trip digits, laid out like JavaScript's Number#toString:
    plain notation for 1e-6 <= |x| < 1e21, else "1.5e-7" / "1e+21".
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    # position of the decimal point relative to the first digit
    point = len(digits) + exponent

    if -6 < point <= 21:
        if point <= 0:
            body = "0." + "0" * -point + digits
        elif point >= len(digits):
            body = digits + "0" * (point - len(digits))
        else:
            body = digits[:point] + "." + digits[point:]
    else:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        power = point - 1
        body = f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"
    return sign + body


def to_cell_value(raw: Any) -> CellValue:
    """Coerce a raw backend cell into a CellValue."""
    if raw is None:
        return ""
    if isinstance(raw, (str, bool, int, float)):
        return raw
    return str(raw)


def format_grid(values: SheetValues) -> str:
    """Render a grid as tab-separated lines."""
    return "\n".join("\t".join(format_value(cell) for cell in row) for row in values)


def parse_grid_text(text: str) -> SheetValues:
    """Parse a tab-separated block into a typed grid (inverse of format_grid)."""
    lines = text.replace("\r\n", "\n").split("\n")
    # A trailing newline does not add an empty row
    if lines and lines[-1] == "":
        lines = lines[:-1]
    return [[infer_value(cell) for cell in line.split("\t")] for line in lines]


def ok(op: str, data: dict[str, Any] | None = None) -> dict[str, Any]:
    """Create a successful response."""
    return {"ok": True, "op": op, "data": data or {}}


def ng(op: str, code: str, message: str, extra: dict[str, Any] | None = None) -> dict[str, Any]:
    """Create an error response."""
    error: dict[str, Any] = {"code": code, "message": message}
    if extra:
        error.update(extra)
    return {"ok": False, "op": op, "error": error}
