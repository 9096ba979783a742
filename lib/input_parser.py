"""
Input parsing and normalization utilities.

Functions for normalizing loosely-shaped MCP tool inputs (quoted strings,
spreadsheet URLs, stringified JSON, pasted TSV blocks) before they reach
the typed argument models.
"""
import json
from typing import Any

from lib.common import parse_grid_text
from lib.sheet_utils import extract_spreadsheet_id


def strip_quotes(s: str) -> str:
    """
    Strip outer quotes from a string.

    Args:
        s: Input string

    Returns:
        String with leading/trailing quotes removed
    """
    s = s.strip()
    if len(s) >= 2 and ((s.startswith('"') and s.endswith('"')) or (s.startswith("'") and s.endswith("'"))):
        return s[1:-1]
    return s


def coerce_str(x: Any, keys: tuple[str, ...] = ()) -> str | None:
    """
    Extract a string from various input formats.

    Handles:
    - Direct string input
    - Dict with specified keys

    Args:
        x: Input value (string, dict, or other)
        keys: Tuple of keys to try in dict order

    Returns:
        Extracted string or None if not found
    """
    if isinstance(x, str):
        return strip_quotes(x)
    if isinstance(x, dict):
        for k in keys:
            v = x.get(k)
            if isinstance(v, str):
                return strip_quotes(v)
    return None


def coerce_spreadsheet_id(x: Any) -> Any:
    """
    Accept a raw ID, a spreadsheet URL or {"spreadsheet_id": ...}.
    Unrecognized shapes are returned unchanged for the validator to reject.
    """
    s = coerce_str(x, ("spreadsheet_id", "id"))
    if s is None:
        return x
    return extract_spreadsheet_id(s) or s


def coerce_values(x: Any) -> Any:
    """
    Accept a 2-D array, a JSON-encoded 2-D array or a tab-separated text block.
    Unrecognized shapes are returned unchanged for the validator to reject.
    """
    if not isinstance(x, str):
        return x
    text = x.strip()
    if text.startswith("["):
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            pass
    return parse_grid_text(x)


def drop_none(arguments: dict[str, Any]) -> dict[str, Any]:
    """Remove unset optional arguments so model defaults apply."""
    return {k: v for k, v in arguments.items() if v is not None}
