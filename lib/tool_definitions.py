"""
Static tool definitions (name, description, input schema).
Built once at import time from the argument models and never mutated.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping

from lib.arguments import ARGUMENT_MODELS


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: Mapping[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": dict(self.input_schema),
        }


_DESCRIPTIONS: dict[str, str] = {
    "list_sheets": "List every sheet in a spreadsheet (title, sheet_id, row/column counts, index).",
    "read_range": "Read values from a range of a spreadsheet (default 100 rows, max 1000).",
    "write_range": "Write a 2-D block of values starting at a cell; the sheet grows automatically when needed.",
    "append_range": "Append rows after the last row of the table found in a range.",
    "clear_range": "Clear the values in a range (formatting is kept).",
    "create_sheet": "Add a new sheet to an existing spreadsheet (default 1000 rows x 26 columns).",
    "delete_sheet": "Delete a sheet by sheet_id or sheet_name.",
    "create_spreadsheet": "Create a new spreadsheet, optionally inside a Drive folder.",
    "search_spreadsheets": "Search spreadsheets in Drive whose name contains the query.",
    "tools_help": "List the tools exposed by this server with their input schemas.",
}


def _build_definitions() -> tuple[ToolDefinition, ...]:
    return tuple(
        ToolDefinition(
            name=name,
            description=_DESCRIPTIONS[name],
            input_schema=MappingProxyType(model.model_json_schema()),
        )
        for name, model in ARGUMENT_MODELS.items()
    )


TOOL_DEFINITIONS: tuple[ToolDefinition, ...] = _build_definitions()
