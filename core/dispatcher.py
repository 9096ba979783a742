"""
Operation dispatcher.

Maps a tool name and a raw argument map to one handler method:
1. validate the arguments into the tool's typed model (BAD_REQUEST on failure)
2. run the handler, which returns an ok/ng envelope
AuthenticationRequired propagates to the caller unchanged.
"""
from typing import Any, Callable

from core.context import ServerContext
from handlers.ranges import RangesHandler
from handlers.sheets import SheetsHandler
from handlers.spreadsheets import SpreadsheetsHandler
from lib.arguments import ToolArguments, parse_arguments
from lib.common import ok
from lib.errors import SheetsToolError
from lib.tool_definitions import TOOL_DEFINITIONS

Route = Callable[[Any], dict[str, Any]]


class Dispatcher:
    """Dispatches tool calls by name against an explicit ServerContext."""

    def __init__(self, context: ServerContext) -> None:
        self.context = context
        self._routes: dict[str, Route] = {
            "list_sheets": lambda a: self._sheets().list_sheets(a),
            "create_sheet": lambda a: self._sheets().create_sheet(a),
            "delete_sheet": lambda a: self._sheets().delete_sheet(a),
            "read_range": lambda a: self._ranges().read_range(a),
            "write_range": lambda a: self._ranges().write_range(a),
            "append_range": lambda a: self._ranges().append_range(a),
            "clear_range": lambda a: self._ranges().clear_range(a),
            "create_spreadsheet": lambda a: self._spreadsheets().create_spreadsheet(a),
            "search_spreadsheets": lambda a: self._spreadsheets().search_spreadsheets(a),
            "tools_help": lambda a: self.tools_help(),
        }

    def call(self, name: str, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Validate arguments and run the named operation.

        Returns:
            Response envelope ({"ok": True, ...} or {"ok": False, "error": ...})

        Raises:
            AuthenticationRequired: no credential is available
        """
        try:
            args: ToolArguments = parse_arguments(name, arguments)
        except SheetsToolError as e:
            return e.to_response(name)
        return self._routes[name](args)

    def tools_help(self) -> dict[str, Any]:
        tools = [d.to_dict() for d in TOOL_DEFINITIONS]
        return ok("tools_help", {"tools": tools, "count": len(tools)})

    # === Handler factories ===

    def _ranges(self) -> RangesHandler:
        return RangesHandler(self.context.sheets, self.context.settings)

    def _sheets(self) -> SheetsHandler:
        return SheetsHandler(self.context.sheets, self.context.settings)

    def _spreadsheets(self) -> SpreadsheetsHandler:
        return SpreadsheetsHandler(self.context.sheets, self.context.settings)
