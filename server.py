"""
Google Sheets MCP Server

Exposes spreadsheet operations (read/write ranges, create/delete sheets,
create/search spreadsheets) as MCP tools backed by the Google Sheets API.
"""
import os
from typing import Any

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, ErrorData

from core.context import ServerContext
from core.dispatcher import Dispatcher
from env_loader import get_allowed_hosts, get_port, get_transport
from lib.common import log
from lib.errors import AuthenticationRequired
from lib.input_parser import drop_none

# Configure transport security for the HTTP transport
transport_security = TransportSecuritySettings(
    enable_dns_rebinding_protection=True,
    allowed_hosts=get_allowed_hosts(),
)

mcp = FastMCP("google-sheets", transport_security=transport_security)

_dispatcher: Dispatcher | None = None


def configure(context: ServerContext) -> Dispatcher:
    """Install the dispatcher for this process from an explicit context."""
    global _dispatcher
    _dispatcher = Dispatcher(context)
    return _dispatcher


def get_dispatcher() -> Dispatcher:
    """Return the configured dispatcher, configuring from the environment on first use."""
    if _dispatcher is None:
        return configure(ServerContext.from_env())
    return _dispatcher


def _call(name: str, **arguments: Any) -> dict:
    """Dispatch a tool call; authentication failures become protocol errors."""
    try:
        return get_dispatcher().call(name, drop_none(arguments))
    except AuthenticationRequired as e:
        log(f"{name}: authentication required")
        raise McpError(ErrorData(code=INTERNAL_ERROR, message=e.message)) from e


# ===== Sheet Tools =====

@mcp.tool()
async def list_sheets(spreadsheet_id: Any) -> dict:
    """スプレッドシート内の全シート情報を取得します。

    引数:
    - spreadsheet_id: スプレッドシートのID（URLも可）

    返り値（例）:
    { ok:true, data:{ sheets:[{title, sheet_id, row_count, column_count, index}], count } }
    """
    return _call("list_sheets", spreadsheet_id=spreadsheet_id)


@mcp.tool()
async def create_sheet(
    spreadsheet_id: Any,
    title: str,
    rows: int | None = None,
    cols: int | None = None,
) -> dict:
    """既存のスプレッドシートに新しいシートを作成します。

    引数:
    - spreadsheet_id: スプレッドシートのID
    - title: 新しいシートの名前
    - rows: 行数（既定 1000）
    - cols: 列数（既定 26）
    """
    return _call("create_sheet", spreadsheet_id=spreadsheet_id, title=title, rows=rows, cols=cols)


@mcp.tool()
async def delete_sheet(
    spreadsheet_id: Any,
    sheet_id: int | None = None,
    sheet_name: str | None = None,
) -> dict:
    """シートを削除します。sheet_id か sheet_name のどちらか必須。"""
    return _call("delete_sheet", spreadsheet_id=spreadsheet_id, sheet_id=sheet_id, sheet_name=sheet_name)


# ===== Range Tools =====

@mcp.tool()
async def read_range(
    spreadsheet_id: Any,
    range: str,
    sheet_name: str | None = None,
    row_limit: int | None = None,
) -> dict:
    """指定範囲のデータを読み取ります。

    引数:
    - spreadsheet_id: スプレッドシートのID
    - range: 読み取り範囲（例: "A1:D10"）
    - sheet_name: シート名（任意）
    - row_limit: 取得する最大行数（既定 100、最大 1000）

    返り値（例）:
    { ok:true, data:{ range:"Sheet1!A1:D10", values:[[…]], row_count, truncated, text } }
    """
    return _call(
        "read_range",
        spreadsheet_id=spreadsheet_id,
        range=range,
        sheet_name=sheet_name,
        row_limit=row_limit,
    )


@mcp.tool()
async def write_range(
    spreadsheet_id: Any,
    start_position: Any,
    values: Any,
    sheet_name: str | None = None,
) -> dict:
    """指定位置から2次元配列を書き込みます。シートが足りなければ自動で拡張します。

    引数:
    - spreadsheet_id: スプレッドシートのID
    - start_position: 開始位置。"B2" / "Sheet1!B2" または {"row":1, "col":1}（0始まり）
    - values: 書き込むデータ（2次元配列、またはタブ区切りテキスト）
    - sheet_name: シート名（任意、省略時は先頭シート）

    使い方（例）:
    - write_range({"spreadsheet_id":"…", "start_position":"B2", "values":[[1,2],[3,4]]})
      → 範囲 "B2:C3" に書き込み
    """
    return _call(
        "write_range",
        spreadsheet_id=spreadsheet_id,
        start_position=start_position,
        values=values,
        sheet_name=sheet_name,
    )


@mcp.tool()
async def append_range(
    spreadsheet_id: Any,
    range: str,
    values: Any,
    sheet_name: str | None = None,
    value_input_option: str | None = None,
    insert_data_option: str | None = None,
) -> dict:
    """表の末尾に行を追加します。

    引数:
    - range: 対象の表範囲（例: "A1" や "A:C"）
    - value_input_option: "RAW" | "USER_ENTERED"（既定 USER_ENTERED）
    - insert_data_option: "OVERWRITE" | "INSERT_ROWS"（既定 INSERT_ROWS）
    """
    return _call(
        "append_range",
        spreadsheet_id=spreadsheet_id,
        range=range,
        values=values,
        sheet_name=sheet_name,
        value_input_option=value_input_option,
        insert_data_option=insert_data_option,
    )


@mcp.tool()
async def clear_range(spreadsheet_id: Any, range: str, sheet_name: str | None = None) -> dict:
    """指定範囲の値をクリアします（書式は残ります）。"""
    return _call("clear_range", spreadsheet_id=spreadsheet_id, range=range, sheet_name=sheet_name)


# ===== Spreadsheet Tools =====

@mcp.tool()
async def create_spreadsheet(
    title: str,
    folder_id: str | None = None,
    sheets: list[dict] | None = None,
) -> dict:
    """新規スプレッドシートを作成します。

    引数:
    - title: スプレッドシートのタイトル
    - folder_id: 作成先フォルダのID（任意。GOOGLE_DRIVE_DEFAULT_FOLDER_ID が既定）
    - sheets: [{"title":"…", "rows":1000, "cols":26}, …]（任意。省略時は "Sheet1" のみ）

    フォルダへの移動に失敗した場合もスプレッドシートは作成済みです。
    エラーの spreadsheet_id を参照してください。
    """
    return _call("create_spreadsheet", title=title, folder_id=folder_id, sheets=sheets)


@mcp.tool()
async def search_spreadsheets(query: str, max_results: int | None = None) -> dict:
    """名前に query を含むスプレッドシートを Drive から検索します（既定 10 件）。"""
    return _call("search_spreadsheets", query=query, max_results=max_results)


# ===== Utility Tools =====

@mcp.tool()
async def tools_help() -> dict:
    """このMCPで公開中のツール一覧と入力スキーマを返します。"""
    return _call("tools_help")


# ===== Server Entry Point =====

def run_http() -> None:
    import uvicorn
    from contextlib import asynccontextmanager
    from starlette.applications import Starlette
    from starlette.routing import Route
    from starlette.responses import JSONResponse

    async def healthz(request):
        return JSONResponse({"status": "ok"})

    async def root(request):
        return JSONResponse(
            {"error": "Use /mcp for MCP endpoint or /healthz for health check"},
            status_code=406,
        )

    # Get MCP ASGI app
    mcp_app = mcp.streamable_http_app()

    @asynccontextmanager
    async def lifespan(app):
        async with mcp.session_manager.run():
            yield

    # Create Starlette app for non-MCP routes
    starlette_app = Starlette(
        routes=[
            Route("/", root),
            Route("/healthz", healthz),
        ],
        lifespan=lifespan,
    )

    # Combined ASGI app - MCP app handles /mcp path internally
    async def combined_app(scope, receive, send):
        path = scope.get("path", "/")
        if path.startswith("/mcp"):
            await mcp_app(scope, receive, send)
        else:
            await starlette_app(scope, receive, send)

    port = get_port()
    log(f"Starting server on port {port}")
    uvicorn.run(combined_app, host=os.getenv("HOST", "0.0.0.0"), port=port, lifespan="on")


def main() -> None:
    context = ServerContext.from_env()
    configure(context)
    log(f"Google Sheets MCP server: credential provider = {context.provider.name}")

    transport = get_transport()
    if transport == "http":
        run_http()
    elif transport == "stdio":
        mcp.run()
    else:
        raise SystemExit(f"Unknown MCP_TRANSPORT: {transport} (expected stdio or http)")


if __name__ == "__main__":
    main()
